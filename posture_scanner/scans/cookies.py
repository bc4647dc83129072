# posture_scanner/scans/cookies.py
SCAN_NAME = "Cookie Security"

import logging
from typing import List, Optional, Sequence

import httpx

from ..config import FetchConfig
from ..fetch import FetchError, build_client, fetch, normalize_url
from ..models import CookieFinding, CookieIssue, CookieRecord, Severity

logger = logging.getLogger(__name__)

MISSING_SECURE = "Missing Secure flag"
MISSING_HTTPONLY = "Missing HttpOnly flag"
MISSING_SAMESITE = "Missing SameSite attribute"
RAW_LIMIT = 100


def parse_cookie(header: str, index: int) -> CookieRecord:
    """Parse one Set-Cookie value. index is the 0-based position in the response."""
    parts = [p.strip() for p in header.split(";")]
    name = parts[0].split("=", 1)[0]
    attrs = [p.lower() for p in parts[1:]]
    return CookieRecord(
        name=name or f"Cookie {index + 1}",
        secure="secure" in attrs,
        http_only="httponly" in attrs,
        same_site=any(a.startswith("samesite") for a in attrs),
    )


def missing_attributes(cookie: CookieRecord) -> List[str]:
    missing: List[str] = []
    if not cookie.secure:
        missing.append(MISSING_SECURE)
    if not cookie.http_only:
        missing.append(MISSING_HTTPONLY)
    if not cookie.same_site:
        missing.append(MISSING_SAMESITE)
    return missing


def truncate_raw(header: str, limit: int = RAW_LIMIT) -> str:
    if len(header) > limit:
        return header[:limit] + "..."
    return header


def analyze_cookies(domain: str, set_cookie_headers: Sequence[str]) -> CookieFinding:
    total = len(set_cookie_headers)
    if total == 0:
        return CookieFinding(
            success=True,
            domain=domain,
            severity=Severity.OK,
            status="No Cookies Set",
            message="No cookies found on this domain",
        )

    cookies: List[CookieRecord] = []
    issues: List[CookieIssue] = []
    for index, header in enumerate(set_cookie_headers):
        cookie = parse_cookie(header, index)
        cookies.append(cookie)
        missing = missing_attributes(cookie)
        if missing:
            issues.append(CookieIssue(name=cookie.name, issues=missing, raw=truncate_raw(header)))

    severity = Severity.OK
    status = "All Cookies Secure"
    if issues:
        severity = Severity.WARNING
        status = "Security Issues Found"
        # no Secure flag anywhere in the cookie set
        if all(not c.secure for c in cookies):
            severity = Severity.CRITICAL
            status = "Critical Security Issues"

    if issues:
        message = f"Found {len(issues)} cookie(s) with security issues out of {total} total"
    else:
        message = f"All {total} cookies are properly secured"

    return CookieFinding(
        success=True,
        domain=domain,
        severity=severity,
        status=status,
        message=message,
        cookie_count=total,
        cookies=cookies,
        issues=issues,
        issue_count=len(issues),
    )


def error_finding(domain: str, err: FetchError) -> CookieFinding:
    return CookieFinding(
        success=False,
        domain=domain,
        severity=Severity.ERROR,
        status="Error",
        message=f"Failed to check cookies: {err.message}",
        error=err.message,
        error_kind=err.kind,
    )


async def check_cookies(
    domain: str,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[FetchConfig] = None,
) -> CookieFinding:
    """
    Fetch the top-level page of domain and grade every Set-Cookie it returns.
    Never raises on fetch failure; the failure is reported as an error finding.
    """
    config = config or FetchConfig.from_env()
    url = normalize_url(domain)
    try:
        if client is None:
            async with build_client(config) as own_client:
                resp = await fetch(own_client, url, config)
        else:
            resp = await fetch(client, url, config)
    except FetchError as e:
        return error_finding(domain, e)

    # each occurrence separately, never the comma-joined value
    set_cookies = resp.headers.get_list("set-cookie")
    logger.debug("%s returned %d Set-Cookie header(s)", url, len(set_cookies))
    return analyze_cookies(domain, set_cookies)


async def run(target: str, client: httpx.AsyncClient, config: Optional[FetchConfig] = None) -> CookieFinding:
    return await check_cookies(target, client, config)
