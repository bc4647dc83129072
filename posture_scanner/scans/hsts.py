# posture_scanner/scans/hsts.py
SCAN_NAME = "HSTS"

import logging
import re
from typing import List, Optional

import httpx

from ..config import FetchConfig
from ..fetch import FetchError, build_client, fetch, normalize_url
from ..models import HstsDetail, HstsFinding, Severity

logger = logging.getLogger(__name__)

MAX_AGE_RE = re.compile(r"max-age=(\d+)", re.IGNORECASE)
ONE_YEAR = 31536000  # recommended minimum max-age
SECONDS_PER_DAY = 86400
MAX_AGE_DIGITS = 18
MAX_AGE_CAP = 10 ** MAX_AGE_DIGITS - 1


def _parse_max_age(digits: str) -> int:
    # longer values are clamped, int() refuses very long digit strings
    digits = digits.lstrip("0") or "0"
    if len(digits) > MAX_AGE_DIGITS:
        return MAX_AGE_CAP
    return int(digits)


def parse_hsts(header: str) -> HstsDetail:
    m = MAX_AGE_RE.search(header)
    max_age = _parse_max_age(m.group(1)) if m else 0
    lowered = header.lower()
    return HstsDetail(
        header=header,
        header_present=True,
        max_age=max_age,
        max_age_days=max_age // SECONDS_PER_DAY,
        include_subdomains="includesubdomains" in lowered,
        preload="preload" in lowered,
    )


def analyze_hsts(domain: str, header: Optional[str]) -> HstsFinding:
    if not header:
        return HstsFinding(
            success=True,
            domain=domain,
            enabled=False,
            severity=Severity.CRITICAL,
            status="HSTS Not Enabled",
            message=(
                "HTTP Strict Transport Security policy is not enabled. "
                "This allows potential man-in-the-middle attacks."
            ),
            details=HstsDetail(header=None, header_present=False, max_age=0, max_age_days=0),
        )

    details = parse_hsts(header)
    issues: List[str] = []

    if details.max_age == 0:
        severity = Severity.CRITICAL
        status = "HSTS Misconfigured"
        issues.append("max-age is 0 (effectively disabled)")
    elif details.max_age < ONE_YEAR:
        severity = Severity.WARNING
        status = "HSTS Weak Configuration"
        issues.append(f"max-age is {details.max_age_days} days (recommended: at least 365 days)")
    else:
        severity = Severity.OK
        status = "HSTS Enabled"

    # only lifts ok to warning; weak or disabled policies keep their grade
    if not details.include_subdomains:
        if severity == Severity.OK:
            severity = Severity.WARNING
        issues.append("includeSubDomains directive not set")

    details.issues = issues
    if issues:
        message = f"HSTS is enabled but has {len(issues)} issue(s)"
    else:
        message = f"HSTS is properly configured (max-age: {details.max_age_days} days)"

    return HstsFinding(
        success=True,
        domain=domain,
        enabled=True,
        severity=severity,
        status=status,
        message=message,
        details=details,
    )


def error_finding(domain: str, err: FetchError) -> HstsFinding:
    return HstsFinding(
        success=False,
        domain=domain,
        enabled=False,
        severity=Severity.ERROR,
        status="Error",
        message=f"Failed to check HSTS: {err.message}",
        details=HstsDetail(),
        error=err.message,
        error_kind=err.kind,
    )


async def check_hsts(
    domain: str,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[FetchConfig] = None,
) -> HstsFinding:
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

    return analyze_hsts(domain, resp.headers.get("strict-transport-security"))


async def run(target: str, client: httpx.AsyncClient, config: Optional[FetchConfig] = None) -> HstsFinding:
    return await check_hsts(target, client, config)
