# posture_scanner/fetch.py
"""
HTTP fetch collaborator shared by the checks.

Exports:
 - normalize_url(domain) -> str
 - build_client(config, transport=None) -> httpx.AsyncClient
 - async fetch(client, url, config) -> FetchedResponse   # raises FetchError only
"""
import logging
import socket
import ssl
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

import httpx

from .config import FetchConfig

logger = logging.getLogger(__name__)

_DNS_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "name resolution",
    "no address associated",
)


class FetchErrorKind(str, Enum):
    TIMEOUT = "timeout"
    DNS = "dns"
    CONNECTION = "connection"
    TLS = "tls"
    TOO_MANY_REDIRECTS = "too_many_redirects"
    HTTP_STATUS = "http_status"
    INVALID_URL = "invalid_url"
    REQUEST = "request"


class FetchError(Exception):
    def __init__(self, kind: FetchErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


@dataclass
class FetchedResponse:
    url: str
    status_code: int
    headers: httpx.Headers


def normalize_url(domain: str) -> str:
    """Prefix https:// when the input carries no http(s) scheme."""
    url = domain.strip()
    if not url.startswith("http://") and not url.startswith("https://"):
        url = "https://" + url
    return url


def build_client(config: FetchConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=config.timeout,
        follow_redirects=True,
        max_redirects=config.max_redirects,
        headers={"User-Agent": config.user_agent},
        verify=config.verify_tls,
        transport=transport,
    )


def _causes(exc: BaseException) -> Iterator[BaseException]:
    seen = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        yield exc
        exc = exc.__cause__ or exc.__context__


def _classify_connect_error(exc: httpx.ConnectError) -> FetchErrorKind:
    for cause in _causes(exc):
        if isinstance(cause, socket.gaierror):
            return FetchErrorKind.DNS
        if isinstance(cause, ssl.SSLError):
            return FetchErrorKind.TLS
    text = str(exc).lower()
    if any(marker in text for marker in _DNS_MARKERS):
        return FetchErrorKind.DNS
    if "ssl" in text or "certificate" in text:
        return FetchErrorKind.TLS
    return FetchErrorKind.CONNECTION


def _describe(exc: Exception) -> str:
    text = str(exc).strip()
    return text or exc.__class__.__name__


def to_fetch_error(exc: Exception) -> FetchError:
    """Map an httpx failure onto the closed FetchErrorKind set."""
    if isinstance(exc, httpx.TimeoutException):
        kind = FetchErrorKind.TIMEOUT
    elif isinstance(exc, httpx.TooManyRedirects):
        kind = FetchErrorKind.TOO_MANY_REDIRECTS
    elif isinstance(exc, httpx.ConnectError):
        kind = _classify_connect_error(exc)
    elif isinstance(exc, httpx.HTTPStatusError):
        kind = FetchErrorKind.HTTP_STATUS
    elif isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        kind = FetchErrorKind.INVALID_URL
    else:
        kind = FetchErrorKind.REQUEST
    return FetchError(kind, _describe(exc))


async def fetch(client: httpx.AsyncClient, url: str, config: FetchConfig) -> FetchedResponse:
    """
    Issue a single GET for url. No retries; the timeout is the only bound.
    Any transport or protocol failure surfaces as FetchError.
    """
    logger.debug("GET %s (timeout=%s, max_redirects=%s)", url, config.timeout, config.max_redirects)
    try:
        resp = await client.get(url)
        if not config.accept_any_status:
            resp.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        err = to_fetch_error(e)
        logger.warning("Fetch of %s failed (%s): %s", url, err.kind.value, err.message)
        raise err from e

    logger.debug("GET %s -> %s (%s)", url, resp.status_code, resp.url)
    return FetchedResponse(url=str(resp.url), status_code=resp.status_code, headers=resp.headers)
