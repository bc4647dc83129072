import httpx
import pytest


def make_transport(headers=None, status_code=200, seen=None):
    """MockTransport answering every request with the given headers."""
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request.url)
        return httpx.Response(status_code, headers=headers or [], text="<html></html>")
    return httpx.MockTransport(handler)


def failing_transport(exc_factory):
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_factory(request)
    return httpx.MockTransport(handler)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SCANNER_TIMEOUT", "SCANNER_MAX_REDIRECTS", "SCANNER_ACCEPT_ANY_STATUS",
                 "SCANNER_USER_AGENT", "SCANNER_VERIFY_TLS"):
        monkeypatch.delenv(name, raising=False)
