import httpx
import pytest
from fastapi.testclient import TestClient

from posture_scanner import router as router_module
from posture_scanner import scan_core
from posture_scanner.fetch import FetchError, FetchErrorKind
from posture_scanner.main import app
from posture_scanner.scans import cookies, hsts

from conftest import make_transport


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def mocked_network(monkeypatch):
    transport = make_transport([
        ("Set-Cookie", "sid=1; HttpOnly"),
        ("Strict-Transport-Security", "max-age=86400"),
    ])
    original = scan_core.build_client
    monkeypatch.setattr(scan_core, "build_client", lambda config, transport_=None: original(config, transport))
    return transport


def test_available(client):
    resp = client.get("/scan/available")
    assert resp.status_code == 200
    assert set(resp.json()["available"]) >= {"Cookie Security", "HSTS"}


def test_scan_lifecycle(client, mocked_network):
    resp = client.post("/scan", json={"target": "example.com", "checks": ["Cookie Security", "HSTS"]})
    assert resp.status_code == 200
    scan_id = resp.json()["scan_id"]

    assert client.get(f"/scan/{scan_id}/status").json() == {"scan_id": scan_id, "status": "done"}

    body = client.get(f"/scan/{scan_id}/results").json()
    assert body["target"] == "example.com"
    cookie_finding, hsts_finding = body["findings"]
    assert cookie_finding["check"] == "cookies"
    assert cookie_finding["severity"] == "critical"
    assert cookie_finding["cookie_count"] == 1
    assert hsts_finding["check"] == "hsts"
    assert hsts_finding["severity"] == "warning"
    assert len(hsts_finding["details"]["issues"]) == 2


def test_unknown_scan(client):
    assert client.get("/scan/missing/status").json()["status"] == "not_found"
    assert client.get("/scan/missing/results").json()["findings"] == []


def test_check_cookies_endpoint(client, monkeypatch):
    async def fake(domain):
        return cookies.analyze_cookies(domain, [])

    monkeypatch.setattr(router_module, "check_cookies", fake)
    body = client.get("/check/cookies", params={"domain": "example.com"}).json()
    assert body["status"] == "No Cookies Set"
    assert body["cookie_count"] == 0


def test_check_hsts_endpoint_error(client, monkeypatch):
    async def fake(domain):
        return hsts.error_finding(domain, FetchError(FetchErrorKind.TIMEOUT, "timed out"))

    monkeypatch.setattr(router_module, "check_hsts", fake)
    body = client.get("/check/hsts", params={"domain": "example.com"}).json()
    assert body["success"] is False
    assert body["severity"] == "error"
    assert body["error_kind"] == "timeout"
    assert body["details"]["max_age"] is None


def test_check_requires_domain(client):
    assert client.get("/check/hsts").status_code == 422


def test_scan_rejects_unknown_check(client):
    resp = client.post("/scan", json={"target": "example.com", "checks": ["HSTS", "cookies"]})
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Unknown checks: cookies"
