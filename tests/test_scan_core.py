import asyncio
from types import SimpleNamespace

from posture_scanner import scan_core
from posture_scanner.models import CookieFinding, HstsFinding, Severity

from conftest import make_transport


HEADERS = [
    ("Set-Cookie", "sid=1; Secure; HttpOnly; SameSite=Strict"),
    ("Strict-Transport-Security", "max-age=31536000; includeSubDomains"),
]


def test_discover_scans():
    names = scan_core.available_scans()
    assert "Cookie Security" in names
    assert "HSTS" in names


def test_run_all_scans():
    findings = asyncio.run(scan_core.run_selected_scans("example.com", transport=make_transport(HEADERS)))
    by_check = {f.check: f for f in findings}
    assert isinstance(by_check["cookies"], CookieFinding)
    assert isinstance(by_check["hsts"], HstsFinding)
    assert all(f.severity == Severity.OK for f in findings)


def test_run_selected_scans_keeps_order_and_skips_unknown():
    findings = asyncio.run(scan_core.run_selected_scans(
        "example.com",
        ["HSTS", "Nope", "Cookie Security"],
        transport=make_transport(HEADERS),
    ))
    assert [f.check for f in findings] == ["hsts", "cookies"]


def test_run_scan_writes_store():
    store = {"abc": {"status": "in_progress", "target": None, "results": []}}
    asyncio.run(scan_core.run_scan("abc", "example.com", ["HSTS"], store, transport=make_transport([])))
    assert store["abc"]["status"] == "done"
    assert store["abc"]["target"] == "example.com"
    assert store["abc"]["results"][0].severity == Severity.CRITICAL


def test_run_scan_marks_failed_job(monkeypatch):
    async def broken_run(target, client, config=None):
        raise RuntimeError("plugin blew up")

    broken = SimpleNamespace(SCAN_NAME="Broken", run=broken_run)
    monkeypatch.setattr(scan_core, "discover_scans", lambda: {"Broken": broken})

    store = {"job": {"status": "in_progress", "target": "example.com", "results": []}}
    asyncio.run(scan_core.run_scan("job", "example.com", ["Broken"], store, transport=make_transport([])))
    assert store["job"]["status"] == "failed"
    assert store["job"]["results"] == []
