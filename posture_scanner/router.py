# posture_scanner/router.py
from fastapi import APIRouter, BackgroundTasks, HTTPException, Query
from uuid import uuid4
from .config import FetchConfig
from .models import ScanRequest, ScanStatus, ScanResult, CookieFinding, HstsFinding
from .scan_core import run_scan, available_scans
from .scans.cookies import check_cookies
from .scans.hsts import check_hsts
from .store import store, new_scan, get_status, get_results

router = APIRouter(prefix="/scan", tags=["scan"])
check_router = APIRouter(prefix="/check", tags=["check"])

@router.post("", response_model=ScanStatus)
async def start_scan(request: ScanRequest, background_tasks: BackgroundTasks):
    unknown = sorted(set(request.checks) - set(available_scans()))
    if unknown:
        raise HTTPException(status_code=422, detail=f"Unknown checks: {', '.join(unknown)}")
    scan_id = str(uuid4())
    status = new_scan(scan_id, request.target)
    background_tasks.add_task(run_scan, scan_id, request.target, request.checks, store, FetchConfig.from_env())
    return status

@router.get("/available")
async def list_available_scans():
    return {"available": available_scans()}

@router.get("/{scan_id}/status", response_model=ScanStatus)
async def check_status(scan_id: str):
    return get_status(scan_id)

@router.get("/{scan_id}/results", response_model=ScanResult)
async def check_results(scan_id: str):
    return get_results(scan_id)

@check_router.get("/cookies", response_model=CookieFinding)
async def cookies(domain: str = Query(..., min_length=1)):
    return await check_cookies(domain)

@check_router.get("/hsts", response_model=HstsFinding)
async def hsts(domain: str = Query(..., min_length=1)):
    return await check_hsts(domain)
