# posture_scanner/store.py
store = {}

def new_scan(scan_id, target):
    store[scan_id] = {"status": "in_progress", "target": target, "results": []}
    return {"scan_id": scan_id, "status": "in_progress"}

def get_status(scan_id):
    job = store.get(scan_id)
    return {"scan_id": scan_id, "status": job["status"] if job else "not_found"}

def get_results(scan_id):
    job = store.get(scan_id) or {"target": "", "results": []}
    return {"scan_id": scan_id, "target": job["target"], "findings": job["results"]}
