# posture_scanner/scan_core.py
import asyncio
import importlib
import logging
import pkgutil
from typing import Dict, List, Optional

import httpx

from .config import FetchConfig
from .fetch import build_client
from .models import AnyFinding

logger = logging.getLogger(__name__)


def discover_scans() -> Dict[str, object]:
    scanners = {}
    try:
        import posture_scanner.scans as scans_pkg
    except Exception as e:
        logger.exception("Failed to import posture_scanner.scans package: %s", e)
        return scanners

    for finder, name, ispkg in sorted(pkgutil.iter_modules(scans_pkg.__path__), key=lambda m: m.name):
        try:
            module = importlib.import_module(f"posture_scanner.scans.{name}")
            if hasattr(module, "SCAN_NAME") and hasattr(module, "run"):
                scanners[module.SCAN_NAME] = module
        except Exception as e:
            logger.exception("Failed to import scan module %s: %s", name, e)
    return scanners


async def run_selected_scans(
    target: str,
    selected: Optional[List[str]] = None,
    config: Optional[FetchConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    concurrency: int = 10,
) -> List[AnyFinding]:
    """
    Run the selected checks (every discovered one when none are given)
    against target over a single shared client. Findings come back in
    selection order.
    """
    SCANNERS = discover_scans()
    config = config or FetchConfig.from_env()
    modules = []
    if not selected:
        modules = list(SCANNERS.values())
    else:
        for name in selected:
            m = SCANNERS.get(name)
            if m:
                modules.append(m)
            else:
                logger.warning("Unknown check requested: %s", name)

    async with build_client(config, transport) as client:
        semaphore = asyncio.Semaphore(concurrency)

        async def run_module(mod):
            async with semaphore:
                logger.info("Running %s against %s", mod.SCAN_NAME, target)
                return await mod.run(target, client, config)

        return list(await asyncio.gather(*(run_module(m) for m in modules)))


async def run_scan(
    scan_id: str,
    target: str,
    checks: List[str],
    store: dict,
    config: Optional[FetchConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> None:
    try:
        findings = await run_selected_scans(target, checks, config=config, transport=transport)
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        logger.exception("Scan %s against %s failed: %s", scan_id, target, exc)
        store[scan_id]['status'] = 'failed'
        store[scan_id]['target'] = target
        return

    store[scan_id]['status'] = 'done'
    store[scan_id]['target'] = target
    store[scan_id]['results'] = findings


def available_scans() -> List[str]:
    return list(discover_scans().keys())
