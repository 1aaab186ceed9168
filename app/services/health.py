# app/services/health.py
from __future__ import annotations

import time
from typing import Any, Dict, Optional

from app.core import config
from app.core.errors import StoreError
from app.services import common


def _ms_since(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _check_result(status: str, latency_ms: int, error: Optional[str] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {"status": status, "latency_ms": latency_ms}
    if error:
        out["error"] = error
    return out


def check_db() -> Dict[str, Any]:
    start = time.perf_counter()
    try:
        with common.recipes_db() as conn:
            with common.round_trip(conn, "health"):
                row = conn.execute(
                    "SELECT name FROM sqlite_master WHERE type='table' AND name='recipes'"
                ).fetchone()
        if row is None:
            return _check_result("fail", _ms_since(start), "recipes table missing (run the importer)")
        return _check_result("ok", _ms_since(start))
    except StoreError as e:
        return _check_result("fail", _ms_since(start), str(e))


def version_payload() -> Dict[str, Any]:
    return {
        "version": config.APP_VERSION,
        "git_sha": config.GIT_SHA,
        "build_date": config.BUILD_DATE,
    }
