# app/services/common.py
from __future__ import annotations

import logging
import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from app.core import config
from app.core.errors import StoreError, StoreTimeoutError
from app.services.nutrients import derive_calories_from_nutrients

log = logging.getLogger("recipe_catalog.store")

# VM instructions between deadline checks
_PROGRESS_STEPS = 1000

_clock = time.monotonic

SCHEMA = """
CREATE TABLE IF NOT EXISTS recipes (
  id            INTEGER PRIMARY KEY AUTOINCREMENT,
  cuisine       TEXT,
  title         TEXT,
  rating        REAL,
  prep_time     REAL,
  cook_time     REAL,
  total_time    REAL,
  description   TEXT,
  nutrients     TEXT,
  serves        TEXT,
  ingredients   TEXT NOT NULL DEFAULT '[]',
  instructions  TEXT NOT NULL DEFAULT '[]',
  continent     TEXT,
  country_state TEXT,
  url           TEXT,
  created_at    TEXT NOT NULL,
  updated_at    TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_recipes_cuisine ON recipes (cuisine);
CREATE INDEX IF NOT EXISTS idx_recipes_rating ON recipes (rating DESC);
CREATE INDEX IF NOT EXISTS idx_recipes_total_time ON recipes (total_time);
"""


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if isinstance(value, str) else None


def _connect(path: Path, readonly: bool) -> sqlite3.Connection:
    if readonly:
        conn = sqlite3.connect(
            f"{path.resolve().as_uri()}?mode=ro",
            uri=True,
            timeout=config.STORE_TIMEOUT_S,
        )
    else:
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(path), timeout=config.STORE_TIMEOUT_S)
    conn.row_factory = sqlite3.Row
    conn.create_function("casefold", 1, _casefold, deterministic=True)
    conn.create_function("derive_calories", 1, derive_calories_from_nutrients, deterministic=True)
    return conn


@contextmanager
def recipes_db(readonly: bool = True, path: Optional[Path] = None) -> Iterator[sqlite3.Connection]:
    """
    Open the recipe store. The query path always opens read-only;
    only the bulk loader asks for a writable connection.
    """
    db_path = Path(path or config.RECIPES_DB)
    try:
        conn = _connect(db_path, readonly)
    except sqlite3.Error as e:
        raise StoreError(f"cannot open recipe store {db_path}: {e}") from e
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def round_trip(conn: sqlite3.Connection, label: str) -> Iterator[None]:
    """
    Run one store round-trip under STORE_TIMEOUT_S.
    sqlite3 errors come out as StoreError / StoreTimeoutError.
    """
    timeout = config.STORE_TIMEOUT_S
    deadline = _clock() + timeout
    conn.set_progress_handler(lambda: 1 if _clock() > deadline else 0, _PROGRESS_STEPS)

    start = time.perf_counter()
    try:
        yield
    except sqlite3.OperationalError as e:
        if "interrupted" in str(e):
            raise StoreTimeoutError(f"{label} exceeded {timeout:g}s") from e
        raise StoreError(str(e)) from e
    except sqlite3.Error as e:
        raise StoreError(str(e)) from e
    finally:
        conn.set_progress_handler(None, 0)
        log.debug(
            "store round-trip %s",
            label,
            extra={"duration_ms": int((time.perf_counter() - start) * 1000)},
        )


def init_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA)
