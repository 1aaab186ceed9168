# app/services/recipes_import.py
"""
One-shot import of a scraped recipe export into the recipe store.

    python -m app.services.recipes_import US_recipes.json [--db PATH] [--keep]

The export is a JSON object keyed by arbitrary ids (or a plain list). Numeric
fields are sanitized here once: NaN, "NaN", junk and infinities become NULL,
so the query path never sees a non-finite number.
"""
from __future__ import annotations

import argparse
import json
import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from app.core import config
from app.core.logging import setup_logging
from app.services import common

log = logging.getLogger("recipe_catalog.import")

NUMERIC_FIELDS = ("rating", "total_time", "prep_time", "cook_time")

# export key -> column
TEXT_FIELDS = {
    "Contient": "continent",
    "Country_State": "country_state",
    "cuisine": "cuisine",
    "title": "title",
    "URL": "url",
    "description": "description",
    "serves": "serves",
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def sanitize_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None]


def process_recipe(raw: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Normalize one exported record; None when it has no title (gallery pages etc.)."""
    row: dict[str, Any] = {col: _text(raw.get(key)) for key, col in TEXT_FIELDS.items()}
    if row["title"] is None:
        return None

    for name in NUMERIC_FIELDS:
        row[name] = sanitize_number(raw.get(name))

    nutrients = raw.get("nutrients")
    row["nutrients"] = nutrients if isinstance(nutrients, dict) and nutrients else None
    row["ingredients"] = _str_list(raw.get("ingredients"))
    row["instructions"] = _str_list(raw.get("instructions"))
    return row


def load_export(path: Path) -> list[dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        return [v for v in data.values() if isinstance(v, dict)]
    if isinstance(data, list):
        return [v for v in data if isinstance(v, dict)]
    raise ValueError(f"{path}: expected a JSON object or list of recipes")


_INSERT = """
INSERT INTO recipes (
  cuisine, title, rating, prep_time, cook_time, total_time, description,
  nutrients, serves, ingredients, instructions, continent, country_state, url,
  created_at, updated_at
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


def _insert_params(row: dict[str, Any], now: str) -> tuple:
    return (
        row["cuisine"],
        row["title"],
        row["rating"],
        row["prep_time"],
        row["cook_time"],
        row["total_time"],
        row["description"],
        json.dumps(row["nutrients"], ensure_ascii=False) if row["nutrients"] is not None else None,
        row["serves"],
        json.dumps(row["ingredients"], ensure_ascii=False),
        json.dumps(row["instructions"], ensure_ascii=False),
        row["continent"],
        row["country_state"],
        row["url"],
        now,
        now,
    )


def import_recipes(
    records: Iterable[dict[str, Any]],
    *,
    db_path: Optional[Path] = None,
    keep_existing: bool = False,
    batch_size: Optional[int] = None,
) -> int:
    batch_size = batch_size or config.IMPORT_BATCH_SIZE
    rows = [r for r in (process_recipe(raw) for raw in records) if r is not None]
    now = _now_iso()

    with common.recipes_db(readonly=False, path=db_path) as conn:
        common.init_schema(conn)
        if not keep_existing:
            log.info("clearing existing recipes")
            conn.execute("DELETE FROM recipes")

        log.info("importing %d recipes", len(rows))
        for i in range(0, len(rows), batch_size):
            batch = rows[i : i + batch_size]
            conn.executemany(_INSERT, [_insert_params(r, now) for r in batch])
            conn.commit()
            log.info("imported %d / %d recipes", min(i + batch_size, len(rows)), len(rows))

        total, rated = conn.execute("SELECT COUNT(*), COUNT(rating) FROM recipes").fetchone()
        conn.commit()

    log.info("import complete: total=%d rated=%d unrated=%d", total, rated, total - rated)
    return len(rows)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load a recipe export into the recipe store.")
    parser.add_argument("export", type=Path, help="JSON export to import")
    parser.add_argument("--db", type=Path, default=None, help=f"store path (default {config.RECIPES_DB})")
    parser.add_argument("--keep", action="store_true", help="append instead of replacing existing recipes")
    args = parser.parse_args(argv)

    setup_logging()
    n = import_recipes(load_export(args.export), db_path=args.db, keep_existing=args.keep)
    print(f"Imported {n} recipes into {args.db or config.RECIPES_DB}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
