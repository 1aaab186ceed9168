# app/services/recipes_repo.py
from __future__ import annotations

import json
import re
import sqlite3
from typing import Any, List, Optional, Sequence

from app.services import common
from app.services.comparison import Comparison

RECIPE_COLUMNS = (
    "id",
    "cuisine",
    "title",
    "rating",
    "prep_time",
    "cook_time",
    "total_time",
    "description",
    "nutrients",
    "serves",
    "ingredients",
    "instructions",
    "continent",
    "country_state",
    "url",
)
_SELECT = ", ".join(RECIPE_COLUMNS)

# Highest rating first, unrated last, id breaks ties so pages never overlap
ORDER_BY = "rating IS NULL, rating DESC, id ASC"

_IDENT_RE = re.compile(r"^[a-z_][a-z0-9_]*$")

# Largest value SQLite accepts for LIMIT / OFFSET binds
_SQLITE_MAX_INT = 2**63 - 1


def _bound(n: int) -> int:
    # an oversized page/limit clamps here and reads as a page past the end
    return min(int(n), _SQLITE_MAX_INT)


def _load_json(text: Optional[str], default: Any) -> Any:
    if not text:
        return default
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return default


def row_to_recipe(row: sqlite3.Row) -> dict[str, Any]:
    recipe = {col: row[col] for col in RECIPE_COLUMNS}
    recipe["nutrients"] = _load_json(row["nutrients"], None)
    recipe["ingredients"] = _load_json(row["ingredients"], [])
    recipe["instructions"] = _load_json(row["instructions"], [])
    return recipe


def count(where: str, params: Sequence[Any]) -> int:
    with common.recipes_db() as conn:
        with common.round_trip(conn, "count"):
            row = conn.execute(f"SELECT COUNT(*) FROM recipes WHERE {where}", tuple(params)).fetchone()
    return int(row[0])


def find(where: str, params: Sequence[Any], *, skip: int, limit: int) -> list[dict[str, Any]]:
    with common.recipes_db() as conn:
        with common.round_trip(conn, "find"):
            rows = conn.execute(
                f"""
                SELECT {_SELECT}
                FROM recipes
                WHERE {where}
                ORDER BY {ORDER_BY}
                LIMIT ? OFFSET ?
                """,
                (*params, _bound(limit), _bound(skip)),
            ).fetchall()
    return [row_to_recipe(r) for r in rows]


class ComputedFieldPipeline:
    """
    filter -> derive -> filter-on-derived, then count or page.

    Compiled to a CTE: the first stage reduces with the stored-column filter
    and adds the derived column, the outer query filters on it. The derived
    column never leaves the store.
    """

    def __init__(self) -> None:
        self._where = "1 = 1"
        self._params: List[Any] = []
        self._derived_name: Optional[str] = None
        self._derived_sql: Optional[str] = None
        self._derived_match: Optional[Comparison] = None

    def match(self, where: str, params: Sequence[Any]) -> "ComputedFieldPipeline":
        self._where = where
        self._params = list(params)
        return self

    def derive(self, name: str, sql_expr: str) -> "ComputedFieldPipeline":
        if not _IDENT_RE.match(name):
            raise ValueError(f"invalid derived field name: {name!r}")
        self._derived_name = name
        self._derived_sql = sql_expr
        return self

    def match_derived(self, comparison: Comparison) -> "ComputedFieldPipeline":
        if self._derived_name is None:
            raise ValueError("match_derived() needs a derive() stage first")
        self._derived_match = comparison
        return self

    def _compile(self, select: str) -> tuple[str, list[Any]]:
        if self._derived_name is None or self._derived_match is None:
            raise ValueError("pipeline is missing its derive/match stages")
        sql = f"""
            WITH derived AS (
              SELECT {_SELECT}, {self._derived_sql} AS {self._derived_name}
              FROM recipes
              WHERE {self._where}
            )
            SELECT {select}
            FROM derived
            WHERE {self._derived_name} {self._derived_match.op.sql} ?
        """
        return sql, [*self._params, self._derived_match.operand]

    def count(self) -> int:
        sql, params = self._compile("COUNT(*)")
        with common.recipes_db() as conn:
            with common.round_trip(conn, "pipeline.count"):
                row = conn.execute(sql, tuple(params)).fetchone()
        return int(row[0])

    def page(self, *, skip: int, limit: int) -> list[dict[str, Any]]:
        sql, params = self._compile(_SELECT)
        sql += f" ORDER BY {ORDER_BY} LIMIT ? OFFSET ?"
        with common.recipes_db() as conn:
            with common.round_trip(conn, "pipeline.page"):
                rows = conn.execute(sql, (*params, _bound(limit), _bound(skip))).fetchall()
        return [row_to_recipe(r) for r in rows]
