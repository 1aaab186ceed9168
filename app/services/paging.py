# app/services/paging.py
from __future__ import annotations

import math
import re
from typing import Any, Optional, Sequence

from app.models.recipe import Recipe, RecipePage

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def _leading_int(raw: Optional[str]) -> Optional[int]:
    m = _LEADING_INT_RE.match(raw or "")
    return int(m.group(1)) if m else None


def coerce_page(raw: Optional[str]) -> int:
    n = _leading_int(raw)
    return n if n and n > 0 else 1


def coerce_limit(raw: Optional[str], default: int) -> int:
    # "3abc" -> 3; absent, junk, zero or negative -> default
    n = _leading_int(raw)
    return n if n and n > 0 else default


def build_page(items: Sequence[dict[str, Any]], total: int, page: int, limit: int) -> RecipePage:
    """
    Wrap one page of recipes. Pages past the end are not clamped;
    they come back empty with the real total.
    """
    return RecipePage(
        count=len(items),
        total=total,
        page=page,
        total_pages=math.ceil(total / limit),
        data=[Recipe(**r) for r in items],
    )
