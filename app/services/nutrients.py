# app/services/nutrients.py
from __future__ import annotations

import json
import math
import re
from typing import Any, Optional

_UNIT_RE = re.compile(r"kcal", flags=re.I)


def derive_calories(entry: Any) -> Optional[float]:
    """
    "450 kcal" -> 450.0; missing entry -> 0.0.
    A present entry with no readable number ("none", "N/A") -> None,
    which never satisfies a comparison.
    """
    if entry is None:
        return 0.0
    if isinstance(entry, bool):
        return None
    if isinstance(entry, (int, float)):
        return float(entry) if math.isfinite(entry) else None

    text = _UNIT_RE.sub("", str(entry)).strip().replace(",", "")
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def derive_calories_from_nutrients(nutrients_json: Optional[str]) -> Optional[float]:
    # Registered with SQLite as derive_calories(nutrients); must never raise.
    if not nutrients_json:
        return 0.0
    try:
        nutrients = json.loads(nutrients_json)
    except (json.JSONDecodeError, TypeError):
        return 0.0
    if not isinstance(nutrients, dict):
        return 0.0
    return derive_calories(nutrients.get("calories"))
