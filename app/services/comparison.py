# app/services/comparison.py
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class InvalidComparisonError(ValueError):
    pass


class Op(str, Enum):
    GTE = "gte"
    LTE = "lte"
    GT = "gt"
    LT = "lt"
    EQ = "eq"

    @property
    def sql(self) -> str:
        return _SQL_OPERATORS[self]


_SQL_OPERATORS = {
    Op.GTE: ">=",
    Op.LTE: "<=",
    Op.GT: ">",
    Op.LT: "<",
    Op.EQ: "=",
}

# Two-character operators first, otherwise ">" would swallow ">=".
_PREFIXES = (
    (">=", Op.GTE),
    ("<=", Op.LTE),
    ("==", Op.EQ),
    (">", Op.GT),
    ("<", Op.LT),
)


@dataclass(frozen=True)
class Comparison:
    op: Op
    operand: float


def _parse_operand(text: str) -> float:
    text = text.strip()
    try:
        value = float(text)
    except ValueError:
        raise InvalidComparisonError(f"not a number: {text!r}") from None
    if not math.isfinite(value):
        raise InvalidComparisonError(f"not a finite number: {text!r}")
    return value


def parse_comparison(raw: Optional[str]) -> Optional[Comparison]:
    """
    Parse a filter value such as ">=4.5", "<=60", "==5" or "30".

    Returns None for an empty value. A value with no operator is an exact
    match, the same as "==". Raises InvalidComparisonError when the operand
    is not a finite decimal number.
    """
    if raw is None:
        return None
    value = raw.strip()
    if not value:
        return None

    for prefix, op in _PREFIXES:
        if value.startswith(prefix):
            return Comparison(op, _parse_operand(value[len(prefix):]))

    return Comparison(Op.EQ, _parse_operand(value))
