# app/services/recipes_filter.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, Union

from app.core.errors import InvalidFilterError
from app.models.recipe import RecipeSearchParams
from app.services.comparison import Comparison, InvalidComparisonError, Op, parse_comparison

CONTAINS = "contains"

TEXT_FIELDS = ("cuisine", "title")
NUMERIC_FIELDS = ("total_time", "rating")
COMPUTED_FIELD = "calories"

# Only these names are ever interpolated into SQL.
_COLUMNS = frozenset(TEXT_FIELDS + NUMERIC_FIELDS)

MATCH_ALL = "1 = 1"


@dataclass(frozen=True)
class Predicate:
    field: str
    kind: Union[str, Op]
    value: Union[str, float]

    def to_sql(self, column: Optional[str] = None) -> Tuple[str, Any]:
        column = column or self.field
        if self.kind == CONTAINS:
            # casefold() is registered on every store connection
            return f"instr(casefold({column}), ?) > 0", str(self.value).casefold()
        return f"{column} {Op(self.kind).sql} ?", self.value


@dataclass(frozen=True)
class RecipeFilter:
    predicates: Tuple[Predicate, ...] = ()
    computed: Optional[Comparison] = None

    @property
    def needs_pipeline(self) -> bool:
        return self.computed is not None

    def compile(self) -> Tuple[str, List[Any]]:
        """Composite WHERE clause and its bound parameters (calories excluded)."""
        if not self.predicates:
            return MATCH_ALL, []
        clauses: List[str] = []
        params: List[Any] = []
        for p in self.predicates:
            sql, value = p.to_sql()
            clauses.append(sql)
            params.append(value)
        return " AND ".join(clauses), params


@dataclass
class FilterBuilder:
    predicates: List[Predicate] = field(default_factory=list)
    computed: Optional[Comparison] = None

    def contains(self, name: str, text: Optional[str]) -> "FilterBuilder":
        text = (text or "").strip()
        if text:
            self._add(Predicate(name, CONTAINS, text))
        return self

    def compare(self, name: str, comparison: Optional[Comparison]) -> "FilterBuilder":
        if comparison is not None:
            self._add(Predicate(name, comparison.op, comparison.operand))
        return self

    def compare_computed(self, comparison: Optional[Comparison]) -> "FilterBuilder":
        self.computed = comparison
        return self

    def build(self) -> RecipeFilter:
        return RecipeFilter(predicates=tuple(self.predicates), computed=self.computed)

    def _add(self, predicate: Predicate) -> None:
        if predicate.field not in _COLUMNS:
            raise ValueError(f"unknown filter field: {predicate.field}")
        self.predicates.append(predicate)


def _parse_field(name: str, raw: Optional[str]) -> Optional[Comparison]:
    try:
        return parse_comparison(raw)
    except InvalidComparisonError as e:
        raise InvalidFilterError(name, raw or "", str(e)) from e


def build_filter(params: RecipeSearchParams) -> RecipeFilter:
    builder = FilterBuilder()

    for name in TEXT_FIELDS:
        builder.contains(name, getattr(params, name))

    for name in NUMERIC_FIELDS:
        builder.compare(name, _parse_field(name, getattr(params, name)))

    # calories lives inside nutrients as "450 kcal"; it is filtered after derivation
    builder.compare_computed(_parse_field(COMPUTED_FIELD, params.calories))

    return builder.build()
