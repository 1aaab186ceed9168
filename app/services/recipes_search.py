# app/services/recipes_search.py
from __future__ import annotations

import logging
from typing import Any

from app.models.recipe import RecipePage, RecipeSearchParams
from app.services import recipes_repo
from app.services.paging import build_page
from app.services.recipes_filter import RecipeFilter, build_filter

log = logging.getLogger("recipe_catalog.search")

CALORIES_FIELD = "calories_value"
CALORIES_EXPR = "derive_calories(nutrients)"


def _skip(page: int, limit: int) -> int:
    return (page - 1) * limit


def _direct(flt: RecipeFilter, page: int, limit: int) -> tuple[list[dict[str, Any]], int]:
    where, params = flt.compile()
    total = recipes_repo.count(where, params)
    items = recipes_repo.find(where, params, skip=_skip(page, limit), limit=limit)
    return items, total


def _computed(flt: RecipeFilter, page: int, limit: int) -> tuple[list[dict[str, Any]], int]:
    where, params = flt.compile()
    pipeline = (
        recipes_repo.ComputedFieldPipeline()
        .match(where, params)
        .derive(CALORIES_FIELD, CALORIES_EXPR)
        .match_derived(flt.computed)
    )
    total = pipeline.count()
    items = pipeline.page(skip=_skip(page, limit), limit=limit)
    return items, total


def list_recipes(page: int, limit: int) -> RecipePage:
    items, total = _direct(RecipeFilter(), page, limit)
    return build_page(items, total, page, limit)


def search_recipes(params: RecipeSearchParams, page: int, limit: int) -> RecipePage:
    """
    Run a faceted search.

    Stored-column filters go straight to the store. A calories filter has to
    read the number out of nutrients.calories first, so it takes the
    computed-field pipeline, which is only used when calories is requested.
    """
    flt = build_filter(params)
    strategy = "computed" if flt.needs_pipeline else "direct"
    log.info(
        "recipe search strategy=%s filters=%d page=%d limit=%d",
        strategy,
        len(flt.predicates) + (1 if flt.needs_pipeline else 0),
        page,
        limit,
    )

    if flt.needs_pipeline:
        items, total = _computed(flt, page, limit)
    else:
        items, total = _direct(flt, page, limit)

    return build_page(items, total, page, limit)
