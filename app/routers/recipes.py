# app/routers/recipes.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter

from app.core import config
from app.models.recipe import ErrorResponse, RecipePage, RecipeSearchParams
from app.services import recipes_search
from app.services.paging import coerce_limit, coerce_page

router = APIRouter(
    prefix="/recipes",
    tags=["recipes"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


# page/limit stay strings so "abc" falls back to the default instead of a 422
@router.get("", response_model=RecipePage)
def recipe_list(page: Optional[str] = None, limit: Optional[str] = None) -> RecipePage:
    return recipes_search.list_recipes(
        page=coerce_page(page),
        limit=coerce_limit(limit, config.LIST_DEFAULT_LIMIT),
    )


@router.get("/search", response_model=RecipePage)
def recipe_search(
    title: Optional[str] = None,
    cuisine: Optional[str] = None,
    rating: Optional[str] = None,
    total_time: Optional[str] = None,
    calories: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
) -> RecipePage:
    params = RecipeSearchParams(
        title=title,
        cuisine=cuisine,
        rating=rating,
        total_time=total_time,
        calories=calories,
    )
    return recipes_search.search_recipes(
        params,
        page=coerce_page(page),
        limit=coerce_limit(limit, config.SEARCH_DEFAULT_LIMIT),
    )
