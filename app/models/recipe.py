# app/models/recipe.py
from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class RecipeSearchParams(BaseModel):
    """Raw search filters as they arrive on the query string."""

    title: Optional[str] = None
    cuisine: Optional[str] = None
    rating: Optional[str] = None
    total_time: Optional[str] = None
    calories: Optional[str] = None


class Recipe(BaseModel):
    id: int
    cuisine: Optional[str] = None
    title: Optional[str] = None
    rating: Optional[float] = None
    prep_time: Optional[float] = None
    cook_time: Optional[float] = None
    total_time: Optional[float] = None
    description: Optional[str] = None
    nutrients: Optional[Dict[str, Any]] = None
    serves: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    continent: Optional[str] = None
    country_state: Optional[str] = None
    url: Optional[str] = None


class RecipePage(BaseModel):
    success: bool = True
    count: int
    total: int
    page: int
    total_pages: int = Field(alias="totalPages")
    data: List[Recipe]

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
