# app/routers/index.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from app.core import config

router = APIRouter(tags=["index"])


@router.get("/")
def index() -> dict[str, Any]:
    base = config.API_PREFIX
    return {
        "message": "Recipe API is running!",
        "endpoints": {
            "getAllRecipes": f"GET {base}/recipes?page=1&limit=10",
            "searchRecipes": f"GET {base}/recipes/search?calories=<=400&title=pie&rating=>=4.5",
        },
    }
