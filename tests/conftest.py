from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from app.core import config
from app.services.recipes_import import import_recipes


def _recipe(title: Any, cuisine: str, rating: Any, total_time: Any, calories: Any = None) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "Contient": "North America",
        "Country_State": "US",
        "cuisine": cuisine,
        "title": title,
        "URL": f"https://example.test/{str(title).lower().replace(' ', '-')}",
        "rating": rating,
        "total_time": total_time,
        "prep_time": 10,
        "cook_time": None,
        "description": f"{title} description",
        "ingredients": ["salt", "water"],
        "instructions": ["Mix.", "Cook."],
        "serves": "4 servings",
    }
    if calories is not None:
        raw["nutrients"] = {"calories": calories, "fatContent": "10 g"}
    return raw


# Insertion order fixes the ids (1..7); the untitled record is skipped on import.
RECIPES = [
    _recipe("Apple Pie", "American", 4.8, 35, "380 kcal"),
    _recipe("Shepherd's Pie", "British", 4.2, 50, "600 kcal"),
    _recipe("PIE night special", "Southern", 4.9, 20, "none"),
    _recipe("Chocolate Cake", "French", 4.5, 90, "450 kcal"),
    _recipe("Garden Salad", "Italian", "NaN", 10),
    _recipe("Tomato Soup", "Italian", 4.5, 30, "120 kcal"),
    _recipe("Beef Stew", "Irish", None, 120, "700 kcal"),
    _recipe(None, "Gallery", 5.0, 1, "1 kcal"),
]

# rating desc, unrated last, id asc
ALL_TITLES_SORTED = [
    "PIE night special",
    "Apple Pie",
    "Chocolate Cake",
    "Tomato Soup",
    "Shepherd's Pie",
    "Garden Salad",
    "Beef Stew",
]


@pytest.fixture
def make_store(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[..., Path]:
    def _make(records: list[dict[str, Any]], name: str = "recipes.sqlite3") -> Path:
        path = tmp_path / name
        import_recipes(records, db_path=path)
        monkeypatch.setattr(config, "RECIPES_DB", path)
        return path

    return _make


@pytest.fixture
def store(make_store: Callable[..., Path]) -> Path:
    return make_store(RECIPES)


@pytest.fixture
def client(store: Path) -> TestClient:
    from app.main import app

    return TestClient(app)
