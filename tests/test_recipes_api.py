from __future__ import annotations

import itertools
import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.core import config
from app.services import common
from tests.conftest import ALL_TITLES_SORTED

ENVELOPE_KEYS = {"success", "count", "total", "page", "totalPages", "data"}


def test_listing_envelope_and_defaults(client: TestClient):
    resp = client.get("/recipes")
    assert resp.status_code == 200

    body = resp.json()
    assert set(body) == ENVELOPE_KEYS
    assert body["success"] is True
    assert body["page"] == 1
    assert body["total"] == 7
    assert body["count"] == 7
    assert body["totalPages"] == 1
    assert [r["title"] for r in body["data"]] == ALL_TITLES_SORTED


def test_listing_default_limit_is_ten(make_store, client: TestClient):
    from tests.conftest import _recipe

    make_store([_recipe(f"Dish {i}", "X", 3.0, 10) for i in range(12)], name="twelve.sqlite3")
    body = client.get("/recipes").json()
    assert body["count"] == 10
    assert body["totalPages"] == 2


def test_search_default_limit_is_fifteen(make_store, client: TestClient):
    from tests.conftest import _recipe

    make_store([_recipe(f"Dish {i}", "X", 3.0, 10) for i in range(20)], name="twenty.sqlite3")
    body = client.get("/recipes/search").json()
    assert body["count"] == 15
    assert body["totalPages"] == 2


def test_junk_paging_params_fall_back_to_defaults(client: TestClient):
    body = client.get("/recipes", params={"page": "abc", "limit": "-4"}).json()
    assert body["page"] == 1
    assert body["count"] == 7


def test_paging_params_echoed(client: TestClient):
    body = client.get("/recipes/search", params={"page": "2", "limit": "3"}).json()
    assert body["page"] == 2
    assert body["count"] == 3
    assert body["totalPages"] == 3
    assert [r["title"] for r in body["data"]] == ALL_TITLES_SORTED[3:6]


def test_search_with_operators_on_query_string(client: TestClient):
    resp = client.get(
        "/recipes/search",
        params={"title": "pie", "rating": ">=4.5", "calories": "<=400"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert [r["title"] for r in body["data"]] == ["Apple Pie"]
    assert body["total"] == 1


def test_page_past_end_keeps_total(client: TestClient):
    body = client.get("/recipes/search", params={"page": "9", "limit": "3"}).json()
    assert body["data"] == []
    assert body["count"] == 0
    assert body["total"] == 7
    assert body["totalPages"] == 3


def test_recipe_shape(client: TestClient):
    recipe = client.get("/recipes/search", params={"title": "apple"}).json()["data"][0]
    assert recipe["nutrients"] == {"calories": "380 kcal", "fatContent": "10 g"}
    assert recipe["ingredients"] == ["salt", "water"]
    assert recipe["instructions"] == ["Mix.", "Cook."]
    assert recipe["continent"] == "North America"
    assert recipe["url"] == "https://example.test/apple-pie"
    assert recipe["cook_time"] is None


@pytest.mark.parametrize("params", [{"rating": ">=abc"}, {"total_time": "soon"}, {"calories": "<=nan"}])
def test_malformed_filter_is_400(client: TestClient, params: dict):
    resp = client.get("/recipes/search", params=params)
    assert resp.status_code == 400

    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Invalid filter"
    assert next(iter(params)) in body["error"]


def test_store_failure_is_500(client: TestClient, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(config, "RECIPES_DB", tmp_path / "gone.sqlite3")

    resp = client.get("/recipes")
    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Server Error"
    assert "gone.sqlite3" in body["error"]


def test_store_timeout_is_500(client: TestClient, monkeypatch: pytest.MonkeyPatch):
    ticks = itertools.count()
    monkeypatch.setattr(common, "_clock", lambda: next(ticks) * 1000.0)
    monkeypatch.setattr(common, "_PROGRESS_STEPS", 1)

    resp = client.get("/recipes/search", params={"calories": "<=400"})
    assert resp.status_code == 500
    assert "exceeded" in resp.json()["error"]


def test_unknown_route_is_404(client: TestClient):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Route not found"}


def test_request_id_echoed(client: TestClient):
    resp = client.get("/recipes", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"
    assert client.get("/recipes").headers["X-Request-ID"]


def test_index_lists_endpoints(client: TestClient):
    body = client.get("/").json()
    assert body["message"] == "Recipe API is running!"
    assert "/recipes/search" in body["endpoints"]["searchRecipes"]


def test_huge_page_is_just_past_the_end(client: TestClient):
    resp = client.get("/recipes", params={"page": "99999999999999999999"})
    assert resp.status_code == 200

    body = resp.json()
    assert body["data"] == []
    assert body["total"] == 7
    assert body["totalPages"] == 1
    assert body["page"] == 99999999999999999999


@pytest.mark.parametrize("params", [{"limit": "99999999999999999999"}, {"calories": ">=0", "limit": "99999999999999999999"}])
def test_huge_limit_returns_everything(client: TestClient, params: dict):
    resp = client.get("/recipes/search", params=params)
    assert resp.status_code == 200

    body = resp.json()
    assert body["count"] == body["total"]
    assert body["totalPages"] == 1


def test_huge_page_and_limit_together(client: TestClient):
    resp = client.get(
        "/recipes/search",
        params={"page": "99999999999999999999", "limit": "99999999999999999999", "calories": "<1000"},
    )
    assert resp.status_code == 200
    assert resp.json()["data"] == []


def test_unexpected_error_keeps_envelope_and_request_id(
    client: TestClient, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
):
    from app.main import app
    from app.services import recipes_search

    def _boom(**kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(recipes_search, "list_recipes", _boom)
    lenient = TestClient(app, raise_server_exceptions=False)

    with caplog.at_level(logging.ERROR, logger="recipe_catalog.errors"):
        resp = lenient.get("/recipes", headers={"X-Request-ID": "rid-1"})

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Server Error", "error": "boom"}
    assert resp.headers["X-Request-ID"] == "rid-1"

    failures = [r for r in caplog.records if r.getMessage() == "request failed"]
    assert failures and failures[0].request_id == "rid-1"
