from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Sequence

import pytest

from core.settings import Settings
from recipes.filters import Predicate
from recipes.records import INT4_MAX, INT4_MIN, RECIPE_FIELDS, Recipe
from recipes.repository import RecipeStoreError
from recipes.service import INT8_MAX


def _matches(row: dict[str, Any], predicate: Predicate) -> bool:
    value = row[predicate.field]
    # SQL comparisons against NULL are never true.
    if value is None:
        return False
    if predicate.op == "eq":
        return value == predicate.value
    if predicate.op == "contains_ci":
        return str(predicate.value).lower() in value.lower()
    if predicate.op == "ge":
        return value >= predicate.value
    if predicate.op == "le":
        return value <= predicate.value
    raise AssertionError(f"unexpected op {predicate.op}")


def _check_argument(field: str, value: Any) -> None:
    # Same argument checks asyncpg applies before the query reaches Postgres.
    if isinstance(value, str) and "\x00" in value:
        raise RecipeStoreError(f"Recipe store search failed: NUL byte in {field}")
    if field == "total_time" and not INT4_MIN <= value <= INT4_MAX:
        raise RecipeStoreError(f"Recipe store search failed: {value} (value out of int32 range)")


def _listing_key(row: dict[str, Any]) -> tuple:
    # rating DESC NULLS LAST, id ASC
    rating = row["rating"]
    return (rating is None, -(rating or 0.0), row["id"])


class FakeRecipeStore:
    """
    In-memory `RecipeStore` following the same ordering rules as the SQL.
    """

    def __init__(self, recipes: Sequence[Recipe] = ()) -> None:
        self.rows: list[dict[str, Any]] = []
        self.insert_calls = 0
        self.fail_with: Exception | None = None
        for recipe in recipes:
            self._add(recipe)

    def _add(self, recipe: Recipe) -> None:
        row = {"id": len(self.rows) + 1}
        row.update(zip(RECIPE_FIELDS, recipe.as_row()))
        self.rows.append(row)

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def count(self) -> int:
        self._check()
        return len(self.rows)

    async def insert_many(self, recipes: Sequence[Recipe]) -> int:
        self._check()
        self.insert_calls += 1
        for recipe in recipes:
            self._add(recipe)
        return len(recipes)

    async def fetch_page(self, *, offset: int, limit: int) -> tuple[list[dict[str, Any]], int]:
        self._check()
        for value in (offset, limit):
            if not 0 <= value <= INT8_MAX:
                raise RecipeStoreError(f"Recipe store page read failed: {value} (value out of int64 range)")
        ordered = sorted(self.rows, key=_listing_key)
        return [dict(r) for r in ordered[offset : offset + limit]], len(self.rows)

    async def fetch_filtered(self, predicates: list[Predicate]) -> list[dict[str, Any]]:
        self._check()
        for predicate in predicates:
            _check_argument(predicate.field, predicate.value)
        return [dict(r) for r in self.rows if all(_matches(r, p) for p in predicates)]


@pytest.fixture
def sample_recipes() -> list[Recipe]:
    return [
        Recipe(cuisine="Soups", title="Chicken Soup", rating=4.5, total_time=40),
        Recipe(cuisine="Southern Recipes", title="Fried Chicken", rating=4.8, total_time=60),
        Recipe(cuisine="Desserts", title="Apple Pie", rating=3.9, total_time=90),
        Recipe(cuisine="Soups", title="Tomato Bisque", rating=None, total_time=30),
        Recipe(cuisine="Desserts", title="Brownies", rating=4.5, total_time=None),
    ]


@pytest.fixture
def store(sample_recipes: list[Recipe]) -> FakeRecipeStore:
    return FakeRecipeStore(sample_recipes)


@pytest.fixture
def empty_store() -> FakeRecipeStore:
    return FakeRecipeStore()


@pytest.fixture
def failing_store() -> FakeRecipeStore:
    fake = FakeRecipeStore()
    fake.fail_with = RecipeStoreError("Recipe store count failed: connection refused")
    return fake


@pytest.fixture
def write_document(tmp_path: Path) -> Callable[[Any], Path]:
    def _write(content: Any) -> Path:
        path = tmp_path / "recipes.json"
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def settings_for() -> Callable[[Path], Settings]:
    def _settings(path: Path, *, load_data: bool = True) -> Settings:
        return Settings(load_data=load_data, data_file=path)

    return _settings
