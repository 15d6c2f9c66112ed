"""
Recipe persistence (raw SQL over asyncpg).

Schema comes from the dbmate migration in `db/migrations/`:
- recipes(id bigserial, cuisine, title, rating, prep_time, cook_time,
  total_time, description, nutrients, serves)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Protocol, Sequence

import asyncpg

from .filters import Predicate, predicates_to_sql
from .records import RECIPE_FIELDS, Recipe

logger = logging.getLogger(__name__)

RECIPE_COLUMNS = "id, " + ", ".join(RECIPE_FIELDS)

# Unrated recipes go to the end of the listing; id keeps pages stable.
LISTING_ORDER = "rating DESC NULLS LAST, id ASC"


class RecipeStoreError(RuntimeError):
    pass


class RecipeStore(Protocol):
    async def count(self) -> int: ...

    async def insert_many(self, recipes: Sequence[Recipe]) -> int: ...

    async def fetch_page(self, *, offset: int, limit: int) -> tuple[list[dict[str, Any]], int]: ...

    async def fetch_filtered(self, predicates: list[Predicate]) -> list[dict[str, Any]]: ...


@asynccontextmanager
async def _store_errors(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
        raise RecipeStoreError(f"Recipe store {operation} failed: {e}") from e


def _insert_sql() -> str:
    placeholders = ", ".join(f"${i}" for i in range(1, len(RECIPE_FIELDS) + 1))
    return f"INSERT INTO recipes ({', '.join(RECIPE_FIELDS)}) VALUES ({placeholders})"


class RecipeRepository:
    """
    `RecipeStore` backed by the `recipes` table.
    """

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def count(self) -> int:
        async with _store_errors("count"):
            value = await self.pool.fetchval("SELECT count(*) FROM recipes")
        return int(value or 0)

    async def insert_many(self, recipes: Sequence[Recipe]) -> int:
        """
        Insert all recipes in a single transaction. Returns the row count.
        """
        if not recipes:
            return 0

        records = [recipe.as_row() for recipe in recipes]
        async with _store_errors("insert"):
            async with self.pool.acquire() as conn:  # type: asyncpg.Connection
                async with conn.transaction():
                    await conn.executemany(_insert_sql(), records)
        logger.info("recipes_inserted count=%s", len(records))
        return len(records)

    async def fetch_page(self, *, offset: int, limit: int) -> tuple[list[dict[str, Any]], int]:
        """
        Returns (rows, total) for one page of the rating-ordered listing.
        """
        async with _store_errors("page read"):
            async with self.pool.acquire() as conn:  # type: asyncpg.Connection
                total = await conn.fetchval("SELECT count(*) FROM recipes")
                rows = await conn.fetch(
                    f"""
                    SELECT {RECIPE_COLUMNS}
                    FROM recipes
                    ORDER BY {LISTING_ORDER}
                    LIMIT $1
                    OFFSET $2
                    """,
                    limit,
                    offset,
                )
        return [dict(r) for r in rows], int(total or 0)

    async def fetch_filtered(self, predicates: list[Predicate]) -> list[dict[str, Any]]:
        where_sql, args = predicates_to_sql(predicates)
        async with _store_errors("search"):
            rows = await self.pool.fetch(
                f"""
                SELECT {RECIPE_COLUMNS}
                FROM recipes
                {where_sql}
                ORDER BY id
                """,
                *args,
            )
        return [dict(r) for r in rows]
