"""
Recipe read operations: rating-ordered pagination and filtered search.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .filters import SearchCriteria, build_predicates
from .repository import RecipeStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

# LIMIT and OFFSET are bigint in Postgres.
INT8_MAX = 2**63 - 1


@dataclass(frozen=True)
class RecipePage:
    page: int
    limit: int
    total: int
    data: list[dict[str, Any]]


def normalize_paging(page: int, limit: int) -> tuple[int, int]:
    if page < 1:
        logger.debug("page_adjusted from=%s to=%s", page, DEFAULT_PAGE)
        page = DEFAULT_PAGE
    if limit < 1:
        logger.debug("limit_adjusted from=%s to=%s", limit, DEFAULT_LIMIT)
        limit = DEFAULT_LIMIT
    if limit > INT8_MAX:
        logger.debug("limit_adjusted from=%s to=%s", limit, INT8_MAX)
        limit = INT8_MAX
    return page, limit


class RecipeQueryService:
    def __init__(self, store: RecipeStore) -> None:
        self.store = store

    async def list_page(self, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> RecipePage:
        """
        One page of all recipes, best rated first. Unrated recipes come last.
        """
        page, limit = normalize_paging(page, limit)
        # An offset past the bigint range can only land beyond the last row.
        offset = min((page - 1) * limit, INT8_MAX)
        rows, total = await self.store.fetch_page(offset=offset, limit=limit)
        logger.info("recipes_listed page=%s limit=%s returned=%s total=%s", page, limit, len(rows), total)
        return RecipePage(page=page, limit=limit, total=total, data=rows)

    async def search(self, criteria: SearchCriteria) -> list[dict[str, Any]]:
        predicates = build_predicates(criteria)
        logger.debug("recipe_search predicates=%s", predicates)
        rows = await self.store.fetch_filtered(predicates)
        logger.info("recipe_search_complete predicates=%s returned=%s", len(predicates), len(rows))
        return rows
