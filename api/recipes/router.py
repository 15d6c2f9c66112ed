"""
Recipe API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from . import schemas
from .dependencies import get_loader, get_query_service
from .filters import SearchCriteria
from .loader import RecipeLoader
from .service import DEFAULT_LIMIT, DEFAULT_PAGE, RecipeQueryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes")

LOAD_MESSAGES = {
    "loaded": "Data loaded successfully",
    "already_loaded": "Data already loaded, nothing to do",
    "disabled": "Data loading is disabled by configuration",
    "source_missing": "Data file not found, nothing loaded",
    "empty": "No valid recipes found in data file",
}


def _int_or_default(raw: str | None, default: int) -> int:
    raw = (raw or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@router.get("", response_model=schemas.RecipePageResponse)
async def list_recipes(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    queries: RecipeQueryService = Depends(get_query_service),
) -> dict:
    """
    All recipes sorted by rating (highest first), one page at a time.
    """
    result = await queries.list_page(
        _int_or_default(page, DEFAULT_PAGE),
        _int_or_default(limit, DEFAULT_LIMIT),
    )
    return {
        "page": result.page,
        "limit": result.limit,
        "total": result.total,
        "data": result.data,
    }


@router.get("/search", response_model=schemas.RecipeSearchResponse)
async def search_recipes(
    calories: str | None = Query(default=None),
    title: str | None = Query(default=None),
    cuisine: str | None = Query(default=None),
    total_time: str | None = Query(default=None),
    rating: str | None = Query(default=None),
    queries: RecipeQueryService = Depends(get_query_service),
) -> dict:
    """
    Filter recipes. `rating` takes ">=v", "<=v" or "=v"; `total_time` takes
    "<=v" or "=v". Malformed values are ignored rather than rejected.

    `calories` is accepted for client compatibility but does not filter.
    """
    if calories:
        logger.debug("search_param_ignored name=calories value=%r", calories)

    criteria = SearchCriteria.from_query(
        cuisine=cuisine,
        title=title,
        rating=rating,
        total_time=total_time,
    )
    rows = await queries.search(criteria)
    return {"data": rows}


@router.get("/load", response_model=schemas.LoadResponse)
async def trigger_load(loader: RecipeLoader = Depends(get_loader)):
    """
    Run the loader now. A no-op when recipes are already present.
    """
    logger.info("recipe_load_requested")
    try:
        result = await loader.load_if_needed()
    except Exception as e:
        logger.exception("recipe_load_request_failed")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": f"Failed to load data: {e}"},
        )

    return {
        "status": "ok",
        "message": LOAD_MESSAGES.get(result.status, result.status),
        "result": result.status,
        "loaded": result.loaded,
        "skipped": result.skipped,
    }
