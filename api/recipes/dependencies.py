"""
FastAPI dependencies for the recipe routes.

The loader and query service are built once in the app lifespan and kept on
`app.state`; tests swap them via `app.dependency_overrides`.
"""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from .loader import RecipeLoader
from .service import RecipeQueryService


def _state_attr(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Recipe service is not initialized.",
        )
    return value


def get_query_service(request: Request) -> RecipeQueryService:
    return _state_attr(request, "recipe_queries")


def get_loader(request: Request) -> RecipeLoader:
    return _state_attr(request, "recipe_loader")
