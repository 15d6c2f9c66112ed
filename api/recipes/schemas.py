"""
Pydantic response models for the recipe endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class RecipeOut(BaseModel):
    id: int
    cuisine: str | None = None
    title: str | None = None
    rating: float | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    total_time: int | None = None
    description: str | None = None
    # JSON text exactly as stored.
    nutrients: str | None = None
    serves: str | None = None


class RecipePageResponse(BaseModel):
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    data: list[RecipeOut]


class RecipeSearchResponse(BaseModel):
    data: list[RecipeOut]


class LoadResponse(BaseModel):
    status: str
    message: str
    result: str | None = None
    loaded: int = 0
    skipped: int = 0
