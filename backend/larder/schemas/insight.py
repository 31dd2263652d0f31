"""Insight Schemas — request bodies for the text-generation endpoints."""

from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field, StringConstraints


class GroceryListRequest(BaseModel):
    recipe_ids: list[UUID] = Field(min_length=1)


class MealPlanRequest(BaseModel):
    preferences: str | None = Field(None, max_length=2000)


class RecipeGenerateRequest(BaseModel):
    ingredients: list[
        Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    ] = Field(min_length=1)


class RecipeImproveRequest(BaseModel):
    recipe: str = Field(min_length=10, max_length=20_000)


class InsightResponse(BaseModel):
    """Model output passed through verbatim (or a fallback message)."""
    data: str
