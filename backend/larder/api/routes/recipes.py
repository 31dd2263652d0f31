"""Recipe Routes — filtered listing and ownership-gated CRUD.

Invariants:
    - Every route requires an authenticated Principal
    - get/update/delete answer 404 before 403 (existence is not hidden)
    - Update body is validated only after the ownership check passes
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from larder.api.dependencies import get_current_principal
from larder.core.domain_types import Principal, RecipeStatus
from larder.core.recipe_filters import RecipeFilters
from larder.infrastructure.database import get_db
from larder.schemas.recipe import RecipeResponse
from larder.services.recipe_service import RecipeService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])


@router.get("")
async def list_recipes(
    name: str | None = Query(None),
    ingredient: str | None = Query(None),
    cuisine_type: str | None = Query(None),
    status_filter: RecipeStatus | None = Query(None, alias="status"),
    prep_time: int | None = Query(None, gt=0),
    tags: str | None = Query(None),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Recipes the caller created or that were shared with them, filtered."""
    filters = RecipeFilters.from_query(
        name=name,
        ingredient=ingredient,
        cuisine_type=cuisine_type,
        status=status_filter,
        prep_time=prep_time,
        tags=tags,
    )
    recipes = await RecipeService(db).list_recipes(principal, filters)
    return {"data": [RecipeResponse.from_model(r) for r in recipes]}


@router.get("/{recipe_id}")
async def get_recipe(
    recipe_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    recipe = await RecipeService(db).get_recipe(principal, recipe_id)
    return {"data": RecipeResponse.from_model(recipe)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_recipe(
    payload: dict = Body(...),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Create a recipe owned by the caller (any role)."""
    recipe = await RecipeService(db).create_recipe(principal, payload)
    return {"data": RecipeResponse.from_model(recipe)}


@router.put("/{recipe_id}")
async def update_recipe(
    recipe_id: UUID,
    payload: dict = Body(...),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Owner or ADMIN. shared_with_ids / ingredients replace, never merge."""
    recipe = await RecipeService(db).update_recipe(principal, recipe_id, payload)
    return {"data": RecipeResponse.from_model(recipe)}


@router.delete("/{recipe_id}")
async def delete_recipe(
    recipe_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    await RecipeService(db).delete_recipe(principal, recipe_id)
    return {"ok": True}
