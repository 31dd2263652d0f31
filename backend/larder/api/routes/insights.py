"""Insight Routes — text-generation endpoints over inventory and recipe snapshots.

Invariants:
    - Every route requires an authenticated Principal (any role)
    - Response is {"data": <text>}: model output verbatim, or a fixed/fallback message
    - Generator failures become a generic 502 via the global LarderError handler
"""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from larder.api.dependencies import get_current_principal, get_text_generator
from larder.config import get_settings
from larder.core.domain_types import Principal
from larder.infrastructure.database import get_db
from larder.schemas.insight import (
    GroceryListRequest, InsightResponse, MealPlanRequest,
    RecipeGenerateRequest, RecipeImproveRequest,
)
from larder.services.insight_service import InsightService, TextGenerator

router = APIRouter(prefix="/api/v1/ai", tags=["insights"])


def get_insight_service(
    db: AsyncSession = Depends(get_db),
    generator: TextGenerator = Depends(get_text_generator),
) -> InsightService:
    settings = get_settings()
    return InsightService(
        db,
        generator,
        snapshot_limit=settings.insight_snapshot_limit,
        expiring_window_days=settings.expiring_window_days,
    )


@router.post("/demand", response_model=InsightResponse)
async def demand_insight(
    principal: Principal = Depends(get_current_principal),
    service: InsightService = Depends(get_insight_service),
):
    return InsightResponse(data=await service.demand(principal))


@router.post("/reorder", response_model=InsightResponse)
async def reorder_suggestions(
    principal: Principal = Depends(get_current_principal),
    service: InsightService = Depends(get_insight_service),
):
    return InsightResponse(data=await service.reorder(principal))


@router.post("/spoilage", response_model=InsightResponse)
async def spoilage_actions(
    principal: Principal = Depends(get_current_principal),
    service: InsightService = Depends(get_insight_service),
):
    return InsightResponse(data=await service.spoilage(principal, date.today()))


@router.post("/grocery-list", response_model=InsightResponse)
async def grocery_list(
    body: GroceryListRequest,
    principal: Principal = Depends(get_current_principal),
    service: InsightService = Depends(get_insight_service),
):
    return InsightResponse(
        data=await service.grocery_list(principal, body.recipe_ids),
    )


@router.post("/meal-plan", response_model=InsightResponse)
async def meal_plan(
    body: MealPlanRequest,
    principal: Principal = Depends(get_current_principal),
    service: InsightService = Depends(get_insight_service),
):
    return InsightResponse(
        data=await service.meal_plan(principal, body.preferences),
    )


@router.post("/recipe-generate", response_model=InsightResponse)
async def generate_recipe(
    body: RecipeGenerateRequest,
    principal: Principal = Depends(get_current_principal),
    service: InsightService = Depends(get_insight_service),
):
    return InsightResponse(
        data=await service.generate_recipe(principal, body.ingredients),
    )


@router.post("/recipe-improve", response_model=InsightResponse)
async def improve_recipe(
    body: RecipeImproveRequest,
    principal: Principal = Depends(get_current_principal),
    service: InsightService = Depends(get_insight_service),
):
    return InsightResponse(
        data=await service.improve_recipe(principal, body.recipe),
    )
