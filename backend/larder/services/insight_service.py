"""Insight Service — builds inventory/recipe snapshots and asks the text generator.

Invariants:
    - Empty snapshot → fixed message, the generator is NOT called
    - Generator output is passed through verbatim; blank output → prompt fallback
    - Generator failures surface as UpstreamFailureError (generic message only)
    - Grocery list only reads recipes the caller owns or is shared on
"""

import logging
from datetime import date
from typing import Protocol

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from larder.core.domain_types import InventoryStatus, Principal
from larder.core.errors import ErrorContext
from larder.core.format_prompts import (
    NO_GROCERY_RECIPES, NO_INVENTORY_DATA, NO_REORDER_NEEDED, NO_SPOILAGE_RISK,
    InsightPrompt, demand_prompt, grocery_list_prompt, meal_plan_prompt,
    recipe_generate_prompt, recipe_improve_prompt, reorder_prompt,
    spoilage_prompt,
)
from larder.core.inventory_status import LOW_STOCK_THRESHOLD
from larder.core.inventory_summary import collect_ingredients, expiry_cutoff
from larder.models.inventory_item import InventoryItem
from larder.services.recipe_service import RecipeService

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    """Text-generation collaborator (see infrastructure/anthropic_client.py)."""
    async def generate(
        self, system: str, prompt: str, context: ErrorContext | None = None,
    ) -> str: ...


class InsightService:
    """One method per insight endpoint."""

    def __init__(
        self,
        db: AsyncSession,
        generator: TextGenerator,
        snapshot_limit: int = 20,
        expiring_window_days: int = 7,
    ):
        self.db = db
        self.generator = generator
        self.snapshot_limit = snapshot_limit
        self.expiring_window_days = expiring_window_days

    async def demand(self, principal: Principal) -> str:
        result = await self.db.execute(
            select(InventoryItem)
            .order_by(InventoryItem.selling_price.desc())
            .limit(self.snapshot_limit),
        )
        items = list(result.scalars().all())
        if not items:
            return NO_INVENTORY_DATA
        return await self._generate(demand_prompt(items), principal)

    async def reorder(self, principal: Principal) -> str:
        result = await self.db.execute(
            select(InventoryItem)
            .where(or_(
                InventoryItem.status == InventoryStatus.LOW_STOCK.value,
                InventoryItem.quantity < LOW_STOCK_THRESHOLD,
            ))
            .order_by(InventoryItem.quantity.asc()),
        )
        items = list(result.scalars().all())
        if not items:
            return NO_REORDER_NEEDED
        return await self._generate(reorder_prompt(items), principal)

    async def spoilage(self, principal: Principal, today: date) -> str:
        cutoff = expiry_cutoff(today, self.expiring_window_days)
        result = await self.db.execute(
            select(InventoryItem)
            .where(InventoryItem.expiration_date <= cutoff)
            .order_by(InventoryItem.expiration_date.asc()),
        )
        items = list(result.scalars().all())
        if not items:
            return NO_SPOILAGE_RISK.format(days=self.expiring_window_days)
        return await self._generate(spoilage_prompt(items), principal)

    async def grocery_list(self, principal: Principal, recipe_ids: list) -> str:
        recipes = await RecipeService(self.db).list_listed_by_ids(
            principal, recipe_ids,
        )
        ingredients = collect_ingredients(recipes)
        if not ingredients:
            return NO_GROCERY_RECIPES
        return await self._generate(grocery_list_prompt(ingredients), principal)

    async def meal_plan(self, principal: Principal, preferences: str | None) -> str:
        return await self._generate(meal_plan_prompt(preferences), principal)

    async def generate_recipe(
        self, principal: Principal, ingredients: list[str],
    ) -> str:
        return await self._generate(recipe_generate_prompt(ingredients), principal)

    async def improve_recipe(self, principal: Principal, recipe: str) -> str:
        return await self._generate(recipe_improve_prompt(recipe), principal)

    async def _generate(self, prompt: InsightPrompt, principal: Principal) -> str:
        text = await self.generator.generate(
            prompt.system, prompt.user,
            context=ErrorContext(user_id=str(principal.id)),
        )
        if not text or not text.strip():
            logger.warning(
                "Text generator returned no content, using fallback",
                extra={"user_id": str(principal.id)},
            )
            return prompt.fallback
        return text
