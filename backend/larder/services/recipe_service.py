"""Recipe Service — ownership/sharing-gated recipe CRUD and filtered listing.

Invariants:
    - get/update/delete: NotFound → ownership policy → payload validation → write
    - ingredients and shared_with_ids, when sent, REPLACE the stored collections
    - Listing is scoped to own + shared recipes for every role (ADMIN included)

Design Decisions:
    - Visibility narrowed in SQL, remaining filters applied by core.recipe_filters:
      one predicate decides membership, whatever the backend's LIKE semantics
"""

import logging
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from larder.core.domain_types import Principal, RecipeOperation, RecipeStatus
from larder.core.enforce_recipe_access import authorize_recipe_access
from larder.core.recipe_filters import RecipeFilters, is_listed_for, matches_filters
from larder.models.recipe import Recipe, RecipeIngredient
from larder.models.user import User
from larder.schemas.recipe import RecipeCreate, RecipeUpdate
from larder.schemas.validation import validate_payload
from larder.services.user_service import UserService

logger = logging.getLogger(__name__)


def _ingredient_rows(names: list[str]) -> list[RecipeIngredient]:
    return [
        RecipeIngredient(name=name, position=pos)
        for pos, name in enumerate(names)
    ]


class RecipeService:
    """Recipe CRUD behind the ownership/sharing policy."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserService(db)

    def _visible_to(self, viewer_id: UUID):
        return select(Recipe).where(
            or_(
                Recipe.created_by_id == viewer_id,
                Recipe.shared_with.any(User.id == viewer_id),
            ),
        )

    async def list_recipes(
        self, principal: Principal, filters: RecipeFilters,
    ) -> list[Recipe]:
        result = await self.db.execute(
            self._visible_to(principal.id).order_by(Recipe.created_at.desc()),
        )
        return [
            r for r in result.scalars().all()
            if matches_filters(r, filters, principal.id)
        ]

    async def list_listed_by_ids(
        self, principal: Principal, recipe_ids: list[UUID],
    ) -> list[Recipe]:
        """Recipes among `recipe_ids` the caller owns or is shared on."""
        result = await self.db.execute(
            self._visible_to(principal.id).where(Recipe.id.in_(recipe_ids)),
        )
        return [
            r for r in result.scalars().all() if is_listed_for(principal.id, r)
        ]

    async def get_recipe(self, principal: Principal, recipe_id: UUID) -> Recipe:
        recipe = await self._load(recipe_id)
        authorize_recipe_access(
            principal, recipe, RecipeOperation.READ, recipe_id,
        )
        return recipe

    async def create_recipe(self, principal: Principal, payload: dict) -> Recipe:
        data = validate_payload(RecipeCreate, payload)
        shared_with = await self.users.resolve_users(data.shared_with_ids or [])
        recipe = Recipe(
            name=data.name,
            instructions=data.instructions,
            cuisine_type=data.cuisine_type,
            prep_time=data.prep_time,
            status=(data.status or RecipeStatus.TO_TRY).value,
            created_by_id=principal.id,
            ingredients=_ingredient_rows(data.ingredients),
            shared_with=shared_with,
        )
        self.db.add(recipe)
        await self.db.commit()
        logger.info(
            f"Recipe created: {recipe.name}",
            extra={"user_id": str(principal.id), "recipe_id": str(recipe.id)},
        )
        return await self._load(recipe.id)

    async def update_recipe(
        self, principal: Principal, recipe_id: UUID, payload: dict,
    ) -> Recipe:
        recipe = await self._load(recipe_id)
        authorize_recipe_access(
            principal, recipe, RecipeOperation.UPDATE, recipe_id,
        )
        changes = validate_payload(RecipeUpdate, payload).present_fields()

        if "shared_with_ids" in changes:
            recipe.shared_with = await self.users.resolve_users(
                changes.pop("shared_with_ids"),
            )
        if "ingredients" in changes:
            recipe.ingredients = _ingredient_rows(changes.pop("ingredients"))
        if "status" in changes:
            changes["status"] = RecipeStatus(changes["status"]).value
        for attr, value in changes.items():
            setattr(recipe, attr, value)

        await self.db.commit()
        logger.info(
            "Recipe updated",
            extra={"user_id": str(principal.id), "recipe_id": str(recipe_id)},
        )
        return await self._load(recipe_id)

    async def delete_recipe(self, principal: Principal, recipe_id: UUID) -> None:
        recipe = await self._load(recipe_id)
        authorize_recipe_access(
            principal, recipe, RecipeOperation.DELETE, recipe_id,
        )
        await self.db.delete(recipe)
        await self.db.commit()
        logger.info(
            "Recipe deleted",
            extra={"user_id": str(principal.id), "recipe_id": str(recipe_id)},
        )

    async def _load(self, recipe_id: UUID) -> Recipe | None:
        result = await self.db.execute(
            select(Recipe)
            .where(Recipe.id == recipe_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()
