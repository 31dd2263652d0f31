"""Sample data loader — `python -m larder.seed`.

Upserts the admin/manager/staff users by email (restoring their seeded role),
then replaces sample inventory and recipes. Reads DATABASE_URL like the app.
"""

import asyncio
import logging
from datetime import date, timedelta

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from larder.config import get_settings
from larder.core.domain_types import (
    InventoryCategory, RecipeStatus, Role, Unit,
)
from larder.core.inventory_status import compute_status
from larder.db.base import Base
from larder.db.session import create_session_factory
from larder.infrastructure.observability import setup_logging
from larder.models import (
    InventoryItem, Recipe, RecipeIngredient, User, recipe_shares,
)

logger = logging.getLogger(__name__)

SEED_USERS = (
    ("Admin User", "admin@example.com", Role.ADMIN),
    ("Manager User", "manager@example.com", Role.MANAGER),
    ("Staff User", "staff@example.com", Role.STAFF),
)

# (name, category, quantity, unit, cost, price, supplier, days to expiry, creator)
SEED_ITEMS = (
    ("Gala Apples", InventoryCategory.FRUIT, 24, Unit.KG,
     1.2, 2.4, "Orchard Farms", 12, Role.ADMIN),
    ("Baby Spinach", InventoryCategory.VEGETABLE, 6, Unit.BOX,
     8.0, 14.5, "Green Leaf Co.", 5, Role.MANAGER),
    ("Bell Peppers Mix", InventoryCategory.VEGETABLE, 11, Unit.BOX,
     7.5, 13.0, "Sunrise Produce", 9, Role.STAFF),
)


async def _upsert_users(db: AsyncSession) -> dict[Role, User]:
    users: dict[Role, User] = {}
    for name, email, role in SEED_USERS:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if user is None:
            user = User(name=name, email=email, role=role.value)
            db.add(user)
        else:
            user.role = role.value
        users[role] = user
    await db.flush()
    return users


def _sample_items(users: dict[Role, User], today: date) -> list[InventoryItem]:
    return [
        InventoryItem(
            name=name,
            category=category.value,
            quantity=quantity,
            unit=unit.value,
            cost_price=cost,
            selling_price=price,
            supplier=supplier,
            expiration_date=today + timedelta(days=days),
            status=compute_status(quantity).value,
            created_by_id=users[creator].id,
        )
        for (name, category, quantity, unit, cost, price,
             supplier, days, creator) in SEED_ITEMS
    ]


def _sample_recipe(users: dict[Role, User]) -> Recipe:
    ingredients = ["chickpeas", "spinach", "tomato", "olive oil", "lemon"]
    return Recipe(
        name="Mediterranean Veggie Bowl",
        instructions=(
            "Roast chickpeas, saute spinach, combine with diced tomatoes "
            "and drizzle with lemon olive oil."
        ),
        cuisine_type="Mediterranean",
        prep_time=25,
        status=RecipeStatus.FAVORITE.value,
        created_by_id=users[Role.ADMIN].id,
        ingredients=[
            RecipeIngredient(name=n, position=i)
            for i, n in enumerate(ingredients)
        ],
        shared_with=[users[Role.MANAGER], users[Role.STAFF]],
    )


async def seed(database_url: str) -> None:
    engine, session_factory = create_session_factory(database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with session_factory() as db:
            users = await _upsert_users(db)
            await db.execute(delete(recipe_shares))
            await db.execute(delete(RecipeIngredient))
            await db.execute(delete(Recipe))
            await db.execute(delete(InventoryItem))
            db.add_all(_sample_items(users, date.today()))
            db.add(_sample_recipe(users))
            await db.commit()
        logger.info(
            f"Seeded {len(SEED_USERS)} users, {len(SEED_ITEMS)} items, 1 recipe",
        )
    finally:
        await engine.dispose()


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    asyncio.run(seed(settings.database_url))


if __name__ == "__main__":
    main()
