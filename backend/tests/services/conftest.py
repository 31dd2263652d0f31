"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - get_text_generator overridden with a recording fake (no network)
    - Users for every role are seeded; requests pick one via the X-User-Id header

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - db_manager patched: the readiness probe reads it directly
"""

from datetime import date, timedelta

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from larder.api.dependencies import get_text_generator
from larder.core.domain_types import Role
from larder.core.errors import UpstreamFailureError
from larder.core.inventory_status import compute_status
from larder.db.base import Base
from larder.infrastructure.database import get_db, DatabaseSessionManager
import larder.infrastructure.database as db_module
from larder.main import app
from larder.models import InventoryItem, Recipe, RecipeIngredient, User


class FakeGenerator:
    """Records every prompt; returns `text` or raises `error`."""

    def __init__(self):
        self.calls: list[dict] = []
        self.text = "Generated insight."
        self.error: Exception | None = None

    async def generate(self, system, prompt, context=None):
        self.calls.append({"system": system, "prompt": prompt, "context": context})
        if self.error:
            raise self.error
        return self.text

    def fail(self):
        self.error = UpstreamFailureError("connection_error")


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
async def client(test_engine, test_session_factory, generator):
    """FastAPI test client with DB and text generator overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_text_generator] = lambda: generator

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def users(test_db) -> dict[str, User]:
    """One user per role plus a second STAFF user ("other")."""
    seeded = {
        "admin": User(name="Admin User", email="admin@example.com", role=Role.ADMIN.value),
        "manager": User(name="Manager User", email="manager@example.com", role=Role.MANAGER.value),
        "staff": User(name="Staff User", email="staff@example.com", role=Role.STAFF.value),
        "other": User(name="Other User", email="other@example.com", role=Role.STAFF.value),
    }
    test_db.add_all(seeded.values())
    await test_db.commit()
    return seeded


@pytest.fixture
def as_user(users):
    """Headers identifying the named seeded user."""
    def _headers(key: str) -> dict[str, str]:
        return {"X-User-Id": str(users[key].id)}
    return _headers


@pytest.fixture
async def make_item(test_db, users):
    """Insert an inventory item directly (bypassing the write policy)."""
    async def _make(
        name="Gala Apples",
        quantity=24,
        selling_price=2.4,
        expires_in_days=30,
        status=None,
        **overrides,
    ) -> InventoryItem:
        item = InventoryItem(
            name=name,
            category=overrides.pop("category", "Fruit"),
            quantity=quantity,
            unit=overrides.pop("unit", "kg"),
            cost_price=overrides.pop("cost_price", 1.0),
            selling_price=selling_price,
            supplier=overrides.pop("supplier", "Orchard Farms"),
            expiration_date=date.today() + timedelta(days=expires_in_days),
            status=status or compute_status(quantity).value,
            created_by_id=users["admin"].id,
        )
        test_db.add(item)
        await test_db.commit()
        return item
    return _make


@pytest.fixture
async def make_recipe(test_db, users):
    """Insert a recipe owned by `owner` and shared with `shared_with`."""
    async def _make(
        owner="staff",
        shared_with=(),
        name="Veggie Bowl",
        ingredients=("chickpeas", "spinach"),
        cuisine_type="Mediterranean",
        prep_time=25,
        status="TO_TRY",
    ) -> Recipe:
        recipe = Recipe(
            name=name,
            instructions="Roast and combine everything.",
            cuisine_type=cuisine_type,
            prep_time=prep_time,
            status=status,
            created_by_id=users[owner].id,
            ingredients=[
                RecipeIngredient(name=n, position=i)
                for i, n in enumerate(ingredients)
            ],
            shared_with=[users[k] for k in shared_with],
        )
        test_db.add(recipe)
        await test_db.commit()
        return recipe
    return _make
