"""Recipe ORM — recipe aggregate with ordered ingredients and a share set.

Invariants:
    - created_by_id is the authoritative owner for authorization
    - shared_with grants read-only visibility; replaced wholesale on update
    - ingredients are replaced wholesale on update (delete-orphan cascade)
    - Deleting a recipe removes its ingredient rows and share rows

Design Decisions:
    - Ingredients as child rows with a position: searchable by name, order preserved
    - lazy="selectin" on every relationship: no implicit IO in async context
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Text, Integer, DateTime, ForeignKey, Table,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from larder.core.domain_types import RecipeStatus
from larder.db.base import Base


recipe_shares = Table(
    "recipe_shares",
    Base.metadata,
    Column(
        "recipe_id", UUID(as_uuid=True),
        ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True,
    ),
    Column(
        "user_id", UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
    ),
)


class Recipe(Base):
    __tablename__ = "recipes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    instructions: Mapped[str] = mapped_column(Text, nullable=False)
    cuisine_type: Mapped[str] = mapped_column(String(100), nullable=False)
    prep_time: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RecipeStatus.TO_TRY.value,
    )
    created_by_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    created_by: Mapped["User"] = relationship("User", lazy="selectin")
    ingredients: Mapped[list["RecipeIngredient"]] = relationship(
        "RecipeIngredient", back_populates="recipe",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="RecipeIngredient.position",
    )
    shared_with: Mapped[list["User"]] = relationship(
        "User", secondary=recipe_shares, lazy="selectin",
    )

    @property
    def ingredient_names(self) -> list[str]:
        return [i.name for i in self.ingredients]

    @property
    def shared_with_ids(self) -> frozenset[uuid.UUID]:
        return frozenset(u.id for u in self.shared_with)


class RecipeIngredient(Base):
    __tablename__ = "recipe_ingredients"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    recipe_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("recipes.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    recipe: Mapped["Recipe"] = relationship(
        "Recipe", back_populates="ingredients",
    )
