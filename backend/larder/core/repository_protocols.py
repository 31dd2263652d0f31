"""Boundary Protocols — structural contracts between core and shell.

Invariants:
    - Core NEVER imports ORM models — it sees recipes and items through these Protocols
    - The ORM models in models/ satisfy these structurally (no inheritance)

Design Decisions:
    - Protocol over ABC: structural subtyping, plain test doubles work without mocks
"""

from datetime import date
from typing import Protocol
from uuid import UUID


class RecipeLike(Protocol):
    """What the ownership policy and listing filter need to know about a recipe."""
    id: UUID
    name: str
    cuisine_type: str
    prep_time: int
    status: str
    created_by_id: UUID

    @property
    def ingredient_names(self) -> list[str]: ...

    @property
    def shared_with_ids(self) -> frozenset[UUID]: ...


class InventoryItemLike(Protocol):
    """What stock summaries and insight prompts read from an inventory item."""
    name: str
    category: str
    quantity: int
    unit: str
    selling_price: float
    supplier: str
    expiration_date: date
    status: str
