"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps the caller identity carried by Principal
    - Role is a closed enum; ordering lives in enforce_roles.ROLE_ORDER, never in string compares
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and to DB String columns without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """User roles. Totally ordered STAFF < MANAGER < ADMIN."""
    STAFF = "STAFF"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


class InventoryCategory(str, Enum):
    FRUIT = "Fruit"
    VEGETABLE = "Vegetable"
    OTHER = "Other"


class Unit(str, Enum):
    KG = "kg"
    BOX = "box"
    PIECE = "piece"


class InventoryStatus(str, Enum):
    """Stock status — LOW_STOCK is forced below the threshold (inventory_status.py)."""
    IN_STOCK = "IN_STOCK"
    LOW_STOCK = "LOW_STOCK"
    ORDERED = "ORDERED"
    DISCONTINUED = "DISCONTINUED"


class RecipeStatus(str, Enum):
    FAVORITE = "FAVORITE"
    TO_TRY = "TO_TRY"
    MADE = "MADE"


class InventoryOperation(str, Enum):
    """Inventory mutations gated by the field-level write policy."""
    CREATE = "create"
    FULL_UPDATE = "full_update"
    QUANTITY_UPDATE = "quantity_update"
    DELETE = "delete"


class RecipeOperation(str, Enum):
    """Recipe accesses gated by the ownership/sharing policy."""
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


# ─── Identity ────────────────────────────────────────────────────

@dataclass(frozen=True)
class Principal:
    """Authenticated caller — explicit identity + role passed into every policy call."""
    id: UserId
    role: Role
