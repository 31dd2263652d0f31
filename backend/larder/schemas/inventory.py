"""Inventory Schemas — response shapes for inventory items and the stock summary.

Inventory write payloads are NOT modelled here: the field-level write policy
(core/enforce_inventory_writes.py) validates them per role.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from larder.core.domain_types import InventoryCategory, InventoryStatus, Unit
from larder.schemas.user import UserSummary


class InventoryItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    category: InventoryCategory
    quantity: int
    unit: Unit
    cost_price: float
    selling_price: float
    supplier: str
    expiration_date: date
    status: InventoryStatus
    created_by: UserSummary
    created_at: datetime


class ExpiringItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    quantity: int
    unit: Unit
    expiration_date: date


class InventorySummaryResponse(BaseModel):
    total_items: int
    low_stock_count: int
    inventory_value: float
    expiring_soon: list[ExpiringItem]
