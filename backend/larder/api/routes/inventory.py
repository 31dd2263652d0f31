"""Inventory Routes — list/get/create/update/delete plus the dashboard summary.

Invariants:
    - Every route requires an authenticated Principal
    - Write bodies are taken as raw JSON objects: the write policy decides per role
      which fields are read, so authorization precedes validation
"""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from larder.api.dependencies import get_current_principal
from larder.config import get_settings
from larder.core.domain_types import Principal
from larder.infrastructure.database import get_db
from larder.schemas.inventory import (
    ExpiringItem, InventoryItemResponse, InventorySummaryResponse,
)
from larder.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/inventory", tags=["inventory"])


@router.get("")
async def list_items(
    name: str | None = Query(None),
    category: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    supplier: str | None = Query(None),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """List inventory, newest first. Unknown category/status values are ignored."""
    items = await InventoryService(db).list_items(
        name=name, category=category, status=status_filter, supplier=supplier,
    )
    return {"data": [InventoryItemResponse.model_validate(i) for i in items]}


@router.get("/summary")
async def inventory_summary(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Totals, low-stock count, stock value and items expiring soon."""
    settings = get_settings()
    summary = await InventoryService(db).summary(
        date.today(), settings.expiring_window_days,
    )
    return {
        "data": InventorySummaryResponse(
            total_items=summary.total_items,
            low_stock_count=summary.low_stock_count,
            inventory_value=summary.inventory_value,
            expiring_soon=[
                ExpiringItem.model_validate(i) for i in summary.expiring_soon
            ],
        ),
    }


@router.get("/{item_id}")
async def get_item(
    item_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    item = await InventoryService(db).get_item(item_id)
    return {"data": InventoryItemResponse.model_validate(item)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_item(
    payload: dict = Body(...),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Create an item (MANAGER+). Status is derived from quantity."""
    item = await InventoryService(db).create_item(principal, payload)
    return {"data": InventoryItemResponse.model_validate(item)}


@router.put("/{item_id}")
async def update_item(
    item_id: UUID,
    payload: dict = Body(...),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Partial update for MANAGER+, quantity-only update for STAFF."""
    item = await InventoryService(db).update_item(principal, item_id, payload)
    return {"data": InventoryItemResponse.model_validate(item)}


@router.delete("/{item_id}")
async def delete_item(
    item_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Hard delete (MANAGER+)."""
    await InventoryService(db).delete_item(principal, item_id)
    return {"ok": True}
