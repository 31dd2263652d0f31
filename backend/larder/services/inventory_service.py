"""Inventory Service — listing, lookup, and policy-gated writes for inventory items.

Invariants:
    - Create/delete: role gate runs BEFORE the record is even looked up
    - Update: NotFound first, then the write policy with the stored quantity
    - Only InventoryWrite.changes is ever applied to the ORM object
    - Fields the policy ignored are logged, never persisted

Design Decisions:
    - Unknown enum values in list filters are ignored (not rejected), matching the
      behaviour of the web client's free-form filter inputs
"""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from larder.core.domain_types import (
    InventoryCategory, InventoryOperation, InventoryStatus, Principal,
)
from larder.core.enforce_inventory_writes import (
    InventoryWrite, authorize_inventory_write, update_operation_for,
)
from larder.core.errors import ResourceNotFoundError
from larder.core.inventory_summary import InventorySummary, summarize_inventory
from larder.models.inventory_item import InventoryItem

logger = logging.getLogger(__name__)


def _parse_enum(value: str | None, enum_cls):
    if not value:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


class InventoryService:
    """Inventory CRUD behind the field-level write policy."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_items(
        self,
        name: str | None = None,
        category: str | None = None,
        status: str | None = None,
        supplier: str | None = None,
    ) -> list[InventoryItem]:
        query = select(InventoryItem).order_by(InventoryItem.created_at.desc())
        if name:
            query = query.where(
                func.lower(InventoryItem.name).contains(name.lower(), autoescape=True),
            )
        if supplier:
            query = query.where(
                func.lower(InventoryItem.supplier).contains(supplier.lower(), autoescape=True),
            )
        parsed_category = _parse_enum(category, InventoryCategory)
        if parsed_category:
            query = query.where(InventoryItem.category == parsed_category.value)
        parsed_status = _parse_enum(status, InventoryStatus)
        if parsed_status:
            query = query.where(InventoryItem.status == parsed_status.value)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_item(self, item_id: UUID) -> InventoryItem:
        item = await self._load(item_id)
        if not item:
            raise ResourceNotFoundError("InventoryItem", str(item_id))
        return item

    async def create_item(
        self, principal: Principal, payload: dict,
    ) -> InventoryItem:
        write = authorize_inventory_write(
            principal.role, InventoryOperation.CREATE, payload,
        )
        self._log_ignored(write, principal, None)
        item = InventoryItem(created_by_id=principal.id)
        _apply(item, write)
        self.db.add(item)
        await self.db.commit()
        logger.info(
            f"Inventory item created: {item.name}",
            extra={"user_id": str(principal.id), "item_id": str(item.id)},
        )
        return await self.get_item(item.id)

    async def update_item(
        self, principal: Principal, item_id: UUID, payload: dict,
    ) -> InventoryItem:
        item = await self.get_item(item_id)
        operation = update_operation_for(principal.role)
        write = authorize_inventory_write(
            principal.role, operation, payload,
            current_quantity=item.quantity,
        )
        self._log_ignored(write, principal, item_id)
        _apply(item, write)
        await self.db.commit()
        logger.info(
            f"Inventory item updated ({operation.value})",
            extra={
                "user_id": str(principal.id),
                "item_id": str(item_id),
                "operation": operation.value,
            },
        )
        return await self.get_item(item_id)

    async def delete_item(self, principal: Principal, item_id: UUID) -> None:
        authorize_inventory_write(principal.role, InventoryOperation.DELETE)
        item = await self.get_item(item_id)
        await self.db.delete(item)
        await self.db.commit()
        logger.info(
            "Inventory item deleted",
            extra={"user_id": str(principal.id), "item_id": str(item_id)},
        )

    async def summary(self, today: date, window_days: int) -> InventorySummary:
        result = await self.db.execute(select(InventoryItem))
        return summarize_inventory(
            list(result.scalars().all()), today, window_days,
        )

    async def _load(self, item_id: UUID) -> InventoryItem | None:
        result = await self.db.execute(
            select(InventoryItem)
            .where(InventoryItem.id == item_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _log_ignored(
        write: InventoryWrite, principal: Principal, item_id: UUID | None,
    ) -> None:
        if write.ignored_fields:
            logger.warning(
                f"Ignored inventory fields for role {principal.role.value}",
                extra={
                    "user_id": str(principal.id),
                    "item_id": str(item_id) if item_id else None,
                    "ignored_fields": list(write.ignored_fields),
                },
            )


def _apply(item: InventoryItem, write: InventoryWrite) -> None:
    for attr, value in write.changes.items():
        setattr(item, attr, getattr(value, "value", value))
