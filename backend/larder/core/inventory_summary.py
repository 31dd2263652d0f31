"""Inventory Summary — dashboard figures and snapshot selection over inventory items.

Invariants:
    - Pure: `today` is always passed in, never read from the clock here
    - inventory_value = sum(quantity * selling_price), rounded to 2 decimals
    - "Expiring soon" is inclusive: expiration_date <= today + window_days
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Sequence

from larder.core.inventory_status import is_low_stock
from larder.core.repository_protocols import InventoryItemLike, RecipeLike


@dataclass(frozen=True)
class InventorySummary:
    total_items: int
    low_stock_count: int
    inventory_value: float
    expiring_soon: list = field(default_factory=list)


def expiry_cutoff(today: date, window_days: int) -> date:
    return today + timedelta(days=window_days)


def select_expiring(
    items: Iterable[InventoryItemLike], today: date, window_days: int,
) -> list:
    """Items expiring on or before the cutoff, soonest first."""
    cutoff = expiry_cutoff(today, window_days)
    return sorted(
        (i for i in items if i.expiration_date <= cutoff),
        key=lambda i: i.expiration_date,
    )


def summarize_inventory(
    items: Sequence[InventoryItemLike], today: date, window_days: int,
) -> InventorySummary:
    value = sum(i.quantity * i.selling_price for i in items)
    return InventorySummary(
        total_items=len(items),
        low_stock_count=sum(
            1 for i in items if is_low_stock(i.quantity, i.status)
        ),
        inventory_value=round(value, 2),
        expiring_soon=select_expiring(items, today, window_days),
    )


def collect_ingredients(recipes: Iterable[RecipeLike]) -> list[str]:
    """Stripped, de-duplicated ingredient names in first-seen order."""
    seen: dict[str, None] = {}
    for recipe in recipes:
        for name in recipe.ingredient_names:
            name = name.strip()
            if name:
                seen.setdefault(name, None)
    return list(seen)
