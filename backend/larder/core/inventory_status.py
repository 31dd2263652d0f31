"""Status Derivation — binds InventoryItem.status to quantity.

Invariants:
    - quantity < LOW_STOCK_THRESHOLD always yields LOW_STOCK, whatever was requested
    - Otherwise the requested status wins, defaulting to IN_STOCK
    - compute_status is the ONLY place a persisted status is decided

Design Decisions:
    - Threshold is a module constant, not a setting: the rule is part of the domain
"""

from larder.core.domain_types import InventoryStatus


LOW_STOCK_THRESHOLD: int = 10


def compute_status(
    quantity: int, requested: InventoryStatus | None = None,
) -> InventoryStatus:
    """Derive the status to persist for an item holding `quantity` units."""
    if quantity < LOW_STOCK_THRESHOLD:
        return InventoryStatus.LOW_STOCK
    if requested is None:
        return InventoryStatus.IN_STOCK
    return InventoryStatus(requested)


def is_low_stock(quantity: int, status: InventoryStatus | str) -> bool:
    """Reorder candidates: flagged LOW_STOCK or below the threshold."""
    return (
        status == InventoryStatus.LOW_STOCK
        or quantity < LOW_STOCK_THRESHOLD
    )
