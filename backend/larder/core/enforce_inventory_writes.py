"""Field-Level Write Policy — decides which inventory fields a caller may change.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Role gate runs before any field validation (Forbidden wins over InvalidInput)
    - QUANTITY_UPDATE reads exactly one field; every other key is reported, never applied
    - Absent field = leave unchanged. Present-but-null or blank string = InvalidInput
    - Every create and every write touching quantity or status goes through compute_status

Design Decisions:
    - Raises typed LarderErrors instead of returning error dicts: the HTTP shell maps
      them to responses through the global handler
    - Validators keyed by wire field name: adding a field is one dict entry
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable

from larder.core.domain_types import (
    InventoryCategory, InventoryOperation, InventoryStatus, Role, Unit,
)
from larder.core.enforce_roles import can_delete_inventory, can_manage_inventory
from larder.core.errors import ForbiddenError, InvalidInputError
from larder.core.inventory_status import compute_status


REQUIRED_ON_CREATE: tuple[str, ...] = (
    "name", "category", "quantity", "unit",
    "cost_price", "selling_price", "supplier", "expiration_date",
)
STAFF_WRITABLE_FIELDS: frozenset[str] = frozenset({"quantity"})
# Largest value the INTEGER quantity column holds
MAX_QUANTITY: int = 2**31 - 1


@dataclass(frozen=True)
class InventoryWrite:
    """Effective payload after policy: only these attribute changes may be persisted."""
    changes: dict[str, Any] = field(default_factory=dict)
    ignored_fields: tuple[str, ...] = ()


# ─── Field validators ───────────────────────────────────────────

def _invalid(field_name: str, message: str) -> InvalidInputError:
    return InvalidInputError(f"Invalid {field_name}: {message}", field=field_name)


def _text(min_length: int) -> Callable[[str, Any], str]:
    def validate(field_name: str, value: Any) -> str:
        if not isinstance(value, str):
            raise _invalid(field_name, "must be a string")
        value = value.strip()
        if len(value) < min_length:
            raise _invalid(
                field_name, f"must be at least {min_length} character(s)",
            )
        return value
    return validate


def _enum(enum_cls: type) -> Callable[[str, Any], Any]:
    def validate(field_name: str, value: Any):
        try:
            return enum_cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in enum_cls)
            raise _invalid(field_name, f"must be one of {allowed}")
    return validate


def _non_negative_int(field_name: str, value: Any) -> int:
    # bool is an int subclass; JSON true must not become quantity 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise _invalid(field_name, "must be an integer")
    if value < 0:
        raise _invalid(field_name, "must be non-negative")
    if value > MAX_QUANTITY:
        raise _invalid(field_name, f"must be at most {MAX_QUANTITY}")
    return value


def _non_negative_number(field_name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _invalid(field_name, "must be a number")
    try:
        number = float(value)
    except OverflowError:
        raise _invalid(field_name, "is out of range")
    if not math.isfinite(number) or number < 0:
        raise _invalid(field_name, "must be a non-negative number")
    return number


def _iso_date(field_name: str, value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise _invalid(field_name, "must be an ISO-8601 date")
    try:
        return datetime.fromisoformat(value.strip()).date()
    except ValueError:
        raise _invalid(field_name, "must be an ISO-8601 date")


_FIELD_VALIDATORS: dict[str, Callable[[str, Any], Any]] = {
    "name": _text(2),
    "category": _enum(InventoryCategory),
    "quantity": _non_negative_int,
    "unit": _enum(Unit),
    "cost_price": _non_negative_number,
    "selling_price": _non_negative_number,
    "supplier": _text(1),
    "expiration_date": _iso_date,
    "status": _enum(InventoryStatus),
}


def _validate_present_fields(payload: dict) -> dict[str, Any]:
    """Validate every known field that is present. Unknown keys are dropped."""
    cleaned: dict[str, Any] = {}
    for name, validator in _FIELD_VALIDATORS.items():
        if name not in payload:
            continue
        value = payload[name]
        if value is None:
            raise _invalid(name, "cannot be null")
        cleaned[name] = validator(name, value)
    return cleaned


def _unknown_fields(payload: dict, allowed) -> tuple[str, ...]:
    return tuple(sorted(k for k in payload if k not in allowed))


# ─── Operations ─────────────────────────────────────────────────

def update_operation_for(role: Role) -> InventoryOperation:
    """Map an incoming update to the operation the caller's role may perform."""
    if can_manage_inventory(role):
        return InventoryOperation.FULL_UPDATE
    return InventoryOperation.QUANTITY_UPDATE


def _authorize_create(payload: dict) -> InventoryWrite:
    missing = [f for f in REQUIRED_ON_CREATE if f not in payload]
    if missing:
        raise InvalidInputError(
            f"Missing required field(s): {', '.join(missing)}",
            field=missing[0],
        )
    changes = _validate_present_fields(payload)
    changes["status"] = compute_status(
        changes["quantity"], changes.get("status"),
    )
    return InventoryWrite(
        changes=changes,
        ignored_fields=_unknown_fields(payload, _FIELD_VALIDATORS),
    )


def _authorize_full_update(
    payload: dict, current_quantity: int | None,
) -> InventoryWrite:
    changes = _validate_present_fields(payload)
    if "quantity" in changes:
        changes["status"] = compute_status(
            changes["quantity"], changes.get("status"),
        )
    elif "status" in changes and current_quantity is not None:
        changes["status"] = compute_status(current_quantity, changes["status"])
    return InventoryWrite(
        changes=changes,
        ignored_fields=_unknown_fields(payload, _FIELD_VALIDATORS),
    )


def _authorize_quantity_update(payload: dict) -> InventoryWrite:
    if "quantity" not in payload or payload["quantity"] is None:
        raise _invalid("quantity", "is required")
    quantity = _non_negative_int("quantity", payload["quantity"])
    return InventoryWrite(
        changes={"quantity": quantity, "status": compute_status(quantity)},
        ignored_fields=_unknown_fields(payload, STAFF_WRITABLE_FIELDS),
    )


def authorize_inventory_write(
    role: Role,
    operation: InventoryOperation,
    payload: dict | None = None,
    current_quantity: int | None = None,
) -> InventoryWrite:
    """Gate an inventory mutation and return the effective payload.

    `current_quantity` is the stored quantity for updates; it lets a status-only
    update be derived against the real stock level.
    Raises ForbiddenError or InvalidInputError; never returns a partial result.
    """
    operation = InventoryOperation(operation)
    if operation == InventoryOperation.DELETE:
        if not can_delete_inventory(role):
            raise ForbiddenError("Deleting inventory requires MANAGER or above")
        return InventoryWrite()

    if operation in (InventoryOperation.CREATE, InventoryOperation.FULL_UPDATE):
        if not can_manage_inventory(role):
            raise ForbiddenError(
                "Creating or editing inventory requires MANAGER or above",
            )

    if not isinstance(payload, dict):
        raise InvalidInputError("Payload must be a JSON object")

    if operation == InventoryOperation.CREATE:
        return _authorize_create(payload)
    if operation == InventoryOperation.FULL_UPDATE:
        return _authorize_full_update(payload, current_quantity)
    return _authorize_quantity_update(payload)
