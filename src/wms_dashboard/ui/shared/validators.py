from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationResult:
    ok: bool
    field_errors: dict[str, str] = field(default_factory=dict)
    summary: list[str] = field(default_factory=list)


def _result(errors: dict[str, str]) -> ValidationResult:
    return ValidationResult(ok=not errors, field_errors=errors, summary=list(errors.values()))


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_order_form(form: dict[str, Any], items: list[dict[str, Any]]) -> ValidationResult:
    errors: dict[str, str] = {}
    if _blank(form.get("warehouse_id")):
        errors["warehouse_id"] = "Select a warehouse."
    if _blank(form.get("client_name")):
        errors["client_name"] = "Client name is required."
    if _blank(form.get("destination_address")):
        errors["destination_address"] = "Destination address is required."
    if not items:
        errors["items"] = "Add at least one product."
    for idx, item in enumerate(items):
        if int(item.get("quantity", 0) or 0) <= 0:
            errors[f"items[{idx}].quantity"] = "Quantity must be greater than 0."
    return _result(errors)


def validate_transfer_form(*, destination_id: int | None, source_id: int, quantity: int, available: int | None) -> ValidationResult:
    """``available`` is None when the stock lookup failed; the server then enforces the limit."""
    errors: dict[str, str] = {}
    if destination_id is None:
        errors["destination_warehouse_id"] = "Select a destination warehouse."
    elif destination_id == source_id:
        errors["destination_warehouse_id"] = "Destination must differ from the source warehouse."
    if quantity <= 0:
        errors["quantity"] = "Quantity must be greater than 0."
    elif available is not None and quantity > available:
        errors["quantity"] = f"Only {available} unit(s) available."
    return _result(errors)
