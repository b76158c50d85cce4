from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .models_orders import OrderCreateRequest, OrderReturnRequest
from .models_products import StockOperationRequest, StockTransferRequest

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class ValidationIssue:
    row_index: int | None
    field: str
    reason: str


class ClientValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Validation failed"
        issue = self.issues[0]
        if issue.row_index is None:
            return issue.reason
        return f"row {issue.row_index} {issue.field}: {issue.reason}"


def require_fields(values: Mapping[str, Any], *fields: str) -> None:
    issues = [
        ValidationIssue(row_index=None, field=name, reason=f"{name} is required")
        for name in fields
        if values.get(name) is None or (isinstance(values.get(name), str) and not values[name].strip())
    ]
    if issues:
        raise ClientValidationError(issues)


def validate_transfer_request(
    payload: StockTransferRequest | Mapping[str, Any],
    known_source_stock: int | None,
) -> StockTransferRequest:
    if not isinstance(payload, StockTransferRequest):
        require_fields(payload, "product_id", "from_warehouse_id", "to_warehouse_id")
        quantity = payload.get("quantity")
        if isinstance(quantity, int) and quantity <= 0:
            _raise_issue(None, "quantity", "quantity must be greater than zero")
    data = coerce_model(payload, StockTransferRequest, None)
    if data.from_warehouse_id == data.to_warehouse_id:
        _raise_issue(None, "to_warehouse_id", "destination warehouse must differ from source")
    if known_source_stock is not None and data.quantity > known_source_stock:
        _raise_issue(
            None,
            "quantity",
            f"quantity {data.quantity} exceeds available stock {known_source_stock}",
        )
    return data


def validate_stock_operation(payload: StockOperationRequest | Mapping[str, Any]) -> StockOperationRequest:
    return coerce_model(payload, StockOperationRequest, None)


def validate_cancel_reason(reason: str | None) -> str:
    cleaned = (reason or "").strip()
    if not cleaned:
        _raise_issue(None, "reason", "cancellation reason is required")
    return cleaned


def validate_order_create(payload: OrderCreateRequest | Mapping[str, Any]) -> OrderCreateRequest:
    if not isinstance(payload, OrderCreateRequest):
        require_fields(payload, "warehouse_id", "client_name", "destination_address")
        if not payload.get("items"):
            _raise_issue(None, "items", "at least one item is required")
        for idx, item in enumerate(payload["items"]):
            if isinstance(item, Mapping) and isinstance(item.get("quantity"), int) and item["quantity"] <= 0:
                _raise_issue(idx, "quantity", "quantity must be greater than zero")
    data = coerce_model(payload, OrderCreateRequest, None)
    if not data.client_name.strip():
        _raise_issue(None, "client_name", "client_name is required")
    if not data.destination_address.strip():
        _raise_issue(None, "destination_address", "destination_address is required")
    if not data.items:
        _raise_issue(None, "items", "at least one item is required")
    return data


def validate_return_request(payload: OrderReturnRequest | Mapping[str, Any]) -> OrderReturnRequest:
    data = coerce_model(payload, OrderReturnRequest, None)
    if not data.items:
        _raise_issue(None, "items", "at least one item is required")
    return data


def coerce_model(line: T | Mapping[str, Any], model_type: type[T], row_index: int | None) -> T:
    if isinstance(line, model_type):
        return line
    try:
        return model_type.model_validate(line)
    except PydanticValidationError as exc:
        issue = exc.errors()[0] if exc.errors() else {"loc": ("payload",), "msg": "Invalid payload"}
        field = ".".join(str(part) for part in issue.get("loc", ("payload",)))
        reason = issue.get("msg", "Invalid payload")
        _raise_issue(row_index, field, reason if row_index is not None else f"{field}: {reason}")
        raise


def _raise_issue(row_index: int | None, field: str, reason: str) -> None:
    raise ClientValidationError([ValidationIssue(row_index=row_index, field=field, reason=reason)])
