from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models_orders import (
    Order,
    OrderCancelRequest,
    OrderCreateRequest,
    OrderReturn,
    OrderReturnRequest,
    OrderStatus,
    OrderStatusUpdateRequest,
)
from ..validation import validate_cancel_reason, validate_order_create, validate_return_request
from .base import BaseClient


@dataclass
class OrdersClient(BaseClient):
    module: str = "orders"

    def list_orders(self) -> list[Order]:
        data = self._request("GET", "/orders/order", operation="list")
        return self._parse_list(Order, data, "order list")

    def get_order(self, order_id: int) -> Order:
        data = self._request("GET", f"/orders/order/{order_id}", operation="get")
        return self._parse(Order, data, "order detail")

    def create_order(self, payload: OrderCreateRequest | Mapping[str, Any]) -> Order:
        request = validate_order_create(payload)
        data = self._request(
            "POST",
            "/orders/order_create",
            json_body=request.model_dump(mode="json", exclude_none=True),
            operation="create",
        )
        return self._parse(Order, data, "order create")

    def update_status(self, order_id: int, status: OrderStatus | str, reason: str | None = None) -> Order:
        request = OrderStatusUpdateRequest(status=OrderStatus(status), reason=reason)
        data = self._request(
            "PATCH",
            f"/orders/order/{order_id}/status",
            json_body=request.model_dump(mode="json", exclude_none=True),
            operation="update_status",
        )
        return self._parse(Order, data, "order status update")

    def cancel_order(self, order_id: int, reason: str) -> Order:
        request = OrderCancelRequest(reason=validate_cancel_reason(reason))
        data = self._request(
            "PATCH",
            f"/orders/order/{order_id}/cancel",
            json_body=request.model_dump(mode="json"),
            operation="cancel",
        )
        return self._parse(Order, data, "order cancel")

    def create_return(self, order_id: int, payload: OrderReturnRequest | Mapping[str, Any]) -> OrderReturn:
        request = validate_return_request(payload)
        data = self._request(
            "POST",
            f"/orders/order/{order_id}/return",
            json_body=request.model_dump(mode="json", exclude_none=True),
            operation="create_return",
        )
        return self._parse(OrderReturn, data, "order return")
