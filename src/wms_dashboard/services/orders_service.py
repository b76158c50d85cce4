from __future__ import annotations

from typing import Any, Mapping

from wms_client_sdk import ApiSession, Order, OrderCreateRequest, OrderReturn, OrderStatus

from .errors import normalize_error


class OrdersService:
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def list_orders(self) -> list[Order]:
        try:
            return self.session.orders_client().list_orders()
        except Exception as exc:
            raise normalize_error(exc) from exc

    def get_order(self, order_id: int) -> Order:
        try:
            return self.session.orders_client().get_order(order_id)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def create_order(self, payload: OrderCreateRequest | Mapping[str, Any]) -> Order:
        try:
            return self.session.orders_client().create_order(payload)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def update_status(self, order_id: int, status: OrderStatus, reason: str | None = None) -> Order:
        try:
            return self.session.orders_client().update_status(order_id, status, reason)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def cancel_order(self, order_id: int, reason: str) -> Order:
        try:
            return self.session.orders_client().cancel_order(order_id, reason)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def create_return(self, order_id: int, payload: Mapping[str, Any]) -> OrderReturn:
        try:
            return self.session.orders_client().create_return(order_id, payload)
        except Exception as exc:
            raise normalize_error(exc) from exc
