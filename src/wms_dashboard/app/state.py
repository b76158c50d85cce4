from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from wms_client_sdk import SessionUser


class Route(str, Enum):
    LOGIN = "login"
    DASHBOARD = "dashboard"
    WAREHOUSES = "warehouses"
    WAREHOUSE_DETAIL = "warehouse_detail"
    PRODUCTS = "products"
    PRODUCT_DETAIL = "product_detail"
    ORDERS = "orders"
    ORDER_DETAIL = "order_detail"
    ORDER_CREATE = "order_create"


@dataclass
class AppState:
    route: Route = Route.LOGIN
    error_message: str | None = None
    status_message: str = "Ready"
    trace_id: str | None = None
    user: SessionUser | None = None
