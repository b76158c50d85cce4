from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from wms_client_sdk import Order, OrderStatus

from wms_dashboard.services.fanout import fan_out
from wms_dashboard.services.orders_service import OrdersService
from wms_dashboard.services.products_service import ProductsService
from wms_dashboard.services.warehouses_service import WarehousesService
from wms_dashboard.shared.telemetry import TelemetryLogger, build_event
from wms_dashboard.ui.shared.notification_center import NotificationCenter
from wms_dashboard.ui.shared.table_sort import stable_sort
from wms_dashboard.ui.shared.view_state import resolve_state

RECENT_ORDERS_LIMIT = 5


@dataclass(frozen=True)
class DashboardStats:
    warehouses: int | None
    products: int | None
    orders: int | None
    new_orders: int | None
    processing_orders: int | None
    completed_orders: int | None


@dataclass
class DashboardView:
    warehouses: WarehousesService
    products: ProductsService
    orders: OrdersService
    fanout_workers: int = 8
    telemetry: TelemetryLogger = field(default_factory=lambda: TelemetryLogger(app_name="wms_dashboard", enabled=False))
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    stats: DashboardStats | None = None
    recent_orders: list[Order] = field(default_factory=list)
    is_loading: bool = False
    error_message: str | None = None

    def load(self) -> bool:
        self.is_loading = True
        self.error_message = None
        try:
            result = fan_out(
                {
                    "warehouses": self.warehouses.list_warehouses,
                    "products": self.products.list_products,
                    "orders": self.orders.list_orders,
                },
                max_workers=self.fanout_workers,
            )
            warehouses = result.values.get("warehouses")
            products = result.values.get("products")
            orders = result.values.get("orders")
            self.stats = DashboardStats(
                warehouses=len(warehouses) if warehouses is not None else None,
                products=len(products) if products is not None else None,
                orders=len(orders) if orders is not None else None,
                new_orders=_count_status(orders, OrderStatus.NEW),
                processing_orders=_count_status(orders, OrderStatus.PROCESSING),
                completed_orders=_count_status(orders, OrderStatus.COMPLETED),
            )
            self.recent_orders = stable_sort(orders or [], "created_at", descending=True)[:RECENT_ORDERS_LIMIT]
            for name, error in result.errors.items():
                self.notifications.failure(f"Could not load {name}", error)
            if result.errors:
                self.error_message = "Some dashboard data could not be loaded"
            self.telemetry.emit(
                build_event(
                    category="navigation",
                    name="screen_view",
                    module="dashboard",
                    action="dashboard.load",
                    success=result.complete,
                )
            )
            return result.complete
        finally:
            self.is_loading = False

    def render(self) -> dict[str, Any]:
        has_data = self.stats is not None and any(
            value is not None for value in (self.stats.warehouses, self.stats.products, self.stats.orders)
        )
        state = resolve_state(is_loading=self.is_loading, error=self.error_message, has_data=has_data)
        return {
            "loading": self.is_loading,
            "error": self.error_message,
            "stats": asdict(self.stats) if self.stats else None,
            "recent_orders": [
                {
                    "id": order.id,
                    "status": order.status.value,
                    "client_name": order.client_name,
                    "total_price": str(order.total_price),
                    "created_at": order.created_at.isoformat() if order.created_at else None,
                }
                for order in self.recent_orders
            ],
            "view_state": state.render(),
            "notifications": self.notifications.render(),
        }


def _count_status(orders: list[Order] | None, status: OrderStatus) -> int | None:
    if orders is None:
        return None
    return sum(1 for order in orders if order.status is status)
