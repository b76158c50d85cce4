from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from wms_client_sdk import Order, OrderStatus

from wms_dashboard.services.orders_service import OrdersService
from wms_dashboard.shared.telemetry import TelemetryLogger
from wms_dashboard.ui.shared.list_view import ResourceListView
from wms_dashboard.ui.shared.notification_center import NotificationCenter
from wms_dashboard.ui.shared.table_sort import SortState


@dataclass
class OrdersListView:
    service: OrdersService
    status_filter: OrderStatus | None = None
    telemetry: TelemetryLogger = field(default_factory=lambda: TelemetryLogger(app_name="wms_dashboard", enabled=False))
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    table: ResourceListView[Order] = field(init=False)

    def __post_init__(self) -> None:
        self.table = ResourceListView(
            loader=self.service.list_orders,
            module="orders",
            sort=SortState(sort_key="created_at", descending=True),
            telemetry=self.telemetry,
            notifications=self.notifications,
        )

    def load(self) -> bool:
        return self.table.load()

    def refresh(self) -> bool:
        return self.table.refresh()

    def sort_by(self, key: str) -> list[Order]:
        return self.table.sort_by(key)

    def filtered(self) -> list[Order]:
        rows = self.table.sorted_rows()
        if self.status_filter is None:
            return rows
        return [row for row in rows if row.status is self.status_filter]

    def render(self) -> dict[str, Any]:
        payload = self.table.render()
        rows = self.filtered()
        payload["rows"] = [
            {
                "id": row.id,
                "status": row.status.value,
                "warehouse": row.warehouse,
                "client_name": row.client_name,
                "total_price": str(row.total_price),
                "created_at": row.created_at.isoformat() if row.created_at else None,
                "transfer_generated": row.is_transfer_generated,
            }
            for row in rows
        ]
        payload["count"] = len(rows)
        payload["status_filter"] = self.status_filter.value if self.status_filter else None
        return payload
