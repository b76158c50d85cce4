from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from wms_client_sdk import Product

from wms_dashboard.services.errors import ServiceError
from wms_dashboard.services.products_service import ProductsService
from wms_dashboard.shared.telemetry import TelemetryLogger, build_event
from wms_dashboard.ui.shared.list_view import ResourceListView
from wms_dashboard.ui.shared.notification_center import NotificationCenter
from wms_dashboard.ui.shared.table_sort import SortState


@dataclass
class ProductsListView:
    service: ProductsService
    warehouse_id: int | None = None
    query: str = ""
    telemetry: TelemetryLogger = field(default_factory=lambda: TelemetryLogger(app_name="wms_dashboard", enabled=False))
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    is_saving: bool = False
    table: ResourceListView[Product] = field(init=False)

    def __post_init__(self) -> None:
        self.table = ResourceListView(
            loader=lambda: self.service.list_products(self.warehouse_id),
            module="products",
            sort=SortState(sort_key="id"),
            telemetry=self.telemetry,
            notifications=self.notifications,
        )

    def load(self, warehouse_id: int | None = None) -> bool:
        self.warehouse_id = warehouse_id
        return self.table.load()

    def refresh(self) -> bool:
        return self.table.refresh()

    def sort_by(self, key: str) -> list[Product]:
        return self.table.sort_by(key)

    def filtered(self) -> list[Product]:
        rows = self.table.sorted_rows()
        if not self.query:
            return rows
        needle = self.query.casefold()
        return [
            row
            for row in rows
            if needle in row.name.casefold() or needle in row.product_type.casefold()
        ]

    def create(self, payload: Mapping[str, Any]) -> Product | None:
        self.is_saving = True
        try:
            created = self.service.create_product(payload)
        except ServiceError as exc:
            self.notifications.failure("Could not create product", exc)
            return None
        finally:
            self.is_saving = False
        self.notifications.success("Product created", f"Product {created.name} created")
        self._emit_mutation("product.create")
        # Stock placement is server-computed, so reload instead of appending.
        self.table.refresh()
        return created

    def delete(self, product_id: int) -> bool:
        self.is_saving = True
        try:
            result = self.service.delete_product(product_id)
        except ServiceError as exc:
            self.notifications.failure("Could not delete product", exc)
            return False
        finally:
            self.is_saving = False
        if not result.succeeded:
            self.notifications.push(
                level="error",
                title="Could not delete product",
                message=result.message or "Delete was rejected",
            )
            return False
        self.table.remove_row(product_id)
        self.notifications.success("Product deleted", result.message or f"Product #{product_id} deleted")
        self._emit_mutation("product.delete")
        return True

    def render(self) -> dict[str, Any]:
        payload = self.table.render()
        rows = self.filtered()
        payload["rows"] = [row.model_dump(mode="json") for row in rows]
        payload["count"] = len(rows)
        payload["query"] = self.query
        payload["warehouse_id"] = self.warehouse_id
        payload["saving"] = self.is_saving
        return payload

    def _emit_mutation(self, action: str) -> None:
        self.telemetry.emit(build_event(category="mutation", name="mutation", module="products", action=action, success=True))
