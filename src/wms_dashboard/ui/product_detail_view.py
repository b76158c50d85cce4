from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Mapping

from wms_client_sdk import Product, ProductImage

from wms_dashboard.services.errors import ServiceError
from wms_dashboard.services.fanout import fan_out
from wms_dashboard.services.products_service import ProductsService
from wms_dashboard.services.warehouses_service import WarehousesService
from wms_dashboard.shared.telemetry import TelemetryLogger, build_event
from wms_dashboard.ui.shared.notification_center import NotificationCenter
from wms_dashboard.ui.shared.table_sort import stable_sort
from wms_dashboard.ui.shared.view_state import resolve_state


@dataclass(frozen=True)
class StockLine:
    warehouse_id: int
    warehouse_name: str
    quantity: int


@dataclass
class ProductDetailView:
    product_id: int
    products: ProductsService
    warehouses: WarehousesService
    fanout_workers: int = 8
    telemetry: TelemetryLogger = field(default_factory=lambda: TelemetryLogger(app_name="wms_dashboard", enabled=False))
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    product: Product | None = None
    stock_lines: list[StockLine] = field(default_factory=list)
    images: list[ProductImage] = field(default_factory=list)
    is_loading: bool = False
    is_saving: bool = False
    error_message: str | None = None
    partial_error: str | None = None
    trace_id: str | None = None

    def load(self) -> bool:
        self.is_loading = True
        self.error_message = None
        self.partial_error = None
        try:
            self.product = self.products.get_product(self.product_id)
            self._load_breakdown(self.product)
            self.telemetry.emit(
                build_event(
                    category="navigation",
                    name="screen_view",
                    module="products",
                    action="product_detail.load",
                    success=True,
                )
            )
            return True
        except ServiceError as exc:
            self.product = None
            self.error_message = exc.message
            self.trace_id = exc.trace_id
            self.notifications.failure("Could not load product", exc)
            return False
        finally:
            self.is_loading = False

    def _load_breakdown(self, product: Product) -> None:
        warehouse_ids = list(product.warehouses_with_stock)

        def line_for(warehouse_id: int) -> StockLine:
            warehouse = self.warehouses.get_warehouse(warehouse_id)
            stock = self.products.get_stock(self.product_id, warehouse_id)
            return StockLine(warehouse_id=warehouse_id, warehouse_name=warehouse.name, quantity=stock.quantity)

        result = fan_out(
            {warehouse_id: (lambda wid=warehouse_id: line_for(wid)) for warehouse_id in warehouse_ids},
            max_workers=self.fanout_workers,
        )
        self.stock_lines = stable_sort([result.values[wid] for wid in warehouse_ids if wid in result.values], "warehouse_id")
        if result.errors:
            failed = ", ".join(f"#{wid}" for wid in sorted(result.errors))
            self.partial_error = f"Stock could not be loaded for warehouse(s) {failed}"

        try:
            self.images = self.products.list_images(self.product_id)
        except ServiceError as exc:
            self.images = []
            self.notifications.failure("Could not load product images", exc)

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.stock_lines)

    def save(self, payload: Mapping[str, Any]) -> bool:
        self.is_saving = True
        try:
            self.product = self.products.update_product(self.product_id, payload)
        except ServiceError as exc:
            self.notifications.failure("Could not update product", exc)
            return False
        finally:
            self.is_saving = False
        self.notifications.success("Product updated", f"Product {self.product.name} updated")
        return True

    def upload_image(self, file: str | Path | BinaryIO, alt_text: str | None = None) -> ProductImage | None:
        self.is_saving = True
        try:
            image = self.products.upload_image(self.product_id, file, alt_text)
        except ServiceError as exc:
            self.notifications.failure("Could not upload image", exc)
            return None
        finally:
            self.is_saving = False
        self.images.append(image)
        self.notifications.success("Image uploaded", "Image uploaded")
        return image

    def render(self) -> dict[str, Any]:
        state = resolve_state(
            is_loading=self.is_loading,
            error=self.error_message,
            warning=self.partial_error,
            has_data=self.product is not None,
            trace_id=self.trace_id,
        )
        return {
            "product": self.product.model_dump(mode="json") if self.product else None,
            "loading": self.is_loading,
            "saving": self.is_saving,
            "error": self.error_message,
            "stock": [
                {"warehouse_id": line.warehouse_id, "warehouse_name": line.warehouse_name, "quantity": line.quantity}
                for line in self.stock_lines
            ],
            "total_quantity": self.total_quantity,
            "images": [image.model_dump(mode="json") for image in self.images],
            "view_state": state.render(),
            "notifications": self.notifications.render(),
        }
