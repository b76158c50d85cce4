from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping

from wms_client_sdk import Product, Warehouse

from wms_dashboard.services.errors import ServiceError
from wms_dashboard.services.products_service import ProductsService
from wms_dashboard.services.transfer_orchestrator import (
    StockTransferOrchestrator,
    TransferCommand,
    TransferOutcome,
    TransferStatus,
)
from wms_dashboard.services.warehouses_service import WarehousesService
from wms_dashboard.shared.telemetry import TelemetryLogger, build_event
from wms_dashboard.ui.shared.notification_center import NotificationCenter
from wms_dashboard.ui.shared.table_sort import SortState
from wms_dashboard.ui.shared.validators import ValidationResult, validate_transfer_form
from wms_dashboard.ui.shared.view_state import resolve_state


@dataclass
class TransferDialog:
    product_id: int
    product_name: str
    available: int | None
    destination_warehouse_id: int | None = None
    quantity: int = 1
    create_follow_up_order: bool = False
    is_submitting: bool = False

    def destination_options(self, warehouses: list[Warehouse], source_id: int) -> list[Warehouse]:
        return [warehouse for warehouse in warehouses if warehouse.id != source_id]

    def validate(self, source_id: int) -> ValidationResult:
        return validate_transfer_form(
            destination_id=self.destination_warehouse_id,
            source_id=source_id,
            quantity=self.quantity,
            available=self.available,
        )


@dataclass
class WarehouseDetailView:
    """One warehouse with the stock it holds and the transfer dialog."""

    warehouse_id: int
    warehouses: WarehousesService
    products: ProductsService
    orchestrator: StockTransferOrchestrator
    telemetry: TelemetryLogger = field(default_factory=lambda: TelemetryLogger(app_name="wms_dashboard", enabled=False))
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    sort: SortState = field(default_factory=SortState)
    warehouse: Warehouse | None = None
    all_warehouses: list[Warehouse] = field(default_factory=list)
    product_rows: list[Product] = field(default_factory=list)
    stock: dict[int, int] = field(default_factory=dict)
    stock_errors: dict[int, str] = field(default_factory=dict)
    dialog: TransferDialog | None = None
    last_transfer: TransferOutcome | None = None
    is_loading: bool = False
    is_saving: bool = False
    error_message: str | None = None
    trace_id: str | None = None

    def load(self) -> bool:
        self.is_loading = True
        self.error_message = None
        try:
            self.warehouse = self.warehouses.get_warehouse(self.warehouse_id)
            self.all_warehouses = self.warehouses.list_warehouses()
            self._load_stock()
            self.telemetry.emit(
                build_event(
                    category="navigation",
                    name="screen_view",
                    module="warehouses",
                    action="warehouse_detail.load",
                    success=True,
                )
            )
            return True
        except ServiceError as exc:
            self.error_message = exc.message
            self.trace_id = exc.trace_id
            self.notifications.failure("Could not load warehouse", exc)
            return False
        finally:
            self.is_loading = False

    def refresh_stock(self) -> bool:
        try:
            self._load_stock()
            return True
        except ServiceError as exc:
            self.notifications.failure("Could not refresh stock", exc)
            return False

    def _load_stock(self) -> None:
        self.product_rows = self.products.list_products(self.warehouse_id)
        result = self.products.stock_by_product(self.warehouse_id, [product.id for product in self.product_rows])
        # Failed lookups stay out of `stock`; their quantity is unknown, not zero.
        self.stock = {product_id: quantity for product_id, quantity in result.values.items()}
        self.stock_errors = {product_id: error.message for product_id, error in result.errors.items()}

    def quantity_of(self, product_id: int) -> int | None:
        if product_id in self.stock_errors:
            return None
        return self.stock.get(product_id, 0)

    @property
    def stock_warning(self) -> str | None:
        if not self.stock_errors:
            return None
        ids = ", ".join(f"#{product_id}" for product_id in sorted(self.stock_errors))
        return f"Stock is unknown for product(s) {ids}. Refresh to retry; totals exclude them."

    @property
    def total_units(self) -> int:
        return sum(self.stock.values())

    @property
    def inventory_value(self) -> Decimal:
        return sum(
            (product.price * self.stock[product.id] for product in self.product_rows if product.id in self.stock),
            Decimal("0"),
        )

    def sort_by(self, key: str) -> list[Product]:
        self.sort.select(key)
        return self.sorted_products()

    def sorted_products(self) -> list[Product]:
        return self.sort.stable_sort(self.product_rows, accessor=self._sort_field)

    def _sort_field(self, product: Product, key: str) -> Any:
        if key == "quantity":
            return self.quantity_of(product.id)
        return getattr(product, key, None)

    def save(self, payload: Mapping[str, Any]) -> bool:
        self.is_saving = True
        try:
            self.warehouse = self.warehouses.update_warehouse(self.warehouse_id, payload)
        except ServiceError as exc:
            self.notifications.failure("Could not update warehouse", exc)
            return False
        finally:
            self.is_saving = False
        self.notifications.success("Warehouse updated", f"Warehouse {self.warehouse.name} updated")
        return True

    def open_transfer(self, product_id: int) -> TransferDialog | None:
        product = next((row for row in self.product_rows if row.id == product_id), None)
        if product is None:
            return None
        self.dialog = TransferDialog(product_id=product.id, product_name=product.name, available=self.quantity_of(product.id))
        return self.dialog

    def close_transfer(self) -> None:
        self.dialog = None

    def submit_transfer(self) -> TransferOutcome | None:
        if self.dialog is None:
            return None
        dialog = self.dialog
        dialog.is_submitting = True
        try:
            outcome = self.orchestrator.execute(
                TransferCommand(
                    product_id=dialog.product_id,
                    source_warehouse_id=self.warehouse_id,
                    destination_warehouse_id=dialog.destination_warehouse_id,
                    quantity=dialog.quantity,
                    create_follow_up_order=dialog.create_follow_up_order,
                ),
                known_source_stock=self.quantity_of(dialog.product_id),
            )
        finally:
            dialog.is_submitting = False
        self.last_transfer = outcome
        self._notify_transfer(outcome)
        if outcome.needs_refresh:
            # Optimistic decrement; the refresh below replaces it with server numbers.
            if dialog.product_id in self.stock:
                self.stock[dialog.product_id] = max(self.stock[dialog.product_id] - dialog.quantity, 0)
            self.dialog = None
            self.refresh_stock()
        self.telemetry.emit(
            build_event(
                category="mutation",
                name="mutation",
                module="warehouses",
                action="stock.transfer",
                success=outcome.transfer_succeeded,
                error_code=None if outcome.status is TransferStatus.SUCCESS else outcome.status.value,
                context={
                    "product_id": dialog.product_id,
                    "from_warehouse_id": self.warehouse_id,
                    "to_warehouse_id": dialog.destination_warehouse_id,
                    "quantity": dialog.quantity,
                    "follow_up_order": dialog.create_follow_up_order,
                },
            )
        )
        return outcome

    def _notify_transfer(self, outcome: TransferOutcome) -> None:
        if outcome.status is TransferStatus.VALIDATION_ERROR:
            self.notifications.push(level="error", title="Check the transfer form", message=outcome.message)
            return
        if outcome.status is TransferStatus.TRANSFER_FAILED:
            self.notifications.push(
                level="error",
                title="Transfer failed",
                message=outcome.message,
                details={"trace_id": outcome.trace_id} if outcome.trace_id else None,
            )
            return
        self.notifications.success("Stock transferred", outcome.message)
        if outcome.order is not None:
            self.notifications.success("Order created", f"Order #{outcome.order.id} created")
        if outcome.order_error:
            self.notifications.warning("Order not created", outcome.order_error)

    def adjust_stock(self, product_id: int, delta: int) -> bool:
        """Add (positive delta) or remove (negative delta) units of one product here."""
        if delta == 0:
            return False
        try:
            if delta > 0:
                result = self.products.add_stock(product_id, self.warehouse_id, delta)
            else:
                result = self.products.decrease_stock(product_id, self.warehouse_id, -delta)
        except ServiceError as exc:
            self.notifications.failure("Could not update stock", exc)
            return False
        if not result.succeeded:
            self.notifications.push(level="error", title="Could not update stock", message=result.message or result.status)
            return False
        self.notifications.success("Stock updated", result.message or "Stock updated")
        self.refresh_stock()
        return True

    def render(self) -> dict[str, Any]:
        state = resolve_state(
            is_loading=self.is_loading,
            error=self.error_message,
            warning=self.stock_warning,
            has_data=self.warehouse is not None,
            trace_id=self.trace_id,
        )
        return {
            "warehouse": self.warehouse.model_dump(mode="json") if self.warehouse else None,
            "loading": self.is_loading,
            "saving": self.is_saving,
            "error": self.error_message,
            "products": [
                {
                    "id": product.id,
                    "name": product.name,
                    "product_type": product.product_type,
                    "price": str(product.price),
                    "quantity": self.quantity_of(product.id),
                    "stock_error": self.stock_errors.get(product.id),
                }
                for product in self.sorted_products()
            ],
            "total_units": self.total_units,
            "inventory_value": str(self.inventory_value),
            "transfer_dialog": None
            if self.dialog is None
            else {
                "product_id": self.dialog.product_id,
                "product_name": self.dialog.product_name,
                "available": self.dialog.available,
                "destinations": [
                    {"id": warehouse.id, "name": warehouse.name}
                    for warehouse in self.dialog.destination_options(self.all_warehouses, self.warehouse_id)
                ],
                "submitting": self.dialog.is_submitting,
                "field_errors": self.dialog.validate(self.warehouse_id).field_errors,
            },
            "last_transfer": self.last_transfer.render() if self.last_transfer else None,
            "view_state": state.render(),
            "notifications": self.notifications.render(),
        }
