from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from wms_client_sdk import Order, Product, Warehouse

from wms_dashboard.services.errors import ServiceError
from wms_dashboard.services.fanout import fan_out
from wms_dashboard.services.orders_service import OrdersService
from wms_dashboard.services.products_service import ProductsService
from wms_dashboard.services.warehouses_service import WarehousesService
from wms_dashboard.shared.telemetry import TelemetryLogger, build_event
from wms_dashboard.ui.shared.notification_center import NotificationCenter
from wms_dashboard.ui.shared.validators import ValidationResult, validate_order_form


@dataclass
class DraftItem:
    product_id: int
    name: str
    quantity: int
    price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass
class OrderCreateView:
    orders: OrdersService
    warehouses: WarehousesService
    products: ProductsService
    fanout_workers: int = 8
    telemetry: TelemetryLogger = field(default_factory=lambda: TelemetryLogger(app_name="wms_dashboard", enabled=False))
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    form: dict[str, Any] = field(
        default_factory=lambda: {"warehouse_id": None, "client_name": "", "destination_address": "", "comment": ""}
    )
    items: list[DraftItem] = field(default_factory=list)
    warehouse_options: list[Warehouse] = field(default_factory=list)
    product_options: list[Product] = field(default_factory=list)
    field_errors: dict[str, str] = field(default_factory=dict)
    created: Order | None = None
    is_loading: bool = False
    is_submitting: bool = False

    def load(self) -> bool:
        self.is_loading = True
        try:
            result = fan_out(
                {"warehouses": self.warehouses.list_warehouses, "products": self.products.list_products},
                max_workers=self.fanout_workers,
            )
            self.warehouse_options = result.values.get("warehouses", [])
            self.product_options = result.values.get("products", [])
            for name, error in result.errors.items():
                self.notifications.failure(f"Could not load {name}", error)
            return result.complete
        finally:
            self.is_loading = False

    def add_item(self, product_id: int, quantity: int) -> bool:
        if quantity <= 0:
            self.field_errors["quantity"] = "Quantity must be greater than 0."
            return False
        product = next((row for row in self.product_options if row.id == product_id), None)
        if product is None:
            self.field_errors["product_id"] = "Select a product."
            return False
        self.field_errors.pop("quantity", None)
        self.field_errors.pop("product_id", None)
        existing = next((item for item in self.items if item.product_id == product_id), None)
        if existing is not None:
            existing.quantity += quantity
        else:
            self.items.append(DraftItem(product_id=product.id, name=product.name, quantity=quantity, price=product.price))
        return True

    def remove_item(self, product_id: int) -> None:
        self.items = [item for item in self.items if item.product_id != product_id]

    @property
    def total(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    def validate(self) -> ValidationResult:
        result = validate_order_form(
            self.form,
            [{"product_id": item.product_id, "quantity": item.quantity} for item in self.items],
        )
        self.field_errors = dict(result.field_errors)
        return result

    def submit(self) -> Order | None:
        validation = self.validate()
        if not validation.ok:
            self.notifications.push(
                level="error",
                title="Check the order form",
                message="; ".join(validation.summary),
            )
            return None
        payload = {
            "warehouse_id": int(self.form["warehouse_id"]),
            "client_name": self.form["client_name"].strip(),
            "destination_address": self.form["destination_address"].strip(),
            "comment": (self.form.get("comment") or "").strip() or None,
            "items": [{"product_id": item.product_id, "quantity": item.quantity} for item in self.items],
        }
        self.is_submitting = True
        try:
            self.created = self.orders.create_order(payload)
        except ServiceError as exc:
            self.notifications.failure("Could not create order", exc)
            return None
        finally:
            self.is_submitting = False
        self.notifications.success("Order created", f"Order #{self.created.id} created")
        self.telemetry.emit(build_event(category="mutation", name="mutation", module="orders", action="order.create", success=True))
        return self.created

    def render(self) -> dict[str, Any]:
        return {
            "form": dict(self.form),
            "items": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "quantity": item.quantity,
                    "price": str(item.price),
                    "line_total": str(item.line_total),
                }
                for item in self.items
            ],
            "total": str(self.total),
            "warehouses": [{"id": row.id, "name": row.name} for row in self.warehouse_options],
            "products": [{"id": row.id, "name": row.name, "price": str(row.price)} for row in self.product_options],
            "field_errors": dict(self.field_errors),
            "loading": self.is_loading,
            "submitting": self.is_submitting,
            "created_order_id": self.created.id if self.created else None,
            "notifications": self.notifications.render(),
        }
