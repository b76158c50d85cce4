from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping

from wms_client_sdk import (
    Order,
    OrderStatus,
    Product,
    StatusMessage,
    StockOperationResult,
    StockTransferRequest,
    TransferResult,
    Warehouse,
    WarehouseStock,
)
from wms_dashboard.services.errors import ServiceError
from wms_dashboard.services.fanout import FanOutResult, fan_out


def make_order(order_id: int = 1, status: OrderStatus = OrderStatus.NEW, **extra: Any) -> Order:
    payload: dict[str, Any] = {
        "id": order_id,
        "status": status,
        "warehouse": 2,
        "client_name": "ACME",
        "destination_address": "1 Main St",
        "items": [{"product_id": 10, "name": "Widget", "quantity": 3, "price": "4.00"}],
        "total_price": "12.00",
    }
    payload.update(extra)
    return Order.model_validate(payload)


@dataclass
class FakeProductsService:
    transfer_result: TransferResult | None = None
    transfer_error: ServiceError | None = None
    failing_add_stock: dict[int, str] = field(default_factory=dict)
    rejected_add_stock: dict[int, str] = field(default_factory=dict)
    products: list[Product] = field(default_factory=list)
    stock: dict[tuple[int, int], int] = field(default_factory=dict)
    failing_stock: set[int] = field(default_factory=set)
    transfer_calls: list[StockTransferRequest] = field(default_factory=list)
    add_stock_calls: list[tuple[int, int, int]] = field(default_factory=list)
    decrease_stock_calls: list[tuple[int, int, int]] = field(default_factory=list)

    def transfer_stock(self, request: StockTransferRequest) -> TransferResult:
        self.transfer_calls.append(request)
        if self.transfer_error:
            raise self.transfer_error
        assert self.transfer_result is not None
        if self.transfer_result.succeeded:
            source = (request.product_id, request.from_warehouse_id)
            target = (request.product_id, request.to_warehouse_id)
            self.stock[source] = self.stock.get(source, 0) - request.quantity
            self.stock[target] = self.stock.get(target, 0) + request.quantity
        return self.transfer_result

    def add_stock(self, product_id: int, warehouse_id: int, quantity: int) -> StockOperationResult:
        self.add_stock_calls.append((product_id, warehouse_id, quantity))
        if product_id in self.failing_add_stock:
            raise ServiceError(message=self.failing_add_stock[product_id])
        if product_id in self.rejected_add_stock:
            return StockOperationResult(status="error", message=self.rejected_add_stock[product_id])
        key = (product_id, warehouse_id)
        self.stock[key] = self.stock.get(key, 0) + quantity
        return StockOperationResult(status="success", stock_quantity=self.stock[key])

    def decrease_stock(self, product_id: int, warehouse_id: int, quantity: int) -> StockOperationResult:
        self.decrease_stock_calls.append((product_id, warehouse_id, quantity))
        key = (product_id, warehouse_id)
        self.stock[key] = self.stock.get(key, 0) - quantity
        return StockOperationResult(status="success", stock_quantity=self.stock[key])

    def list_products(self, warehouse_id: int | None = None) -> list[Product]:
        if warehouse_id is None:
            return list(self.products)
        return [product for product in self.products if warehouse_id in product.warehouses_with_stock]

    def get_product(self, product_id: int, warehouse_id: int | None = None) -> Product:
        for row in self.products:
            if row.id == product_id:
                return row
        raise ServiceError(message=f"Product {product_id} not found")

    def create_product(self, payload: Mapping[str, Any]) -> Product:
        created = Product(id=max((row.id for row in self.products), default=0) + 1, **payload)
        self.products.append(created)
        return created

    def update_product(self, product_id: int, payload: Mapping[str, Any]) -> Product:
        updated = self.get_product(product_id).model_copy(update=dict(payload))
        self.products = [updated if row.id == product_id else row for row in self.products]
        return updated

    def delete_product(self, product_id: int) -> StatusMessage:
        self.products = [row for row in self.products if row.id != product_id]
        return StatusMessage(status="success", message="deleted")

    def get_stock(self, product_id: int, warehouse_id: int) -> WarehouseStock:
        if product_id in self.failing_stock:
            raise ServiceError(message="stock lookup failed")
        return WarehouseStock(quantity=self.stock.get((product_id, warehouse_id), 0))

    def stock_by_product(self, warehouse_id: int, product_ids: list[int]) -> FanOutResult[int, int]:
        return fan_out(
            {pid: (lambda pid=pid: self.get_stock(pid, warehouse_id).quantity) for pid in product_ids}
        )

    def list_images(self, product_id: int) -> list:
        return []


@dataclass
class FakeOrdersService:
    orders: dict[int, Order] = field(default_factory=dict)
    create_error: ServiceError | None = None
    update_error: ServiceError | None = None
    get_error: ServiceError | None = None
    created_payloads: list[Mapping[str, Any]] = field(default_factory=list)
    status_calls: list[tuple[int, OrderStatus]] = field(default_factory=list)
    cancel_calls: list[tuple[int, str]] = field(default_factory=list)
    drop_comment_on_update: bool = False

    def list_orders(self) -> list[Order]:
        return list(self.orders.values())

    def get_order(self, order_id: int) -> Order:
        if self.get_error:
            raise self.get_error
        if order_id not in self.orders:
            raise ServiceError(message=f"Order {order_id} not found")
        return self.orders[order_id]

    def create_order(self, payload: Mapping[str, Any]) -> Order:
        self.created_payloads.append(payload)
        if self.create_error:
            raise self.create_error
        order_id = max(self.orders, default=0) + 1
        order = Order(
            id=order_id,
            status=OrderStatus.NEW,
            warehouse=payload["warehouse_id"],
            client_name=payload["client_name"],
            destination_address=payload["destination_address"],
            comment=payload.get("comment"),
            items=[{"product_id": item["product_id"], "quantity": item["quantity"]} for item in payload["items"]],
        )
        self.orders[order_id] = order
        return order

    def update_status(self, order_id: int, status: OrderStatus, reason: str | None = None) -> Order:
        self.status_calls.append((order_id, status))
        if self.update_error:
            raise self.update_error
        update: dict[str, Any] = {"status": status}
        if self.drop_comment_on_update:
            update["comment"] = None
        order = self.orders[order_id].model_copy(update=update)
        self.orders[order_id] = order
        return order

    def cancel_order(self, order_id: int, reason: str) -> Order:
        self.cancel_calls.append((order_id, reason))
        order = self.orders[order_id].model_copy(
            update={"status": OrderStatus.CANCELLED, "cancellation_reason": reason}
        )
        self.orders[order_id] = order
        return order

    def create_return(self, order_id: int, payload: Mapping[str, Any]) -> Any:
        return {"order_id": order_id, **payload}


@dataclass
class FakeWarehousesService:
    warehouses: list[Warehouse] = field(default_factory=list)
    fail: ServiceError | None = None

    def list_warehouses(self) -> list[Warehouse]:
        if self.fail:
            raise self.fail
        return list(self.warehouses)

    def get_warehouse(self, warehouse_id: int) -> Warehouse:
        for warehouse in self.warehouses:
            if warehouse.id == warehouse_id:
                return warehouse
        raise ServiceError(message=f"Warehouse {warehouse_id} not found")

    def create_warehouse(self, payload: Mapping[str, Any]) -> Warehouse:
        warehouse = Warehouse(id=max((w.id for w in self.warehouses), default=0) + 1, **payload)
        self.warehouses.append(warehouse)
        return warehouse

    def update_warehouse(self, warehouse_id: int, payload: Mapping[str, Any]) -> Warehouse:
        current = self.get_warehouse(warehouse_id)
        updated = current.model_copy(update=dict(payload))
        self.warehouses = [updated if w.id == warehouse_id else w for w in self.warehouses]
        return updated

    def delete_warehouse(self, warehouse_id: int) -> StatusMessage:
        self.warehouses = [w for w in self.warehouses if w.id != warehouse_id]
        return StatusMessage(status="success", message="deleted")


def product(product_id: int, name: str, price: str, warehouses: list[int]) -> Product:
    return Product(id=product_id, name=name, product_type="goods", price=Decimal(price), warehouses_with_stock=warehouses)
