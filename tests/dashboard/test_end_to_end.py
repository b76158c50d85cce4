from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterator
from urllib.parse import parse_qs, urlparse

import pytest
import responses

from wms_client_sdk import ApiSession, OrderStatus, load_config
from wms_dashboard.services.order_lifecycle import OrderLifecycleController
from wms_dashboard.services.orders_service import OrdersService
from wms_dashboard.services.products_service import ProductsService
from wms_dashboard.services.transfer_orchestrator import StockTransferOrchestrator, TransferStatus
from wms_dashboard.services.warehouses_service import WarehousesService
from wms_dashboard.ui.order_create_view import OrderCreateView
from wms_dashboard.ui.warehouse_detail_view import WarehouseDetailView

BASE = "https://api.example.com"
JSON = {"Content-Type": "application/json"}


def _reply(payload: Any, status: int = 200) -> tuple[int, dict[str, str], str]:
    return status, JSON, json.dumps(payload)


def _query(request: Any) -> dict[str, int]:
    return {key: int(values[0]) for key, values in parse_qs(urlparse(request.url).query).items()}


def _order_id(request: Any) -> int:
    return int(re.search(r"/orders/order/(\d+)", request.url).group(1))


@dataclass
class FakeBackend:
    """In-memory warehouse server answering the routes the dashboard calls."""

    warehouses: dict[int, dict[str, Any]] = field(default_factory=dict)
    products: dict[int, dict[str, Any]] = field(default_factory=dict)
    stock: dict[tuple[int, int], int] = field(default_factory=dict)
    orders: dict[int, dict[str, Any]] = field(default_factory=dict)

    def register(self, mock: responses.RequestsMock) -> None:
        mock.add_callback(responses.GET, f"{BASE}/warehouses/warehouse_list", callback=self.list_warehouses)
        mock.add_callback(responses.GET, re.compile(rf"{BASE}/warehouses/warehouse/\d+$"), callback=self.get_warehouse)
        mock.add_callback(responses.GET, f"{BASE}/products/product_list_get", callback=self.list_products)
        mock.add_callback(responses.GET, f"{BASE}/products/product_stock", callback=self.get_stock)
        mock.add_callback(responses.POST, f"{BASE}/products/products/product_stock_add", callback=self.add_stock)
        mock.add_callback(responses.POST, f"{BASE}/products/products/product_stock_transfer", callback=self.transfer)
        mock.add_callback(responses.GET, f"{BASE}/orders/order", callback=self.list_orders)
        mock.add_callback(responses.POST, f"{BASE}/orders/order_create", callback=self.create_order)
        mock.add_callback(responses.GET, re.compile(rf"{BASE}/orders/order/\d+$"), callback=self.get_order)
        mock.add_callback(responses.PATCH, re.compile(rf"{BASE}/orders/order/\d+/status$"), callback=self.update_status)
        mock.add_callback(responses.PATCH, re.compile(rf"{BASE}/orders/order/\d+/cancel$"), callback=self.cancel_order)

    def list_warehouses(self, request: Any) -> tuple[int, dict[str, str], str]:
        return _reply(list(self.warehouses.values()))

    def get_warehouse(self, request: Any) -> tuple[int, dict[str, str], str]:
        warehouse_id = int(request.url.rsplit("/", 1)[1])
        if warehouse_id not in self.warehouses:
            return _reply({"detail": "Warehouse not found"}, 404)
        return _reply(self.warehouses[warehouse_id])

    def _product_payload(self, product_id: int) -> dict[str, Any]:
        held = sorted(wid for (pid, wid), qty in self.stock.items() if pid == product_id and qty > 0)
        return {**self.products[product_id], "warehouses_with_stock": held}

    def list_products(self, request: Any) -> tuple[int, dict[str, str], str]:
        warehouse_id = _query(request).get("warehouse_id")
        rows = [self._product_payload(pid) for pid in self.products]
        if warehouse_id is not None:
            rows = [row for row in rows if warehouse_id in row["warehouses_with_stock"]]
        return _reply(rows)

    def get_stock(self, request: Any) -> tuple[int, dict[str, str], str]:
        query = _query(request)
        quantity = self.stock.get((query["product_id"], query["warehouse_id"]), 0)
        return _reply({"product": self.products[query["product_id"]]["name"], "quantity": quantity})

    def add_stock(self, request: Any) -> tuple[int, dict[str, str], str]:
        body = json.loads(request.body)
        key = (body["product_id"], body["warehouse_id"])
        self.stock[key] = self.stock.get(key, 0) + body["quantity"]
        return _reply({"status": "success", "message": "Stock added", "stock_quantity": self.stock[key]})

    def transfer(self, request: Any) -> tuple[int, dict[str, str], str]:
        body = json.loads(request.body)
        source = (body["product_id"], body["from_warehouse_id"])
        target = (body["product_id"], body["to_warehouse_id"])
        if self.stock.get(source, 0) < body["quantity"]:
            return _reply({"status": "error", "message": "Insufficient stock"})
        self.stock[source] -= body["quantity"]
        self.stock[target] = self.stock.get(target, 0) + body["quantity"]
        return _reply(
            {
                "status": "success",
                "message": f"Transferred {body['quantity']} unit(s)",
                "from_warehouse_stock": self.stock[source],
                "to_warehouse_stock": self.stock[target],
            }
        )

    def list_orders(self, request: Any) -> tuple[int, dict[str, str], str]:
        return _reply(list(self.orders.values()))

    def create_order(self, request: Any) -> tuple[int, dict[str, str], str]:
        body = json.loads(request.body)
        order_id = len(self.orders) + 1
        items = [
            {
                "product_id": item["product_id"],
                "name": self.products[item["product_id"]]["name"],
                "quantity": item["quantity"],
                "price": self.products[item["product_id"]]["price"],
            }
            for item in body["items"]
        ]
        total = sum(Decimal(item["price"]) * item["quantity"] for item in items)
        self.orders[order_id] = {
            "id": order_id,
            "status": "new",
            "warehouse": body["warehouse_id"],
            "client_name": body["client_name"],
            "destination_address": body["destination_address"],
            "comment": body.get("comment"),
            "items": items,
            "total_price": str(total),
            "created_at": f"2024-05-01T10:0{order_id}:00Z",
        }
        return _reply(self.orders[order_id])

    def get_order(self, request: Any) -> tuple[int, dict[str, str], str]:
        return _reply(self.orders[_order_id(request)])

    def update_status(self, request: Any) -> tuple[int, dict[str, str], str]:
        order = self.orders[_order_id(request)]
        order["status"] = json.loads(request.body)["status"]
        return _reply(order)

    def cancel_order(self, request: Any) -> tuple[int, dict[str, str], str]:
        body = json.loads(request.body)
        order = self.orders[_order_id(request)]
        order["status"] = body["status"]
        order["cancellation_reason"] = body["reason"]
        return _reply(order)


@pytest.fixture
def backend() -> Iterator[FakeBackend]:
    server = FakeBackend(
        warehouses={1: {"id": 1, "name": "North", "address": "1 Dock Rd"}, 2: {"id": 2, "name": "South", "address": "9 Pier St"}},
        products={
            1: {"id": 1, "name": "Pallet jack", "product_type": "equipment", "price": "100.00"},
            2: {"id": 2, "name": "Shrink wrap", "product_type": "supplies", "price": "50.00"},
        },
        stock={(1, 1): 10, (2, 1): 3},
    )
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        server.register(mock)
        yield server


@pytest.fixture
def session() -> ApiSession:
    return ApiSession(load_config())


def test_create_then_cancel_order(backend: FakeBackend, session: ApiSession) -> None:
    orders = OrdersService(session)
    products = ProductsService(session)
    view = OrderCreateView(orders=orders, warehouses=WarehousesService(session), products=products)
    assert view.load()

    view.form.update({"warehouse_id": 1, "client_name": "ACME", "destination_address": "1 Main St"})
    view.add_item(1, 2)
    view.add_item(2, 1)
    created = view.submit()

    assert created is not None
    assert created.status is OrderStatus.NEW
    assert created.total_price == Decimal("250.00")
    assert view.total == created.total_price

    outcome = OrderLifecycleController(orders, products).cancel(created, "duplicate")

    assert outcome.succeeded
    assert outcome.order.status is OrderStatus.CANCELLED
    assert outcome.order.cancellation_reason == "duplicate"
    assert backend.orders[created.id]["status"] == "cancelled"


def test_transfer_with_follow_up_order_then_complete(backend: FakeBackend, session: ApiSession) -> None:
    products = ProductsService(session, fanout_workers=4)
    orders = OrdersService(session)
    sleeps: list[float] = []
    view = WarehouseDetailView(
        warehouse_id=1,
        warehouses=WarehousesService(session),
        products=products,
        orchestrator=StockTransferOrchestrator(products, orders, follow_up_delay_seconds=0.5, sleep=sleeps.append),
    )
    assert view.load()
    assert view.quantity_of(1) == 10

    dialog = view.open_transfer(1)
    dialog.destination_warehouse_id = 2
    dialog.quantity = 5
    dialog.create_follow_up_order = True
    outcome = view.submit_transfer()

    assert outcome.status is TransferStatus.SUCCESS
    assert sleeps == [0.5]
    assert view.quantity_of(1) == 5
    assert products.get_stock(1, 1).quantity == 5
    assert products.get_stock(1, 2).quantity == 5
    placed = orders.list_orders()
    assert len(placed) == 1
    order = placed[0]
    assert order.warehouse == 2
    assert [(item.product_id, item.quantity) for item in order.items] == [(1, 5)]
    assert order.is_transfer_generated

    lifecycle = OrderLifecycleController(orders, products)
    for target in (OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.COMPLETED):
        result = lifecycle.change_status(order, target)
        assert result.fully_succeeded
        order = result.order

    assert order.status is OrderStatus.COMPLETED
    assert backend.stock[(1, 2)] == 10


def test_transfer_beyond_stock_never_reaches_server(backend: FakeBackend, session: ApiSession) -> None:
    products = ProductsService(session)
    orchestrator = StockTransferOrchestrator(products, OrdersService(session), sleep=lambda _: None)
    view = WarehouseDetailView(warehouse_id=1, warehouses=WarehousesService(session), products=products, orchestrator=orchestrator)
    view.load()

    dialog = view.open_transfer(2)
    dialog.destination_warehouse_id = 2
    dialog.quantity = 4
    outcome = view.submit_transfer()

    assert outcome.status is TransferStatus.VALIDATION_ERROR
    assert backend.stock == {(1, 1): 10, (2, 1): 3}
    assert backend.orders == {}
