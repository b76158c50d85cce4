from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
import responses

from wms_client_sdk import ApiSession, ClientValidationError, OrderStatus, ReportKind, load_config
from wms_client_sdk.clients import OrdersClient, ProductsClient, ReportsClient, WarehousesClient
from wms_client_sdk.clients.auth import AuthClient
from wms_client_sdk.exceptions import AuthError, InvalidResponseError
from wms_client_sdk.http_client import CSRF_HEADER, HttpClient
from wms_client_sdk.tracing import TraceContext

BASE = "https://api.example.com"


def _client(base_url: str) -> HttpClient:
    cfg = load_config()
    object.__setattr__(cfg, "api_base_url", base_url)
    return HttpClient(cfg, trace=TraceContext())


def _order_payload(order_id: int = 7, status: str = "new", **extra) -> dict:
    payload = {
        "id": order_id,
        "status": status,
        "warehouse": 2,
        "client_name": "ACME",
        "destination_address": "1 Main St",
        "comment": None,
        "items": [{"product_id": 1, "name": "Widget", "quantity": 2, "price": "100.00"}],
        "total_price": "200.00",
        "created_at": "2024-05-01T10:00:00Z",
    }
    payload.update(extra)
    return payload


@responses.activate
def test_login_performs_csrf_handshake_then_loads_user() -> None:
    session = ApiSession(load_config())
    object.__setattr__(session.config, "api_base_url", BASE)
    responses.add(responses.GET, f"{BASE}/auth/csrf", json={}, headers={CSRF_HEADER: "tok-1"}, status=200)
    responses.add(responses.POST, f"{BASE}/auth/login", json={"success": True, "message": "ok"}, status=200)
    responses.add(
        responses.GET,
        f"{BASE}/auth/user",
        json={"is_authenticated": True, "id": 3, "username": "clerk", "groups": ["staff"]},
        status=200,
    )

    session.auth_client().login("clerk", "secret")
    user = session.refresh_user()

    assert session.http.csrf_token == "tok-1"
    assert responses.calls[1].request.headers[CSRF_HEADER] == "tok-1"
    assert json.loads(responses.calls[1].request.body) == {"username": "clerk", "password": "secret"}
    assert user.username == "clerk"
    assert session.is_authenticated


@responses.activate
def test_login_rejected_raises_auth_error() -> None:
    http = _client(BASE)
    responses.add(responses.GET, f"{BASE}/auth/csrf", json={}, status=200)
    responses.add(responses.POST, f"{BASE}/auth/login", json={"success": False, "message": "Bad credentials"}, status=200)

    with pytest.raises(AuthError) as exc_info:
        AuthClient(http=http).login("clerk", "wrong")

    assert exc_info.value.code == "LOGIN_FAILED"
    assert exc_info.value.message == "Bad credentials"


@responses.activate
def test_current_user_empty_body_is_anonymous() -> None:
    http = _client(BASE)
    responses.add(responses.GET, f"{BASE}/auth/user", body=b"", status=200)
    user = AuthClient(http=http).current_user()
    assert user.is_authenticated is False
    assert user.display_name == "anonymous"


@responses.activate
def test_session_clear_drops_user_and_csrf() -> None:
    session = ApiSession(load_config())
    session.http.csrf_token = "tok"
    session.http.session.cookies.set("sessionid", "abc")
    session.clear()
    assert session.user is None
    assert session.http.csrf_token is None
    assert not session.http.session.cookies


@responses.activate
def test_warehouse_crud_routes() -> None:
    http = _client(BASE)
    client = WarehousesClient(http=http)
    responses.add(responses.GET, f"{BASE}/warehouses/warehouse_list", json=[{"id": 1, "name": "North"}], status=200)
    responses.add(responses.GET, f"{BASE}/warehouses/warehouse/1", json={"id": 1, "name": "North", "address": "A"}, status=200)
    responses.add(responses.PATCH, f"{BASE}/warehouses/warehouse_update/1", json={"id": 1, "name": "North 2"}, status=200)
    responses.add(responses.DELETE, f"{BASE}/warehouses/warehouse_delete", json={"status": "success"}, status=200)

    assert [w.name for w in client.list_warehouses()] == ["North"]
    assert client.get_warehouse(1).address == "A"
    assert client.update_warehouse(1, {"name": "North 2"}).name == "North 2"
    assert client.delete_warehouse(1).succeeded
    assert responses.calls[3].request.url.endswith("warehouse_id=1")


@responses.activate
def test_invalid_body_raises_invalid_response() -> None:
    http = _client(BASE)
    responses.add(responses.GET, f"{BASE}/warehouses/warehouse_list", json={"items": []}, status=200)

    with pytest.raises(InvalidResponseError) as exc_info:
        WarehousesClient(http=http).list_warehouses()

    assert exc_info.value.code == "INVALID_RESPONSE"


@responses.activate
def test_product_stock_and_transfer() -> None:
    http = _client(BASE)
    client = ProductsClient(http=http)
    responses.add(responses.GET, f"{BASE}/products/product_stock", json={"product": "Widget", "quantity": 10}, status=200)
    responses.add(
        responses.POST,
        f"{BASE}/products/products/product_stock_transfer",
        json={"status": "success", "message": "moved", "from_warehouse_stock": 5, "to_warehouse_stock": 5},
        status=200,
    )

    stock = client.get_stock(1, 1)
    result = client.transfer_stock({"product_id": 1, "from_warehouse_id": 1, "to_warehouse_id": 2, "quantity": 5})

    assert stock.quantity == 10
    assert "product_id=1" in responses.calls[0].request.url and "warehouse_id=1" in responses.calls[0].request.url
    assert result.succeeded
    assert result.from_warehouse_stock == 5
    assert json.loads(responses.calls[1].request.body) == {
        "product_id": 1,
        "from_warehouse_id": 1,
        "to_warehouse_id": 2,
        "quantity": 5,
    }


def test_stock_operation_rejects_non_positive_quantity() -> None:
    client = ProductsClient(http=_client(BASE))
    with pytest.raises(ClientValidationError):
        client.add_stock({"product_id": 1, "warehouse_id": 1, "quantity": 0})


@responses.activate
def test_product_image_upload_is_multipart(tmp_path: Path) -> None:
    http = _client(BASE)
    image = tmp_path / "widget.png"
    image.write_bytes(b"\x89PNG")
    responses.add(
        responses.POST,
        f"{BASE}/products/product/upload_image",
        json={"id": 4, "product": 1, "image_url": "/media/widget.png"},
        status=200,
    )

    uploaded = ProductsClient(http=http).upload_image(1, image, alt_text="front")

    body = responses.calls[0].request.body
    assert b'name="file"; filename="widget.png"' in body
    assert b'"alt_text": "front"' in body
    assert uploaded.image_url == "/media/widget.png"


@responses.activate
def test_order_create_and_cancel_payloads() -> None:
    http = _client(BASE)
    client = OrdersClient(http=http)
    responses.add(responses.POST, f"{BASE}/orders/order_create", json=_order_payload(), status=200)
    responses.add(
        responses.PATCH,
        f"{BASE}/orders/order/7/cancel",
        json=_order_payload(status="cancelled", cancellation_reason="duplicate"),
        status=200,
    )

    created = client.create_order(
        {
            "warehouse_id": 2,
            "client_name": "ACME",
            "destination_address": "1 Main St",
            "items": [{"product_id": 1, "quantity": 2}],
        }
    )
    cancelled = client.cancel_order(7, "  duplicate ")

    assert created.total_price == Decimal("200.00")
    assert created.items[0].line_total == Decimal("200.00")
    assert json.loads(responses.calls[1].request.body) == {"status": "cancelled", "reason": "duplicate"}
    assert cancelled.status is OrderStatus.CANCELLED


def test_cancel_without_reason_sends_nothing() -> None:
    client = OrdersClient(http=_client(BASE))
    with responses.RequestsMock() as mocked:
        with pytest.raises(ClientValidationError):
            client.cancel_order(7, "   ")
        assert len(mocked.calls) == 0


@responses.activate
def test_update_status_route() -> None:
    http = _client(BASE)
    responses.add(responses.PATCH, f"{BASE}/orders/order/7/status", json=_order_payload(status="processing"), status=200)
    order = OrdersClient(http=http).update_status(7, OrderStatus.PROCESSING)
    assert order.status is OrderStatus.PROCESSING
    assert json.loads(responses.calls[0].request.body) == {"status": "processing"}


@responses.activate
def test_order_report_download(tmp_path: Path) -> None:
    http = _client(BASE)
    responses.add(responses.GET, f"{BASE}/report/order-report/7", body=b"xlsx-bytes", status=200)

    document = ReportsClient(http=http).order_report(7)
    path = document.save(tmp_path, document.default_filename(date(2024, 5, 1)))

    assert document.kind is ReportKind.ORDER
    assert path.name == "order_report_7_2024-05-01.xlsx"
    assert path.read_bytes() == b"xlsx-bytes"


@responses.activate
def test_stock_summary_without_warehouse() -> None:
    http = _client(BASE)
    responses.add(
        responses.GET,
        f"{BASE}/products/product_stock",
        json={"product": "Widget", "total_quantity_all_warehouses": 12, "warehouses_with_stock": [1, 3]},
        status=200,
    )

    summary = ProductsClient(http=http).get_stock_summary(1)

    assert summary.total_quantity_all_warehouses == 12
    assert summary.warehouses_with_stock == [1, 3]
    assert "warehouse_id" not in responses.calls[0].request.url
