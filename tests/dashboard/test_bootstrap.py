from __future__ import annotations

import pytest
import responses

from wms_client_sdk import load_config
from wms_dashboard.app.bootstrap import DashboardBootstrap
from wms_dashboard.app.state import Route
from wms_dashboard.config import DashboardConfig
from wms_dashboard.ui.order_detail_view import OrderDetailView
from wms_dashboard.ui.warehouse_detail_view import WarehouseDetailView

BASE = "https://api.example.com"


@pytest.fixture
def app() -> DashboardBootstrap:
    return DashboardBootstrap(config=load_config(), dashboard_config=DashboardConfig(telemetry_enabled=False))


def _mock_login() -> None:
    responses.add(responses.GET, f"{BASE}/auth/csrf", json={}, status=200)
    responses.add(responses.POST, f"{BASE}/auth/login", json={"success": True}, status=200)
    responses.add(
        responses.GET,
        f"{BASE}/auth/user",
        json={"is_authenticated": True, "id": 1, "username": "clerk"},
        status=200,
    )


def test_start_without_session_routes_to_login(app: DashboardBootstrap) -> None:
    result = app.start()

    assert result.route is Route.LOGIN
    assert app.state.status_message == "Login required"


@responses.activate
def test_login_routes_to_dashboard(app: DashboardBootstrap) -> None:
    _mock_login()

    result = app.login("clerk", "pw")

    assert result.route is Route.DASHBOARD
    assert result.error_message is None
    assert app.state.user is not None
    assert app.state.user.username == "clerk"
    assert app.state.status_message == "Signed in as clerk"
    assert app.start().route is Route.DASHBOARD


@responses.activate
def test_rejected_login_stays_on_login(app: DashboardBootstrap) -> None:
    responses.add(responses.GET, f"{BASE}/auth/csrf", json={}, status=200)
    responses.add(responses.POST, f"{BASE}/auth/login", json={"success": False, "message": "Bad credentials"}, status=200)

    result = app.login("clerk", "wrong")

    assert result.route is Route.LOGIN
    assert result.error_message == "Bad credentials"
    assert app.state.error_message == "Bad credentials"
    assert app.state.user is None


@responses.activate
def test_logout_clears_session_even_when_server_fails(app: DashboardBootstrap) -> None:
    _mock_login()
    app.login("clerk", "pw")
    responses.add(responses.POST, f"{BASE}/auth/logout", json={"detail": "boom"}, status=500)

    result = app.logout()

    assert result.route is Route.LOGIN
    assert app.session.user is None
    assert app.state.user is None
    assert app.state.status_message == "Session cleared"


def test_view_factories_share_services_and_track_route(app: DashboardBootstrap) -> None:
    detail = app.warehouse_detail_view(3)

    assert isinstance(detail, WarehouseDetailView)
    assert detail.warehouse_id == 3
    assert detail.orchestrator is app.orchestrator
    assert app.state.route is Route.WAREHOUSE_DETAIL

    order = app.order_detail_view(7)

    assert isinstance(order, OrderDetailView)
    assert order.lifecycle is app.lifecycle
    assert app.state.route is Route.ORDER_DETAIL


def test_order_create_view_uses_configured_fanout_workers() -> None:
    app = DashboardBootstrap(config=load_config(), dashboard_config=DashboardConfig(fanout_workers=3))

    view = app.order_create_view()

    assert view.fanout_workers == 3
    assert app.state.route is Route.ORDER_CREATE
