from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter

from wms_client_sdk import ApiSession, ClientConfig, load_config

from wms_dashboard.app.state import AppState, Route
from wms_dashboard.config import DashboardConfig, load_dashboard_config
from wms_dashboard.services.auth_service import AuthService
from wms_dashboard.services.errors import ServiceError
from wms_dashboard.services.order_lifecycle import OrderLifecycleController
from wms_dashboard.services.orders_service import OrdersService
from wms_dashboard.services.products_service import ProductsService
from wms_dashboard.services.reports_service import ReportsService
from wms_dashboard.services.transfer_orchestrator import StockTransferOrchestrator
from wms_dashboard.services.warehouses_service import WarehousesService
from wms_dashboard.shared.telemetry import TelemetryLogger, build_event
from wms_dashboard.ui.dashboard_view import DashboardView
from wms_dashboard.ui.order_create_view import OrderCreateView
from wms_dashboard.ui.order_detail_view import OrderDetailView
from wms_dashboard.ui.orders_list_view import OrdersListView
from wms_dashboard.ui.product_detail_view import ProductDetailView
from wms_dashboard.ui.products_list_view import ProductsListView
from wms_dashboard.ui.warehouse_detail_view import WarehouseDetailView
from wms_dashboard.ui.warehouses_list_view import WarehousesListView

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    route: Route
    error_message: str | None = None


class DashboardBootstrap:
    """Wires one ``ApiSession`` into every service and view of the dashboard."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        dashboard_config: DashboardConfig | None = None,
        session: ApiSession | None = None,
    ) -> None:
        self.config = config or load_config()
        self.dashboard_config = dashboard_config or load_dashboard_config()
        self.session = session or ApiSession(self.config)
        self.state = AppState()
        self.telemetry = TelemetryLogger(app_name="wms_dashboard", enabled=self.dashboard_config.telemetry_enabled)

        self.auth_service = AuthService(self.session)
        self.warehouses_service = WarehousesService(self.session)
        self.products_service = ProductsService(self.session, fanout_workers=self.dashboard_config.fanout_workers)
        self.orders_service = OrdersService(self.session)
        self.reports_service = ReportsService(self.session, self.dashboard_config.reports_dir)
        self.orchestrator = StockTransferOrchestrator(
            self.products_service,
            self.orders_service,
            follow_up_delay_seconds=self.dashboard_config.follow_up_delay_seconds,
        )
        self.lifecycle = OrderLifecycleController(self.orders_service, self.products_service)

    def start(self) -> BootstrapResult:
        if not self.auth_service.has_active_session():
            self._navigate(Route.LOGIN, "Login required")
            return BootstrapResult(route=self.state.route)
        self._navigate(Route.DASHBOARD, "Authenticated")
        return BootstrapResult(route=self.state.route)

    def login(self, username: str, password: str) -> BootstrapResult:
        started = perf_counter()
        try:
            user = self.auth_service.login(username, password)
        except ServiceError as exc:
            self.state.error_message = exc.message
            self.state.trace_id = exc.trace_id
            self._emit_auth_result(False, started, trace_id=exc.trace_id)
            self._navigate(Route.LOGIN, "Authentication failed")
            return BootstrapResult(route=self.state.route, error_message=exc.message)
        self.state.user = user
        self.state.error_message = None
        self._emit_auth_result(True, started, trace_id=None)
        self._navigate(Route.DASHBOARD, f"Signed in as {user.display_name}")
        return BootstrapResult(route=self.state.route)

    def logout(self) -> BootstrapResult:
        try:
            self.auth_service.logout()
        except ServiceError as exc:
            # Local session is cleared regardless; the server may already have dropped it.
            logger.warning("logout_failed", extra={"trace_id": exc.trace_id})
        self.state.user = None
        self._navigate(Route.LOGIN, "Session cleared")
        return BootstrapResult(route=self.state.route)

    def dashboard_view(self) -> DashboardView:
        self._navigate(Route.DASHBOARD, "Viewing dashboard")
        return DashboardView(
            warehouses=self.warehouses_service,
            products=self.products_service,
            orders=self.orders_service,
            fanout_workers=self.dashboard_config.fanout_workers,
            telemetry=self.telemetry,
        )

    def warehouses_view(self) -> WarehousesListView:
        self._navigate(Route.WAREHOUSES, "Viewing warehouses")
        return WarehousesListView(service=self.warehouses_service, telemetry=self.telemetry)

    def warehouse_detail_view(self, warehouse_id: int) -> WarehouseDetailView:
        self._navigate(Route.WAREHOUSE_DETAIL, "Viewing warehouse")
        return WarehouseDetailView(
            warehouse_id=warehouse_id,
            warehouses=self.warehouses_service,
            products=self.products_service,
            orchestrator=self.orchestrator,
            telemetry=self.telemetry,
        )

    def products_view(self) -> ProductsListView:
        self._navigate(Route.PRODUCTS, "Viewing products")
        return ProductsListView(service=self.products_service, telemetry=self.telemetry)

    def product_detail_view(self, product_id: int) -> ProductDetailView:
        self._navigate(Route.PRODUCT_DETAIL, "Viewing product")
        return ProductDetailView(
            product_id=product_id,
            products=self.products_service,
            warehouses=self.warehouses_service,
            fanout_workers=self.dashboard_config.fanout_workers,
            telemetry=self.telemetry,
        )

    def orders_view(self) -> OrdersListView:
        self._navigate(Route.ORDERS, "Viewing orders")
        return OrdersListView(service=self.orders_service, telemetry=self.telemetry)

    def order_detail_view(self, order_id: int) -> OrderDetailView:
        self._navigate(Route.ORDER_DETAIL, "Viewing order")
        return OrderDetailView(
            order_id=order_id,
            orders=self.orders_service,
            lifecycle=self.lifecycle,
            reports=self.reports_service,
            telemetry=self.telemetry,
        )

    def order_create_view(self) -> OrderCreateView:
        self._navigate(Route.ORDER_CREATE, "New order")
        return OrderCreateView(
            orders=self.orders_service,
            warehouses=self.warehouses_service,
            products=self.products_service,
            fanout_workers=self.dashboard_config.fanout_workers,
            telemetry=self.telemetry,
        )

    def _navigate(self, route: Route, status_message: str) -> None:
        self.state.route = route
        self.state.status_message = status_message
        self.telemetry.emit(
            build_event(category="navigation", name="navigate", module="app", action=f"route.{route.value}")
        )

    def _emit_auth_result(self, success: bool, started: float, *, trace_id: str | None) -> None:
        self.telemetry.emit(
            build_event(
                category="auth",
                name="login_result",
                module="auth",
                action="auth.login",
                success=success,
                trace_id=trace_id,
                duration_ms=int((perf_counter() - started) * 1000),
            )
        )
