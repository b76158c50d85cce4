from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from wms_client_sdk import Order, OrderReturn, OrderStatus, ReportKind, order_action_availability

from wms_dashboard.services.errors import ServiceError
from wms_dashboard.services.order_lifecycle import CancelOutcome, OrderLifecycleController, StatusChangeOutcome
from wms_dashboard.services.orders_service import OrdersService
from wms_dashboard.services.reports_service import ReportsService, SavedReport
from wms_dashboard.shared.telemetry import TelemetryLogger, build_event
from wms_dashboard.ui.shared.notification_center import NotificationCenter
from wms_dashboard.ui.shared.view_state import resolve_state


@dataclass
class OrderDetailView:
    order_id: int
    orders: OrdersService
    lifecycle: OrderLifecycleController
    reports: ReportsService
    telemetry: TelemetryLogger = field(default_factory=lambda: TelemetryLogger(app_name="wms_dashboard", enabled=False))
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    order: Order | None = None
    cancel_reason: str = ""
    is_loading: bool = False
    is_updating: bool = False
    error_message: str | None = None
    trace_id: str | None = None
    last_report: SavedReport | None = None

    def load(self) -> bool:
        self.is_loading = True
        self.error_message = None
        try:
            self.order = self.orders.get_order(self.order_id)
            return True
        except ServiceError as exc:
            self.order = None
            self.error_message = exc.message
            self.trace_id = exc.trace_id
            self.notifications.failure("Could not load order", exc)
            return False
        finally:
            self.is_loading = False

    def advance(self) -> StatusChangeOutcome | None:
        if self.order is None:
            return None
        availability = order_action_availability(self.order.status)
        if availability.next_status is None:
            self.notifications.push(
                level="error",
                title="No further status",
                message=f"Order #{self.order.id} is {self.order.status.value}",
            )
            return None
        return self.set_status(availability.next_status)

    def set_status(self, target: OrderStatus | str) -> StatusChangeOutcome | None:
        if self.order is None:
            return None
        self.is_updating = True
        try:
            outcome = self.lifecycle.change_status(self.order, target)
        finally:
            self.is_updating = False
        if outcome.succeeded and outcome.order is not None:
            self.order = outcome.order
        if outcome.fully_succeeded:
            self.notifications.success("Status updated", outcome.message)
        elif outcome.succeeded:
            self.notifications.warning(
                "Status updated with stock errors",
                outcome.message,
                failed_products=[failure.product_id for failure in outcome.stock_failures],
            )
        else:
            self.notifications.push(
                level="error",
                title="Status not updated",
                message=outcome.message,
                details={"trace_id": outcome.trace_id} if outcome.trace_id else None,
            )
        self._emit_mutation("order.status", outcome.succeeded)
        return outcome

    def cancel(self, reason: str | None = None) -> CancelOutcome | None:
        if self.order is None:
            return None
        self.is_updating = True
        try:
            outcome = self.lifecycle.cancel(self.order, self.cancel_reason if reason is None else reason)
        finally:
            self.is_updating = False
        if outcome.succeeded:
            self.order = outcome.order
            self.cancel_reason = ""
            self.notifications.success("Order cancelled", outcome.message)
        else:
            self.notifications.push(level="error", title="Order not cancelled", message=outcome.message)
        self._emit_mutation("order.cancel", outcome.succeeded)
        return outcome

    def register_return(self, items: list[dict[str, int]], reason: str | None = None) -> OrderReturn | None:
        if self.order is None or not order_action_availability(self.order.status).can_return:
            self.notifications.push(level="error", title="Return not allowed", message="Only completed orders accept returns")
            return None
        try:
            created = self.orders.create_return(self.order_id, {"reason": reason, "items": items})
        except ServiceError as exc:
            self.notifications.failure("Could not register return", exc)
            return None
        self.notifications.success("Return registered", f"Return registered for order #{self.order_id}")
        self._emit_mutation("order.return", True)
        return created

    def download_report(self) -> SavedReport | None:
        try:
            self.last_report = self.reports.download(ReportKind.ORDER, self.order_id)
        except ServiceError as exc:
            self.notifications.failure("Could not download report", exc)
            return None
        self.notifications.success("Report downloaded", f"Saved to {self.last_report.path}")
        return self.last_report

    def render(self) -> dict[str, Any]:
        state = resolve_state(
            is_loading=self.is_loading,
            error=self.error_message,
            has_data=self.order is not None,
            trace_id=self.trace_id,
        )
        actions: dict[str, Any] = {"advance": False, "next_status": None, "cancel": False, "return": False}
        if self.order is not None:
            availability = order_action_availability(self.order.status)
            actions = {
                "advance": availability.can_advance and not self.is_updating,
                "next_status": availability.next_status.value if availability.next_status else None,
                "cancel": availability.can_cancel and not self.is_updating,
                "return": availability.can_return,
            }
        return {
            "order": self.order.model_dump(mode="json") if self.order else None,
            "items": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "quantity": item.quantity,
                    "price": str(item.price),
                    "line_total": str(item.line_total),
                }
                for item in (self.order.items if self.order else [])
            ],
            "transfer_generated": bool(self.order and self.order.is_transfer_generated),
            "actions": actions,
            "loading": self.is_loading,
            "updating": self.is_updating,
            "error": self.error_message,
            "last_report": str(self.last_report.path) if self.last_report else None,
            "view_state": state.render(),
            "notifications": self.notifications.render(),
        }

    def _emit_mutation(self, action: str, success: bool) -> None:
        self.telemetry.emit(
            build_event(
                category="mutation",
                name="mutation",
                module="orders",
                action=action,
                success=success,
                context={"order_id": self.order_id},
            )
        )
