from __future__ import annotations

import logging
from dataclasses import dataclass, field

from wms_client_sdk import ClientValidationError, Order, OrderItem, OrderStatus, can_transition, validate_cancel_reason

from .errors import ServiceError
from .orders_service import OrdersService
from .products_service import ProductsService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockRestoreFailure:
    product_id: int
    name: str | None
    quantity: int
    message: str

    @property
    def label(self) -> str:
        return self.name or f"product #{self.product_id}"


@dataclass(frozen=True)
class StatusChangeOutcome:
    """Result of one status change, including any stock side-effect.

    When ``succeeded`` is true the order was updated server-side even if some
    ``stock_failures`` were collected afterwards.
    """

    succeeded: bool
    message: str
    order: Order | None = None
    validation_error: bool = False
    stock_updates: int = 0
    stock_failures: list[StockRestoreFailure] = field(default_factory=list)
    trace_id: str | None = None

    @property
    def fully_succeeded(self) -> bool:
        return self.succeeded and not self.stock_failures


@dataclass(frozen=True)
class CancelOutcome:
    succeeded: bool
    message: str
    order: Order | None = None
    validation_error: bool = False
    trace_id: str | None = None


class OrderLifecycleController:
    def __init__(self, orders: OrdersService, products: ProductsService) -> None:
        self.orders = orders
        self.products = products

    def change_status(self, order: Order, target: OrderStatus | str) -> StatusChangeOutcome:
        target = OrderStatus(target)
        if target is OrderStatus.CANCELLED:
            return StatusChangeOutcome(
                succeeded=False,
                message="Use cancel with a reason to cancel an order",
                order=order,
                validation_error=True,
            )
        if not can_transition(order.status, target):
            return StatusChangeOutcome(
                succeeded=False,
                message=f"Cannot change order #{order.id} from {order.status.value} to {target.value}",
                order=order,
                validation_error=True,
            )

        logger.info("order_status_change", extra={"order_id": order.id, "target": target.value})
        try:
            updated = self.orders.update_status(order.id, target)
        except ServiceError as exc:
            return StatusChangeOutcome(succeeded=False, message=exc.message, order=order, trace_id=exc.trace_id)

        # Decided from the order as it was before the update; the server copy may drop the comment.
        if target is not OrderStatus.COMPLETED or not order.is_transfer_generated:
            return StatusChangeOutcome(
                succeeded=True,
                message=f"Order #{order.id} is now {updated.status.value}",
                order=updated,
            )

        failures = self._restore_stock(order.warehouse, order.items)
        restored = len(order.items) - len(failures)
        if failures:
            names = ", ".join(f"{failure.label} ({failure.message})" for failure in failures)
            message = f"Order #{order.id} completed, but stock was not updated for: {names}"
        else:
            message = f"Order #{order.id} completed and stock updated at warehouse #{order.warehouse}"
        return StatusChangeOutcome(
            succeeded=True,
            message=message,
            order=updated,
            stock_updates=restored,
            stock_failures=failures,
        )

    def cancel(self, order: Order, reason: str | None) -> CancelOutcome:
        try:
            cleaned = validate_cancel_reason(reason)
        except ClientValidationError as exc:
            return CancelOutcome(succeeded=False, message=str(exc), order=order, validation_error=True)
        if not can_transition(order.status, OrderStatus.CANCELLED):
            return CancelOutcome(
                succeeded=False,
                message=f"Order #{order.id} is {order.status.value} and cannot be cancelled",
                order=order,
                validation_error=True,
            )

        logger.info("order_cancel", extra={"order_id": order.id})
        try:
            self.orders.cancel_order(order.id, cleaned)
        except ServiceError as exc:
            return CancelOutcome(succeeded=False, message=exc.message, order=order, trace_id=exc.trace_id)
        try:
            refreshed = self.orders.get_order(order.id)
        except ServiceError as exc:
            return CancelOutcome(
                succeeded=True,
                message=f"Order #{order.id} cancelled, but it could not be reloaded: {exc.message}",
                order=order.model_copy(update={"status": OrderStatus.CANCELLED, "cancellation_reason": cleaned}),
                trace_id=exc.trace_id,
            )
        return CancelOutcome(succeeded=True, message=f"Order #{order.id} cancelled", order=refreshed)

    def _restore_stock(self, warehouse_id: int, items: list[OrderItem]) -> list[StockRestoreFailure]:
        failures: list[StockRestoreFailure] = []
        for item in items:
            try:
                result = self.products.add_stock(item.product_id, warehouse_id, item.quantity)
            except ServiceError as exc:
                failures.append(self._failure(item, exc.message))
                continue
            if not result.succeeded:
                failures.append(self._failure(item, result.message or result.status))
        if failures:
            logger.warning(
                "order_completion_stock_partial",
                extra={"warehouse_id": warehouse_id, "failed": len(failures), "total": len(items)},
            )
        return failures

    @staticmethod
    def _failure(item: OrderItem, message: str) -> StockRestoreFailure:
        return StockRestoreFailure(product_id=item.product_id, name=item.name, quantity=item.quantity, message=message)
