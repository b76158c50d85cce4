from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from wms_client_sdk import (
    TRANSFER_ORDER_MARKER,
    ClientValidationError,
    Order,
    StockTransferRequest,
    TransferResult,
    validate_transfer_request,
)

from .errors import ServiceError
from .orders_service import OrdersService
from .products_service import ProductsService

logger = logging.getLogger(__name__)

TRANSFER_CLIENT_NAME = "Internal stock transfer"


class TransferStatus(str, Enum):
    VALIDATION_ERROR = "validation_error"
    TRANSFER_FAILED = "transfer_failed"
    SUCCESS = "success"
    PARTIAL = "partial"


@dataclass(frozen=True)
class TransferCommand:
    product_id: int
    source_warehouse_id: int
    destination_warehouse_id: int | None
    quantity: int
    create_follow_up_order: bool = False


@dataclass(frozen=True)
class TransferOutcome:
    """Consolidated result of a transfer and its optional follow-up order.

    ``transfer_succeeded`` is true for both ``SUCCESS`` and ``PARTIAL``; a
    partial outcome keeps the transfer message and names the order failure
    separately in ``order_error``.
    """

    status: TransferStatus
    message: str
    transfer: TransferResult | None = None
    order: Order | None = None
    order_error: str | None = None
    trace_id: str | None = None

    @property
    def transfer_succeeded(self) -> bool:
        return self.status in {TransferStatus.SUCCESS, TransferStatus.PARTIAL}

    @property
    def needs_refresh(self) -> bool:
        return self.transfer_succeeded

    def render(self) -> dict[str, object]:
        return {
            "status": self.status.value,
            "message": self.message,
            "transfer_succeeded": self.transfer_succeeded,
            "order_id": self.order.id if self.order else None,
            "order_error": self.order_error,
            "trace_id": self.trace_id,
        }


class StockTransferOrchestrator:
    def __init__(
        self,
        products: ProductsService,
        orders: OrdersService,
        *,
        follow_up_delay_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.products = products
        self.orders = orders
        self.follow_up_delay_seconds = follow_up_delay_seconds
        self.sleep = sleep

    def execute(self, command: TransferCommand, known_source_stock: int | None) -> TransferOutcome:
        try:
            request = self._validate(command, known_source_stock)
        except ClientValidationError as exc:
            logger.info("transfer_rejected_locally", extra={"product_id": command.product_id, "reason": str(exc)})
            return TransferOutcome(status=TransferStatus.VALIDATION_ERROR, message=str(exc))

        logger.info(
            "transfer_submitted",
            extra={
                "product_id": request.product_id,
                "from_warehouse_id": request.from_warehouse_id,
                "to_warehouse_id": request.to_warehouse_id,
                "quantity": request.quantity,
            },
        )
        try:
            result = self.products.transfer_stock(request)
        except ServiceError as exc:
            logger.warning("transfer_failed", extra={"product_id": request.product_id, "trace_id": exc.trace_id})
            return TransferOutcome(status=TransferStatus.TRANSFER_FAILED, message=exc.message, trace_id=exc.trace_id)
        if not result.succeeded:
            message = result.message or "Transfer was rejected"
            logger.warning("transfer_failed", extra={"product_id": request.product_id, "server_status": result.status})
            return TransferOutcome(status=TransferStatus.TRANSFER_FAILED, message=message, transfer=result)

        message = result.message or "Stock transferred"
        if not command.create_follow_up_order:
            return TransferOutcome(status=TransferStatus.SUCCESS, message=message, transfer=result)

        if self.follow_up_delay_seconds > 0:
            self.sleep(self.follow_up_delay_seconds)
        try:
            order = self.orders.create_order(self._follow_up_payload(request))
        except ServiceError as exc:
            logger.warning(
                "transfer_follow_up_order_failed",
                extra={"product_id": request.product_id, "trace_id": exc.trace_id},
            )
            return TransferOutcome(
                status=TransferStatus.PARTIAL,
                message=message,
                transfer=result,
                order_error=f"Stock was transferred but the order could not be created: {exc.message}",
                trace_id=exc.trace_id,
            )
        logger.info("transfer_follow_up_order_created", extra={"order_id": order.id})
        return TransferOutcome(status=TransferStatus.SUCCESS, message=message, transfer=result, order=order)

    def _validate(self, command: TransferCommand, known_source_stock: int | None) -> StockTransferRequest:
        return validate_transfer_request(
            {
                "product_id": command.product_id,
                "from_warehouse_id": command.source_warehouse_id,
                "to_warehouse_id": command.destination_warehouse_id,
                "quantity": command.quantity,
            },
            known_source_stock,
        )

    @staticmethod
    def _follow_up_payload(request: StockTransferRequest) -> dict[str, object]:
        return {
            "warehouse_id": request.to_warehouse_id,
            "client_name": TRANSFER_CLIENT_NAME,
            "destination_address": f"Warehouse #{request.to_warehouse_id}",
            "comment": (
                f"{TRANSFER_ORDER_MARKER} {request.quantity} unit(s) of product #{request.product_id} "
                f"from warehouse #{request.from_warehouse_id}"
            ),
            "items": [{"product_id": request.product_id, "quantity": request.quantity}],
        }
