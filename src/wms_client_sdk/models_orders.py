from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

# Comment substring that marks an order auto-created by a stock transfer.
TRANSFER_ORDER_MARKER = "[stock-transfer]"


class OrderStatus(str, Enum):
    NEW = "new"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    product_id: int
    name: str | None = None
    quantity: int
    price: Decimal = Decimal("0")

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class Order(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    status: OrderStatus
    warehouse: int
    client_name: str | None = None
    destination_address: str | None = None
    comment: str | None = None
    cancellation_reason: str | None = None
    items: List[OrderItem] = Field(default_factory=list)
    total_price: Decimal = Decimal("0")
    created_at: datetime | None = None
    qr_code: str | None = None

    @property
    def is_transfer_generated(self) -> bool:
        return bool(self.comment) and TRANSFER_ORDER_MARKER in self.comment


class OrderItemInput(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)


class OrderCreateRequest(BaseModel):
    warehouse_id: int
    client_name: str
    destination_address: str
    comment: str | None = None
    items: List[OrderItemInput]


class OrderStatusUpdateRequest(BaseModel):
    status: OrderStatus
    reason: str | None = None


class OrderCancelRequest(BaseModel):
    status: OrderStatus = OrderStatus.CANCELLED
    reason: str


class ReturnItemInput(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)


class OrderReturnRequest(BaseModel):
    reason: str | None = None
    items: List[ReturnItemInput]


class ReturnItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    product_id: int
    name: str | None = None
    quantity: int


class OrderReturn(BaseModel):
    model_config = ConfigDict(extra="allow")

    order_id: int
    reason: str | None = None
    created_at: datetime | None = None
    items: List[ReturnItem] = Field(default_factory=list)
