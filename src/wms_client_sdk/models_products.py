from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    product_type: str
    price: Decimal = Field(ge=0)
    product_description: str | None = None
    warehouses_with_stock: List[int] = Field(default_factory=list)
    quantity: int | None = None


class ProductCreateRequest(BaseModel):
    name: str
    product_type: str
    price: Decimal = Field(ge=0)
    product_description: str | None = None


class ProductUpdateRequest(BaseModel):
    name: str | None = None
    product_type: str | None = None
    price: Decimal | None = Field(default=None, ge=0)
    product_description: str | None = None


class WarehouseStock(BaseModel):
    """Stock of one product at one warehouse."""

    model_config = ConfigDict(extra="allow")

    product: str | int | None = None
    quantity: int = Field(default=0, ge=0)


class ProductStockSummary(BaseModel):
    """Stock of one product aggregated over every warehouse."""

    model_config = ConfigDict(extra="allow")

    product: str | int | None = None
    total_quantity_all_warehouses: int = Field(default=0, ge=0)
    warehouses_with_stock: List[int] = Field(default_factory=list)


class StockOperationRequest(BaseModel):
    product_id: int
    warehouse_id: int
    quantity: int = Field(gt=0)


class StockOperationResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: str
    message: str | None = None
    stock_quantity: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.status.lower() == "success"


class StockTransferRequest(BaseModel):
    product_id: int
    from_warehouse_id: int
    to_warehouse_id: int
    quantity: int = Field(gt=0)


class TransferResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: str
    message: str | None = None
    from_warehouse_stock: int | None = None
    to_warehouse_stock: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.status.lower() == "success"


class ProductImage(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    product: int
    image_url: str
    alt_text: str | None = None
    uploaded_at: datetime | None = None
