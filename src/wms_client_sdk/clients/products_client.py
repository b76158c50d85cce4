from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Mapping

from ..models import StatusMessage
from ..models_products import (
    Product,
    ProductCreateRequest,
    ProductImage,
    ProductStockSummary,
    ProductUpdateRequest,
    StockOperationRequest,
    StockOperationResult,
    StockTransferRequest,
    TransferResult,
    WarehouseStock,
)
from ..validation import coerce_model, require_fields, validate_stock_operation
from .base import BaseClient


@dataclass
class ProductsClient(BaseClient):
    module: str = "products"

    def list_products(self, warehouse_id: int | None = None) -> list[Product]:
        params = {"warehouse_id": warehouse_id} if warehouse_id else None
        data = self._request("GET", "/products/product_list_get", params=params, operation="list")
        return self._parse_list(Product, data, "product list")

    def get_product(self, product_id: int, warehouse_id: int | None = None) -> Product:
        params: dict[str, Any] = {"product_id": product_id}
        if warehouse_id:
            params["warehouse_id"] = warehouse_id
        data = self._request("GET", "/products/product_detail_get", params=params, operation="get")
        return self._parse(Product, data, "product detail")

    def create_product(self, payload: ProductCreateRequest | Mapping[str, Any]) -> Product:
        if not isinstance(payload, ProductCreateRequest):
            require_fields(payload, "name", "product_type", "price")
        request = coerce_model(payload, ProductCreateRequest, None)
        data = self._request(
            "POST",
            "/products/product_create",
            json_body=request.model_dump(mode="json", exclude_none=True),
            operation="create",
        )
        return self._parse(Product, data, "product create")

    def update_product(self, product_id: int, payload: ProductUpdateRequest | Mapping[str, Any]) -> Product:
        request = coerce_model(payload, ProductUpdateRequest, None)
        data = self._request(
            "PATCH",
            f"/products/product_update/{product_id}",
            json_body=request.model_dump(mode="json", exclude_none=True),
            operation="update",
        )
        return self._parse(Product, data, "product update")

    def delete_product(self, product_id: int) -> StatusMessage:
        data = self._request(
            "DELETE",
            "/products/product_delete",
            params={"product_id": product_id},
            operation="delete",
        )
        return self._parse(StatusMessage, data, "product delete")

    def get_stock(self, product_id: int, warehouse_id: int) -> WarehouseStock:
        data = self._request(
            "GET",
            "/products/product_stock",
            params={"product_id": product_id, "warehouse_id": warehouse_id},
            operation="stock",
        )
        return self._parse(WarehouseStock, data, "product stock")

    def get_stock_summary(self, product_id: int) -> ProductStockSummary:
        data = self._request(
            "GET",
            "/products/product_stock",
            params={"product_id": product_id},
            operation="stock_summary",
        )
        return self._parse(ProductStockSummary, data, "product stock summary")

    def add_stock(self, payload: StockOperationRequest | Mapping[str, Any]) -> StockOperationResult:
        return self._stock_operation("/products/products/product_stock_add", payload, "stock_add")

    def decrease_stock(self, payload: StockOperationRequest | Mapping[str, Any]) -> StockOperationResult:
        return self._stock_operation("/products/products/product_stock_decrease", payload, "stock_decrease")

    def transfer_stock(self, payload: StockTransferRequest | Mapping[str, Any]) -> TransferResult:
        request = coerce_model(payload, StockTransferRequest, None)
        data = self._request(
            "POST",
            "/products/products/product_stock_transfer",
            json_body=request.model_dump(mode="json"),
            operation="stock_transfer",
        )
        return self._parse(TransferResult, data, "stock transfer")

    def upload_image(
        self,
        product_id: int,
        file: str | Path | BinaryIO,
        alt_text: str | None = None,
    ) -> ProductImage:
        meta: dict[str, Any] = {"product_id": product_id}
        if alt_text:
            meta["alt_text"] = alt_text
        if isinstance(file, (str, Path)):
            path = Path(file)
            with path.open("rb") as handle:
                data = self._upload(meta, (path.name, handle.read()))
        else:
            data = self._upload(meta, (Path(getattr(file, "name", "upload")).name, file.read()))
        return self._parse(ProductImage, data, "product image upload")

    def list_images(self, product_id: int) -> list[ProductImage]:
        data = self._request(
            "GET",
            "/products/product/images",
            params={"product_id": product_id},
            operation="images",
        )
        return self._parse_list(ProductImage, data, "product images")

    def _upload(self, meta: dict[str, Any], file_part: tuple[str, bytes]) -> Any:
        return self._request(
            "POST",
            "/products/product/upload_image",
            data={"data": json.dumps(meta)},
            files={"file": file_part},
            operation="upload_image",
        )

    def _stock_operation(
        self, path: str, payload: StockOperationRequest | Mapping[str, Any], operation: str
    ) -> StockOperationResult:
        request = validate_stock_operation(payload)
        data = self._request("POST", path, json_body=request.model_dump(mode="json"), operation=operation)
        return self._parse(StockOperationResult, data, operation.replace("_", " "))
