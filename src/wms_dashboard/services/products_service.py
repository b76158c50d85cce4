from __future__ import annotations

from pathlib import Path
from typing import Any, BinaryIO, Mapping

from wms_client_sdk import (
    ApiSession,
    Product,
    ProductImage,
    StatusMessage,
    StockOperationResult,
    StockTransferRequest,
    TransferResult,
    WarehouseStock,
)

from .errors import normalize_error
from .fanout import FanOutResult, fan_out


class ProductsService:
    def __init__(self, session: ApiSession, *, fanout_workers: int = 8) -> None:
        self.session = session
        self.fanout_workers = fanout_workers

    def list_products(self, warehouse_id: int | None = None) -> list[Product]:
        try:
            return self.session.products_client().list_products(warehouse_id)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def get_product(self, product_id: int, warehouse_id: int | None = None) -> Product:
        try:
            return self.session.products_client().get_product(product_id, warehouse_id)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def create_product(self, payload: Mapping[str, Any]) -> Product:
        try:
            return self.session.products_client().create_product(payload)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def update_product(self, product_id: int, payload: Mapping[str, Any]) -> Product:
        try:
            return self.session.products_client().update_product(product_id, payload)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def delete_product(self, product_id: int) -> StatusMessage:
        try:
            return self.session.products_client().delete_product(product_id)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def get_stock(self, product_id: int, warehouse_id: int) -> WarehouseStock:
        try:
            return self.session.products_client().get_stock(product_id, warehouse_id)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def stock_by_product(self, warehouse_id: int, product_ids: list[int]) -> FanOutResult[int, int]:
        """Quantity of each product at one warehouse, loaded concurrently."""
        client = self.session.products_client()
        tasks = {
            product_id: (lambda pid=product_id: client.get_stock(pid, warehouse_id).quantity)
            for product_id in product_ids
        }
        return fan_out(tasks, max_workers=self.fanout_workers)

    def add_stock(self, product_id: int, warehouse_id: int, quantity: int) -> StockOperationResult:
        request = {"product_id": product_id, "warehouse_id": warehouse_id, "quantity": quantity}
        try:
            return self.session.products_client().add_stock(request)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def decrease_stock(self, product_id: int, warehouse_id: int, quantity: int) -> StockOperationResult:
        request = {"product_id": product_id, "warehouse_id": warehouse_id, "quantity": quantity}
        try:
            return self.session.products_client().decrease_stock(request)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def transfer_stock(self, request: StockTransferRequest) -> TransferResult:
        try:
            return self.session.products_client().transfer_stock(request)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def upload_image(self, product_id: int, file: str | Path | BinaryIO, alt_text: str | None = None) -> ProductImage:
        try:
            return self.session.products_client().upload_image(product_id, file, alt_text)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def list_images(self, product_id: int) -> list[ProductImage]:
        try:
            return self.session.products_client().list_images(product_id)
        except Exception as exc:
            raise normalize_error(exc) from exc
