from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models import StatusMessage
from ..models_warehouses import Warehouse, WarehouseCreateRequest, WarehouseUpdateRequest
from ..validation import coerce_model, require_fields
from .base import BaseClient


@dataclass
class WarehousesClient(BaseClient):
    module: str = "warehouses"

    def list_warehouses(self) -> list[Warehouse]:
        data = self._request("GET", "/warehouses/warehouse_list", operation="list")
        return self._parse_list(Warehouse, data, "warehouse list")

    def get_warehouse(self, warehouse_id: int) -> Warehouse:
        data = self._request("GET", f"/warehouses/warehouse/{warehouse_id}", operation="get")
        return self._parse(Warehouse, data, "warehouse detail")

    def create_warehouse(self, payload: WarehouseCreateRequest | Mapping[str, Any]) -> Warehouse:
        if not isinstance(payload, WarehouseCreateRequest):
            require_fields(payload, "name")
        request = coerce_model(payload, WarehouseCreateRequest, None)
        data = self._request(
            "POST",
            "/warehouses/warehouse_create",
            json_body=request.model_dump(mode="json", exclude_none=True),
            operation="create",
        )
        return self._parse(Warehouse, data, "warehouse create")

    def update_warehouse(
        self, warehouse_id: int, payload: WarehouseUpdateRequest | Mapping[str, Any]
    ) -> Warehouse:
        request = coerce_model(payload, WarehouseUpdateRequest, None)
        data = self._request(
            "PATCH",
            f"/warehouses/warehouse_update/{warehouse_id}",
            json_body=request.model_dump(mode="json", exclude_none=True),
            operation="update",
        )
        return self._parse(Warehouse, data, "warehouse update")

    def delete_warehouse(self, warehouse_id: int) -> StatusMessage:
        data = self._request(
            "DELETE",
            "/warehouses/warehouse_delete",
            params={"warehouse_id": warehouse_id},
            operation="delete",
        )
        return self._parse(StatusMessage, data, "warehouse delete")
