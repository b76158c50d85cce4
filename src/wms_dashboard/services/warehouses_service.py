from __future__ import annotations

from typing import Any, Mapping

from wms_client_sdk import ApiSession, StatusMessage, Warehouse

from .errors import normalize_error


class WarehousesService:
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def list_warehouses(self) -> list[Warehouse]:
        try:
            return self.session.warehouses_client().list_warehouses()
        except Exception as exc:
            raise normalize_error(exc) from exc

    def get_warehouse(self, warehouse_id: int) -> Warehouse:
        try:
            return self.session.warehouses_client().get_warehouse(warehouse_id)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def create_warehouse(self, payload: Mapping[str, Any]) -> Warehouse:
        try:
            return self.session.warehouses_client().create_warehouse(payload)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def update_warehouse(self, warehouse_id: int, payload: Mapping[str, Any]) -> Warehouse:
        try:
            return self.session.warehouses_client().update_warehouse(warehouse_id, payload)
        except Exception as exc:
            raise normalize_error(exc) from exc

    def delete_warehouse(self, warehouse_id: int) -> StatusMessage:
        try:
            return self.session.warehouses_client().delete_warehouse(warehouse_id)
        except Exception as exc:
            raise normalize_error(exc) from exc
