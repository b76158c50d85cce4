from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from wms_client_sdk import Warehouse

from wms_dashboard.services.errors import ServiceError
from wms_dashboard.services.warehouses_service import WarehousesService
from wms_dashboard.shared.telemetry import TelemetryLogger, build_event
from wms_dashboard.ui.shared.list_view import ResourceListView
from wms_dashboard.ui.shared.notification_center import NotificationCenter
from wms_dashboard.ui.shared.table_sort import SortState


@dataclass
class WarehousesListView:
    service: WarehousesService
    telemetry: TelemetryLogger = field(default_factory=lambda: TelemetryLogger(app_name="wms_dashboard", enabled=False))
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    is_saving: bool = False
    table: ResourceListView[Warehouse] = field(init=False)

    def __post_init__(self) -> None:
        self.table = ResourceListView(
            loader=self.service.list_warehouses,
            module="warehouses",
            sort=SortState(sort_key="id"),
            telemetry=self.telemetry,
            notifications=self.notifications,
        )

    def load(self) -> bool:
        return self.table.load()

    def refresh(self) -> bool:
        return self.table.refresh()

    def sort_by(self, key: str) -> list[Warehouse]:
        return self.table.sort_by(key)

    def create(self, payload: Mapping[str, Any]) -> Warehouse | None:
        self.is_saving = True
        try:
            created = self.service.create_warehouse(payload)
        except ServiceError as exc:
            self.notifications.failure("Could not create warehouse", exc)
            return None
        finally:
            self.is_saving = False
        self.table.rows = [*(self.table.rows or []), created]
        self.notifications.success("Warehouse created", f"Warehouse {created.name} created")
        self._emit_mutation("warehouse.create")
        return created

    def update(self, warehouse_id: int, payload: Mapping[str, Any]) -> Warehouse | None:
        self.is_saving = True
        try:
            updated = self.service.update_warehouse(warehouse_id, payload)
        except ServiceError as exc:
            self.notifications.failure("Could not update warehouse", exc)
            return None
        finally:
            self.is_saving = False
        self.table.replace_row(updated)
        self.notifications.success("Warehouse updated", f"Warehouse {updated.name} updated")
        self._emit_mutation("warehouse.update")
        return updated

    def delete(self, warehouse_id: int) -> bool:
        self.is_saving = True
        try:
            result = self.service.delete_warehouse(warehouse_id)
        except ServiceError as exc:
            self.notifications.failure("Could not delete warehouse", exc)
            return False
        finally:
            self.is_saving = False
        if not result.succeeded:
            self.notifications.push(
                level="error",
                title="Could not delete warehouse",
                message=result.message or "Delete was rejected",
            )
            return False
        self.table.remove_row(warehouse_id)
        self.notifications.success("Warehouse deleted", result.message or f"Warehouse #{warehouse_id} deleted")
        self._emit_mutation("warehouse.delete")
        return True

    def render(self) -> dict[str, Any]:
        payload = self.table.render()
        payload["saving"] = self.is_saving
        return payload

    def _emit_mutation(self, action: str) -> None:
        self.telemetry.emit(build_event(category="mutation", name="mutation", module="warehouses", action=action, success=True))
