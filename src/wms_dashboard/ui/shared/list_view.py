from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel

from wms_dashboard.services.errors import ServiceError
from wms_dashboard.shared.telemetry import TelemetryLogger, build_event
from wms_dashboard.ui.shared.notification_center import NotificationCenter
from wms_dashboard.ui.shared.table_sort import SortState
from wms_dashboard.ui.shared.view_state import resolve_state

T = TypeVar("T", bound=BaseModel)


@dataclass
class ResourceListView(Generic[T]):
    """Load, sort and render one collection.

    Sorting works on the rows already loaded and never triggers a fetch.
    """

    loader: Callable[[], list[T]]
    module: str
    sort: SortState = field(default_factory=SortState)
    telemetry: TelemetryLogger = field(default_factory=lambda: TelemetryLogger(app_name="wms_dashboard", enabled=False))
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    rows: list[T] | None = None
    is_loading: bool = False
    error_message: str | None = None
    trace_id: str | None = None

    def load(self) -> bool:
        self.is_loading = True
        self.error_message = None
        try:
            self.rows = list(self.loader())
            self.trace_id = None
            self._emit("navigation", "screen_view", success=True)
            return True
        except ServiceError as exc:
            self.rows = None
            self.error_message = exc.message
            self.trace_id = exc.trace_id
            self.notifications.failure(f"Could not load {self.module}", exc)
            self._emit("api_call_result", "api_call_result", success=False, error_code="read_failed")
            return False
        finally:
            self.is_loading = False

    def refresh(self) -> bool:
        return self.load()

    def sort_by(self, key: str) -> list[T]:
        self.sort.select(key)
        return self.sorted_rows()

    def sorted_rows(self) -> list[T]:
        return self.sort.stable_sort(self.rows or [])

    def find(self, row_id: int) -> T | None:
        return next((row for row in self.rows or [] if getattr(row, "id", None) == row_id), None)

    def replace_row(self, updated: T) -> None:
        """Patch one row in place after a mutation that returned the full record."""
        if self.rows is None:
            return
        row_id = getattr(updated, "id", None)
        self.rows = [updated if getattr(row, "id", None) == row_id else row for row in self.rows]

    def remove_row(self, row_id: int) -> None:
        if self.rows is not None:
            self.rows = [row for row in self.rows if getattr(row, "id", None) != row_id]

    def render(self) -> dict[str, Any]:
        state = resolve_state(
            is_loading=self.is_loading,
            error=self.error_message,
            has_data=bool(self.rows),
            trace_id=self.trace_id,
        )
        rows = self.sorted_rows()
        return {
            "module": self.module,
            "loading": self.is_loading,
            "error": self.error_message,
            "sort": {"key": self.sort.sort_key, "order": self.sort.order.value},
            "rows": [row.model_dump(mode="json") for row in rows],
            "count": len(rows),
            "view_state": state.render(),
            "notifications": self.notifications.render(),
        }

    def _emit(self, category: str, name: str, *, success: bool, error_code: str | None = None) -> None:
        self.telemetry.emit(
            build_event(
                category=category,
                name=name,
                module=self.module,
                action=f"{self.module}_list.load",
                success=success,
                trace_id=self.trace_id,
                error_code=error_code,
            )
        )
