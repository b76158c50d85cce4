from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Deque, Iterator

from wms_dashboard.services.errors import ServiceError

LEVELS = ("success", "info", "warning", "error")
MAX_NOTIFICATIONS = 20


@dataclass
class NotificationCenter:
    """Toast queue for one screen. Oldest toasts fall off once the queue is full."""

    messages: Deque[dict[str, Any]] = field(default_factory=lambda: deque(maxlen=MAX_NOTIFICATIONS))
    _ids: Iterator[int] = field(default_factory=lambda: count(1), repr=False)

    def push(self, *, level: str, title: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
        if level not in LEVELS:
            raise ValueError(f"Unknown notification level: {level}")
        toast = {"id": next(self._ids), "level": level, "title": title, "message": message, "details": details or {}}
        self.messages.append(toast)
        return toast

    def success(self, title: str, message: str) -> dict[str, Any]:
        return self.push(level="success", title=title, message=message)

    def warning(self, title: str, message: str, **details: Any) -> dict[str, Any]:
        return self.push(level="warning", title=title, message=message, details=details)

    def failure(self, title: str, error: ServiceError) -> dict[str, Any]:
        details: dict[str, Any] = {"kind": error.kind.value}
        if error.trace_id:
            details["trace_id"] = error.trace_id
        if error.details:
            details["technical"] = error.details
        return self.push(level="error", title=title, message=error.message, details=details)

    @property
    def latest(self) -> dict[str, Any] | None:
        return self.messages[-1] if self.messages else None

    def dismiss(self, toast_id: int) -> bool:
        for toast in self.messages:
            if toast["id"] == toast_id:
                self.messages.remove(toast)
                return True
        return False

    def clear(self) -> None:
        self.messages.clear()

    def render(self) -> dict[str, Any]:
        return {
            "count": len(self.messages),
            "has_errors": any(toast["level"] == "error" for toast in self.messages),
            "messages": list(self.messages),
        }
