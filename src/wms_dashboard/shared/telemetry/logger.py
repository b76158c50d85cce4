from __future__ import annotations

import json
import logging
import os
import sys
import threading
from pathlib import Path
from typing import TextIO

from .events import TelemetryEvent

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


class TelemetryLogger:
    """Appends dashboard events as JSON lines.

    Views emit from fan-out worker threads as well as the caller's thread,
    so writes to the file and the optional stdout mirror share one lock.
    """

    def __init__(
        self,
        *,
        app_name: str,
        enabled: bool | None = None,
        log_file: str | Path | None = None,
        stdout_sink: bool = False,
        stdout_stream: TextIO | None = None,
    ) -> None:
        self.app_name = app_name
        self.enabled = _env_telemetry_enabled() if enabled is None else enabled
        self.log_file = Path(log_file) if log_file else Path("artifacts") / "telemetry" / f"{app_name}.jsonl"
        self.stdout_sink = stdout_sink
        self.stdout_stream = stdout_stream
        self._lock = threading.Lock()

    def serialize(self, event: TelemetryEvent) -> str:
        return json.dumps({"app_name": self.app_name, **event.to_dict()}, sort_keys=True, default=str)

    def emit(self, event: TelemetryEvent) -> bool:
        if not self.enabled:
            return False
        line = self.serialize(event)
        logger.debug("telemetry_event", extra={"action": event.action, "category": event.category.value})
        with self._lock:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with self.log_file.open("a", encoding="utf-8") as fp:
                fp.write(line + "\n")
            if self.stdout_sink:
                stream = self.stdout_stream or sys.stdout
                stream.write(line + "\n")
                stream.flush()
        return True


def _env_telemetry_enabled() -> bool:
    return os.getenv("WMS_TELEMETRY_ENABLED", "0").strip().lower() in _TRUTHY
