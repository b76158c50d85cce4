from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Mapping

TRACE_HEADER = "X-Request-ID"


@dataclass
class TraceContext:
    """Hands out one request id per HTTP call.

    Fan-out lookups share a client across worker threads, so callers keep the
    id returned by ``begin``; ``trace_id`` only remembers the most recent one
    for display next to an error banner.
    """

    prefix: str = "wms"
    trace_id: str | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def begin(self) -> str:
        request_id = f"{self.prefix}-{uuid.uuid4().hex}"
        self._remember(request_id)
        return request_id

    def resolve(self, request_id: str, headers: Mapping[str, str]) -> str:
        """Prefer the id the server echoed back, which is what its logs carry."""
        lowered = {key.lower(): value for key, value in headers.items()}
        resolved = lowered.get(TRACE_HEADER.lower()) or request_id
        self._remember(resolved)
        return resolved

    def _remember(self, request_id: str) -> None:
        with self._lock:
            self.trace_id = request_id
