from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ViewStateStatus(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    SUCCESS = "success"
    PARTIAL_ERROR = "partial_error"
    FATAL_ERROR = "fatal_error"


@dataclass(frozen=True)
class ViewState:
    """What a screen shows above its content: a spinner, a banner, or nothing."""

    status: ViewStateStatus
    message: str | None = None
    trace_id: str | None = None

    @property
    def shows_content(self) -> bool:
        return self.status in (ViewStateStatus.SUCCESS, ViewStateStatus.PARTIAL_ERROR)

    @property
    def can_retry(self) -> bool:
        return self.status in (ViewStateStatus.PARTIAL_ERROR, ViewStateStatus.FATAL_ERROR)

    @property
    def banner(self) -> str | None:
        if self.status is ViewStateStatus.FATAL_ERROR:
            return "error"
        if self.status is ViewStateStatus.PARTIAL_ERROR:
            return "warning"
        return None

    def render(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "trace_id": self.trace_id,
            "banner": self.banner,
            "shows_content": self.shows_content,
            "can_retry": self.can_retry,
        }


def resolve_state(
    *,
    is_loading: bool,
    error: str | None,
    has_data: bool,
    warning: str | None = None,
    trace_id: str | None = None,
) -> ViewState:
    """Collapse a screen's flags into one state.

    ``error`` is a failure of the screen's own request; with data already on
    screen it degrades to a partial state. ``warning`` comes from secondary
    lookups (per-warehouse stock, images) and never hides the content.
    """
    if is_loading:
        return ViewState(ViewStateStatus.LOADING, "Loading...", trace_id)
    if error and not has_data:
        return ViewState(ViewStateStatus.FATAL_ERROR, error, trace_id)
    if error or warning:
        return ViewState(ViewStateStatus.PARTIAL_ERROR, error or warning, trace_id)
    if not has_data:
        return ViewState(ViewStateStatus.EMPTY, "Nothing to show yet")
    return ViewState(ViewStateStatus.SUCCESS, trace_id=trace_id)
