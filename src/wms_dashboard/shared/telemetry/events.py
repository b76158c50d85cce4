from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union

ContextValue = Union[str, int, float, bool, None]


class TelemetryCategory(str, Enum):
    AUTH = "auth"
    NAVIGATION = "navigation"
    API_CALL_RESULT = "api_call_result"
    ERROR = "error"
    MUTATION = "mutation"


TELEMETRY_CATEGORIES = frozenset(category.value for category in TelemetryCategory)

# Matched as substrings so "client_name" and "billing_address" are both caught.
FORBIDDEN_CONTEXT_KEYS = frozenset(
    {
        "email",
        "password",
        "phone",
        "full_name",
        "client_name",
        "address",
        "token",
        "authorization",
        "reason",
        "comment",
    }
)


@dataclass(frozen=True)
class TelemetryEvent:
    """One dashboard interaction. Context carries ids and counts, never customer data."""

    category: TelemetryCategory
    name: str
    module: str
    action: str
    timestamp_utc: str
    trace_id: str | None = None
    duration_ms: int | None = None
    success: bool | None = None
    error_code: str | None = None
    context: dict[str, ContextValue] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = {key: value for key, value in asdict(self).items() if value is not None}
        payload["category"] = self.category.value
        return payload


def _coerce_category(category: str | TelemetryCategory) -> TelemetryCategory:
    try:
        return TelemetryCategory(category)
    except ValueError:
        raise ValueError(f"Unsupported telemetry category: {category}") from None


def _check_context(context: dict[str, Any] | None) -> dict[str, ContextValue] | None:
    if not context:
        return None
    illegal = sorted(key for key in context if any(marker in key.lower() for marker in FORBIDDEN_CONTEXT_KEYS))
    if illegal:
        raise ValueError(f"PII-like keys are forbidden in telemetry context: {illegal}")
    nested = sorted(key for key, value in context.items() if isinstance(value, (dict, list, tuple, set)))
    if nested:
        raise ValueError(f"Telemetry context values must be scalars: {nested}")
    return dict(context)


def build_event(
    *,
    category: str | TelemetryCategory,
    name: str,
    module: str,
    action: str,
    trace_id: str | None = None,
    duration_ms: int | None = None,
    success: bool | None = None,
    error_code: str | None = None,
    context: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> TelemetryEvent:
    return TelemetryEvent(
        category=_coerce_category(category),
        name=name,
        module=module,
        action=action,
        timestamp_utc=(now or datetime.now(timezone.utc)).isoformat(),
        trace_id=trace_id,
        duration_ms=duration_ms,
        success=success,
        error_code=error_code,
        context=_check_context(context),
    )
