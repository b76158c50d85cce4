"""Structured, PII-free telemetry for dashboard views and mutations."""

from .events import FORBIDDEN_CONTEXT_KEYS, TELEMETRY_CATEGORIES, TelemetryEvent, build_event
from .logger import TelemetryLogger

__all__ = ["FORBIDDEN_CONTEXT_KEYS", "TELEMETRY_CATEGORIES", "TelemetryEvent", "TelemetryLogger", "build_event"]
