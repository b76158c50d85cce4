from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


class DashboardConfigError(ValueError):
    """Raised when dashboard configuration is invalid."""


@dataclass(frozen=True)
class DashboardConfig:
    follow_up_delay_seconds: float = 1.0
    fanout_workers: int = 8
    reports_dir: Path = Path("reports")
    telemetry_enabled: bool = False


def load_dashboard_config(env_file: str | None = None) -> DashboardConfig:
    load_dotenv(env_file)

    raw_delay = os.getenv("WMS_FOLLOW_UP_DELAY_SECONDS", "1.0")
    try:
        delay = float(raw_delay)
    except ValueError as exc:
        raise DashboardConfigError(
            f"Invalid WMS_FOLLOW_UP_DELAY_SECONDS: expected a number, got {raw_delay!r}"
        ) from exc
    if delay < 0:
        raise DashboardConfigError(f"Invalid WMS_FOLLOW_UP_DELAY_SECONDS: expected >= 0, got {delay}")

    raw_workers = os.getenv("WMS_FANOUT_WORKERS", "8")
    try:
        workers = int(raw_workers)
    except ValueError as exc:
        raise DashboardConfigError(
            f"Invalid WMS_FANOUT_WORKERS: expected an integer, got {raw_workers!r}"
        ) from exc
    if workers < 1:
        raise DashboardConfigError(f"Invalid WMS_FANOUT_WORKERS: expected >= 1, got {workers}")

    telemetry = os.getenv("WMS_TELEMETRY_ENABLED", "0").strip().lower() in {"1", "true", "yes", "on"}

    return DashboardConfig(
        follow_up_delay_seconds=delay,
        fanout_workers=workers,
        reports_dir=Path(os.getenv("WMS_REPORTS_DIR", "reports")),
        telemetry_enabled=telemetry,
    )
