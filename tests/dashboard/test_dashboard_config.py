from __future__ import annotations

from pathlib import Path

import pytest

from wms_dashboard.config import DashboardConfigError, load_dashboard_config


def test_defaults(tmp_path: Path) -> None:
    empty_env = tmp_path / ".env"
    empty_env.write_text("", encoding="utf-8")
    cfg = load_dashboard_config(str(empty_env))
    assert cfg.follow_up_delay_seconds == 1.0
    assert cfg.fanout_workers == 8
    assert cfg.reports_dir == Path("reports")
    assert cfg.telemetry_enabled is False


def test_reads_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("WMS_FOLLOW_UP_DELAY_SECONDS", "0")
    monkeypatch.setenv("WMS_FANOUT_WORKERS", "3")
    monkeypatch.setenv("WMS_REPORTS_DIR", str(tmp_path))
    monkeypatch.setenv("WMS_TELEMETRY_ENABLED", "true")
    cfg = load_dashboard_config()
    assert cfg.follow_up_delay_seconds == 0.0
    assert cfg.fanout_workers == 3
    assert cfg.reports_dir == tmp_path
    assert cfg.telemetry_enabled is True


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("WMS_FOLLOW_UP_DELAY_SECONDS", "soon"),
        ("WMS_FOLLOW_UP_DELAY_SECONDS", "-1"),
        ("WMS_FANOUT_WORKERS", "many"),
        ("WMS_FANOUT_WORKERS", "0"),
    ],
)
def test_rejects_invalid_values(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(DashboardConfigError, match=name):
        load_dashboard_config()
