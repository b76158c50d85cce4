from __future__ import annotations

import sys
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = BASE_DIR / "src"

sys.path.insert(0, str(SRC_DIR))

API_BASE_URL = "https://api.example.com"


@pytest.fixture(autouse=True)
def _set_api_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WMS_API_BASE_URL", API_BASE_URL)
    for name in (
        "WMS_ENV",
        "WMS_RETRIES",
        "WMS_CSRF_COOKIE_NAME",
        "WMS_TELEMETRY_ENABLED",
        "WMS_FOLLOW_UP_DELAY_SECONDS",
        "WMS_FANOUT_WORKERS",
        "WMS_REPORTS_DIR",
        "WMS_USERNAME",
        "WMS_PASSWORD",
    ):
        monkeypatch.delenv(name, raising=False)
