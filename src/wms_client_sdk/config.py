from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar
from urllib.parse import urlparse

from dotenv import load_dotenv

N = TypeVar("N", int, float)


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    retries: int = 0
    retry_backoff_seconds: float = 0.3
    max_connections: int = 20
    verify_ssl: bool = True
    csrf_cookie_name: str = "csrftoken"

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()


def _number(name: str, default: N, parse: Callable[[str], N], *, minimum: N, exclusive: bool = False) -> N:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = parse(raw.strip())
    except ValueError as exc:
        kind = "an integer" if parse is int else "a number"
        raise ConfigError(f"Invalid {name}: expected {kind}, got {raw!r}") from exc
    if value < minimum or (exclusive and value == minimum):
        bound = f"> {minimum}" if exclusive else f">= {minimum}"
        raise ConfigError(f"Invalid {name}: expected {bound}, got {value}")
    return value


def _base_url(env_key: str) -> str:
    for name in (f"WMS_API_BASE_URL_{env_key}", "WMS_API_BASE_URL"):
        value = (os.getenv(name) or "").strip()
        if value:
            parsed = urlparse(value)
            if parsed.scheme not in {"http", "https"} or not parsed.netloc:
                raise ConfigError(f"Invalid {name}: expected an http(s) URL, got {value!r}")
            return value.rstrip("/")
    raise ConfigError("Missing required config values: WMS_API_BASE_URL")


def load_config(env_file: str | None = None) -> ClientConfig:
    """Build the SDK config from ``WMS_*`` variables, reading ``env_file`` first when given.

    ``WMS_API_BASE_URL_<ENV>`` wins over ``WMS_API_BASE_URL`` so one .env can
    carry every backend. ``WMS_TIMEOUT_SECONDS`` seeds both timeouts; the
    connect and read variables override it individually.
    """
    load_dotenv(env_file)

    env_name = (os.getenv("WMS_ENV") or "dev").strip()
    api_base_url = _base_url(env_name.upper())

    timeout = _number("WMS_TIMEOUT_SECONDS", 10.0, float, minimum=0.0, exclusive=True)
    connect_timeout = _number("WMS_CONNECT_TIMEOUT_SECONDS", min(timeout, 5.0), float, minimum=0.0, exclusive=True)
    read_timeout = _number("WMS_READ_TIMEOUT_SECONDS", max(timeout, connect_timeout), float, minimum=0.0, exclusive=True)

    verify_raw = os.getenv("WMS_VERIFY_SSL")
    return ClientConfig(
        env_name=env_name,
        api_base_url=api_base_url,
        connect_timeout_seconds=connect_timeout,
        read_timeout_seconds=read_timeout,
        # Only reads are ever retried; writes always go out exactly once.
        retries=_number("WMS_RETRIES", 0, int, minimum=0),
        retry_backoff_seconds=_number("WMS_RETRY_BACKOFF_SECONDS", 0.3, float, minimum=0.0),
        max_connections=_number("WMS_MAX_CONNECTIONS", 20, int, minimum=1),
        verify_ssl=True if verify_raw is None else verify_raw.strip().lower() in {"1", "true", "yes", "on"},
        csrf_cookie_name=(os.getenv("WMS_CSRF_COOKIE_NAME") or "csrftoken").strip(),
    )
