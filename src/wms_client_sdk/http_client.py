from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import TransportError
from .tracing import TRACE_HEADER, TraceContext

logger = logging.getLogger(__name__)

CSRF_HEADER = "X-CSRFToken"
SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


@dataclass
class LastOperation:
    module: str
    operation: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass(frozen=True)
class BinaryPayload:
    content: bytes
    content_type: str | None
    filename: str | None


@dataclass
class HttpClient:
    """Cookie-session client for the warehouse backend.

    The backend authenticates with a session cookie and guards every unsafe
    method with a CSRF token. The token is picked up from any response that
    carries it (header first, then cookie) and replayed on POST, PATCH, PUT
    and DELETE.
    """

    config: ClientConfig
    trace: TraceContext | None = None
    session: requests.Session | None = None
    csrf_token: str | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        self.trace = self.trace or TraceContext()
        if self.session is None:
            self.session = requests.Session()
            adapter = HTTPAdapter(pool_connections=self.config.max_connections, pool_maxsize=self.config.max_connections)
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)

    def url_for(self, path: str) -> str:
        return urljoin(self.config.api_base_url.rstrip("/") + "/", path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        module: str = "unknown",
        operation: str = "unknown",
    ) -> dict[str, Any] | list[Any] | str | None:
        response = self._send(
            method,
            path,
            accept="application/json",
            module=module,
            operation=operation,
            json=json_body,
            params=params,
            data=data,
            files=files,
        )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def request_bytes(
        self,
        method: str,
        path: str,
        *,
        accept: str,
        params: dict[str, Any] | None = None,
        module: str = "unknown",
        operation: str = "unknown",
    ) -> BinaryPayload:
        response = self._send(method, path, accept=accept, module=module, operation=operation, params=params)
        match = _FILENAME_RE.search(response.headers.get("Content-Disposition") or "")
        return BinaryPayload(
            content=response.content,
            content_type=response.headers.get("Content-Type"),
            filename=match.group(1) if match else None,
        )

    def _headers_for(self, method: str, accept: str, request_id: str) -> dict[str, str]:
        headers = {"Accept": accept, TRACE_HEADER: request_id}
        if method not in SAFE_METHODS:
            token = self.csrf_token or self.session.cookies.get(self.config.csrf_cookie_name)
            if token:
                headers[CSRF_HEADER] = token
        return headers

    def _send(self, method: str, path: str, *, accept: str, module: str, operation: str, **payload: Any) -> requests.Response:
        method = method.upper()
        url = self.url_for(path)
        request_id = self.trace.begin()
        started = time.monotonic()
        try:
            response = self._dispatch(method, url, self._headers_for(method, accept, request_id), payload)
        except requests.RequestException as exc:
            self._record(module, operation, started, "error", request_id)
            logger.warning("http_transport_error", extra={"method": method, "url": url, "error": type(exc).__name__})
            raise TransportError(
                code="TRANSPORT_ERROR",
                message=str(exc) or "Network request failed",
                details={"type": type(exc).__name__},
                trace_id=request_id,
                status_code=0,
            ) from exc

        trace_id = self.trace.resolve(request_id, response.headers)
        self._capture_csrf(response)
        if response.ok:
            self._record(module, operation, started, "success", trace_id)
            return response

        self._record(module, operation, started, "error", trace_id)
        logger.info("http_error_response", extra={"method": method, "url": url, "status_code": response.status_code})
        raise map_error(response.status_code, _error_payload(response), trace_id)

    def _dispatch(self, method: str, url: str, headers: dict[str, str], payload: dict[str, Any]) -> requests.Response:
        # Stock and order writes are not idempotent on the backend, so only reads retry.
        attempts = self.config.retries + 1 if method in SAFE_METHODS else 1
        for attempt in range(attempts):
            last_attempt = attempt == attempts - 1
            try:
                response = self.session.request(
                    method,
                    url,
                    headers=headers,
                    timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                    verify=self.config.verify_ssl,
                    **payload,
                )
            except requests.RequestException:
                if last_attempt:
                    raise
            else:
                if response.status_code < 500 or last_attempt:
                    return response
            logger.debug("http_retry", extra={"method": method, "url": url, "attempt": attempt + 1})
            time.sleep(self.config.retry_backoff_seconds * (2**attempt))
        raise RuntimeError("retry loop exited without a response")

    def _capture_csrf(self, response: requests.Response) -> None:
        token = response.headers.get(CSRF_HEADER) or response.cookies.get(self.config.csrf_cookie_name)
        if token:
            self.csrf_token = token

    def _record(self, module: str, operation: str, started: float, result: str, trace_id: str | None) -> None:
        self.last_operation = LastOperation(
            module=module,
            operation=operation,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
            trace_id=trace_id,
        )


def _error_payload(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"message": response.text} if response.text.strip() else None
