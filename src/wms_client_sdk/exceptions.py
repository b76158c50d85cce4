from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class ApiError(Exception):
    """A request the backend refused, or one that never got an answer.

    Subclasses list the HTTP statuses they stand for and the sentence shown
    to a clerk when the server sent no message of its own.
    """

    code: str
    message: str
    details: object | None
    trace_id: str | None
    status_code: int
    raw_payload: object | None = None

    statuses: ClassVar[frozenset[int]] = frozenset()
    fallback_message: ClassVar[str] = "The request could not be completed."

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"

    @property
    def has_server_message(self) -> bool:
        return bool(self.message.strip()) and self.message != f"HTTP {self.status_code}"


class AuthError(ApiError):
    statuses = frozenset({401})
    fallback_message = "Your session has expired. Sign in again."


class ForbiddenError(ApiError):
    statuses = frozenset({403})
    fallback_message = "Your account is not allowed to do this."


class NotFoundError(ApiError):
    statuses = frozenset({404})
    fallback_message = "The record no longer exists. Refresh the list."


class ValidationError(ApiError):
    statuses = frozenset({400, 422})
    fallback_message = "The server rejected the submitted values."


class ConflictError(ApiError):
    statuses = frozenset({409})
    fallback_message = "The record was changed by someone else. Reload and try again."


class RateLimitError(ApiError):
    statuses = frozenset({429})
    fallback_message = "Too many requests. Wait a moment and try again."


class ServerError(ApiError):
    fallback_message = "The warehouse server failed to process the request."


class TransportError(ApiError):
    """No HTTP response arrived: DNS, refused connection, or timeout."""

    fallback_message = "Cannot reach the server. Check your connection and try again."


class InvalidResponseError(ApiError):
    """2xx response whose body does not match the endpoint's result type."""

    fallback_message = "The server sent a response this client does not understand."


_BY_STATUS = {status: error_type for error_type in ApiError.__subclasses__() for status in error_type.statuses}


def error_class_for(status_code: int) -> type[ApiError]:
    if status_code >= 500:
        return ServerError
    return _BY_STATUS.get(status_code, ApiError)
