from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ApiError, TransportError


@dataclass(frozen=True)
class UserFacingError:
    message: str
    technical_details: str | None = None
    trace_id: str | None = None


def to_user_facing_error(exc: ApiError) -> UserFacingError:
    """Headline for a banner plus a one-line technical footnote.

    The server's own text ("Insufficient stock", "Bad credentials") is what a
    clerk can act on, so it wins; the class fallback only covers bare statuses.
    """
    if isinstance(exc, TransportError):
        return UserFacingError(exc.fallback_message, f"{exc.code}: {exc.message}", exc.trace_id)
    headline = exc.message.strip() if exc.has_server_message else exc.fallback_message
    footnote = f"{exc.code} (HTTP {exc.status_code})"
    if exc.details:
        footnote = f"{footnote}: {exc.details}"
    return UserFacingError(headline, footnote, exc.trace_id)
