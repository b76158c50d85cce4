from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from wms_client_sdk import ApiError, ClientValidationError, TransportError, to_user_facing_error


class FailureKind(str, Enum):
    VALIDATION = "validation"
    TRANSPORT = "transport"
    REJECTED = "rejected"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class ServiceError(RuntimeError):
    message: str
    details: str | None = None
    trace_id: str | None = None
    kind: FailureKind = FailureKind.REJECTED

    def __str__(self) -> str:
        return self.message


def normalize_error(exc: Exception, fallback: str = "Unexpected client error") -> ServiceError:
    if isinstance(exc, ServiceError):
        return exc
    if isinstance(exc, ClientValidationError):
        return ServiceError(message=str(exc), details="CLIENT_VALIDATION", kind=FailureKind.VALIDATION)
    if isinstance(exc, ApiError):
        user_facing = to_user_facing_error(exc)
        return ServiceError(
            message=user_facing.message,
            details=user_facing.technical_details,
            trace_id=user_facing.trace_id,
            kind=FailureKind.TRANSPORT if isinstance(exc, TransportError) else FailureKind.REJECTED,
        )
    return ServiceError(message=str(exc) or fallback, kind=FailureKind.UNEXPECTED)
