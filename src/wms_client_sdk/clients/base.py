from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import InvalidResponseError
from ..http_client import HttpClient

M = TypeVar("M", bound=BaseModel)


@dataclass
class BaseClient:
    http: HttpClient
    module: str = "unknown"

    def _request(self, method: str, path: str, **kwargs):
        kwargs.setdefault("module", self.module)
        return self.http.request(method, path, **kwargs)

    def _parse(self, model_type: type[M], payload: Any, operation: str) -> M:
        if not isinstance(payload, dict):
            raise self._invalid(operation, f"expected a JSON object, got {type(payload).__name__}", payload)
        try:
            return model_type.model_validate(payload)
        except PydanticValidationError as exc:
            raise self._invalid(operation, str(exc.errors()[0].get("msg", "invalid body")), payload) from exc

    def _parse_list(self, model_type: type[M], payload: Any, operation: str) -> list[M]:
        if not isinstance(payload, list):
            raise self._invalid(operation, f"expected a JSON array, got {type(payload).__name__}", payload)
        return [self._parse(model_type, item, operation) for item in payload]

    def _invalid(self, operation: str, reason: str, payload: Any) -> InvalidResponseError:
        last = self.http.last_operation
        return InvalidResponseError(
            code="INVALID_RESPONSE",
            message=f"Unexpected {operation} response: {reason}",
            details={"module": self.module, "operation": operation},
            trace_id=last.trace_id if last else None,
            status_code=200,
            raw_payload=payload,
        )
