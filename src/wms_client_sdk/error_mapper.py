from __future__ import annotations

from typing import Any

from .exceptions import ApiError, error_class_for


def extract_message(payload: Any, status_code: int) -> str:
    """Pick the server's message out of an error body.

    ``detail`` wins over ``message``; Django Ninja validation failures send
    ``detail`` as a list of ``{"loc": ..., "msg": ...}`` entries, which are
    joined into one line.
    """
    if isinstance(payload, dict):
        for key in ("detail", "message"):
            text = _stringify(payload.get(key))
            if text:
                return text
    elif isinstance(payload, list):
        text = _stringify(payload)
        if text:
            return text
    return f"HTTP {status_code}"


def _stringify(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, list):
        parts = []
        for entry in value:
            if isinstance(entry, dict) and entry.get("msg"):
                parts.append(str(entry["msg"]))
            elif entry:
                parts.append(str(entry))
        return "; ".join(parts) or None
    return str(value)


def map_error(status_code: int, payload: Any, trace_id: str | None) -> ApiError:
    body = payload if isinstance(payload, dict) else {}
    code = str(body.get("code") or "HTTP_ERROR")
    message = extract_message(payload, status_code)
    details = body.get("details")
    if details is None and isinstance(body.get("detail"), list):
        details = body.get("detail")
    payload_trace_id = body.get("trace_id")
    resolved_trace_id = str(payload_trace_id) if payload_trace_id is not None else trace_id
    return error_class_for(status_code)(
        code=code,
        message=message,
        details=details,
        trace_id=resolved_trace_id,
        status_code=status_code,
        raw_payload=payload,
    )
