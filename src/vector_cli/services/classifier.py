"""Map failed API calls onto the fixed error taxonomy and exit codes."""

from __future__ import annotations

import json
from typing import Any

from vector_cli.errors import EXIT_CODES, ApiError, ErrorKind, FieldError, TransportError
from vector_cli.services.transport import ApiResponse

MAX_RAW_BODY = 200

PREFIXES = {
    401: "Authentication failed",
    403: "Access denied",
    404: "Not found",
    422: "Validation failed",
}


def kind_for_status(status: int) -> ErrorKind:
    if status in (401, 403):
        return ErrorKind.AUTHENTICATION
    if status == 422:
        return ErrorKind.VALIDATION
    if status == 404:
        return ErrorKind.NOT_FOUND
    if status >= 500:
        return ErrorKind.NETWORK_OR_SERVER
    return ErrorKind.GENERAL


def classify(outcome: ApiResponse | TransportError) -> tuple[ErrorKind, int]:
    """Total mapping from a response status or transport failure to ``(kind, exit code)``."""
    if isinstance(outcome, TransportError):
        kind = ErrorKind.NETWORK_OR_SERVER
    else:
        kind = kind_for_status(outcome.status_code)
    return kind, EXIT_CODES[kind]


def parse_error_body(body: bytes, status: int) -> tuple[str, list[FieldError]]:
    """Extract the message and per-field errors from an error body.

    Accepts ``{"message": ..., "errors": {field: [msg, ...]}}`` and the
    ``{"errors": [{"field": ..., "message": ...}]}`` list form. A body that
    is not JSON is returned verbatim, truncated.
    """
    text = body.decode("utf-8", errors="replace").strip()
    if not text:
        return f"HTTP {status}", []
    try:
        data = json.loads(text)
    except ValueError:
        return _truncate(text), []
    if not isinstance(data, dict):
        return _truncate(text), []

    message = data.get("message") or data.get("error")
    if not isinstance(message, str) or not message:
        message = f"HTTP {status}"
    return message, _field_errors(data.get("errors"))


def _field_errors(errors: Any) -> list[FieldError]:
    out: list[FieldError] = []
    if isinstance(errors, dict):
        for name, messages in errors.items():
            if isinstance(messages, list):
                out.extend(FieldError(str(name), str(m)) for m in messages)
            elif messages is not None:
                out.append(FieldError(str(name), str(messages)))
    elif isinstance(errors, list):
        for item in errors:
            if isinstance(item, dict):
                out.append(FieldError(str(item.get("field", "")), str(item.get("message", ""))))
            elif item is not None:
                out.append(FieldError("", str(item)))
    return out


def _truncate(text: str) -> str:
    if len(text) <= MAX_RAW_BODY:
        return text
    return text[:MAX_RAW_BODY] + "..."


def to_error(response: ApiResponse) -> ApiError:
    """Build the user-facing :class:`ApiError` for a non-2xx response."""
    status = response.status_code
    kind, _ = classify(response)
    message, field_errors = parse_error_body(response.body, status)
    if status in PREFIXES:
        prefix = PREFIXES[status]
    elif status >= 500:
        prefix = "Server error"
    else:
        prefix = f"Request failed (HTTP {status})"
    return ApiError(kind, f"{prefix}: {message}", status=status, field_errors=field_errors)

