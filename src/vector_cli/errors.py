"""Custom exceptions for the Vector CLI.

Every exception carries the process exit code it maps to, so the dispatcher
can report any failure without knowing where it came from.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from vector_common.constants import (
    EXIT_AUTH_ERROR,
    EXIT_GENERAL_ERROR,
    EXIT_NETWORK_ERROR,
    EXIT_NOT_FOUND,
    EXIT_VALIDATION_ERROR,
)


class ErrorKind(str, Enum):
    """Classification of a failed API call."""

    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    NETWORK_OR_SERVER = "network_or_server"
    GENERAL = "general"


EXIT_CODES: dict[ErrorKind, int] = {
    ErrorKind.AUTHENTICATION: EXIT_AUTH_ERROR,
    ErrorKind.VALIDATION: EXIT_VALIDATION_ERROR,
    ErrorKind.NOT_FOUND: EXIT_NOT_FOUND,
    ErrorKind.NETWORK_OR_SERVER: EXIT_NETWORK_ERROR,
    ErrorKind.GENERAL: EXIT_GENERAL_ERROR,
}


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}" if self.field else self.message


class VectorError(Exception):
    """Base exception for all Vector CLI operations."""

    kind = "general"

    def __init__(self, message: str, *, exit_code: int = EXIT_GENERAL_ERROR):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def details(self) -> list[str]:
        """Extra lines shown under the main message."""
        return []

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


class ConfigError(VectorError):
    """Config or credential file could not be read or written."""

    kind = "config"


class RegistryError(VectorError):
    """An endpoint descriptor is malformed."""

    kind = "registry"


class ResponseFormatError(VectorError):
    """A successful response did not have the expected shape."""

    kind = "response_format"


class UnknownCommandError(VectorError):
    """No command matches the given noun/verb."""

    kind = "unknown_command"

    def __init__(
        self,
        command: str,
        *,
        suggestions: Sequence[str] = (),
        available: Sequence[str] = (),
    ):
        message = f"Unknown command '{command}'."
        if suggestions:
            message += f" Did you mean: {', '.join(suggestions)}?"
        super().__init__(message, exit_code=EXIT_GENERAL_ERROR)
        self.command = command
        self.suggestions = list(suggestions)
        self.available = list(available)

    def details(self) -> list[str]:
        lines = ["Usage: vector <noun> <verb> [ARGS]... [OPTIONS]"]
        if self.available:
            lines.append(f"Available commands: {', '.join(self.available)}")
        return lines

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["suggestions"] = self.suggestions
        return data


class ValidationError(VectorError):
    """Arguments were rejected locally, before any request was sent."""

    kind = "validation"

    def __init__(self, message: str):
        super().__init__(message, exit_code=EXIT_VALIDATION_ERROR)


class AuthError(VectorError):
    """No API token could be resolved."""

    kind = "auth"

    def __init__(self, message: str = "Not logged in. Run 'vector auth login' to authenticate."):
        super().__init__(message, exit_code=EXIT_AUTH_ERROR)


class ApiError(VectorError):
    """The API answered with a non-2xx status."""

    def __init__(
        self,
        error_kind: ErrorKind,
        message: str,
        *,
        status: int | None = None,
        field_errors: Sequence[FieldError] = (),
    ):
        super().__init__(message, exit_code=EXIT_CODES[error_kind])
        self.error_kind = error_kind
        self.status = status
        self.field_errors = list(field_errors)

    @property
    def kind(self) -> str:  # type: ignore[override]
        return self.error_kind.value

    def details(self) -> list[str]:
        return [f"- {fe}" for fe in self.field_errors]

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status"] = self.status
        errors: dict[str, list[str]] = {}
        for fe in self.field_errors:
            errors.setdefault(fe.field, []).append(fe.message)
        data["errors"] = errors
        return data


class TransportError(VectorError):
    """The request never produced an HTTP response (DNS, connect, TLS, timeout)."""

    kind = ErrorKind.NETWORK_OR_SERVER.value
    error_kind = ErrorKind.NETWORK_OR_SERVER

    def __init__(self, message: str, *, cause: BaseException | None = None):
        super().__init__(message, exit_code=EXIT_NETWORK_ERROR)
        self.cause = cause
