"""Error taxonomy shared by the domain, security and HTTP layers."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    INTERNAL = "internal"


# kind -> (HTTP status, machine-readable code)
_CLASSIFICATION: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.VALIDATION: (400, "VALIDATION_ERROR"),
    ErrorKind.CONFLICT: (409, "CONFLICT_ERROR"),
    ErrorKind.NOT_FOUND: (404, "NOT_FOUND_ERROR"),
    ErrorKind.BAD_REQUEST: (400, "BAD_REQUEST_ERROR"),
    ErrorKind.UNAUTHORIZED: (401, "UNAUTHORIZED"),
    ErrorKind.INTERNAL: (500, "INTERNAL_ERROR"),
}


class AppError(Exception):
    """Domain failure carrying its classification.

    The HTTP layer dispatches on ``kind``; ``status_code`` and ``code`` are
    derived from it so the three can never disagree.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details
        self.status_code, self.code = classify(kind)

    def __repr__(self) -> str:
        return f"AppError(kind={self.kind.value!r}, message={self.message!r})"


def classify(kind: ErrorKind) -> tuple[int, str]:
    """Return the HTTP status and machine-readable code for ``kind``."""
    return _CLASSIFICATION[kind]


def validation_error(details: list[dict[str, Any]], message: str = "Validation failed") -> AppError:
    return AppError(ErrorKind.VALIDATION, message, details=details)


def conflict(message: str) -> AppError:
    return AppError(ErrorKind.CONFLICT, message)


def not_found(message: str) -> AppError:
    return AppError(ErrorKind.NOT_FOUND, message)


def bad_request(message: str) -> AppError:
    return AppError(ErrorKind.BAD_REQUEST, message)


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing or malformed."""


class InvalidTokenError(Exception):
    """Raised for any bearer token that fails verification."""


class PasswordHashError(Exception):
    """Raised when a stored password hash cannot be processed."""


class DuplicateEmailError(Exception):
    """Raised by the repository when the email unique constraint is violated."""

    def __init__(self, email: str) -> None:
        super().__init__("email already registered")
        self.email = email
