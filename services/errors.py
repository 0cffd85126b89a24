"""Domain error kinds raised by the account services.

Services raise :class:`AuthError` carrying an :class:`ErrorKind`; the HTTP
layer owns the translation to status codes and user-facing messages.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    DUPLICATE_USERNAME = "duplicate_username"
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    INVALID_OR_EXPIRED_TOKEN = "invalid_or_expired_token"
    NOTIFIER_FAILURE = "notifier_failure"
    STORAGE_FAILURE = "storage_failure"


class AuthError(Exception):
    """A failure with a known kind."""

    def __init__(self, kind: ErrorKind, detail: str | None = None):
        super().__init__(detail or kind.value)
        self.kind = kind
        self.detail = detail


class ValidationError(AuthError):
    """Malformed input; ``reason`` identifies which rule was broken."""

    def __init__(self, field: str, reason: str):
        super().__init__(ErrorKind.VALIDATION, f"{field}: {reason}")
        self.field = field
        self.reason = reason


class StorageFailure(AuthError):
    """The user store could not complete an operation."""

    def __init__(self, detail: str | None = None):
        super().__init__(ErrorKind.STORAGE_FAILURE, detail)


def duplicate_username() -> AuthError:
    return AuthError(ErrorKind.DUPLICATE_USERNAME)


def duplicate_email() -> AuthError:
    return AuthError(ErrorKind.DUPLICATE_EMAIL)


def invalid_credentials() -> AuthError:
    return AuthError(ErrorKind.INVALID_CREDENTIALS)
