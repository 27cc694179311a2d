"""Error taxonomy and structured error responses.

Every rejection raised by a validator is a ``SanitizationError`` carrying
an ``ErrorKind`` so callers can map it to a field-specific message.
Operational failures (the filesystem check in file-name validation) are
raised as ``FileCheckError`` and are never confused with a rejection.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel


class ErrorKind(enum.Enum):
    """Closed set of reasons a value can be rejected."""

    INVALID_USERNAME = "invalid username"
    INVALID_HALL_NAME = "invalid hall name"
    INVALID_DISPLAY_NAME = "invalid display name"
    INVALID_EMAIL = "invalid email"
    INVALID_PHONE_NUMBER = "invalid phone number"
    INVALID_PASSWORD = "password is too weak"
    PASSWORD_WHITESPACE = "password must not start or end with whitespace"
    INVALID_BANNER_COLOR = "invalid banner color"
    INVALID_FILE_NAME = "invalid file name"
    BAD_FILE_TYPE = "file type is not allowed"
    FILE_UNMATCH = "file type does not match its extension"
    FILE_TOO_LARGE = "file is too large"
    FILE_CHECK_FAILED = "file check could not be completed"

    @property
    def code(self) -> str:
        """Machine-readable code, e.g. ``INVALID_USERNAME``."""
        return self.name


class InputGuardError(Exception):
    """Base exception for all inputguard errors."""

    kind: ErrorKind | None = None


class SanitizationError(InputGuardError, ValueError):
    """Raised when a raw value violates its domain policy.

    Subclasses ``ValueError`` so it surfaces as an ordinary validation
    error when raised from a pydantic ``field_validator``.
    """

    def __init__(self, kind: ErrorKind, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail
        msg = kind.value
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class PasswordPolicyError(SanitizationError):
    """Raised for a password that is too weak or has boundary whitespace.

    ``hint`` names what the password is missing, when known.
    """

    def __init__(self, kind: ErrorKind, hint: str = "") -> None:
        self.hint = hint
        super().__init__(kind, hint)


class FileCheckError(InputGuardError):
    """Raised when the existence of a file could not be determined.

    Distinct from a rejection: the name may well be valid, the check
    itself failed (permission denied, I/O error, timeout).
    """

    kind = ErrorKind.FILE_CHECK_FAILED

    def __init__(self, path: str, detail: str = "") -> None:
        self.path = path
        self.detail = detail
        msg = f"File check failed for '{path}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class StructuredErrorResponse(BaseModel):
    """Structured error response.

    Returns ``{"error": str, "code": str, "request_id": str}``, no stack traces.
    """

    error: str
    code: str
    request_id: str

    @classmethod
    def from_exception(cls, exc: Exception, request_id: str) -> "StructuredErrorResponse":
        """Create from an exception, mapping to machine-readable codes.

        Rejections expose their user-facing message; operational errors
        expose only their kind.  Never leaks internal details for
        unhandled exceptions.
        """
        if isinstance(exc, SanitizationError):
            return cls(
                error=str(exc),
                code=exc.kind.code,
                request_id=request_id,
            )
        if isinstance(exc, InputGuardError) and exc.kind is not None:
            return cls(
                error=exc.kind.value,
                code=exc.kind.code,
                request_id=request_id,
            )
        if isinstance(exc, InputGuardError):
            return cls(
                error=str(exc),
                code="INPUTGUARD_ERROR",
                request_id=request_id,
            )
        # Unhandled: never expose internal details
        return cls(
            error="An internal error occurred",
            code="INTERNAL_ERROR",
            request_id=request_id,
        )
