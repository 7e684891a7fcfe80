"""
Domain error hierarchy and data-store error translation.

Every error raised past the repository layer is an AppError with a stable
machine-readable code and an HTTP status. Raw SQLAlchemy/driver errors are
translated here and never reach a client.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"
    FORBIDDEN = "forbidden"
    RATE_LIMITED = "rate_limited"
    INTERNAL = "internal"


class AppError(Exception):
    """Base exception for every error surfaced through the error envelope."""

    kind: ErrorKind = ErrorKind.INTERNAL
    default_code: str = "INTERNAL_ERROR"
    http_status: int = 500

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details

    def to_response(self) -> dict[str, Any]:
        """Convert to the error envelope."""
        error: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details is not None:
            error["details"] = self.details
        return {"success": False, "error": error}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} code={self.code!r} message={self.message!r}>"


# ---------------------------------------------------------------------------
# Client errors
# ---------------------------------------------------------------------------

class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND
    default_code = "NOT_FOUND"
    http_status = 404

    @classmethod
    def for_resource(cls, resource: str) -> "NotFoundError":
        return cls(f"{resource} not found")


class ValidationFailedError(AppError):
    kind = ErrorKind.VALIDATION
    default_code = "VALIDATION_ERROR"
    http_status = 400


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT
    default_code = "UNIQUE_CONSTRAINT_VIOLATION"
    http_status = 409


class ForbiddenError(AppError):
    kind = ErrorKind.FORBIDDEN
    default_code = "FORBIDDEN"
    http_status = 403


class RateLimitedError(AppError):
    kind = ErrorKind.RATE_LIMITED
    default_code = "TOO_MANY_ATTEMPTS"
    http_status = 429


# ---------------------------------------------------------------------------
# Infrastructure errors
# ---------------------------------------------------------------------------

class UnavailableError(AppError):
    kind = ErrorKind.UNAVAILABLE
    default_code = "SERVICE_UNAVAILABLE"
    http_status = 503


class InternalError(AppError):
    kind = ErrorKind.INTERNAL
    default_code = "INTERNAL_ERROR"
    http_status = 500


# ---------------------------------------------------------------------------
# Store error translation
# ---------------------------------------------------------------------------

# SQLSTATE classes (PostgreSQL) and message fragments (SQLite, drivers)
_UNIQUE_STATES = {"23505"}
_FOREIGN_KEY_STATES = {"23503"}
_NOT_NULL_STATES = {"23502", "23514"}

_UNIQUE_MARKERS = ("unique constraint", "duplicate key", "unique violation")
_FOREIGN_KEY_MARKERS = ("foreign key constraint", "foreignkeyviolation", "violates foreign key")
_NOT_NULL_MARKERS = ("not null constraint", "check constraint", "violates not-null")


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    for attr in ("sqlstate", "pgcode"):
        value = getattr(orig, attr, None)
        if isinstance(value, str):
            return value
    return None


def _matches(text: str, markers: tuple[str, ...]) -> bool:
    return any(marker in text for marker in markers)


def translate_db_error(exc: SQLAlchemyError, resource: str = "Record") -> AppError:
    """Map a SQLAlchemy exception onto the closed set of domain errors."""
    if isinstance(exc, IntegrityError):
        state = _sqlstate(exc)
        text = str(exc.orig).lower()
        if state in _UNIQUE_STATES or _matches(text, _UNIQUE_MARKERS):
            return ConflictError(f"{resource} already exists")
        if state in _FOREIGN_KEY_STATES or _matches(text, _FOREIGN_KEY_MARKERS):
            return ValidationFailedError(
                "Referenced record does not exist",
                code="FOREIGN_KEY_VIOLATION",
            )
        if state in _NOT_NULL_STATES or _matches(text, _NOT_NULL_MARKERS):
            return ValidationFailedError("Required field is missing or invalid")

    if isinstance(exc, (OperationalError, InterfaceError, DisconnectionError)):
        logger.error("Database unavailable: %s", exc, extra={"resource": resource})
        return UnavailableError("Database is unavailable, try again later")

    logger.error(
        "Unhandled database error: %s",
        exc,
        exc_info=exc,
        extra={"resource": resource},
    )
    return InternalError("A database error occurred", code="DATABASE_ERROR")
