"""
Error taxonomy for the flight inventory and booking engine.

Every domain error carries the HTTP status the API layer answers with, so the
services raise plain exceptions and the web layer stays a thin translation.
Storage-level failures coming out of SQLAlchemy are mapped by
``translate_storage_error``.
"""

from typing import Optional

from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
)


class FlightDeskError(Exception):
    """Base class for all engine errors."""

    status_code = 500
    error = "Server Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(FlightDeskError):
    """Flight, ticket or plane does not exist."""

    status_code = 404
    error = "Not Found"


class CapacityExhaustedError(FlightDeskError):
    """A sale was attempted on a flight with no free seats."""

    status_code = 409
    error = "Capacity Exhausted"


class ReferentialConflictError(FlightDeskError):
    """Delete refused because dependent rows still exist."""

    status_code = 409
    error = "Referential Conflict"


class DuplicateResourceError(FlightDeskError):
    """A unique natural key (e.g. flight number) is already taken."""

    status_code = 409
    error = "Duplicate Entry"


class InputValidationError(FlightDeskError):
    """Malformed, missing or out-of-range input."""

    status_code = 400
    error = "Validation Error"


class StorageError(FlightDeskError):
    """Storage failure after translation to an HTTP-facing category."""

    def __init__(self, message: str, status_code: int = 500, error: str = "Database Error"):
        super().__init__(message)
        self.status_code = status_code
        self.error = error


def format_validation_error(exc) -> str:
    """Flatten a pydantic ValidationError into one human-readable line."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(parts) or "Invalid input"


def _is_unique_violation(exc: IntegrityError) -> bool:
    text = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
    return "unique" in text or "duplicate" in text or "1062" in text or "23505" in text


def translate_storage_error(exc: SQLAlchemyError) -> StorageError:
    """
    Map a SQLAlchemy exception onto an HTTP-facing StorageError.

    Args:
        exc: Exception raised by the storage layer

    Returns:
        StorageError with status 409 (unique violation), 400 (foreign key or
        check violation), 503 (connection lost) or 500 (anything else)
    """
    if isinstance(exc, IntegrityError):
        if _is_unique_violation(exc):
            return StorageError(
                "A record with this value already exists", 409, "Duplicate Entry"
            )
        return StorageError(
            "Referenced record does not exist or value violates a constraint",
            400,
            "Constraint Violation",
        )

    if isinstance(exc, DisconnectionError) or (
        isinstance(exc, OperationalError) and exc.connection_invalidated
    ):
        return StorageError("Database connection failed", 503, "Service Unavailable")

    if isinstance(exc, OperationalError):
        message = _operational_message(exc)
        if message:
            return StorageError(message, 503, "Service Unavailable")

    return StorageError("An unexpected database error occurred")


def _operational_message(exc: OperationalError) -> Optional[str]:
    text = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
    if "locked" in text or "lock wait timeout" in text or "lock timeout" in text:
        return "Timed out waiting for a database lock"
    if "connect" in text or "connection" in text:
        return "Database connection failed"
    return None


__all__ = [
    "FlightDeskError",
    "NotFoundError",
    "CapacityExhaustedError",
    "ReferentialConflictError",
    "DuplicateResourceError",
    "InputValidationError",
    "StorageError",
    "format_validation_error",
    "translate_storage_error",
]
