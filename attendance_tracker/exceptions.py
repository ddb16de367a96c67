from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import exc as sa_exc

from attendance_tracker.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS_MESSAGE = (
    "All fields are required: employeeName, employeeID, date, status"
)


class AttendanceAPIError(Exception):
    """Base class for errors reported to clients in the response envelope."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class RecordValidationError(AttendanceAPIError):
    """Request body failed validation; the message names the first broken rule."""

    status_code = 400
    message = REQUIRED_FIELDS_MESSAGE


class InvalidRecordId(AttendanceAPIError):
    status_code = 400
    message = "Valid ID is required"


class DuplicateRecord(AttendanceAPIError):
    status_code = 400
    message = "Duplicate entry found"


class RecordNotFound(AttendanceAPIError):
    status_code = 404
    message = "Record not found"


class StoreUnavailable(AttendanceAPIError):
    message = "Database not connected"


class StoreError(AttendanceAPIError):
    message = "Database operation failed"


class PoolTimeout(StoreError):
    """No pooled connection became free within the acquisition timeout."""


class StartupFailed(RuntimeError):
    """Raised when the store stays unreachable after every connection attempt."""


# SQLSTATE 23505 (PostgreSQL), ER_DUP_ENTRY 1062 (MySQL), SQLite message text
UNIQUE_VIOLATION_SQLSTATE = "23505"
MYSQL_DUP_ENTRY = 1062
UNIQUE_VIOLATION_MARKERS = ("UNIQUE constraint failed", "duplicate key value")


def is_unique_violation(exc: sa_exc.IntegrityError) -> bool:
    orig = exc.orig
    for source in (orig, getattr(orig, "__cause__", None)):
        if source is None:
            continue
        code = getattr(source, "sqlstate", None) or getattr(source, "pgcode", None)
        if code == UNIQUE_VIOLATION_SQLSTATE:
            return True
    args = getattr(orig, "args", ())
    if args and args[0] == MYSQL_DUP_ENTRY:
        return True
    return any(marker in str(orig) for marker in UNIQUE_VIOLATION_MARKERS)


@contextmanager
def translate_store_errors(message: str) -> Iterator[None]:
    """Map SQLAlchemy failures inside the block onto envelope errors."""
    try:
        yield
    except sa_exc.IntegrityError as exc:
        if not is_unique_violation(exc):
            logger.exception(message)
            raise StoreError(message, details=str(exc)) from exc
        logger.warning("%s: %s", message, exc.orig)
        raise DuplicateRecord() from exc
    except sa_exc.TimeoutError as exc:
        logger.error("%s: connection pool exhausted", message)
        raise PoolTimeout(message, details=str(exc)) from exc
    except sa_exc.SQLAlchemyError as exc:
        logger.exception(message)
        raise StoreError(message, details=str(exc)) from exc
