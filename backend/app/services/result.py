"""
StarPrep Backend — Storage Result Values
==========================================

What:  The value every data-access helper returns.
Why:   Storage failures come back as data, not as unwinding exceptions, so the
       handler decides which message and status the failed phase maps to
       (e.g. "Server error" for a lookup vs "Error adding your answer..." for
       an insert).
How:   A StorageResult holds either the value of a successful operation or the
       DatabaseError describing why it failed. `None` is a legitimate success
       value ("no such row"); only `error` signals failure.

Example:
    result = await question_service.find_question(db, question_id)
    if not result.ok:
        return error_response(500, "Server error")
    if result.value is None:
        return error_response(404, "No question found")
"""

import logging
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Storage errors the helpers turn into failed results. OSError covers
# drivers that surface a refused connection before SQLAlchemy wraps it;
# OverflowError covers bind values the driver cannot convert.
STORAGE_ERRORS = (SQLAlchemyError, OSError, OverflowError)


@dataclass(frozen=True)
class StorageResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[DatabaseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "StorageResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DatabaseError) -> "StorageResult[T]":
        return cls(error=error)


async def storage_failure(
    db: AsyncSession,
    operation: str,
    exc: Exception,
    **context: Any,
) -> StorageResult[Any]:
    """
    Turn a storage exception into a failed StorageResult.

    Logs the original exception with full stack trace (server-side only),
    rolls the session back so the request's transaction is not committed
    half-done, and wraps the failure in a client-safe DatabaseError.
    """
    logger.error(
        "Storage operation %s failed: %s | Context: %s",
        operation,
        str(exc),
        context,
        exc_info=exc,
    )
    try:
        await db.rollback()
    except Exception:
        logger.error("Rollback after failed %s also failed", operation, exc_info=True)
    return StorageResult.failure(
        DatabaseError(
            context={"operation": operation, "original_error": type(exc).__name__, **context},
        )
    )
