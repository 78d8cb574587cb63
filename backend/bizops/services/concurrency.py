# Overview: Transaction boundary for processors: row locking, retry, and result conversion.

from __future__ import annotations

import time

from flask import current_app
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db
from .errors import OrderProcessingError, ServiceResult, StorageError

# Lock/deadlock, optimistic conflict, and unique-number collisions
RETRYABLE_ERRORS = (OperationalError, StaleDataError, IntegrityError)


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


def run_with_retry(func, *, attempts: int | None = None, backoff_base: float | None = None):
    """
    Execute a DB operation with retry on concurrency-related failures.

    Each failed attempt is rolled back before the next one starts. When the
    last attempt fails the error is re-raised as StorageError.
    """
    if attempts is None:
        attempts = current_app.config.get("RETRY_ATTEMPTS", 3)
    if backoff_base is None:
        backoff_base = current_app.config.get("RETRY_BACKOFF_BASE", 0.1)

    for attempt in range(attempts):
        try:
            return func()
        except RETRYABLE_ERRORS as exc:
            db.session.rollback()
            if attempt >= attempts - 1:
                raise StorageError(
                    "Transaction could not be committed; please retry",
                    details={"attempts": attempts, "reason": type(exc).__name__},
                ) from exc
            current_app.logger.warning(
                "Retrying unit of work after %s (attempt %d/%d)",
                type(exc).__name__, attempt + 1, attempts,
            )
            if backoff_base:
                time.sleep(backoff_base * (2 ** attempt))
    raise StorageError("Transaction was not attempted", details={"attempts": attempts})


def run_unit_of_work(func, *, operation: str) -> ServiceResult:
    """
    Run `func` and commit as one atomic unit.

    Business failures (OrderProcessingError) roll back and come back as a
    failed ServiceResult. Anything else rolls back and propagates.
    """
    def _op():
        value = func()
        db.session.commit()
        return value

    try:
        value = run_with_retry(_op)
    except OrderProcessingError as exc:
        db.session.rollback()
        current_app.logger.warning("%s rejected (%s): %s", operation, exc.code, exc.message)
        return ServiceResult.failure(exc)
    except Exception:
        db.session.rollback()
        raise

    return ServiceResult.success(value)
