"""
Transaction boundary for ledger operations.

Every state-changing service method is wrapped in ledger_transaction:

- runs under transaction.atomic()
- on PostgreSQL bounds row lock waits with SET LOCAL lock_timeout
- at the outermost block, retries the whole unit on serialization
  failure, deadlock or lock timeout, then raises ConcurrencyConflict

Nested calls (a workflow calling the engine) join the caller's
transaction as a savepoint and never retry on their own.
"""

import functools
import logging
import time

from django.db import OperationalError, transaction

from stockledger.conf import ledger_settings
from stockledger.exceptions import ConcurrencyConflict

logger = logging.getLogger('stockledger')

# PostgreSQL SQLSTATE codes worth retrying:
# - 40001: serialization_failure
# - 40P01: deadlock_detected
# - 55P03: lock_not_available (lock_timeout / NOWAIT)
# - 57014: query_canceled (statement_timeout / lock_timeout)
RETRYABLE_SQLSTATES = {'40001', '40P01', '55P03', '57014'}
RETRYABLE_SQLITE_ERRORS = {'SQLITE_BUSY', 'SQLITE_LOCKED'}
SQLITE_LOCK_MESSAGES = ('database is locked', 'database table is locked')


def _sqlstate(exc: Exception) -> str | None:
    """SQLSTATE of the driver error behind a Django DatabaseError."""
    cause = exc.__cause__
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    return getattr(cause, 'pgcode', None) or getattr(cause, 'sqlstate', None)


def is_conflict(exc: Exception) -> bool:
    """Is this database error a transient concurrency conflict?"""
    if _sqlstate(exc) in RETRYABLE_SQLSTATES:
        return True
    # sqlite_errorname exists on Python 3.11+
    if getattr(exc.__cause__, 'sqlite_errorname', None) in RETRYABLE_SQLITE_ERRORS:
        return True
    message = str(exc)
    return any(text in message for text in SQLITE_LOCK_MESSAGES)


def _apply_lock_timeout(using=None):
    connection = transaction.get_connection(using)
    timeout_ms = int(ledger_settings.LOCK_TIMEOUT_MS)
    if connection.vendor == 'postgresql' and timeout_ms > 0:
        with connection.cursor() as cursor:
            cursor.execute(f"SET LOCAL lock_timeout = {timeout_ms}")


def ledger_transaction(func):
    """Run func atomically, retrying transient conflicts at the outermost level."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if transaction.get_connection().in_atomic_block:
            with transaction.atomic():
                return func(*args, **kwargs)

        attempts = int(ledger_settings.CONFLICT_RETRIES) + 1
        for attempt in range(1, attempts + 1):
            try:
                with transaction.atomic():
                    _apply_lock_timeout()
                    return func(*args, **kwargs)
            except OperationalError as exc:
                if not is_conflict(exc):
                    raise
                logger.warning(
                    "ledger.retry",
                    extra={
                        "operation": func.__qualname__,
                        "attempt": attempt,
                        "max_attempts": attempts,
                        "sqlstate": _sqlstate(exc),
                    },
                )
                if attempt < attempts:
                    time.sleep(attempt * int(ledger_settings.RETRY_BACKOFF_MS) / 1000)

        raise ConcurrencyConflict(operation=func.__qualname__, attempts=attempts)

    return wrapper
