"""
Exceptions for Stockledger.

Every error is a LedgerError with a structured code for programmatic
handling. Subclasses fix the code so callers can catch by type:

    try:
        ledger.confirm_shipping_instruction(pk, actor='wh-01')
    except InsufficientInventory as e:
        print(f"Only {e.available} available")
    except LedgerError as e:
        return JsonResponse(e.as_dict(), status=400)
"""

from decimal import Decimal
from typing import Any


class LedgerError(Exception):
    """
    Structured exception for ledger operations.

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'INSUFFICIENT_INVENTORY': 'Operation rejected, stock unavailable',
        'NOT_FOUND': 'Referenced record does not exist',
        'VALIDATION_FAILED': 'Invalid input',
        'INVALID_STATE': 'Operation not allowed in the current status',
        'CONCURRENCY_CONFLICT': 'Concurrent modification detected, try again',
    }

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, data={self.data!r})"

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }


class InsufficientInventory(LedgerError):
    """Source balance is lower than the requested reduction."""

    def __init__(self, message: str | None = None, **data):
        super().__init__('INSUFFICIENT_INVENTORY', message, **data)

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)


class NotFound(LedgerError):
    """Referenced entity id does not exist."""

    def __init__(self, message: str | None = None, **data):
        super().__init__('NOT_FOUND', message, **data)


class ValidationFailure(LedgerError):
    """
    Malformed input.

    Field-level detail lives in data['errors'] as {field: message}.
    """

    def __init__(self, errors: dict[str, str], message: str | None = None, **data):
        super().__init__('VALIDATION_FAILED', message, errors=errors, **data)

    @property
    def errors(self) -> dict[str, str]:
        return self.data['errors']


class InvalidState(LedgerError):
    """Workflow record is not in a status that allows the operation."""

    def __init__(self, message: str | None = None, **data):
        super().__init__('INVALID_STATE', message, **data)


class ConcurrencyConflict(LedgerError):
    """Transaction kept failing to serialize after the configured retries."""

    def __init__(self, message: str | None = None, **data):
        super().__init__('CONCURRENCY_CONFLICT', message, **data)
