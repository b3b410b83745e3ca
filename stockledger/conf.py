"""
Stockledger configuration.

Usage in settings.py:
    STOCKLEDGER = {
        "LOW_STOCK_ALERT_LIMIT": 50,
        "DEFAULT_SUPPLIER": "Main supplier",
        "INBOUND_LEAD_DAYS": 7,
        "CONFLICT_RETRIES": 3,
        "LOCK_TIMEOUT_MS": 1500,
        "RETRY_BACKOFF_MS": 20,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class LedgerSettings:
    """Stockledger configuration settings."""

    # Max number of low stock alerts returned by the advisor
    LOW_STOCK_ALERT_LIMIT: int = 50

    # Rows returned by history queries when no limit is given
    HISTORY_DEFAULT_LIMIT: int = 20

    # Supplier used for inbound plans created by auto-replenishment
    DEFAULT_SUPPLIER: str = "Default supplier"

    # Days between the replenishment date and the inbound plan due date
    INBOUND_LEAD_DAYS: int = 7

    # Extra attempts after a serialization failure / deadlock
    CONFLICT_RETRIES: int = 3

    # Row lock wait limit per transaction (PostgreSQL only, 0 = no limit)
    LOCK_TIMEOUT_MS: int = 1500

    # Pause before retry n is n times this value
    RETRY_BACKOFF_MS: int = 20


def get_ledger_settings() -> LedgerSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "STOCKLEDGER", {})
    return LedgerSettings(**{
        k: v for k, v in user_settings.items()
        if k in LedgerSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_ledger_settings(), name)


ledger_settings = _LazySettings()
