"""
Integrity — compare the Balance projection with the history fold.

Balances are a cache over history. verify_balances() recomputes every
(product, location, state) from history and reports rows that diverge;
with fix=True it rewrites them.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass

from django.db.models import Sum
from django.utils import timezone

from stockledger.models.balance import Balance
from stockledger.models.history import HistoryEntry
from stockledger.services.transactions import ledger_transaction

logger = logging.getLogger('stockledger')


@dataclass(frozen=True)
class BalanceDrift:
    product_id: int
    location_id: int
    state: str
    recorded: int
    expected: int

    @property
    def diff(self) -> int:
        return self.expected - self.recorded


def fold_history() -> dict[tuple[int, int, str], int]:
    """Expected quantity per coordinate, from history alone."""
    totals = defaultdict(int)

    incoming = (
        HistoryEntry.objects.filter(to_state__isnull=False, to_location__isnull=False)
        .values('product_id', 'to_location_id', 'to_state')
        .annotate(t=Sum('quantity'))
        .order_by()
    )
    for row in incoming:
        totals[(row['product_id'], row['to_location_id'], row['to_state'])] += row['t']

    outgoing = (
        HistoryEntry.objects.filter(from_state__isnull=False, from_location__isnull=False)
        .values('product_id', 'from_location_id', 'from_state')
        .annotate(t=Sum('quantity'))
        .order_by()
    )
    for row in outgoing:
        totals[(row['product_id'], row['from_location_id'], row['from_state'])] -= row['t']

    return dict(totals)


class Integrity:
    """Balance/history consistency checks."""

    @classmethod
    @ledger_transaction
    def verify_balances(cls, fix: bool = False) -> list[BalanceDrift]:
        """
        Find (and optionally repair) balances that disagree with history.

        Returns:
            One BalanceDrift per diverging coordinate
        """
        expected = fold_history()
        drifts = []

        rows = Balance.objects.all()
        if fix:
            rows = rows.select_for_update()

        seen = set()
        for balance in rows.order_by('pk'):
            key = (balance.product_id, balance.location_id, balance.state)
            seen.add(key)
            want = expected.get(key, 0)
            if balance.quantity != want:
                drifts.append(BalanceDrift(*key, recorded=balance.quantity, expected=want))

        for key, want in expected.items():
            if key not in seen and want != 0:
                drifts.append(BalanceDrift(*key, recorded=0, expected=want))

        if fix:
            now = timezone.now()
            for drift in drifts:
                Balance.objects.update_or_create(
                    product_id=drift.product_id,
                    location_id=drift.location_id,
                    state=drift.state,
                    defaults={'quantity': max(drift.expected, 0), 'last_updated': now},
                )
                logger.warning(
                    "ledger.balance_repaired",
                    extra={
                        "product_id": drift.product_id,
                        "location_id": drift.location_id,
                        "state": drift.state,
                        "recorded": drift.recorded,
                        "expected": drift.expected,
                    },
                )

        return drifts
