"""
Balance model — Quantity cache at a (product, location, state) coordinate.
"""

from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import InventoryState


class BalanceQuerySet(models.QuerySet):
    """QuerySet with helper methods for Balance queries."""

    def non_empty(self):
        return self.filter(quantity__gt=0)

    def visible(self):
        """Only rows whose product and location are both active."""
        return self.filter(product__is_active=True, location__is_active=True)


class Balance(models.Model):
    """
    Quantity of a product at a location in one inventory state.

    Coordinates:
    - product: WHAT
    - location: WHERE
    - state: in which condition (normal, reserved, in inspection, defective)

    Performance:
    - quantity is a projection of HistoryEntry, written by the ledger engine
      in the same transaction as the history row
    - Read is O(1), not O(N)
    - Audit with ledger.verify_balances()
    """

    product = models.ForeignKey(
        'stockledger.Product',
        on_delete=models.PROTECT,
        related_name='balances',
        verbose_name=_('Product'),
    )
    location = models.ForeignKey(
        'stockledger.Location',
        on_delete=models.PROTECT,
        related_name='balances',
        verbose_name=_('Location'),
    )
    state = models.CharField(
        max_length=20,
        choices=InventoryState.choices,
        verbose_name=_('State'),
    )
    quantity = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Quantity'),
    )
    last_updated = models.DateTimeField(default=timezone.now)

    objects = BalanceQuerySet.as_manager()

    class Meta:
        verbose_name = _('Balance')
        verbose_name_plural = _('Balances')
        ordering = ['product', 'location', 'state']
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'location', 'state'],
                name='unique_balance_coordinate',
            ),
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name='balance_quantity_non_negative',
            ),
        ]
        indexes = [
            models.Index(fields=['location', 'state'], name='stockledger_bal_loc_state_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.product} [{self.location.code}/{self.state}]: {self.quantity}"
