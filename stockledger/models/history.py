"""
HistoryEntry model — Immutable ledger of inventory operations.
"""

from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import InventoryState, OperationKind


class HistoryQuerySet(models.QuerySet):
    def for_product(self, product):
        return self.filter(product=product)

    def touching(self, location):
        """Rows moving stock out of or into the location."""
        return self.filter(Q(from_location=location) | Q(to_location=location))

    def of_kind(self, *kinds):
        return self.filter(kind__in=kinds)

    def update(self, **kwargs):
        raise ValueError("History entries are immutable.")

    def delete(self):
        raise ValueError("History entries are immutable.")


class HistoryEntry(models.Model):
    """
    Immutable record of one inventory operation.

    Rules:
    - NEVER update() or delete()
    - Corrections are new entries in the opposite direction
    - quantity is always positive; direction comes from the state columns:
      (from_location, from_state) loses quantity, (to_location, to_state)
      gains it. Entries without states are informational only.

    Written by the ledger engine in the same transaction as the balance
    rows it describes, always as the last write.
    """

    kind = models.CharField(
        max_length=32,
        choices=OperationKind.choices,
        db_index=True,
        verbose_name=_('Operation'),
    )
    product = models.ForeignKey(
        'stockledger.Product',
        on_delete=models.PROTECT,
        related_name='history',
        verbose_name=_('Product'),
    )
    quantity = models.PositiveIntegerField(verbose_name=_('Quantity'))

    from_location = models.ForeignKey(
        'stockledger.Location',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('From location'),
    )
    to_location = models.ForeignKey(
        'stockledger.Location',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('To location'),
    )
    from_state = models.CharField(
        max_length=20,
        choices=InventoryState.choices,
        null=True,
        blank=True,
        verbose_name=_('From state'),
    )
    to_state = models.CharField(
        max_length=20,
        choices=InventoryState.choices,
        null=True,
        blank=True,
        verbose_name=_('To state'),
    )

    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_('Amount'),
        help_text=_('Monetary amount, e.g. the sale total'),
    )
    reference = models.CharField(
        max_length=64,
        blank=True,
        default='',
        verbose_name=_('Reference'),
        help_text=_('Related record, e.g. "shipping:12" or "inbound:3"'),
    )
    memo = models.TextField(blank=True, default='', verbose_name=_('Memo'))

    actor = models.CharField(max_length=150, verbose_name=_('Performed by'))
    performed_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        verbose_name=_('Performed at'),
    )

    objects = HistoryQuerySet.as_manager()

    class Meta:
        verbose_name = _('History entry')
        verbose_name_plural = _('History')
        ordering = ['-performed_at', '-id']
        indexes = [
            models.Index(fields=['product', 'performed_at'], name='stockledger_hist_prod_at_idx'),
            models.Index(fields=['kind', 'performed_at'], name='stockledger_hist_kind_at_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name='history_quantity_positive',
            ),
        ]

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError(
                "History entries are immutable. "
                "To correct, record a new entry in the opposite direction."
            )
        if not self.actor:
            raise ValueError("actor is required")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("History entries are immutable.")

    @property
    def moves_stock(self) -> bool:
        return self.from_state is not None or self.to_state is not None

    def __str__(self) -> str:
        src = f"{self.from_location.code}/{self.from_state}" if self.from_state else '-'
        dst = f"{self.to_location.code}/{self.to_state}" if self.to_state else '-'
        return f"{self.kind} {self.quantity}x {self.product} {src} -> {dst}"
