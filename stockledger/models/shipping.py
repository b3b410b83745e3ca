"""
ShippingInstruction model — warehouse → store transfer request.
"""

from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import ShippingStatus


class ShippingInstructionQuerySet(models.QuerySet):
    def pending(self):
        return self.filter(status=ShippingStatus.PENDING)


class ShippingInstruction(models.Model):
    """
    Request to move stock from a warehouse shelf to a store.

    LIFECYCLE:

        ┌─────────┐   confirm()   ┌───────────┐
        │ PENDING │ ────────────► │ COMPLETED │
        └─────────┘               └───────────┘

    Creating an instruction does not touch balances. Confirmation moves
    the stock in one ledger transfer and happens exactly once.
    reserve() may earmark source stock (NORMAL -> RESERVED) beforehand;
    it does not change the status.
    """

    product = models.ForeignKey(
        'stockledger.Product',
        on_delete=models.PROTECT,
        related_name='shipping_instructions',
        verbose_name=_('Product'),
    )
    from_location = models.ForeignKey(
        'stockledger.Location',
        on_delete=models.PROTECT,
        related_name='outgoing_shipments',
        verbose_name=_('From'),
    )
    to_location = models.ForeignKey(
        'stockledger.Location',
        on_delete=models.PROTECT,
        related_name='incoming_shipments',
        verbose_name=_('To'),
    )
    quantity = models.PositiveIntegerField(verbose_name=_('Quantity'))
    requested_date = models.DateField(
        null=True,
        blank=True,
        verbose_name=_('Requested date'),
    )
    status = models.CharField(
        max_length=20,
        choices=ShippingStatus.choices,
        default=ShippingStatus.PENDING,
        db_index=True,
        verbose_name=_('Status'),
    )
    is_reserved = models.BooleanField(
        default=False,
        verbose_name=_('Reserved'),
        help_text=_('Source stock already moved to RESERVED'),
    )
    memo = models.TextField(blank=True, default='')

    created_by = models.CharField(max_length=150, verbose_name=_('Created by'))
    created_at = models.DateTimeField(default=timezone.now)
    completed_by = models.CharField(max_length=150, blank=True, default='')
    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Completed at'))

    objects = ShippingInstructionQuerySet.as_manager()

    class Meta:
        verbose_name = _('Shipping instruction')
        verbose_name_plural = _('Shipping instructions')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['product', 'to_location', 'status'], name='stockledger_ship_pending_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name='shipping_quantity_positive',
            ),
        ]

    @property
    def is_pending(self) -> bool:
        return self.status == ShippingStatus.PENDING

    @property
    def reference(self) -> str:
        return f"shipping:{self.pk}"

    def __str__(self) -> str:
        return f"#{self.pk} {self.quantity}x {self.product} {self.from_location.code} -> {self.to_location.code}"
