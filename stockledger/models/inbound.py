"""
InboundPlan model — expected incoming goods from a supplier.
"""

from django.db import models
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import InboundStatus


class InboundPlanQuerySet(models.QuerySet):
    def pending(self):
        return self.filter(status=InboundStatus.PENDING)


class InboundPlan(models.Model):
    """
    Purchase / replenishment expectation, fulfilled by receipts.

    LIFECYCLE:

        ┌─────────┐  receive() until received == planned  ┌───────────┐
        │ PENDING │ ─────────────────────────────────────► │ COMPLETED │
        └─────────┘                                        └───────────┘
             │ cancel()
             ▼
        ┌──────────┐
        │ CANCELED │
        └──────────┘

    received_quantity never decreases and never exceeds planned_quantity.
    """

    product = models.ForeignKey(
        'stockledger.Product',
        on_delete=models.PROTECT,
        related_name='inbound_plans',
        verbose_name=_('Product'),
    )
    supplier_name = models.CharField(max_length=150, verbose_name=_('Supplier'))
    planned_quantity = models.PositiveIntegerField(verbose_name=_('Planned'))
    received_quantity = models.PositiveIntegerField(default=0, verbose_name=_('Received'))
    due_date = models.DateField(db_index=True, verbose_name=_('Due date'))
    status = models.CharField(
        max_length=20,
        choices=InboundStatus.choices,
        default=InboundStatus.PENDING,
        db_index=True,
        verbose_name=_('Status'),
    )
    memo = models.TextField(blank=True, default='')

    created_by = models.CharField(max_length=150, verbose_name=_('Created by'))
    created_at = models.DateTimeField(default=timezone.now)
    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text=_('When the plan was completed or canceled'),
    )

    objects = InboundPlanQuerySet.as_manager()

    class Meta:
        verbose_name = _('Inbound plan')
        verbose_name_plural = _('Inbound plans')
        ordering = ['due_date', 'id']
        constraints = [
            models.CheckConstraint(
                condition=Q(planned_quantity__gt=0),
                name='inbound_planned_positive',
            ),
            models.CheckConstraint(
                condition=Q(received_quantity__lte=F('planned_quantity')),
                name='inbound_received_within_planned',
            ),
        ]

    @property
    def remaining_quantity(self) -> int:
        return self.planned_quantity - self.received_quantity

    @property
    def is_pending(self) -> bool:
        return self.status == InboundStatus.PENDING

    @property
    def reference(self) -> str:
        return f"inbound:{self.pk}"

    def __str__(self) -> str:
        return f"#{self.pk} {self.product} {self.received_quantity}/{self.planned_quantity} ({self.status})"
