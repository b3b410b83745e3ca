"""
ReplenishmentCriteria model — per product/location stock thresholds.

Usage:
    ledger.set_replenishment_criteria(
        product, store, min_stock=2, target_stock=5, standard_quantity=3,
    )

    # Read side
    alerts = ledger.low_stock_alerts()
"""

from django.db import models
from django.db.models import F, Q
from django.utils.translation import gettext_lazy as _


class ReplenishmentCriteria(models.Model):
    """
    Thresholds for one product at one location.

    Stock below min_stock raises a low-stock alert; replenishment aims at
    target_stock; standard_quantity is the default order size.
    """

    product = models.ForeignKey(
        'stockledger.Product',
        on_delete=models.CASCADE,
        related_name='replenishment_criteria',
        verbose_name=_('Product'),
    )
    location = models.ForeignKey(
        'stockledger.Location',
        on_delete=models.CASCADE,
        related_name='replenishment_criteria',
        verbose_name=_('Location'),
    )
    min_stock = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Minimum stock'),
        help_text=_('Alert when NORMAL stock is below this value'),
    )
    target_stock = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Target stock'),
    )
    standard_quantity = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Standard replenishment'),
        help_text=_('Default order size (0 = top up to target)'),
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Replenishment criteria')
        verbose_name_plural = _('Replenishment criteria')
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'location'],
                name='unique_criteria_per_product_location',
            ),
            models.CheckConstraint(
                condition=Q(min_stock__lte=F('target_stock')),
                name='criteria_min_not_above_target',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product} @ {self.location.code}: min {self.min_stock} / target {self.target_stock}"
