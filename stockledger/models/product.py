"""
Product model — catalog identity referenced by the ledger.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ProductQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class Product(models.Model):
    """
    A sellable SKU.

    Identity (sku, model, color, size, category) is immutable once stock
    has been recorded against it. Products are never deleted: balances and
    history reference them with PROTECT. Retire with is_active=False.
    """

    sku = models.CharField(
        max_length=64,
        unique=True,
        verbose_name=_('SKU'),
    )
    model_name = models.CharField(max_length=100, verbose_name=_('Model'))
    color = models.CharField(max_length=50, verbose_name=_('Color'))
    size = models.CharField(max_length=20, verbose_name=_('Size'))
    category = models.CharField(
        max_length=100,
        blank=True,
        default='',
        verbose_name=_('Category'),
    )
    retail_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        verbose_name=_('Retail price'),
    )
    cost_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_('Cost price'),
    )
    is_active = models.BooleanField(default=True, verbose_name=_('Active'))
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        verbose_name = _('Product')
        verbose_name_plural = _('Products')
        ordering = ['sku']

    def __str__(self) -> str:
        return self.sku
