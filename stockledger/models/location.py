"""
Location model — Where stock exists.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import LocationKind


class LocationQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def warehouses(self):
        return self.filter(kind=LocationKind.WAREHOUSE)

    def stores(self):
        return self.filter(kind=LocationKind.STORE)


class Location(models.Model):
    """
    A warehouse shelf or a store.

    Locations are stable entities, created during system setup. Once a
    balance or history row points at a location its identity is permanent;
    deactivate instead of deleting.

    Examples:
        Location.objects.create(code='SHELF_A', name='Shelf A', kind=LocationKind.WAREHOUSE)
        Location.objects.create(code='STORE_1', name='Store 1', kind=LocationKind.STORE)
    """

    code = models.SlugField(
        unique=True,
        max_length=50,
        verbose_name=_('Code'),
        help_text=_('Unique identifier (e.g. SHELF_A, STORE_1)'),
    )
    name = models.CharField(
        max_length=100,
        verbose_name=_('Name'),
    )
    kind = models.CharField(
        max_length=20,
        choices=LocationKind.choices,
        verbose_name=_('Kind'),
    )
    display_order = models.IntegerField(
        default=0,
        verbose_name=_('Display order'),
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_('Active'),
    )

    objects = LocationQuerySet.as_manager()

    class Meta:
        verbose_name = _('Location')
        verbose_name_plural = _('Locations')
        ordering = ['display_order', 'code']

    @property
    def is_warehouse(self) -> bool:
        return self.kind == LocationKind.WAREHOUSE

    @property
    def is_store(self) -> bool:
        return self.kind == LocationKind.STORE

    def __str__(self) -> str:
        return self.name
