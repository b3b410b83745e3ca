"""
Enums for Stockledger models.

All vocabularies are closed: adding a value means a migration and a
code change, never free text.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class LocationKind(models.TextChoices):
    """Type of location."""
    WAREHOUSE = 'warehouse', _('Warehouse shelf')
    STORE = 'store', _('Store')


class InventoryState(models.TextChoices):
    """
    Quality/availability state of a unit of stock.

    NORMAL:        sellable / shippable
    RESERVED:      earmarked for a pending shipment
    IN_INSPECTION: received but not yet graded
    DEFECTIVE:     excluded from sale
    """
    NORMAL = 'normal', _('Normal')
    RESERVED = 'reserved', _('Reserved')
    IN_INSPECTION = 'in_inspection', _('In inspection')
    DEFECTIVE = 'defective', _('Defective')


class OperationKind(models.TextChoices):
    """Kind of operation recorded in history. Metadata only."""
    SALE = 'sale', _('Sale')
    CUSTOMER_RETURN = 'customer_return', _('Customer return')
    SHIP_REQUEST_CREATED = 'ship_request_created', _('Shipping request created')
    RESERVE = 'reserve', _('Reserve')
    SHIP_CONFIRMED = 'ship_confirmed', _('Shipment confirmed')
    GOODS_RECEIVED = 'goods_received', _('Goods received')
    SHELVED = 'shelved', _('Shelved')
    STORE_RETURN_SENT = 'store_return_sent', _('Store return sent')
    RETURN_RECEIVED = 'return_received', _('Return received')
    RETURN_INSPECTED = 'return_inspected', _('Return inspected')


class ShippingStatus(models.TextChoices):
    """Shipping instruction lifecycle status."""
    PENDING = 'pending', _('Pending')
    COMPLETED = 'completed', _('Completed')


class InboundStatus(models.TextChoices):
    """Inbound plan lifecycle status."""
    PENDING = 'pending', _('Pending')
    COMPLETED = 'completed', _('Completed')
    CANCELED = 'canceled', _('Canceled')
