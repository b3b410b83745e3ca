"""
Stockledger Models.

Core models for the inventory ledger:
- Product, Location: reference data
- Balance: quantity cache at (product, location, state)
- HistoryEntry: immutable ledger of operations
- ShippingInstruction: warehouse -> store transfer requests
- InboundPlan: expected supplier deliveries
- ReplenishmentCriteria: min/target stock per product and location
"""

from stockledger.models.balance import Balance
from stockledger.models.criteria import ReplenishmentCriteria
from stockledger.models.enums import (
    InboundStatus,
    InventoryState,
    LocationKind,
    OperationKind,
    ShippingStatus,
)
from stockledger.models.history import HistoryEntry
from stockledger.models.inbound import InboundPlan
from stockledger.models.location import Location
from stockledger.models.product import Product
from stockledger.models.shipping import ShippingInstruction

__all__ = [
    'InventoryState',
    'OperationKind',
    'LocationKind',
    'ShippingStatus',
    'InboundStatus',
    'Product',
    'Location',
    'Balance',
    'HistoryEntry',
    'ShippingInstruction',
    'InboundPlan',
    'ReplenishmentCriteria',
]
