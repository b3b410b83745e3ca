"""
Ledger services — modular organization of inventory operations.

    from stockledger.services import LedgerMovements, ShippingWorkflow, ReceivingWorkflow
"""

from stockledger.services.catalog import Catalog
from stockledger.services.integrity import Integrity
from stockledger.services.ledger import LedgerMovements
from stockledger.services.queries import LedgerQueries
from stockledger.services.receiving import ReceivingWorkflow
from stockledger.services.replenishment import Replenishment
from stockledger.services.shipping import ShippingWorkflow

__all__ = [
    'LedgerMovements',
    'ShippingWorkflow',
    'ReceivingWorkflow',
    'Replenishment',
    'Catalog',
    'LedgerQueries',
    'Integrity',
]
