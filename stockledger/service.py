"""
Ledger Service — The single public interface for all inventory operations.

Usage:
    from stockledger import ledger, LedgerError

    ledger.adjust(sku1, shelf_a, InventoryState.NORMAL, None, 3, OperationKind.SALE, actor='store-1')
    instruction = ledger.create_shipping_instruction(sku1, shelf_a, store_1, 5, actor='store-1')
    ledger.confirm_shipping_instruction(instruction.pk, actor='wh-01')
    ledger.low_stock_alerts()

Every state-changing method takes an explicit actor and runs in its own
transaction (or joins the caller's). See stockledger.services.
"""

from stockledger.services import (
    Catalog,
    Integrity,
    LedgerMovements,
    LedgerQueries,
    ReceivingWorkflow,
    Replenishment,
    ShippingWorkflow,
)


class Ledger(
    LedgerMovements,
    ShippingWorkflow,
    ReceivingWorkflow,
    Replenishment,
    Catalog,
    LedgerQueries,
    Integrity,
):
    """
    Single interface for all ledger operations.

    Parameter convention: (product, location(s), states, quantity, ..., actor)
    Products and locations may be passed as instances or primary keys.
    """
