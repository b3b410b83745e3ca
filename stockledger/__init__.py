"""
Django Stockledger — inventory ledger for a warehouse and its stores.

Usage:
    from stockledger import ledger, LedgerError

    ledger.adjust(product, shelf, None, InventoryState.NORMAL, 20, OperationKind.GOODS_RECEIVED, actor='wh-01')
    ledger.get_balance(product, shelf, InventoryState.NORMAL)  # 20
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'ledger':
        from stockledger.service import Ledger
        return Ledger
    elif name in ('LedgerError', 'InsufficientInventory', 'NotFound',
                  'ValidationFailure', 'InvalidState', 'ConcurrencyConflict'):
        from stockledger import exceptions
        return getattr(exceptions, name)
    elif name in ('Product', 'Location', 'Balance', 'HistoryEntry',
                  'ShippingInstruction', 'InboundPlan', 'ReplenishmentCriteria',
                  'InventoryState', 'OperationKind', 'LocationKind',
                  'ShippingStatus', 'InboundStatus'):
        from stockledger import models
        return getattr(models, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'ledger',
    'LedgerError',
    'InsufficientInventory',
    'NotFound',
    'ValidationFailure',
    'InvalidState',
    'ConcurrencyConflict',
    'Product',
    'Location',
    'Balance',
    'HistoryEntry',
    'ShippingInstruction',
    'InboundPlan',
    'ReplenishmentCriteria',
    'InventoryState',
    'OperationKind',
    'LocationKind',
    'ShippingStatus',
    'InboundStatus',
]

__version__ = '0.1.0'
