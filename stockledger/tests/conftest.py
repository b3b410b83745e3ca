"""
Pytest fixtures for Stockledger tests.
"""

from datetime import date
from decimal import Decimal

import pytest

from stockledger import ledger
from stockledger.models import (
    InventoryState,
    Location,
    LocationKind,
    OperationKind,
    Product,
)


@pytest.fixture
def actor():
    """Warehouse operator."""
    return 'wh-01'


@pytest.fixture
def store_actor():
    """Store clerk."""
    return 'store-1'


@pytest.fixture
def sku1(db):
    """Create a test product."""
    return Product.objects.create(
        sku='SKU1',
        model_name='Classic Tee',
        color='Black',
        size='M',
        category='Tops',
        retail_price=Decimal('29.00'),
        cost_price=Decimal('11.50'),
    )


@pytest.fixture
def sku2(db):
    """Create a second test product."""
    return Product.objects.create(
        sku='SKU2',
        model_name='Slim Jeans',
        color='Indigo',
        size='32',
        category='Bottoms',
        retail_price=Decimal('79.00'),
    )


@pytest.fixture
def shelf_a(db):
    """Warehouse shelf, first in display order."""
    return Location.objects.create(
        code='SHELF_A',
        name='Shelf A',
        kind=LocationKind.WAREHOUSE,
        display_order=1,
    )


@pytest.fixture
def shelf_b(db):
    """Second warehouse shelf."""
    return Location.objects.create(
        code='SHELF_B',
        name='Shelf B',
        kind=LocationKind.WAREHOUSE,
        display_order=2,
    )


@pytest.fixture
def store_1(db):
    """Create a store."""
    return Location.objects.create(
        code='STORE_1',
        name='Store 1',
        kind=LocationKind.STORE,
        display_order=10,
    )


@pytest.fixture
def store_2(db):
    """Create a second store."""
    return Location.objects.create(
        code='STORE_2',
        name='Store 2',
        kind=LocationKind.STORE,
        display_order=11,
    )


@pytest.fixture
def stock(actor):
    """Put NORMAL stock at a location through the ledger."""

    def _stock(product, location, quantity, state=InventoryState.NORMAL):
        return ledger.adjust(
            product, location, None, state, quantity,
            OperationKind.GOODS_RECEIVED, actor=actor, memo='Opening stock',
        )

    return _stock


@pytest.fixture
def today():
    """Fixed replenishment date."""
    return date(2024, 1, 10)
