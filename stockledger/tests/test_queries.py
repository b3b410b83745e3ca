"""
Tests for read-only ledger queries.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from stockledger import ledger, NotFound
from stockledger.models import (
    HistoryEntry,
    InboundStatus,
    InventoryState,
    OperationKind,
    ShippingStatus,
)


pytestmark = pytest.mark.django_db

NORMAL = InventoryState.NORMAL


class TestListBalances:
    """Tests for ledger.list_balances()."""

    def test_hides_empty_rows_by_default(self, sku1, store_1, stock, actor):
        stock(sku1, store_1, 2)
        ledger.adjust(sku1, store_1, NORMAL, None, 2, OperationKind.SALE, actor=actor)

        assert list(ledger.list_balances()) == []
        assert ledger.list_balances(include_empty=True).count() == 1

    def test_filters(self, sku1, sku2, shelf_a, store_1, stock):
        stock(sku1, shelf_a, 5)
        stock(sku2, shelf_a, 3)
        stock(sku1, store_1, 1)

        assert ledger.list_balances(product=sku1).count() == 2
        assert ledger.list_balances(location=shelf_a).count() == 2
        assert ledger.list_balances(state=InventoryState.DEFECTIVE).count() == 0

    def test_inactive_location_hidden(self, sku1, store_1, stock):
        stock(sku1, store_1, 2)
        ledger.update_location(store_1, is_active=False)

        assert ledger.list_balances().count() == 0
        assert ledger.list_balances(include_inactive=True).count() == 1


class TestListHistory:
    """Tests for ledger.list_history()."""

    def test_newest_first(self, sku1, store_1, stock, actor):
        stock(sku1, store_1, 5)
        ledger.adjust(sku1, store_1, NORMAL, None, 1, OperationKind.SALE, actor=actor)

        kinds = [e.kind for e in ledger.list_history()]

        assert kinds == [OperationKind.SALE, OperationKind.GOODS_RECEIVED]

    def test_location_matches_either_side(self, sku1, shelf_a, store_1, store_2, stock, actor):
        stock(sku1, shelf_a, 5)
        ledger.transfer(sku1, shelf_a, store_1, NORMAL, NORMAL, 2, OperationKind.SHIP_CONFIRMED, actor=actor)
        stock(sku1, store_2, 1)

        assert len(ledger.list_history(location=store_1)) == 1
        assert len(ledger.list_history(location=shelf_a)) == 2

    def test_kind_filter_ignores_unknown_values(self, sku1, store_1, stock, actor):
        stock(sku1, store_1, 5)
        ledger.adjust(sku1, store_1, NORMAL, None, 1, OperationKind.SALE, actor=actor)

        rows = ledger.list_history(kinds=[OperationKind.SALE, 'bogus'])

        assert [e.kind for e in rows] == [OperationKind.SALE]

    def test_default_limit_from_settings(self, sku1, store_1, stock, settings):
        settings.STOCKLEDGER = {'HISTORY_DEFAULT_LIMIT': 3}
        for _ in range(5):
            stock(sku1, store_1, 1)

        assert len(ledger.list_history()) == 3
        assert len(ledger.list_history(limit=0)) == 5


class TestWorkflowQueries:
    """Tests for shipping/inbound lookups."""

    def test_pending_instructions_by_requested_date(self, sku1, shelf_a, store_1, store_2, store_actor):
        late = ledger.create_shipping_instruction(
            sku1, shelf_a, store_1, 1, actor=store_actor, requested_date=date(2024, 3, 2),
        )
        undated = ledger.create_shipping_instruction(sku1, shelf_a, store_2, 1, actor=store_actor)
        early = ledger.create_shipping_instruction(
            sku1, shelf_a, store_2, 1, actor=store_actor, requested_date=date(2024, 3, 1),
        )

        rows = list(ledger.list_shipping_instructions(status=ShippingStatus.PENDING))

        assert rows == [early, late, undated]

    def test_get_shipping_instruction_not_found(self):
        with pytest.raises(NotFound) as exc:
            ledger.get_shipping_instruction(404)

        assert exc.value.data == {'entity': 'ShippingInstruction', 'id': 404}

    def test_inbound_plan_filters(self, sku1, sku2, actor):
        due = date(2024, 1, 17)
        ledger.create_inbound_plan(sku1, 'Acme Textiles', 10, due, actor=actor)
        later = ledger.create_inbound_plan(sku2, 'Denim Co', 5, due + timedelta(days=7), actor=actor)
        ledger.cancel_inbound_plan(later.pk, actor=actor)

        assert ledger.list_inbound_plans(status=InboundStatus.PENDING).count() == 1
        assert ledger.list_inbound_plans(due_on_or_before=due).count() == 1
        assert ledger.list_inbound_plans(search='denim').get() == later
        assert ledger.list_inbound_plans(search='SKU1').count() == 1

    def test_get_inbound_plan(self, sku1, actor):
        plan = ledger.create_inbound_plan(sku1, 'Acme', 10, date(2024, 1, 17), actor=actor)

        assert ledger.get_inbound_plan(plan.pk) == plan
        with pytest.raises(NotFound):
            ledger.get_inbound_plan(plan.pk + 1)


class TestSummaries:
    """Tests for state_summary() and dashboard_metrics()."""

    def test_state_summary_lists_every_state(self, sku1, shelf_a, stock):
        stock(sku1, shelf_a, 5)
        stock(sku1, shelf_a, 2, state=InventoryState.DEFECTIVE)

        summary = ledger.state_summary()

        assert summary == {
            'normal': 5,
            'reserved': 0,
            'in_inspection': 0,
            'defective': 2,
        }

    def test_dashboard_metrics(self, sku1, shelf_a, store_1, stock, actor, store_actor):
        today = timezone.localdate()
        stock(sku1, store_1, 5)
        ledger.adjust(
            sku1, store_1, NORMAL, None, 2, OperationKind.SALE,
            actor=store_actor, amount=Decimal('58.00'),
        )
        ledger.create_shipping_instruction(sku1, shelf_a, store_1, 3, actor=store_actor)
        plan = ledger.create_inbound_plan(sku1, 'Acme', 10, today, actor=actor)
        ledger.receive_inbound_plan(plan.pk, 4, 0, shelf_a, memo='', actor=actor)
        ledger.set_replenishment_criteria(sku1, shelf_a, min_stock=8, target_stock=12)

        metrics = ledger.dashboard_metrics()

        assert metrics['pending_shipments'] == 1
        assert metrics['low_stock_items'] == 1
        # opening stock plus the receipt
        assert metrics['today_receiving'] == {'processed': 2, 'planned': 1}
        assert metrics['week_sales'] == 2

    def test_old_sales_excluded(self, sku1, store_1, stock, actor):
        stock(sku1, store_1, 5)
        HistoryEntry.objects.create(
            kind=OperationKind.SALE,
            product=sku1,
            quantity=1,
            from_location=store_1,
            from_state=NORMAL,
            actor=actor,
            performed_at=timezone.now() - timedelta(days=30),
        )

        assert ledger.dashboard_metrics()['week_sales'] == 0
