"""
Tests for low stock alerts and auto-replenishment.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from stockledger import ledger, NotFound, ValidationFailure
from stockledger.models import (
    InboundPlan,
    InboundStatus,
    InventoryState,
    Location,
    LocationKind,
    OperationKind,
    Product,
    ShippingInstruction,
    ShippingStatus,
)


pytestmark = pytest.mark.django_db

NORMAL = InventoryState.NORMAL


@pytest.fixture
def sku3(db):
    return Product.objects.create(
        sku='SKU3', model_name='Hoodie', color='Grey', size='L', retail_price=Decimal('59.00'),
    )


class TestLowStockAlerts:
    """Tests for ledger.low_stock_alerts()."""

    def test_shortage_and_recommendation(self, sku3, store_2, stock):
        """Scenario: min 5, target 20, stock 2 -> shortage 3, recommend 18."""
        ledger.set_replenishment_criteria(sku3, store_2, min_stock=5, target_stock=20)
        stock(sku3, store_2, 2)

        alerts = ledger.low_stock_alerts()

        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.product == sku3
        assert alert.location == store_2
        assert alert.current_stock == 2
        assert alert.shortage_amount == 3
        assert alert.recommended_quantity == 18

    def test_missing_balance_counts_as_zero(self, sku1, store_1):
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=2, target_stock=6)

        alert, = ledger.low_stock_alerts()

        assert alert.current_stock == 0
        assert alert.shortage_amount == 2

    def test_at_minimum_is_not_low(self, sku1, store_1, stock):
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=3, target_stock=6)
        stock(sku1, store_1, 3)

        assert ledger.low_stock_alerts() == []

    def test_only_normal_stock_counts(self, sku1, store_1, stock):
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=3, target_stock=6)
        stock(sku1, store_1, 5, state=InventoryState.DEFECTIVE)

        alert, = ledger.low_stock_alerts()

        assert alert.current_stock == 0

    def test_pending_shipment_suppresses_alert(self, sku1, shelf_a, store_1, store_actor):
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=3, target_stock=6)
        ledger.create_shipping_instruction(sku1, shelf_a, store_1, 6, actor=store_actor)

        assert ledger.low_stock_alerts() == []

    def test_completed_shipment_does_not_suppress(self, sku1, shelf_a, store_1, stock, store_actor, actor):
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=5, target_stock=10)
        stock(sku1, shelf_a, 2)
        instruction = ledger.create_shipping_instruction(sku1, shelf_a, store_1, 2, actor=store_actor)
        ledger.confirm_shipping_instruction(instruction.pk, actor=actor)

        alert, = ledger.low_stock_alerts()

        assert alert.current_stock == 2

    def test_inactive_product_or_location_ignored(self, sku1, sku2, store_1, store_2):
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=3, target_stock=6)
        ledger.set_replenishment_criteria(sku2, store_2, min_stock=3, target_stock=6)
        ledger.update_product(sku1, is_active=False)
        ledger.update_location(store_2, is_active=False)

        assert ledger.low_stock_alerts() == []

    def test_ordered_by_shortage_desc(self, sku1, sku2, store_1, store_2):
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=2, target_stock=4)
        ledger.set_replenishment_criteria(sku2, store_2, min_stock=7, target_stock=9)
        ledger.set_replenishment_criteria(sku1, store_2, min_stock=2, target_stock=4)

        alerts = ledger.low_stock_alerts()

        assert [a.shortage_amount for a in alerts] == [7, 2, 2]
        # ties by location display order
        assert [a.location for a in alerts[1:]] == [store_1, store_2]

    def test_limit(self, sku1, sku2, store_1, store_2, settings):
        settings.STOCKLEDGER = {'LOW_STOCK_ALERT_LIMIT': 1}
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=2, target_stock=4)
        ledger.set_replenishment_criteria(sku2, store_2, min_stock=7, target_stock=9)

        assert len(ledger.low_stock_alerts()) == 1
        assert len(ledger.low_stock_alerts(limit=0)) == 2

    def test_read_only(self, sku1, store_1):
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=2, target_stock=4)

        ledger.low_stock_alerts()

        assert ShippingInstruction.objects.count() == 0
        assert InboundPlan.objects.count() == 0


class TestAutoReplenish:
    """Tests for ledger.auto_replenish()."""

    def test_store_shortage_creates_shipping_instruction(self, sku1, shelf_a, store_1, actor, today):
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=3, target_stock=8)

        result = ledger.auto_replenish(today, actor=actor)

        instruction, = result.shipping_instructions
        assert instruction.from_location == shelf_a
        assert instruction.to_location == store_1
        assert instruction.quantity == 8
        assert instruction.requested_date == today
        assert instruction.status == ShippingStatus.PENDING
        assert result.created_count == 1

    def test_standard_quantity_wins(self, sku1, shelf_a, store_1, actor, today):
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=3, target_stock=8, standard_quantity=5)

        result = ledger.auto_replenish(today, actor=actor)

        assert result.shipping_instructions[0].quantity == 5

    def test_first_warehouse_by_display_order(self, sku1, shelf_a, shelf_b, store_1, actor, today):
        ledger.update_location(shelf_a, display_order=5)

        ledger.set_replenishment_criteria(sku1, store_1, min_stock=3, target_stock=8)
        result = ledger.auto_replenish(today, actor=actor)

        assert result.shipping_instructions[0].from_location == shelf_b

    def test_warehouse_shortage_creates_inbound_plan(self, sku1, shelf_a, actor, today):
        ledger.set_replenishment_criteria(sku1, shelf_a, min_stock=10, target_stock=30)

        result = ledger.auto_replenish(today, actor=actor)

        plan, = result.inbound_plans
        assert plan.planned_quantity == 30
        assert plan.supplier_name == 'Default supplier'
        assert plan.due_date == today + timedelta(days=7)
        assert plan.status == InboundStatus.PENDING

    def test_pending_inbound_plan_skips_warehouse_alert(self, sku1, shelf_a, actor, today):
        ledger.set_replenishment_criteria(sku1, shelf_a, min_stock=10, target_stock=30)
        ledger.create_inbound_plan(sku1, 'Acme', 30, today, actor=actor)

        result = ledger.auto_replenish(today, actor=actor)

        assert result.inbound_plans == []
        assert result.skipped[0][1] == 'inbound plan pending'

    def test_second_run_creates_nothing(self, sku1, shelf_a, store_1, actor, today):
        """Pending instructions and plans suppress repeat replenishment."""
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=3, target_stock=8)
        ledger.set_replenishment_criteria(sku1, shelf_a, min_stock=10, target_stock=30)
        ledger.auto_replenish(today, actor=actor)

        result = ledger.auto_replenish(today, actor=actor)

        assert result.created_count == 0
        assert ShippingInstruction.objects.count() == 1
        assert InboundPlan.objects.count() == 1

    def test_no_warehouse_raises_not_found(self, sku1, store_1, actor, today):
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=3, target_stock=8)

        with pytest.raises(NotFound):
            ledger.auto_replenish(today, actor=actor)

        assert ShippingInstruction.objects.count() == 0

    def test_inactive_warehouse_not_used(self, sku1, store_1, actor, today):
        Location.objects.create(code='OLD', name='Old shelf', kind=LocationKind.WAREHOUSE, is_active=False)
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=3, target_stock=8)

        with pytest.raises(NotFound):
            ledger.auto_replenish(today, actor=actor)

    def test_does_not_move_stock(self, sku1, shelf_a, store_1, stock, actor, today):
        stock(sku1, shelf_a, 50)
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=3, target_stock=8)

        ledger.auto_replenish(today, actor=actor)

        assert ledger.get_balance(sku1, shelf_a, NORMAL) == 50
        assert ledger.get_balance(sku1, store_1, NORMAL) == 0
        assert len(ledger.list_history(kinds=[OperationKind.SHIP_CONFIRMED])) == 0

    def test_rejects_bad_date(self, actor):
        with pytest.raises(ValidationFailure) as exc:
            ledger.auto_replenish('today', actor=actor)

        assert 'date' in exc.value.errors

    def test_date_accepts_date_instances(self, sku1, shelf_a, store_1, actor):
        ledger.set_replenishment_criteria(sku1, store_1, min_stock=3, target_stock=8)

        result = ledger.auto_replenish(date(2024, 2, 1), actor=actor)

        assert result.date == date(2024, 2, 1)
