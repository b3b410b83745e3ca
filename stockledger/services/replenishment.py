"""
Replenishment — low stock alerts and the auto-replenishment planner.

Usage:
    from stockledger import ledger

    # Read-only view, safe to call anywhere
    alerts = ledger.low_stock_alerts()

    # Batch: turn alerts into shipping instructions / inbound plans
    result = ledger.auto_replenish(date.today(), actor='wh-01')
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from django.db.models import Exists, IntegerField, OuterRef, Subquery, Value
from django.db.models.functions import Coalesce

from stockledger.conf import ledger_settings
from stockledger.exceptions import NotFound, ValidationFailure
from stockledger.models.balance import Balance
from stockledger.models.criteria import ReplenishmentCriteria
from stockledger.models.enums import InventoryState
from stockledger.models.inbound import InboundPlan
from stockledger.models.location import Location
from stockledger.models.product import Product
from stockledger.models.shipping import ShippingInstruction
from stockledger.services.receiving import ReceivingWorkflow
from stockledger.services.shipping import ShippingWorkflow
from stockledger.services.transactions import ledger_transaction

logger = logging.getLogger('stockledger')


@dataclass(frozen=True)
class LowStockAlert:
    """A (product, location) whose NORMAL stock is below its minimum."""

    criteria: ReplenishmentCriteria
    product: Product
    location: Location
    current_stock: int
    min_stock: int
    target_stock: int
    shortage_amount: int
    recommended_quantity: int

    @property
    def order_quantity(self) -> int:
        """Standard replenishment size, falling back to the recommendation."""
        return self.criteria.standard_quantity or self.recommended_quantity


@dataclass
class ReplenishmentResult:
    """Outcome of one auto_replenish run."""

    date: date
    shipping_instructions: list[ShippingInstruction] = field(default_factory=list)
    inbound_plans: list[InboundPlan] = field(default_factory=list)
    skipped: list[tuple[LowStockAlert, str]] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.shipping_instructions) + len(self.inbound_plans)


class Replenishment:
    """Replenishment advisor and planner."""

    @classmethod
    def low_stock_alerts(cls, limit: int | None = None) -> list[LowStockAlert]:
        """
        Current low stock alerts, largest shortage first.

        An alert is raised when NORMAL stock < min_stock and no pending
        shipping instruction already targets the same product/location.
        Only active products and locations are considered.

        Args:
            limit: Max alerts (None = LOW_STOCK_ALERT_LIMIT, 0 = no limit)

        Returns:
            List of LowStockAlert, never mutates anything
        """
        if limit is None:
            limit = ledger_settings.LOW_STOCK_ALERT_LIMIT

        normal_stock = Balance.objects.filter(
            product=OuterRef('product'),
            location=OuterRef('location'),
            state=InventoryState.NORMAL,
        ).values('quantity')[:1]
        pending_shipment = ShippingInstruction.objects.pending().filter(
            product=OuterRef('product'),
            to_location=OuterRef('location'),
        )

        rows = (
            ReplenishmentCriteria.objects
            .filter(product__is_active=True, location__is_active=True)
            .select_related('product', 'location')
            .annotate(
                current_stock=Coalesce(
                    Subquery(normal_stock, output_field=IntegerField()),
                    Value(0),
                ),
                has_pending_shipment=Exists(pending_shipment),
            )
            .filter(has_pending_shipment=False)
        )

        alerts = []
        for criteria in rows:
            current = criteria.current_stock
            if current >= criteria.min_stock:
                continue
            alerts.append(LowStockAlert(
                criteria=criteria,
                product=criteria.product,
                location=criteria.location,
                current_stock=current,
                min_stock=criteria.min_stock,
                target_stock=criteria.target_stock,
                shortage_amount=criteria.min_stock - current,
                recommended_quantity=max(0, criteria.target_stock - current),
            ))

        alerts.sort(key=lambda a: (-a.shortage_amount, a.location.display_order, a.product.sku))
        if limit and limit > 0:
            alerts = alerts[:limit]
        return alerts

    @classmethod
    @ledger_transaction
    def auto_replenish(cls, on_date: date, actor: str) -> ReplenishmentResult:
        """
        Close current shortages.

        - store alert: shipping instruction from the first active warehouse
          location, requested for on_date
        - warehouse alert: inbound plan from DEFAULT_SUPPLIER, due
          on_date + INBOUND_LEAD_DAYS, unless a pending plan for the product
          already exists

        Quantity is the criteria's standard_quantity, or the recommended
        top-up when that is 0. Alerts resolving to 0 are skipped.

        Raises:
            ValidationFailure: bad date or actor
            NotFound: store shortages exist but there is no warehouse
        """
        errors = {}
        if not isinstance(on_date, date):
            errors['date'] = 'Must be a date.'
        if not actor:
            errors['actor'] = 'This field is required.'
        if errors:
            raise ValidationFailure(errors)

        result = ReplenishmentResult(date=on_date)
        alerts = cls.low_stock_alerts(limit=0)
        source = None
        due_date = on_date + timedelta(days=int(ledger_settings.INBOUND_LEAD_DAYS))
        memo = f"Auto replenishment {on_date.isoformat()}"

        for alert in alerts:
            quantity = alert.order_quantity
            if quantity <= 0:
                result.skipped.append((alert, 'zero quantity'))
                continue

            if alert.location.is_store:
                if source is None:
                    source = Location.objects.active().warehouses().order_by('display_order', 'pk').first()
                    if source is None:
                        raise NotFound(entity='Location', kind='warehouse')
                instruction = ShippingWorkflow.create_shipping_instruction(
                    alert.product, source, alert.location, quantity, actor,
                    requested_date=on_date,
                    memo=memo,
                )
                result.shipping_instructions.append(instruction)
            else:
                if InboundPlan.objects.pending().filter(product=alert.product).exists():
                    result.skipped.append((alert, 'inbound plan pending'))
                    continue
                plan = ReceivingWorkflow.create_inbound_plan(
                    alert.product, ledger_settings.DEFAULT_SUPPLIER, quantity, due_date, actor,
                    memo=memo,
                )
                result.inbound_plans.append(plan)

        logger.info(
            "replenish.completed",
            extra={
                "date": on_date.isoformat(),
                "alerts": len(alerts),
                "shipping_instructions": len(result.shipping_instructions),
                "inbound_plans": len(result.inbound_plans),
                "skipped": len(result.skipped),
                "actor": actor,
            },
        )
        return result
