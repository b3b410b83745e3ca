"""
Ledger queries — read-only operations.

No locking, no writes.
"""

from datetime import date, timedelta

from django.db.models import F, Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from stockledger.conf import ledger_settings
from stockledger.exceptions import NotFound
from stockledger.models.balance import Balance
from stockledger.models.criteria import ReplenishmentCriteria
from stockledger.models.enums import InboundStatus, InventoryState, OperationKind, ShippingStatus
from stockledger.models.history import HistoryEntry
from stockledger.models.inbound import InboundPlan
from stockledger.models.shipping import ShippingInstruction


class LedgerQueries:
    """Read-only ledger query methods."""

    @classmethod
    def list_balances(cls, product=None, location=None, state=None,
                      include_empty: bool = False, include_inactive: bool = False):
        """Balances filtered by product, location and/or state."""
        qs = Balance.objects.select_related('product', 'location')

        if product is not None:
            qs = qs.filter(product=product)
        if location is not None:
            qs = qs.filter(location=location)
        if state is not None:
            qs = qs.filter(state=state)
        if not include_empty:
            qs = qs.non_empty()
        if not include_inactive:
            qs = qs.visible()

        return qs.order_by('product__sku', 'location__display_order', 'state')

    @classmethod
    def list_history(cls, product=None, location=None, kinds=None, limit: int | None = None):
        """
        History, newest first.

        Args:
            product: Only entries for this product
            location: Entries moving stock out of or into this location
            kinds: Iterable of OperationKind values; unknown values are ignored
            limit: Max rows (None = HISTORY_DEFAULT_LIMIT, 0 = no limit)
        """
        qs = HistoryEntry.objects.select_related('product', 'from_location', 'to_location')

        if product is not None:
            qs = qs.for_product(product)
        if location is not None:
            qs = qs.touching(location)
        if kinds:
            valid = [k for k in kinds if k in OperationKind.values]
            if valid:
                qs = qs.of_kind(*valid)

        if limit is None:
            limit = ledger_settings.HISTORY_DEFAULT_LIMIT
        qs = qs.order_by('-performed_at', '-id')
        if limit > 0:
            qs = qs[:limit]
        return qs

    @classmethod
    def list_criteria(cls, location=None):
        qs = ReplenishmentCriteria.objects.filter(
            product__is_active=True, location__is_active=True,
        ).select_related('product', 'location')
        if location is not None:
            qs = qs.filter(location=location)
        return qs.order_by('location__display_order', 'product__sku')

    @classmethod
    def list_shipping_instructions(cls, status=None):
        """All instructions newest first; pending ones by requested date."""
        qs = ShippingInstruction.objects.select_related('product', 'from_location', 'to_location')
        if status is None:
            return qs.order_by('-created_at')
        qs = qs.filter(status=status)
        if status == ShippingStatus.PENDING:
            return qs.order_by(F('requested_date').asc(nulls_last=True), 'created_at')
        return qs.order_by('-created_at')

    @classmethod
    def get_shipping_instruction(cls, instruction_id) -> ShippingInstruction:
        try:
            return ShippingInstruction.objects.select_related(
                'product', 'from_location', 'to_location',
            ).get(pk=instruction_id)
        except (ShippingInstruction.DoesNotExist, ValueError, TypeError):
            raise NotFound(entity='ShippingInstruction', id=instruction_id)

    @classmethod
    def list_inbound_plans(cls, status=None, due_on_or_before: date | None = None, search: str = ''):
        qs = InboundPlan.objects.select_related('product')
        if status is not None:
            qs = qs.filter(status=status)
        if due_on_or_before is not None:
            qs = qs.filter(due_date__lte=due_on_or_before)
        if search:
            qs = qs.filter(
                Q(product__sku__icontains=search)
                | Q(product__model_name__icontains=search)
                | Q(supplier_name__icontains=search)
            )
        return qs.order_by('due_date', 'id')

    @classmethod
    def get_inbound_plan(cls, plan_id) -> InboundPlan:
        try:
            return InboundPlan.objects.select_related('product').get(pk=plan_id)
        except (InboundPlan.DoesNotExist, ValueError, TypeError):
            raise NotFound(entity='InboundPlan', id=plan_id)

    @classmethod
    def state_summary(cls) -> dict[str, int]:
        """Total quantity per inventory state, every state present."""
        summary = {state: 0 for state in InventoryState.values}
        rows = Balance.objects.values('state').annotate(total=Coalesce(Sum('quantity'), 0))
        for row in rows:
            summary[row['state']] = row['total']
        return summary

    @classmethod
    def dashboard_metrics(cls, today: date | None = None) -> dict:
        """
        Headline numbers for an operations dashboard.

        Returns:
            pending_shipments: pending shipping instructions
            low_stock_items: current low stock alerts
            today_receiving: goods_received entries today / plans due today
            week_sales: units sold in the last 7 days
        """
        from stockledger.services.replenishment import Replenishment

        today = today or timezone.localdate()
        now = timezone.now()

        received_today = HistoryEntry.objects.filter(
            kind=OperationKind.GOODS_RECEIVED,
            performed_at__date=today,
        ).count()
        due_today = InboundPlan.objects.filter(due_date=today).exclude(status=InboundStatus.CANCELED).count()
        week_sales = HistoryEntry.objects.filter(
            kind=OperationKind.SALE,
            performed_at__gte=now - timedelta(days=7),
        ).aggregate(t=Coalesce(Sum('quantity'), 0))['t']

        return {
            'pending_shipments': ShippingInstruction.objects.pending().count(),
            'low_stock_items': len(Replenishment.low_stock_alerts()),
            'today_receiving': {'processed': received_today, 'planned': due_today},
            'week_sales': week_sales,
        }
