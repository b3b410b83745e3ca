"""
Inbound plans — supplier deliveries received onto warehouse shelves.

A plan is received incrementally; each receipt splits the goods into
NORMAL and DEFECTIVE stock on one shelf.
"""

import logging
from datetime import date

from django.utils import timezone

from stockledger.exceptions import InvalidState, NotFound, ValidationFailure
from stockledger.models.enums import InboundStatus, InventoryState, OperationKind
from stockledger.models.inbound import InboundPlan
from stockledger.models.location import Location
from stockledger.models.product import Product
from stockledger.services.ledger import LedgerMovements, is_positive_int, resolve
from stockledger.services.transactions import ledger_transaction

logger = logging.getLogger('stockledger')


def _locked_plans():
    return InboundPlan.objects.select_for_update(of=('self',)).select_related('product')


def _lock_plan(plan_id) -> InboundPlan:
    if isinstance(plan_id, InboundPlan):
        plan_id = plan_id.pk
    try:
        return _locked_plans().get(pk=plan_id)
    except (InboundPlan.DoesNotExist, ValueError, TypeError):
        raise NotFound(entity='InboundPlan', id=plan_id)


def _require_pending(plan: InboundPlan) -> None:
    if plan.status != InboundStatus.PENDING:
        raise InvalidState(
            current=plan.status,
            expected=InboundStatus.PENDING,
            plan_id=plan.pk,
        )


def _is_non_negative_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class ReceivingWorkflow:
    """Inbound plan lifecycle."""

    @classmethod
    @ledger_transaction
    def create_inbound_plan(cls, product, supplier_name: str, planned_quantity: int,
                            due_date: date, actor: str, memo: str = '') -> InboundPlan:
        """
        Register an expected delivery.

        Raises:
            ValidationFailure: bad quantity, supplier, date or actor
            NotFound: product does not exist
        """
        product = resolve(Product, product, 'product')

        errors = {}
        if not is_positive_int(planned_quantity):
            errors['planned_quantity'] = 'Must be a positive integer.'
        if not supplier_name:
            errors['supplier_name'] = 'This field is required.'
        if not isinstance(due_date, date):
            errors['due_date'] = 'Must be a date.'
        if not actor:
            errors['actor'] = 'This field is required.'
        if errors:
            raise ValidationFailure(errors)

        plan = InboundPlan.objects.create(
            product=product,
            supplier_name=supplier_name,
            planned_quantity=planned_quantity,
            due_date=due_date,
            memo=memo or '',
            created_by=actor,
        )
        logger.info(
            "inbound.created",
            extra={
                "plan_id": plan.pk,
                "product": product.sku,
                "supplier": supplier_name,
                "qty": planned_quantity,
                "due_date": str(due_date),
                "actor": actor,
            },
        )
        return plan

    @classmethod
    @ledger_transaction
    def receive_inbound_plan(cls, plan_id, good_qty: int, defect_qty: int, shelf,
                             memo: str, actor: str) -> InboundPlan:
        """
        Receive (part of) a plan onto a warehouse shelf.

        1. good_qty + defect_qty must fit in the remaining quantity
        2. good_qty lands in NORMAL, defect_qty in DEFECTIVE (goods_received)
        3. received_quantity grows; the plan completes when it reaches planned

        Raises:
            ValidationFailure: negative or zero total, non-warehouse shelf,
                more than the remaining quantity
            NotFound: plan or shelf does not exist
            InvalidState: plan completed or canceled
        """
        errors = {}
        if not _is_non_negative_int(good_qty):
            errors['good_qty'] = 'Must be a non-negative integer.'
        if not _is_non_negative_int(defect_qty):
            errors['defect_qty'] = 'Must be a non-negative integer.'
        if not errors and good_qty + defect_qty <= 0:
            errors['quantity'] = 'Total quantity must be greater than 0.'
        if not actor:
            errors['actor'] = 'This field is required.'
        if errors:
            raise ValidationFailure(errors)

        plan = _lock_plan(plan_id)
        _require_pending(plan)

        shelf = resolve(Location, shelf, 'shelf')
        if not shelf.is_warehouse:
            raise ValidationFailure({'shelf': 'Goods are received onto a warehouse shelf.'})

        total = good_qty + defect_qty
        if total > plan.remaining_quantity:
            raise ValidationFailure(
                {'quantity': f'Exceeds remaining quantity ({plan.remaining_quantity}).'},
                remaining=plan.remaining_quantity,
                requested=total,
            )

        parts = [
            (InventoryState.NORMAL, good_qty),
            (InventoryState.DEFECTIVE, defect_qty),
        ]
        for state, qty in parts:
            if qty > 0:
                LedgerMovements._mutate_balances(plan.product, shelf, shelf, None, state, qty)

        plan.received_quantity += total
        update_fields = ['received_quantity']
        if plan.received_quantity >= plan.planned_quantity:
            plan.status = InboundStatus.COMPLETED
            plan.completed_at = timezone.now()
            update_fields += ['status', 'completed_at']
        plan.save(update_fields=update_fields)

        for state, qty in parts:
            if qty > 0:
                LedgerMovements._append_history(
                    plan.product, OperationKind.GOODS_RECEIVED, qty, actor,
                    to_location=shelf,
                    to_state=state,
                    memo=memo,
                    reference=plan.reference,
                )

        logger.info(
            "inbound.received",
            extra={
                "plan_id": plan.pk,
                "product": plan.product.sku,
                "shelf": shelf.code,
                "good_qty": good_qty,
                "defect_qty": defect_qty,
                "received": plan.received_quantity,
                "planned": plan.planned_quantity,
                "status": plan.status,
                "actor": actor,
            },
        )
        return plan

    @classmethod
    @ledger_transaction
    def cancel_inbound_plan(cls, plan_id, actor: str, memo: str = '') -> InboundPlan:
        """
        Cancel a pending plan. Goods already received stay in stock.

        Raises:
            NotFound: plan does not exist
            InvalidState: plan completed or canceled
        """
        if not actor:
            raise ValidationFailure({'actor': 'This field is required.'})

        plan = _lock_plan(plan_id)
        _require_pending(plan)

        plan.status = InboundStatus.CANCELED
        plan.completed_at = timezone.now()
        update_fields = ['status', 'completed_at']
        if memo:
            plan.memo = f"{plan.memo}\n{memo}".strip()
            update_fields.append('memo')
        plan.save(update_fields=update_fields)

        logger.info(
            "inbound.canceled",
            extra={
                "plan_id": plan.pk,
                "received": plan.received_quantity,
                "planned": plan.planned_quantity,
                "actor": actor,
            },
        )
        return plan
