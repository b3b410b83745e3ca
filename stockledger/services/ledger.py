"""
Ledger engine — the only code that changes balances.

adjust() moves quantity out of and/or into states at one location;
transfer() does the same across two locations. Each call:

1. locks the touched Balance rows (deterministic order)
2. decrements the source, failing with InsufficientInventory
3. increments the destination (row created on first use)
4. appends exactly one HistoryEntry, as the last write

All inside one transaction (see services.transactions).
"""

import logging
from decimal import Decimal, InvalidOperation

from django.db.models import F, Q
from django.utils import timezone

from stockledger.exceptions import InsufficientInventory, NotFound, ValidationFailure
from stockledger.models.balance import Balance
from stockledger.models.enums import InventoryState, OperationKind
from stockledger.models.history import HistoryEntry
from stockledger.models.location import Location
from stockledger.models.product import Product
from stockledger.services.transactions import ledger_transaction

logger = logging.getLogger('stockledger')

AMOUNT_PLACES = Decimal('0.01')
AMOUNT_LIMIT = Decimal('100000000')


def resolve(model, value, field: str):
    """Accept a model instance or a primary key."""
    if isinstance(value, model):
        return value
    if value is None:
        raise ValidationFailure({field: 'This field is required.'})
    try:
        return model.objects.get(pk=value)
    except (model.DoesNotExist, ValueError, TypeError):
        raise NotFound(entity=model.__name__, id=value)


def is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_amount(amount) -> str | None:
    """Monetary amounts are non-negative with at most 8 integer and 2 decimal digits."""
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        return 'Must be a decimal number.'
    if not value.is_finite():
        return 'Must be a decimal number.'
    if value < 0:
        return 'Must not be negative.'
    if value >= AMOUNT_LIMIT or value != value.quantize(AMOUNT_PLACES):
        return 'Must fit in 10 digits with 2 decimal places.'
    return None


def validate_movement(quantity, from_state, to_state, kind, actor, amount=None) -> dict[str, str]:
    """Field-level errors shared by every balance mutation."""
    errors = {}
    if not is_positive_int(quantity):
        errors['quantity'] = 'Must be a positive integer.'
    if from_state is None and to_state is None:
        errors['state'] = 'At least one of from_state / to_state is required.'
    if from_state is not None and from_state not in InventoryState.values:
        errors['from_state'] = f'Unknown state {from_state!r}.'
    if to_state is not None and to_state not in InventoryState.values:
        errors['to_state'] = f'Unknown state {to_state!r}.'
    if kind not in OperationKind.values:
        errors['kind'] = f'Unknown operation kind {kind!r}.'
    if not actor:
        errors['actor'] = 'This field is required.'
    if amount is not None:
        problem = validate_amount(amount)
        if problem:
            errors['amount'] = problem
    return errors


class LedgerMovements:
    """Balance reads and the adjustment primitive."""

    @classmethod
    def get_balance(cls, product, location, state) -> int:
        """Quantity at (product, location, state). No row means zero."""
        product = resolve(Product, product, 'product')
        location = resolve(Location, location, 'location')
        row = Balance.objects.filter(
            product=product, location=location, state=state,
        ).values_list('quantity', flat=True).first()
        return row or 0

    @classmethod
    @ledger_transaction
    def adjust(cls, product, location, from_state, to_state, quantity, kind,
               actor, memo='', amount=None, reference='') -> HistoryEntry:
        """
        Move quantity between states at one location.

        - from_state only: reduction (sale, store return sent)
        - to_state only: increase (customer return, goods received)
        - both: in-place state change (reserve, inspection)

        Raises:
            ValidationFailure: bad quantity, states, kind or actor
            NotFound: product or location does not exist
            InsufficientInventory: source balance below quantity
        """
        errors = validate_movement(quantity, from_state, to_state, kind, actor, amount)
        if from_state is not None and from_state == to_state:
            errors['to_state'] = 'Must differ from from_state at the same location.'
        if errors:
            raise ValidationFailure(errors)

        product = resolve(Product, product, 'product')
        location = resolve(Location, location, 'location')

        cls._mutate_balances(product, location, location, from_state, to_state, quantity)
        entry = cls._append_history(
            product, kind, quantity, actor,
            from_location=location if from_state else None,
            to_location=location if to_state else None,
            from_state=from_state,
            to_state=to_state,
            memo=memo,
            amount=amount,
            reference=reference,
        )
        logger.info(
            "ledger.adjust",
            extra={
                "product": product.sku,
                "location": location.code,
                "from_state": from_state,
                "to_state": to_state,
                "qty": quantity,
                "kind": kind,
                "actor": actor,
            },
        )
        return entry

    @classmethod
    @ledger_transaction
    def transfer(cls, product, from_location, to_location, from_state, to_state,
                 quantity, kind, actor, memo='', amount=None, reference='') -> HistoryEntry:
        """
        Move quantity from one location/state to another.

        Both legs and their single history entry commit together.
        """
        errors = validate_movement(quantity, from_state, to_state, kind, actor, amount)
        if from_state is None or to_state is None:
            errors['state'] = 'Transfers need both from_state and to_state.'
        if errors:
            raise ValidationFailure(errors)

        product = resolve(Product, product, 'product')
        from_location = resolve(Location, from_location, 'from_location')
        to_location = resolve(Location, to_location, 'to_location')
        if from_location.pk == to_location.pk and from_state == to_state:
            raise ValidationFailure({'to_location': 'Source and destination are identical.'})

        cls._mutate_balances(product, from_location, to_location, from_state, to_state, quantity)
        entry = cls._append_history(
            product, kind, quantity, actor,
            from_location=from_location,
            to_location=to_location,
            from_state=from_state,
            to_state=to_state,
            memo=memo,
            amount=amount,
            reference=reference,
        )
        logger.info(
            "ledger.transfer",
            extra={
                "product": product.sku,
                "from_location": from_location.code,
                "to_location": to_location.code,
                "from_state": from_state,
                "to_state": to_state,
                "qty": quantity,
                "kind": kind,
                "actor": actor,
            },
        )
        return entry

    # ══════════════════════════════════════════════════════════════
    # INTERNALS (callers must already be inside ledger_transaction)
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _mutate_balances(cls, product, from_location, to_location,
                         from_state, to_state, quantity: int) -> None:
        """Decrement source and increment destination under row locks."""
        coordinates = []
        if from_state:
            coordinates.append((from_location.pk, from_state))
        if to_state:
            coordinates.append((to_location.pk, to_state))
            Balance.objects.get_or_create(
                product=product, location=to_location, state=to_state,
            )

        match = Q()
        for location_id, state in coordinates:
            match |= Q(location_id=location_id, state=state)
        locked = {
            (row.location_id, row.state): row
            for row in Balance.objects.select_for_update()
            .filter(match, product=product)
            .order_by('location_id', 'state')
        }

        now = timezone.now()

        if from_state:
            source = locked.get((from_location.pk, from_state))
            available = source.quantity if source else 0
            if available < quantity:
                raise InsufficientInventory(
                    f"Insufficient inventory in {from_state} state",
                    available=available,
                    requested=quantity,
                    state=from_state,
                    location=from_location.code,
                    product=product.sku,
                )
            Balance.objects.filter(pk=source.pk).update(
                quantity=F('quantity') - quantity,
                last_updated=now,
            )

        if to_state:
            target = locked[(to_location.pk, to_state)]
            Balance.objects.filter(pk=target.pk).update(
                quantity=F('quantity') + quantity,
                last_updated=now,
            )

    @classmethod
    def _append_history(cls, product, kind, quantity: int, actor: str,
                        from_location=None, to_location=None,
                        from_state=None, to_state=None,
                        memo='', amount=None, reference='') -> HistoryEntry:
        if amount is not None and not isinstance(amount, Decimal):
            amount = Decimal(str(amount))
        return HistoryEntry.objects.create(
            kind=kind,
            product=product,
            quantity=quantity,
            from_location=from_location,
            to_location=to_location,
            from_state=from_state,
            to_state=to_state,
            amount=amount,
            reference=reference or '',
            memo=memo or '',
            actor=actor,
        )
