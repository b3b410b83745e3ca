"""
Shipping instructions — warehouse → store transfer lifecycle.

create (store) → optional reserve (warehouse) → confirm (warehouse).
Only confirmation moves stock between locations.
"""

import logging
from datetime import date

from django.utils import timezone

from stockledger.exceptions import InvalidState, NotFound, ValidationFailure
from stockledger.models.enums import InventoryState, OperationKind, ShippingStatus
from stockledger.models.location import Location
from stockledger.models.product import Product
from stockledger.models.shipping import ShippingInstruction
from stockledger.services.ledger import LedgerMovements, is_positive_int, resolve
from stockledger.services.transactions import ledger_transaction

logger = logging.getLogger('stockledger')


def _locked_instructions():
    """Instructions with only their own rows locked, related rows joined."""
    return (
        ShippingInstruction.objects.select_for_update(of=('self',))
        .select_related('product', 'from_location', 'to_location')
    )


def _lock_instruction(instruction_id) -> ShippingInstruction:
    if isinstance(instruction_id, ShippingInstruction):
        instruction_id = instruction_id.pk
    try:
        return _locked_instructions().get(pk=instruction_id)
    except (ShippingInstruction.DoesNotExist, ValueError, TypeError):
        raise NotFound(entity='ShippingInstruction', id=instruction_id)


def _require_pending(instruction: ShippingInstruction) -> None:
    if instruction.status != ShippingStatus.PENDING:
        raise InvalidState(
            current=instruction.status,
            expected=ShippingStatus.PENDING,
            instruction_id=instruction.pk,
        )


class ShippingWorkflow:
    """Shipping instruction state machine."""

    @classmethod
    @ledger_transaction
    def create_shipping_instruction(cls, product, from_location, to_location, quantity,
                                    actor, requested_date: date | None = None,
                                    memo: str = '') -> ShippingInstruction:
        """
        Record a transfer request. Does not touch balances.

        Appends an informational ship_request_created history entry
        (no locations, no states).

        Raises:
            ValidationFailure: bad quantity, locations or inactive records
            NotFound: product or location does not exist
        """
        product = resolve(Product, product, 'product')
        from_location = resolve(Location, from_location, 'from_location')
        to_location = resolve(Location, to_location, 'to_location')

        errors = {}
        if not is_positive_int(quantity):
            errors['quantity'] = 'Must be a positive integer.'
        if not actor:
            errors['actor'] = 'This field is required.'
        if not product.is_active:
            errors['product'] = 'Product is inactive.'
        if not from_location.is_warehouse:
            errors['from_location'] = 'Shipments leave from a warehouse location.'
        elif not from_location.is_active:
            errors['from_location'] = 'Location is inactive.'
        if not to_location.is_store:
            errors['to_location'] = 'Shipments go to a store.'
        elif not to_location.is_active:
            errors['to_location'] = 'Location is inactive.'
        if requested_date is not None and not isinstance(requested_date, date):
            errors['requested_date'] = 'Must be a date.'
        if errors:
            raise ValidationFailure(errors)

        instruction = ShippingInstruction.objects.create(
            product=product,
            from_location=from_location,
            to_location=to_location,
            quantity=quantity,
            requested_date=requested_date,
            memo=memo or '',
            created_by=actor,
        )
        LedgerMovements._append_history(
            product, OperationKind.SHIP_REQUEST_CREATED, quantity, actor,
            memo=memo,
            reference=instruction.reference,
        )
        logger.info(
            "shipping.created",
            extra={
                "instruction_id": instruction.pk,
                "product": product.sku,
                "from_location": from_location.code,
                "to_location": to_location.code,
                "qty": quantity,
                "actor": actor,
            },
        )
        return instruction

    @classmethod
    @ledger_transaction
    def reserve_for_shipping_instruction(cls, instruction_id, actor) -> ShippingInstruction:
        """
        Earmark source stock for a pending instruction.

        NORMAL -> RESERVED at the source location. The instruction stays
        pending; a later confirm() ships from RESERVED.

        Raises:
            NotFound: instruction does not exist
            InvalidState: instruction completed or already reserved
            InsufficientInventory: not enough NORMAL stock at the source
        """
        if not actor:
            raise ValidationFailure({'actor': 'This field is required.'})

        instruction = _lock_instruction(instruction_id)
        _require_pending(instruction)
        if instruction.is_reserved:
            raise InvalidState(
                current='reserved',
                expected='not reserved',
                instruction_id=instruction.pk,
            )

        LedgerMovements._mutate_balances(
            instruction.product, instruction.from_location, instruction.from_location,
            InventoryState.NORMAL, InventoryState.RESERVED, instruction.quantity,
        )
        instruction.is_reserved = True
        instruction.save(update_fields=['is_reserved'])
        LedgerMovements._append_history(
            instruction.product, OperationKind.RESERVE, instruction.quantity, actor,
            from_location=instruction.from_location,
            to_location=instruction.from_location,
            from_state=InventoryState.NORMAL,
            to_state=InventoryState.RESERVED,
            reference=instruction.reference,
        )
        logger.info(
            "shipping.reserved",
            extra={"instruction_id": instruction.pk, "qty": instruction.quantity, "actor": actor},
        )
        return instruction

    @classmethod
    @ledger_transaction
    def confirm_shipping_instruction(cls, instruction_id, actor) -> ShippingInstruction:
        """
        Ship a pending instruction.

        1. Locks the instruction (NotFound / InvalidState)
        2. Moves quantity from source NORMAL (or RESERVED, if reserved)
           to destination NORMAL
        3. Marks the instruction completed
        4. Appends one ship_confirmed history entry

        On any failure the instruction stays pending and balances are
        unchanged.

        Raises:
            NotFound: instruction does not exist
            InvalidState: instruction already completed
            InsufficientInventory: source balance below quantity
        """
        if not actor:
            raise ValidationFailure({'actor': 'This field is required.'})

        instruction = _lock_instruction(instruction_id)
        _require_pending(instruction)

        source_state = InventoryState.RESERVED if instruction.is_reserved else InventoryState.NORMAL
        LedgerMovements._mutate_balances(
            instruction.product, instruction.from_location, instruction.to_location,
            source_state, InventoryState.NORMAL, instruction.quantity,
        )

        instruction.status = ShippingStatus.COMPLETED
        instruction.completed_at = timezone.now()
        instruction.completed_by = actor
        instruction.save(update_fields=['status', 'completed_at', 'completed_by'])

        LedgerMovements._append_history(
            instruction.product, OperationKind.SHIP_CONFIRMED, instruction.quantity, actor,
            from_location=instruction.from_location,
            to_location=instruction.to_location,
            from_state=source_state,
            to_state=InventoryState.NORMAL,
            memo=instruction.memo,
            reference=instruction.reference,
        )
        logger.info(
            "shipping.confirmed",
            extra={
                "instruction_id": instruction.pk,
                "product": instruction.product.sku,
                "from_location": instruction.from_location.code,
                "to_location": instruction.to_location.code,
                "qty": instruction.quantity,
                "actor": actor,
            },
        )
        return instruction
