"""
Reference data — products, locations and replenishment criteria.

Products and locations are never deleted; deactivate them instead.
"""

import logging
from decimal import Decimal, InvalidOperation

from stockledger.exceptions import ValidationFailure
from stockledger.models.criteria import ReplenishmentCriteria
from stockledger.models.enums import LocationKind
from stockledger.models.location import Location
from stockledger.models.product import Product
from stockledger.services.ledger import resolve
from stockledger.services.transactions import ledger_transaction

logger = logging.getLogger('stockledger')

PRODUCT_MUTABLE_FIELDS = {'retail_price', 'cost_price', 'is_active'}
LOCATION_MUTABLE_FIELDS = {'name', 'display_order', 'is_active'}


def _to_price(value, field: str, errors: dict, required: bool = True):
    if value is None:
        if required:
            errors[field] = 'This field is required.'
        return None
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        errors[field] = 'Must be a decimal number.'
        return None
    if price < 0:
        errors[field] = 'Must not be negative.'
    return price


def _is_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class Catalog:
    """Create/update reference data."""

    @classmethod
    @ledger_transaction
    def create_product(cls, sku: str, model_name: str, color: str, size: str,
                       retail_price, category: str = '', cost_price=None) -> Product:
        errors = {}
        for name, value in (('sku', sku), ('model_name', model_name), ('color', color), ('size', size)):
            if not value:
                errors[name] = 'This field is required.'
        retail = _to_price(retail_price, 'retail_price', errors)
        cost = _to_price(cost_price, 'cost_price', errors, required=False)
        if sku and Product.objects.filter(sku=sku).exists():
            errors['sku'] = 'A product with this SKU already exists.'
        if errors:
            raise ValidationFailure(errors)

        product = Product.objects.create(
            sku=sku,
            model_name=model_name,
            color=color,
            size=size,
            category=category or '',
            retail_price=retail,
            cost_price=cost,
        )
        logger.info("catalog.product_created", extra={"product": sku})
        return product

    @classmethod
    @ledger_transaction
    def update_product(cls, product, **changes) -> Product:
        """
        Update pricing or the active flag.

        Identity fields (sku, model, color, size, category) are immutable.
        """
        product = resolve(Product, product, 'product')

        errors = {
            name: 'This field cannot be changed.'
            for name in changes if name not in PRODUCT_MUTABLE_FIELDS
        }
        if 'retail_price' in changes:
            changes['retail_price'] = _to_price(changes['retail_price'], 'retail_price', errors)
        if 'cost_price' in changes:
            changes['cost_price'] = _to_price(changes['cost_price'], 'cost_price', errors, required=False)
        if errors:
            raise ValidationFailure(errors)

        for name, value in changes.items():
            setattr(product, name, value)
        if changes:
            product.save(update_fields=list(changes))
        return product

    @classmethod
    @ledger_transaction
    def create_location(cls, code: str, name: str, kind: str, display_order: int = 0) -> Location:
        errors = {}
        if not code:
            errors['code'] = 'This field is required.'
        elif Location.objects.filter(code=code).exists():
            errors['code'] = 'A location with this code already exists.'
        if not name:
            errors['name'] = 'This field is required.'
        if kind not in LocationKind.values:
            errors['kind'] = f'Unknown location kind {kind!r}.'
        if errors:
            raise ValidationFailure(errors)

        location = Location.objects.create(
            code=code, name=name, kind=kind, display_order=display_order,
        )
        logger.info("catalog.location_created", extra={"location": code, "kind": kind})
        return location

    @classmethod
    @ledger_transaction
    def update_location(cls, location, **changes) -> Location:
        """Rename, reorder or (de)activate. Code and kind are permanent."""
        location = resolve(Location, location, 'location')

        errors = {
            name: 'This field cannot be changed.'
            for name in changes if name not in LOCATION_MUTABLE_FIELDS
        }
        if errors:
            raise ValidationFailure(errors)

        for name, value in changes.items():
            setattr(location, name, value)
        if changes:
            location.save(update_fields=list(changes))
        return location

    @classmethod
    @ledger_transaction
    def set_replenishment_criteria(cls, product, location, min_stock: int, target_stock: int,
                                   standard_quantity: int = 0) -> ReplenishmentCriteria:
        """Create or update the criteria for a product/location."""
        product = resolve(Product, product, 'product')
        location = resolve(Location, location, 'location')

        errors = {}
        for name, value in (('min_stock', min_stock), ('target_stock', target_stock),
                            ('standard_quantity', standard_quantity)):
            if not _is_count(value):
                errors[name] = 'Must be a non-negative integer.'
        if not errors and min_stock > target_stock:
            errors['target_stock'] = 'Must not be lower than min_stock.'
        if errors:
            raise ValidationFailure(errors)

        criteria, _ = ReplenishmentCriteria.objects.update_or_create(
            product=product,
            location=location,
            defaults={
                'min_stock': min_stock,
                'target_stock': target_stock,
                'standard_quantity': standard_quantity,
            },
        )
        return criteria
