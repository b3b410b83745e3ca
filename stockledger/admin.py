"""
Stockledger Admin.

Provides views for production debugging:
- Product, Location, ReplenishmentCriteria: list + edit
- Balance: read-only (stock only changes via the ledger service)
- HistoryEntry: read-only audit trail
- ShippingInstruction: read-only with "confirm" action
- InboundPlan: read-only with "cancel" action
"""

import logging

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from stockledger.exceptions import LedgerError
from stockledger.models import (
    Balance,
    HistoryEntry,
    InboundPlan,
    Location,
    Product,
    ReplenishmentCriteria,
    ShippingInstruction,
)

logger = logging.getLogger(__name__)


def _actor(request) -> str:
    return request.user.get_username() or f"user:{request.user.pk}"


class ReadOnlyAdmin(admin.ModelAdmin):
    """No add, change or delete."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# REFERENCE DATA
# =========================================================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['sku', 'model_name', 'color', 'size', 'category', 'retail_price', 'is_active']
    list_filter = ['is_active', 'category']
    search_fields = ['sku', 'model_name']
    readonly_fields = ['created_at']
    identity_fields = ['sku', 'model_name', 'color', 'size', 'category']

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return self.readonly_fields
        return [*self.identity_fields, *self.readonly_fields]

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'kind', 'display_order', 'is_active']
    list_filter = ['kind', 'is_active']
    search_fields = ['code', 'name']

    def get_readonly_fields(self, request, obj=None):
        return ['code', 'kind'] if obj else []

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ReplenishmentCriteria)
class ReplenishmentCriteriaAdmin(admin.ModelAdmin):
    list_display = ['product', 'location', 'min_stock', 'target_stock', 'standard_quantity']
    list_filter = ['location']
    search_fields = ['product__sku']
    readonly_fields = ['updated_at']


# =========================================================================
# LEDGER (read-only)
# =========================================================================

@admin.register(Balance)
class BalanceAdmin(ReadOnlyAdmin):
    """Balance admin — read-only. Stock only changes via the ledger service."""

    list_display = ['product', 'location', 'state', 'quantity', 'last_updated']
    list_filter = ['state', 'location']
    search_fields = ['product__sku']
    readonly_fields = ['product', 'location', 'state', 'quantity', 'last_updated']


@admin.register(HistoryEntry)
class HistoryEntryAdmin(ReadOnlyAdmin):
    """History admin — read-only. Immutable audit trail."""

    list_display = ['performed_at', 'kind', 'product', 'quantity',
                    'from_location', 'from_state', 'to_location', 'to_state', 'actor']
    list_filter = ['kind', 'performed_at']
    search_fields = ['product__sku', 'reference', 'memo', 'actor']
    readonly_fields = ['kind', 'product', 'quantity', 'from_location', 'to_location',
                       'from_state', 'to_state', 'amount', 'reference', 'memo',
                       'actor', 'performed_at']
    date_hierarchy = 'performed_at'


# =========================================================================
# WORKFLOWS
# =========================================================================

@admin.register(ShippingInstruction)
class ShippingInstructionAdmin(ReadOnlyAdmin):
    list_display = ['id', 'product', 'from_location', 'to_location', 'quantity',
                    'requested_date', 'status', 'is_reserved', 'created_by', 'completed_at']
    list_filter = ['status', 'to_location']
    search_fields = ['product__sku']
    readonly_fields = ['product', 'from_location', 'to_location', 'quantity', 'requested_date',
                       'status', 'is_reserved', 'memo', 'created_by', 'created_at',
                       'completed_by', 'completed_at']
    actions = ['confirm_instructions']

    @admin.action(description=_('Confirm selected shipping instructions'))
    def confirm_instructions(self, request, queryset):
        from stockledger import ledger

        count = 0
        for instruction in queryset.pending():
            try:
                ledger.confirm_shipping_instruction(instruction.pk, actor=_actor(request))
                count += 1
            except LedgerError as exc:
                logger.warning("confirm_instructions: failed to confirm %s: %s", instruction.pk, exc)

        self.message_user(request, _('{count} instruction(s) confirmed.').format(count=count))


@admin.register(InboundPlan)
class InboundPlanAdmin(ReadOnlyAdmin):
    list_display = ['id', 'product', 'supplier_name', 'planned_quantity',
                    'received_quantity', 'due_date', 'status']
    list_filter = ['status', 'due_date']
    search_fields = ['product__sku', 'supplier_name']
    readonly_fields = ['product', 'supplier_name', 'planned_quantity', 'received_quantity',
                       'due_date', 'status', 'memo', 'created_by', 'created_at', 'completed_at']
    actions = ['cancel_plans']

    @admin.action(description=_('Cancel selected inbound plans'))
    def cancel_plans(self, request, queryset):
        from stockledger import ledger

        count = 0
        for plan in queryset.pending():
            try:
                ledger.cancel_inbound_plan(plan.pk, actor=_actor(request), memo='Canceled via admin')
                count += 1
            except LedgerError as exc:
                logger.warning("cancel_plans: failed to cancel %s: %s", plan.pk, exc)

        self.message_user(request, _('{count} plan(s) canceled.').format(count=count))
