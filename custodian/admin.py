"""
Custodian Admin.

Provides views for production debugging:
- Item: list + edit (quantity read-only, changes only via movements)
- Transaction: read-only ledger with "complete checkout" action
- LowStockAlert: read-only with "acknowledge" action
"""

import logging

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from custodian.exceptions import CustodyError
from custodian.models import ActorRole, AlertStatus, Item, LowStockAlert, Transaction

logger = logging.getLogger(__name__)


# =========================================================================
# ITEM ADMIN
# =========================================================================

@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    """Item admin — thresholds editable, quantity read-only."""

    list_display = ['name', 'location', 'quantity', 'min_quantity', 'max_quantity',
                    'status', 'is_low_stock_display']
    list_filter = ['status']
    search_fields = ['name', 'location']
    readonly_fields = ['created_at', 'updated_at']

    def get_readonly_fields(self, request, obj=None):
        # Opening balance is set on creation; afterwards only movements change it
        if obj is not None:
            return ['quantity', *self.readonly_fields]
        return self.readonly_fields

    @admin.display(description=_('Estoque baixo?'), boolean=True)
    def is_low_stock_display(self, obj):
        return obj.is_low_stock

    def save_model(self, request, obj, form, change):
        """Thresholds may have moved; bring the alert in line."""
        super().save_model(request, obj, form, change)
        from custodian import custody

        custody.reconcile_alert(obj.pk)

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# TRANSACTION ADMIN (read-only ledger)
# =========================================================================

@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Transaction admin — read-only with complete action."""

    list_display = ['created_at', 'item', 'user', 'transaction_type', 'quantity',
                    'status', 'due_date', 'returned_at']
    list_filter = ['transaction_type', 'status', 'created_at']
    search_fields = ['item__name', 'notes']
    readonly_fields = ['item', 'user', 'transaction_type', 'quantity', 'status',
                       'due_date', 'returned_at', 'location_used', 'condition_on_return',
                       'notes', 'created_at', 'updated_at']
    date_hierarchy = 'created_at'
    actions = ['complete_checkouts']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.action(description=_('Concluir retiradas selecionadas'))
    def complete_checkouts(self, request, queryset):
        from custodian import custody
        from custodian.protocols import Actor

        actor = Actor(user_id=request.user.pk, role=ActorRole.ADMIN)
        count = 0
        for txn in queryset.open_checkouts():
            try:
                custody.complete_checkout(txn.pk, actor)
                count += 1
            except CustodyError as exc:
                logger.warning("complete_checkouts: failed to complete %s: %s", txn.pk, exc)

        self.message_user(request, _('{count} retirada(s) concluída(s).').format(count=count))


# =========================================================================
# LOW STOCK ALERT ADMIN
# =========================================================================

@admin.register(LowStockAlert)
class LowStockAlertAdmin(admin.ModelAdmin):
    """LowStockAlert admin — read-only with acknowledge action."""

    list_display = ['item', 'alert_level', 'status', 'current_quantity', 'min_quantity',
                    'acknowledged_by', 'created_at', 'resolved_at']
    list_filter = ['alert_level', 'status']
    search_fields = ['item__name']
    readonly_fields = ['item', 'current_quantity', 'min_quantity', 'alert_level', 'status',
                       'acknowledged_by', 'acknowledged_at', 'resolved_at',
                       'created_at', 'updated_at']
    actions = ['acknowledge_alerts']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.action(description=_('Reconhecer alertas selecionados'))
    def acknowledge_alerts(self, request, queryset):
        from custodian import custody

        count = 0
        for alert in queryset.filter(status=AlertStatus.ACTIVE):
            try:
                custody.acknowledge_alert(alert.pk, request.user.pk)
                count += 1
            except CustodyError as exc:
                logger.warning("acknowledge_alerts: failed to acknowledge %s: %s", alert.pk, exc)

        self.message_user(request, _('{count} alerta(s) reconhecido(s).').format(count=count))
