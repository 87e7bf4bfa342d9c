"""
Custody queries — read-only operations (items, ledger, alerts).
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from django.db.models import QuerySet

from custodian.conf import custodian_settings
from custodian.models.alert import LowStockAlert
from custodian.models.enums import ActorRole, AlertStatus
from custodian.models.item import Item
from custodian.models.transaction import Transaction
from custodian.services.alerts import AlertStore
from custodian.services.items import ItemStore
from custodian.services.ledger import TransactionLedger


@dataclass(frozen=True)
class CustodySummary:
    """Counts and short lists for a custody dashboard."""

    active_transactions: int
    low_stock_alerts: int
    recent_transactions: list = field(default_factory=list)
    low_stock_items: list = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'active_transactions': self.active_transactions,
            'low_stock_alerts': self.low_stock_alerts,
            'recent_transactions': [
                {
                    'id': str(txn.pk),
                    'item': txn.item.name,
                    'user': txn.user.get_username(),
                    'transaction_type': txn.transaction_type,
                    'quantity': txn.quantity,
                    'status': txn.status,
                    'created_at': txn.created_at.isoformat(),
                }
                for txn in self.recent_transactions
            ],
            'low_stock_items': [
                {
                    'id': str(item.pk),
                    'name': item.name,
                    'quantity': item.quantity,
                    'min_quantity': item.min_quantity,
                }
                for item in self.low_stock_items
            ],
        }


class CustodyQueries:
    """Read-only custody query methods."""

    @classmethod
    def get_item(cls, item_id) -> Item:
        """
        Raises:
            CustodyError('NOT_FOUND'): If the item does not exist
        """
        return ItemStore.get(item_id)

    @classmethod
    def get_transaction(cls, transaction_id) -> Transaction:
        return TransactionLedger.get(transaction_id)

    @classmethod
    def open_alert(cls, item_id) -> LowStockAlert | None:
        """The item's ACTIVE or ACKNOWLEDGED alert, if any."""
        return AlertStore.get_open(item_id)

    @classmethod
    def open_alerts(cls, include_acknowledged: bool = False) -> QuerySet:
        """
        Alerts awaiting attention, newest first.

        Args:
            include_acknowledged: Also list alerts already reviewed
        """
        qs = LowStockAlert.objects.select_related('item', 'acknowledged_by')
        if include_acknowledged:
            return qs.open()
        return qs.filter(status=AlertStatus.ACTIVE)

    @classmethod
    def transactions_for(cls, actor, limit: int | None = None) -> QuerySet:
        """
        Ledger visible to an actor, newest first.

        MEDICAL_PERSONNEL only see their own transactions.
        """
        limit = limit or custodian_settings.DEFAULT_LIST_LIMIT
        qs = Transaction.objects.select_related('item', 'user')
        if actor.role == ActorRole.MEDICAL_PERSONNEL:
            qs = qs.for_user(actor.user_id)
        return qs.order_by('-created_at')[:limit]

    @classmethod
    def overdue_checkouts(cls, today: date | None = None) -> QuerySet:
        """ACTIVE checkouts past their due_date, oldest due first."""
        return (
            Transaction.objects.overdue(today)
            .select_related('item', 'user')
            .order_by('due_date')
        )

    @classmethod
    def low_stock_items(cls) -> QuerySet:
        return Item.objects.low_stock().order_by('quantity')

    @classmethod
    def can_delete_item(cls, item_id) -> bool:
        """
        Whether item.delete() would go through.

        Ledger entries and alerts of any status keep the item, since both
        reference it through protected foreign keys.
        """
        return not (
            TransactionLedger.has_entries_for_item(item_id)
            or AlertStore.has_history(item_id)
        )

    @classmethod
    def can_delete_user(cls, user_id) -> bool:
        """No ledger entry, open or completed, belongs to the user."""
        return not TransactionLedger.has_entries_for_user(user_id)

    @classmethod
    def summary(cls, limit: int = 10) -> CustodySummary:
        """
        Dashboard figures for the custody core.

        Args:
            limit: Size of the recent-transactions and low-stock lists
        """
        return CustodySummary(
            active_transactions=Transaction.objects.active().count(),
            low_stock_alerts=LowStockAlert.objects.filter(status=AlertStatus.ACTIVE).count(),
            recent_transactions=list(
                Transaction.objects.select_related('item', 'user')
                .order_by('-created_at')[:limit]
            ),
            low_stock_items=list(cls.low_stock_items()[:limit]),
        )
