"""
Tests for model-level guards.
"""

import pytest
from django.db import IntegrityError, transaction

from custodian import custody, CustodyError
from custodian.models import (
    AlertLevel,
    AlertStatus,
    Item,
    LowStockAlert,
    Transaction,
    TransactionStatus,
)


pytestmark = pytest.mark.django_db


class TestTransactionImmutability:
    """Recorded movements only change lifecycle fields."""

    def test_full_save_refused(self, item, user):
        """save() without update_fields raises."""
        txn = custody.create_movement(item.pk, user.pk, 'CHECKOUT', 1).transaction
        txn.quantity = 5

        with pytest.raises(ValueError, match='imutáveis'):
            txn.save()

    def test_quantity_update_refused(self, item, user):
        """quantity is not a mutable field."""
        txn = custody.create_movement(item.pk, user.pk, 'CHECKOUT', 1).transaction
        txn.quantity = 5

        with pytest.raises(ValueError):
            txn.save(update_fields=['quantity'])

        assert Transaction.objects.get(pk=txn.pk).quantity == 1

    def test_notes_update_allowed(self, item, user):
        """notes can be saved through update_fields."""
        txn = custody.create_movement(item.pk, user.pk, 'CHECKOUT', 1).transaction
        txn.notes = 'Revisado'
        txn.save(update_fields=['notes'])

        assert Transaction.objects.get(pk=txn.pk).notes == 'Revisado'

    def test_active_delete_refused(self, item, user):
        """ACTIVE entries cannot be deleted."""
        txn = custody.create_movement(item.pk, user.pk, 'CHECKOUT', 1).transaction

        with pytest.raises(ValueError):
            txn.delete()

    def test_signed_quantity(self, item, user):
        """CHECKOUT is negative, CHECKIN positive."""
        out = custody.create_movement(item.pk, user.pk, 'CHECKOUT', 2).transaction
        back = custody.create_movement(item.pk, user.pk, 'CHECKIN', 3).transaction

        assert out.signed_quantity == -2
        assert back.signed_quantity == 3
        assert out.is_returnable
        assert not back.is_returnable

    def test_positive_quantity_constraint(self, item, user):
        """The database rejects a non-positive quantity."""
        with pytest.raises(IntegrityError), transaction.atomic():
            Transaction.objects.create(
                item=item, user=user, transaction_type='CHECKOUT', quantity=0,
            )


class TestItemGuards:
    """Tests for Item deletion and quantity constraints."""

    def test_delete_with_active_transactions(self, item, user):
        """Items referenced by ACTIVE entries cannot be deleted."""
        custody.create_movement(item.pk, user.pk, 'CHECKOUT', 1)

        with pytest.raises(CustodyError) as exc:
            item.delete()

        assert exc.value.code == 'ITEM_HAS_ACTIVE_TRANSACTIONS'
        assert Item.objects.filter(pk=item.pk).exists()

    def test_delete_without_history(self, item):
        """An unused item can be deleted."""
        item.delete()

        assert not Item.objects.exists()

    def test_negative_quantity_constraint(self, make_item):
        """The database rejects a negative on-hand quantity."""
        with pytest.raises(IntegrityError), transaction.atomic():
            make_item(quantity=-1)

    def test_is_low_stock(self, make_item):
        """quantity <= min_quantity is low stock."""
        assert make_item(quantity=5, min_quantity=5).is_low_stock
        assert not make_item(quantity=6, min_quantity=5).is_low_stock

    def test_with_active_transactions(self, make_item, user, owner):
        """Queryset helper lists items with ACTIVE entries once."""
        busy = make_item(name='Bomba de infusão')
        idle = make_item(name='Termômetro')
        custody.create_movement(busy.pk, user.pk, 'CHECKOUT', 1)
        custody.create_movement(busy.pk, user.pk, 'CHECKOUT', 1)
        txn = custody.create_movement(idle.pk, user.pk, 'CHECKOUT', 1).transaction
        custody.complete_checkout(txn.pk, owner)

        assert list(Item.objects.with_active_transactions()) == [busy]


class TestAlertGuards:
    """Tests for LowStockAlert constraints."""

    def test_delete_refused(self, make_item):
        """Alerts are history and cannot be deleted."""
        item = make_item(quantity=0, min_quantity=1)
        alert = custody.reconcile_alert(item.pk)

        with pytest.raises(ValueError):
            alert.delete()

    def test_one_open_alert_per_item(self, make_item):
        """A second open alert for the same item violates the constraint."""
        item = make_item(quantity=0, min_quantity=1)
        custody.reconcile_alert(item.pk)

        with pytest.raises(IntegrityError), transaction.atomic():
            LowStockAlert.objects.create(
                item=item,
                current_quantity=0,
                min_quantity=1,
                alert_level=AlertLevel.OUT_OF_STOCK,
                status=AlertStatus.ACKNOWLEDGED,
            )

    def test_resolved_alerts_accumulate(self, make_item, user):
        """Resolved alerts do not block a new open alert."""
        item = make_item(quantity=5, min_quantity=5)
        first = custody.reconcile_alert(item.pk)
        custody.create_movement(item.pk, user.pk, 'CHECKIN', 5)
        second = custody.create_movement(item.pk, user.pk, 'CHECKOUT', 6).alert

        assert second.pk != first.pk
        first.refresh_from_db()
        assert first.status == AlertStatus.RESOLVED
        assert LowStockAlert.objects.filter(item=item).count() == 2

    def test_transaction_status_default(self, item, user):
        """Entries are recorded ACTIVE."""
        txn = custody.create_movement(item.pk, user.pk, 'CHECKIN', 1).transaction

        assert txn.status == TransactionStatus.ACTIVE
