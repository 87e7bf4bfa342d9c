"""
Transaction ledger — append movements and complete returned checkouts.

The ledger never touches Item.quantity; the engine pairs each write here
with ItemStore.adjust_quantity() in the same unit of work.
"""

import logging

from django.utils import timezone

from custodian.exceptions import CustodyError
from custodian.models.enums import TransactionStatus, TransactionType
from custodian.models.transaction import Transaction

logger = logging.getLogger('custodian')


class TransactionLedger:
    """Append-only movement records with a mutable status."""

    @classmethod
    def get(cls, transaction_id, lock: bool = False) -> Transaction:
        """
        Load a transaction.

        Raises:
            CustodyError('NOT_FOUND'): If it does not exist
        """
        qs = Transaction.objects.select_for_update() if lock else Transaction.objects.all()
        try:
            return qs.get(pk=transaction_id)
        except Transaction.DoesNotExist:
            raise CustodyError('NOT_FOUND', entity='transaction', id=str(transaction_id)) from None

    @classmethod
    def append(cls, item, user_id, transaction_type, quantity: int,
               due_date=None, location_used=None, notes=None) -> Transaction:
        """
        Record a movement (status ACTIVE).

        Raises:
            CustodyError('INVALID_QUANTITY'): If quantity <= 0
            CustodyError('INVALID_TYPE'): If type is not CHECKOUT/CHECKIN
        """
        if transaction_type not in TransactionType.values:
            raise CustodyError('INVALID_TYPE', transaction_type=transaction_type)
        if quantity <= 0:
            raise CustodyError('INVALID_QUANTITY', requested=quantity)

        return Transaction.objects.create(
            item=item,
            user_id=user_id,
            transaction_type=transaction_type,
            quantity=quantity,
            status=TransactionStatus.ACTIVE,
            due_date=due_date,
            location_used=location_used or '',
            notes=notes or '',
        )

    @classmethod
    def complete(cls, txn: Transaction, returned_at=None,
                 condition_on_return=None, notes=None) -> Transaction:
        """
        Mark a checkout as returned.

        Transition: ACTIVE → COMPLETED (CHECKOUT only)

        Raises:
            CustodyError('INVALID_STATE'): If not an ACTIVE checkout
        """
        if txn.transaction_type != TransactionType.CHECKOUT:
            raise CustodyError(
                'INVALID_STATE',
                'Somente retiradas podem ser concluídas',
                transaction_id=str(txn.pk),
                current=txn.transaction_type,
                expected=TransactionType.CHECKOUT,
            )
        if txn.status != TransactionStatus.ACTIVE:
            raise CustodyError(
                'INVALID_STATE',
                'Transação já concluída',
                transaction_id=str(txn.pk),
                current=txn.status,
                expected=TransactionStatus.ACTIVE,
            )

        now = timezone.now()
        changes = {
            'status': TransactionStatus.COMPLETED,
            'returned_at': returned_at or now,
            'updated_at': now,
        }
        if condition_on_return is not None:
            changes['condition_on_return'] = condition_on_return
        if notes is not None:
            changes['notes'] = notes

        # Conditional on ACTIVE so a concurrent return cannot complete it twice
        updated = Transaction.objects.filter(
            pk=txn.pk,
            status=TransactionStatus.ACTIVE,
            transaction_type=TransactionType.CHECKOUT,
        ).update(**changes)

        if not updated:
            raise CustodyError(
                'INVALID_STATE',
                'Transação já concluída',
                transaction_id=str(txn.pk),
                expected=TransactionStatus.ACTIVE,
            )

        for field_name, value in changes.items():
            setattr(txn, field_name, value)
        return txn

    @classmethod
    def annotate(cls, txn: Transaction, notes=None, condition_on_return=None) -> Transaction:
        """Update free-text fields only."""
        update_fields = ['updated_at']
        if notes is not None:
            txn.notes = notes
            update_fields.append('notes')
        if condition_on_return is not None:
            txn.condition_on_return = condition_on_return
            update_fields.append('condition_on_return')
        txn.save(update_fields=update_fields)
        return txn

    @classmethod
    def count_active_for_item(cls, item_id) -> int:
        return Transaction.objects.filter(
            item_id=item_id, status=TransactionStatus.ACTIVE
        ).count()

    @classmethod
    def count_active_for_user(cls, user_id) -> int:
        return Transaction.objects.filter(
            user_id=user_id, status=TransactionStatus.ACTIVE
        ).count()

    @classmethod
    def has_entries_for_item(cls, item_id) -> bool:
        """Any entry, whatever its status, references the item."""
        return Transaction.objects.filter(item_id=item_id).exists()

    @classmethod
    def has_entries_for_user(cls, user_id) -> bool:
        return Transaction.objects.filter(user_id=user_id).exists()
