"""
Item store — reads and conditional quantity updates.

adjust_quantity() is meant to run inside the engine's transaction.atomic()
block, after the Item row has been locked.
"""

import logging

from django.db.models import F
from django.utils import timezone

from custodian.exceptions import CustodyError
from custodian.models.enums import TransactionStatus
from custodian.models.item import Item
from custodian.models.transaction import Transaction

logger = logging.getLogger('custodian')


class ItemStore:
    """Item reads and quantity writes."""

    @classmethod
    def get(cls, item_id, lock: bool = False) -> Item:
        """
        Load an item.

        Args:
            item_id: Item primary key
            lock: Acquire a row lock (select_for_update). Must be called
                inside transaction.atomic().

        Raises:
            CustodyError('NOT_FOUND'): If the item does not exist
        """
        qs = Item.objects.select_for_update() if lock else Item.objects.all()
        try:
            return qs.get(pk=item_id)
        except Item.DoesNotExist:
            raise CustodyError('NOT_FOUND', entity='item', id=str(item_id)) from None

    @classmethod
    def adjust_quantity(cls, item_id, delta: int, expected_quantity: int | None = None) -> Item:
        """
        Apply delta to an item's quantity in one conditional UPDATE.

        When expected_quantity is given, the write only happens if the stored
        quantity still equals it. This catches a stale pre-read on backends
        where select_for_update() does not block.

        Returns:
            The refreshed Item

        Raises:
            CustodyError('INVALID_STATE'): If the result would be negative
            CustodyError('CONFLICT'): If expected_quantity is stale
            CustodyError('NOT_FOUND'): If the item does not exist
        """
        if expected_quantity is not None and expected_quantity + delta < 0:
            raise CustodyError(
                'INVALID_STATE',
                'Quantidade resultante seria negativa',
                item_id=str(item_id),
                quantity=expected_quantity,
                delta=delta,
            )

        qs = Item.objects.filter(pk=item_id)
        if expected_quantity is not None:
            qs = qs.filter(quantity=expected_quantity)
        else:
            qs = qs.filter(quantity__gte=-delta)

        updated = qs.update(quantity=F('quantity') + delta, updated_at=timezone.now())

        if not updated:
            try:
                current = Item.objects.values_list('quantity', flat=True).get(pk=item_id)
            except Item.DoesNotExist:
                raise CustodyError('NOT_FOUND', entity='item', id=str(item_id)) from None

            if expected_quantity is None:
                raise CustodyError(
                    'INVALID_STATE',
                    'Quantidade resultante seria negativa',
                    item_id=str(item_id),
                    quantity=current,
                    delta=delta,
                )

            logger.warning(
                "custody.item.stale_quantity",
                extra={
                    "item_id": str(item_id),
                    "expected": expected_quantity,
                    "current": current,
                },
            )
            raise CustodyError(
                'CONFLICT',
                item_id=str(item_id),
                expected=expected_quantity,
                current=current,
            )

        return Item.objects.get(pk=item_id)

    @classmethod
    def count_active_transactions(cls, item_id) -> int:
        """ACTIVE ledger entries referencing the item (deletion guard)."""
        return Transaction.objects.filter(
            item_id=item_id, status=TransactionStatus.ACTIVE
        ).count()
