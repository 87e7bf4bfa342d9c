"""
Custody movements — the checkout/checkin engine.

Every public method is one unit of work: the Item quantity, the ledger entry
and the alert state are committed together or not at all.

Concurrency:
    - Item row locked with select_for_update() before availability is checked
    - Quantity written with a conditional UPDATE on the locked value
    - Lock contention (OperationalError, CONFLICT) retried with backoff when
      this module owns the outermost transaction
"""

import functools
import logging
import time
from dataclasses import dataclass
from typing import Any

from django.db import OperationalError, connection, transaction

from custodian.conf import custodian_settings
from custodian.exceptions import CustodyError
from custodian.models.alert import LowStockAlert
from custodian.models.enums import TransactionType
from custodian.models.item import Item
from custodian.models.transaction import Transaction
from custodian.services.alerts import AlertStore
from custodian.services.items import ItemStore
from custodian.services.ledger import TransactionLedger

logger = logging.getLogger('custodian')


@dataclass(frozen=True)
class MovementResult:
    """A transaction joined with the refreshed item and its open alert."""

    transaction: Transaction
    item: Item
    alert: LowStockAlert | None = None

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        txn = self.transaction
        data = {
            'id': str(txn.pk),
            'item_id': str(txn.item_id),
            'user_id': str(txn.user_id),
            'transaction_type': txn.transaction_type,
            'quantity': txn.quantity,
            'status': txn.status,
            'due_date': txn.due_date.isoformat() if txn.due_date else None,
            'returned_at': txn.returned_at.isoformat() if txn.returned_at else None,
            'location_used': txn.location_used,
            'condition_on_return': txn.condition_on_return,
            'notes': txn.notes,
            'created_at': txn.created_at.isoformat(),
            'item': {
                'id': str(self.item.pk),
                'name': self.item.name,
                'quantity': self.item.quantity,
                'min_quantity': self.item.min_quantity,
                'max_quantity': self.item.max_quantity,
                'status': self.item.status,
            },
            'alert': None,
        }
        if self.alert is not None:
            data['alert'] = {
                'id': str(self.alert.pk),
                'alert_level': self.alert.alert_level,
                'status': self.alert.status,
                'current_quantity': self.alert.current_quantity,
            }
        return data


def _set_lock_timeout():
    """Bound row lock waits for the current transaction (PostgreSQL)."""
    timeout_ms = custodian_settings.LOCK_TIMEOUT_MS
    if timeout_ms and connection.vendor == 'postgresql':
        with connection.cursor() as cursor:
            cursor.execute("SET LOCAL lock_timeout = %s", [f"{int(timeout_ms)}ms"])


def unit_of_work(func):
    """
    Run func inside transaction.atomic(), retrying transient contention.

    Inside a caller's atomic block the work runs as a savepoint and is never
    retried; the caller owns the retry decision there. Lock errors still
    surface as CustodyError('CONFLICT') on both paths.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if connection.in_atomic_block:
            try:
                with transaction.atomic():
                    _set_lock_timeout()
                    return func(*args, **kwargs)
            except OperationalError as exc:
                raise CustodyError(
                    'CONFLICT',
                    operation=func.__name__,
                    attempts=1,
                ) from exc

        attempts = custodian_settings.MAX_RETRIES + 1
        delay = custodian_settings.RETRY_BACKOFF_SECONDS

        for attempt in range(1, attempts + 1):
            try:
                with transaction.atomic():
                    _set_lock_timeout()
                    return func(*args, **kwargs)
            except CustodyError as exc:
                if not exc.retryable or attempt == attempts:
                    raise
                error = exc
            except OperationalError as exc:
                if attempt == attempts:
                    raise CustodyError(
                        'CONFLICT',
                        operation=func.__name__,
                        attempts=attempt,
                    ) from exc
                error = exc

            logger.warning(
                "custody.retry",
                extra={
                    "operation": func.__name__,
                    "attempt": attempt,
                    "error": str(error),
                },
            )
            time.sleep(delay)
            delay *= 2

    return wrapper


def _validate_quantity(quantity):
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise CustodyError('INVALID_QUANTITY', requested=quantity)


class CustodyMovements:
    """State-changing custody operations."""

    @classmethod
    def create_movement(cls, item_id, user_id, transaction_type, quantity: int,
                        due_date=None, location_used=None, notes=None) -> MovementResult:
        """
        Check units out of custody or back in.

        1. Lock the item
        2. CHECKOUT: reject when quantity > item.quantity
        3. Append an ACTIVE transaction
        4. Apply -quantity (CHECKOUT) or +quantity (CHECKIN)
        5. Recompute the item's low-stock alert

        Raises:
            CustodyError('INVALID_QUANTITY'): If quantity is not a positive int
            CustodyError('INVALID_TYPE'): If type is not CHECKOUT/CHECKIN
            CustodyError('NOT_FOUND'): If the item does not exist
            CustodyError('INSUFFICIENT_QUANTITY'): If a checkout exceeds stock
            CustodyError('CONFLICT'): If contention persisted through retries
        """
        _validate_quantity(quantity)
        if transaction_type not in TransactionType.values:
            raise CustodyError('INVALID_TYPE', transaction_type=transaction_type)

        return cls._create_movement(
            item_id, user_id, TransactionType(transaction_type), quantity,
            due_date=due_date, location_used=location_used, notes=notes,
        )

    @classmethod
    @unit_of_work
    def _create_movement(cls, item_id, user_id, transaction_type, quantity,
                         due_date=None, location_used=None, notes=None) -> MovementResult:
        item = ItemStore.get(item_id, lock=True)

        if transaction_type == TransactionType.CHECKOUT and quantity > item.quantity:
            raise CustodyError(
                'INSUFFICIENT_QUANTITY',
                item_id=str(item_id),
                available=item.quantity,
                requested=quantity,
            )

        txn = TransactionLedger.append(
            item, user_id, transaction_type, quantity,
            due_date=due_date, location_used=location_used, notes=notes,
        )

        delta = -quantity if transaction_type == TransactionType.CHECKOUT else quantity
        item = ItemStore.adjust_quantity(item.pk, delta, expected_quantity=item.quantity)
        alert = AlertStore.recompute(item)

        txn.item = item
        logger.info(
            "custody.movement.created",
            extra={
                "transaction_id": str(txn.pk),
                "item_id": str(item.pk),
                "type": transaction_type,
                "qty": quantity,
                "quantity_after": item.quantity,
                "user_id": str(user_id),
            },
        )
        return MovementResult(transaction=txn, item=item, alert=alert)

    @classmethod
    @unit_of_work
    def complete_checkout(cls, transaction_id, actor, returned_at=None,
                          condition_on_return=None, notes=None) -> MovementResult:
        """
        Return a checked-out quantity to custody.

        Transition: ACTIVE → COMPLETED (CHECKOUT only), quantity += original

        Raises:
            CustodyError('NOT_FOUND'): If the transaction does not exist
            CustodyError('FORBIDDEN'): If actor neither owns it nor may override
            CustodyError('INVALID_STATE'): If already completed or a CHECKIN;
                the item quantity is left untouched
        """
        txn = TransactionLedger.get(transaction_id, lock=True)

        if not actor.can_override_ownership and not actor.owns(txn.user_id):
            raise CustodyError(
                'FORBIDDEN',
                transaction_id=str(transaction_id),
                user_id=str(actor.user_id),
            )

        if not txn.is_returnable:
            raise CustodyError(
                'INVALID_STATE',
                'Transação não é uma retirada ativa',
                transaction_id=str(transaction_id),
                current=txn.status,
                transaction_type=txn.transaction_type,
            )

        item = ItemStore.get(txn.item_id, lock=True)
        txn = TransactionLedger.complete(
            txn,
            returned_at=returned_at,
            condition_on_return=condition_on_return,
            notes=notes,
        )
        item = ItemStore.adjust_quantity(item.pk, txn.quantity, expected_quantity=item.quantity)
        alert = AlertStore.recompute(item)

        txn.item = item
        logger.info(
            "custody.checkout.completed",
            extra={
                "transaction_id": str(txn.pk),
                "item_id": str(item.pk),
                "qty": txn.quantity,
                "quantity_after": item.quantity,
                "user_id": str(actor.user_id),
            },
        )
        return MovementResult(transaction=txn, item=item, alert=alert)

    @classmethod
    @unit_of_work
    def annotate_transaction(cls, transaction_id, actor, notes=None,
                             condition_on_return=None) -> Transaction:
        """
        Update a transaction's notes/condition without any quantity effect.

        Raises:
            CustodyError('NOT_FOUND'): If the transaction does not exist
            CustodyError('FORBIDDEN'): If actor neither owns it nor may override
        """
        txn = TransactionLedger.get(transaction_id, lock=True)

        if not actor.can_override_ownership and not actor.owns(txn.user_id):
            raise CustodyError(
                'FORBIDDEN',
                transaction_id=str(transaction_id),
                user_id=str(actor.user_id),
            )

        return TransactionLedger.annotate(txn, notes=notes, condition_on_return=condition_on_return)

    @classmethod
    @unit_of_work
    def acknowledge_alert(cls, alert_id, user_id) -> LowStockAlert:
        """
        Acknowledge an ACTIVE low-stock alert.

        Raises:
            CustodyError('NOT_FOUND'): If the alert does not exist
            CustodyError('INVALID_STATE'): If already acknowledged or resolved
        """
        return AlertStore.acknowledge(alert_id, user_id)

    @classmethod
    @unit_of_work
    def reconcile_alert(cls, item_id) -> LowStockAlert | None:
        """
        Recompute one item's alert under its row lock.

        For use after an administrative change to min_quantity.
        """
        item = ItemStore.get(item_id, lock=True)
        return AlertStore.recompute(item)
