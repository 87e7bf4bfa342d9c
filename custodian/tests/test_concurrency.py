"""
Concurrency tests for the custody engine.

These run outside the test-case transaction so each thread commits on its
own connection, the way concurrent requests would.
"""

import threading

import pytest
from django.db import OperationalError, connection

from custodian import custody, CustodyError
from custodian.models import Item, LowStockAlert, Transaction, TransactionStatus
from custodian.services.items import ItemStore


pytestmark = pytest.mark.django_db(transaction=True)


def _run_concurrently(*calls):
    """Start all calls behind a barrier; return their outcomes in order."""
    barrier = threading.Barrier(len(calls))
    outcomes = [None] * len(calls)

    def worker(index, call):
        try:
            barrier.wait()
            outcomes[index] = ('ok', call())
        except CustodyError as e:
            outcomes[index] = ('error', e.code)
        finally:
            connection.close()

    threads = [
        threading.Thread(target=worker, args=(i, call))
        for i, call in enumerate(calls)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    return outcomes


class TestConcurrentCheckout:
    """Two writers racing for the same units."""

    def test_last_unit_goes_to_one_caller(self, make_item, user, other_user):
        """Exactly one checkout of the last unit succeeds."""
        item = make_item(quantity=1, min_quantity=0)

        outcomes = _run_concurrently(
            lambda: custody.create_movement(item.pk, user.pk, 'CHECKOUT', 1),
            lambda: custody.create_movement(item.pk, other_user.pk, 'CHECKOUT', 1),
        )

        kinds = sorted(kind for kind, _ in outcomes)
        assert kinds == ['error', 'ok']
        assert ('error', 'INSUFFICIENT_QUANTITY') in outcomes
        item.refresh_from_db()
        assert item.quantity == 0
        assert Transaction.objects.count() == 1
        assert LowStockAlert.objects.open().count() == 1

    def test_concurrent_returns_conserve_quantity(self, make_item, user, staff):
        """Parallel returns of distinct checkouts all land."""
        item = make_item(quantity=6, min_quantity=2)
        first = custody.create_movement(item.pk, user.pk, 'CHECKOUT', 3).transaction
        second = custody.create_movement(item.pk, user.pk, 'CHECKOUT', 3).transaction

        outcomes = _run_concurrently(
            lambda: custody.complete_checkout(first.pk, staff),
            lambda: custody.complete_checkout(second.pk, staff),
        )

        assert [kind for kind, _ in outcomes] == ['ok', 'ok']
        item.refresh_from_db()
        assert item.quantity == 6
        assert LowStockAlert.objects.open().count() == 0

    def test_concurrent_double_return(self, item, user, staff):
        """Two returns of the same checkout restore the quantity once."""
        txn = custody.create_movement(item.pk, user.pk, 'CHECKOUT', 4).transaction

        outcomes = _run_concurrently(
            lambda: custody.complete_checkout(txn.pk, staff),
            lambda: custody.complete_checkout(txn.pk, staff),
        )

        assert sorted(outcomes, key=str)[0] == ('error', 'INVALID_STATE')
        item.refresh_from_db()
        assert item.quantity == 10
        assert Transaction.objects.get(pk=txn.pk).status == TransactionStatus.COMPLETED


class TestRetry:
    """Transient contention is retried as a whole unit of work."""

    def test_conflict_retried_once(self, item, user, monkeypatch):
        """A CONFLICT on the first attempt is retried without duplicate writes."""
        original = ItemStore.adjust_quantity
        calls = []

        def flaky(item_id, delta, expected_quantity=None):
            calls.append(delta)
            if len(calls) == 1:
                raise CustodyError('CONFLICT', item_id=str(item_id))
            return original(item_id, delta, expected_quantity=expected_quantity)

        monkeypatch.setattr(ItemStore, 'adjust_quantity', flaky)

        result = custody.create_movement(item.pk, user.pk, 'CHECKOUT', 2)

        assert len(calls) == 2
        assert result.item.quantity == 8
        assert Transaction.objects.count() == 1
        assert Item.objects.get(pk=item.pk).quantity == 8

    def test_lock_errors_exhaust_retries(self, item, user, monkeypatch):
        """Persistent OperationalError surfaces as a retryable CONFLICT."""
        calls = []

        def locked(item_id, lock=False):
            calls.append(item_id)
            raise OperationalError('database is locked')

        monkeypatch.setattr(ItemStore, 'get', locked)

        with pytest.raises(CustodyError) as exc:
            custody.create_movement(item.pk, user.pk, 'CHECKOUT', 2)

        assert exc.value.code == 'CONFLICT'
        assert exc.value.retryable
        assert len(calls) == 4
        assert Transaction.objects.count() == 0

    def test_business_errors_not_retried(self, item, user, monkeypatch):
        """INSUFFICIENT_QUANTITY fails on the first attempt."""
        original = ItemStore.get
        calls = []

        def counting(item_id, lock=False):
            calls.append(item_id)
            return original(item_id, lock=lock)

        monkeypatch.setattr(ItemStore, 'get', counting)

        with pytest.raises(CustodyError) as exc:
            custody.create_movement(item.pk, user.pk, 'CHECKOUT', 20)

        assert exc.value.code == 'INSUFFICIENT_QUANTITY'
        assert len(calls) == 1
