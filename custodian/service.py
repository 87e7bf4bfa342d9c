"""
Custody Service — The single public interface for all custody operations.

Usage:
    from custodian import custody, CustodyError
    from custodian.protocols import Actor

    result = custody.create_movement(item.pk, user.pk, 'CHECKOUT', 2)
    result.item.quantity          # refreshed on-hand quantity
    result.alert                  # open low-stock alert, if any

    custody.complete_checkout(result.transaction.pk, Actor(user.pk, 'STAFF'))
"""

import logging

from custodian.models.alert import LowStockAlert
from custodian.models.item import Item
from custodian.services.movements import CustodyMovements
from custodian.services.queries import CustodyQueries
from custodian.thresholds import classify

logger = logging.getLogger('custodian')


class Custody(CustodyQueries, CustodyMovements):
    """
    Single interface for all custody operations.

    Parameter convention: (item_id, user_id, type, quantity, ...)
    Follows natural language: "Check out 2 units of this item for this user"

    IMPORTANT: All state-changing methods run as one atomic unit of work
    with the Item row locked. See CustodyMovements.
    """

    @classmethod
    def reconcile_all(cls, dry_run: bool = False) -> list[tuple[Item, object]]:
        """
        Recompute the alert state of every item.

        Each item is reconciled in its own unit of work, so one locked row
        does not hold back the sweep.

        Args:
            dry_run: Only report items whose open alert disagrees with
                their quantity, without writing.

        Returns:
            List of (item, alert_or_None) tuples for items that were
            (or would be) changed.
        """
        open_alerts = {
            alert.item_id: alert
            for alert in LowStockAlert.objects.open()
        }

        changed = []
        for item in Item.objects.all().iterator():
            level = classify(item.quantity, item.min_quantity)
            alert = open_alerts.get(item.pk)

            in_sync = (
                (level is None and alert is None)
                or (
                    alert is not None
                    and alert.alert_level == level
                    and alert.current_quantity == item.quantity
                )
            )
            if in_sync:
                continue

            if dry_run:
                changed.append((item, alert))
                continue

            changed.append((item, cls.reconcile_alert(item.pk)))

        if changed and not dry_run:
            logger.info(
                "custody.alerts.reconciled",
                extra={"items": len(changed)},
            )
        return changed
