"""
Low-stock alerts — keep one open alert per item in step with its quantity.

Usage:
    from custodian.services.alerts import AlertStore

    # Inside the unit of work that changed item.quantity
    AlertStore.recompute(item)

upsert_active() and resolve_open() are explicit check-then-write steps;
they rely on the caller holding the Item row lock.
"""

import logging

from django.utils import timezone

from custodian.exceptions import CustodyError
from custodian.models.alert import LowStockAlert
from custodian.models.enums import AlertStatus
from custodian.thresholds import classify

logger = logging.getLogger('custodian')


class AlertStore:
    """Alert lifecycle writes."""

    @classmethod
    def get_open(cls, item_id) -> LowStockAlert | None:
        return LowStockAlert.objects.open().for_item(item_id).first()

    @classmethod
    def upsert_active(cls, item, quantity: int, min_quantity: int, level) -> LowStockAlert:
        """
        Open an alert, or re-level the one already open.

        The open alert keeps its status (an ACKNOWLEDGED alert stays
        ACKNOWLEDGED) and only current_quantity/alert_level change.
        """
        alert = cls.get_open(item.pk)

        if alert is None:
            alert = LowStockAlert.objects.create(
                item=item,
                current_quantity=quantity,
                min_quantity=min_quantity,
                alert_level=level,
                status=AlertStatus.ACTIVE,
            )
            logger.warning(
                "custody.alert.raised",
                extra={
                    "alert_id": str(alert.pk),
                    "item_id": str(item.pk),
                    "level": level,
                    "quantity": quantity,
                    "min_quantity": min_quantity,
                },
            )
            return alert

        previous = alert.alert_level
        alert.current_quantity = quantity
        alert.alert_level = level
        alert.save(update_fields=['current_quantity', 'alert_level', 'updated_at'])

        if previous != level:
            logger.warning(
                "custody.alert.relevelled",
                extra={
                    "alert_id": str(alert.pk),
                    "item_id": str(item.pk),
                    "previous_level": previous,
                    "level": level,
                    "quantity": quantity,
                },
            )
        return alert

    @classmethod
    def resolve_open(cls, item) -> int:
        """
        Resolve any open alert for the item.

        Returns:
            Number of alerts resolved (0 when none was open)
        """
        now = timezone.now()
        resolved = LowStockAlert.objects.open().for_item(item.pk).update(
            status=AlertStatus.RESOLVED,
            resolved_at=now,
            updated_at=now,
        )
        if resolved:
            logger.info(
                "custody.alert.resolved",
                extra={"item_id": str(item.pk), "quantity": item.quantity},
            )
        return resolved

    @classmethod
    def has_history(cls, item_id) -> bool:
        """Any alert, open or resolved, references the item."""
        return LowStockAlert.objects.for_item(item_id).exists()

    @classmethod
    def recompute(cls, item) -> LowStockAlert | None:
        """
        Bring the item's alert in line with its current quantity.

        Returns:
            The open alert, or None when the item is above its threshold
        """
        level = classify(item.quantity, item.min_quantity)
        if level is None:
            cls.resolve_open(item)
            return None
        return cls.upsert_active(item, item.quantity, item.min_quantity, level)

    @classmethod
    def acknowledge(cls, alert_id, user_id) -> LowStockAlert:
        """
        Acknowledge an alert (human review).

        Transition: ACTIVE → ACKNOWLEDGED

        Raises:
            CustodyError('NOT_FOUND'): If the alert does not exist
            CustodyError('INVALID_STATE'): If status is not ACTIVE
        """
        try:
            alert = LowStockAlert.objects.select_for_update().get(pk=alert_id)
        except LowStockAlert.DoesNotExist:
            raise CustodyError('NOT_FOUND', entity='alert', id=str(alert_id)) from None

        if alert.status != AlertStatus.ACTIVE:
            raise CustodyError(
                'INVALID_STATE',
                alert_id=str(alert_id),
                current=alert.status,
                expected=AlertStatus.ACTIVE,
            )

        alert.status = AlertStatus.ACKNOWLEDGED
        alert.acknowledged_by_id = user_id
        alert.acknowledged_at = timezone.now()
        alert.save(update_fields=['status', 'acknowledged_by', 'acknowledged_at', 'updated_at'])
        logger.info(
            "custody.alert.acknowledged",
            extra={"alert_id": str(alert_id), "user_id": str(user_id)},
        )
        return alert
