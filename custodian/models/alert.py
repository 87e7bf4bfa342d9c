"""
LowStockAlert model — lifecycle record of a low-stock condition per Item.

An alert is opened when an item's quantity falls to or below its
min_quantity, re-levelled on every later quantity change while open, and
resolved once quantity recovers above the threshold. Resolved alerts are
kept as history.

Usage:
    from custodian.models import LowStockAlert

    LowStockAlert.objects.open().filter(alert_level=AlertLevel.CRITICAL)
"""

import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from custodian.models.enums import OPEN_ALERT_STATUSES, AlertLevel, AlertStatus


class LowStockAlertQuerySet(models.QuerySet):
    """Helper filters for alert queries."""

    def open(self):
        """Alerts not yet RESOLVED (ACTIVE or ACKNOWLEDGED)."""
        return self.filter(status__in=OPEN_ALERT_STATUSES)

    def for_item(self, item_id):
        return self.filter(item_id=item_id)


class LowStockAlert(models.Model):
    """
    Low-stock alert for one Item.

    LIFECYCLE:

        ACTIVE ──acknowledge()──► ACKNOWLEDGED
           │                          │
           └──── quantity recovers ───┴──► RESOLVED

    At most one ACTIVE/ACKNOWLEDGED alert exists per item (partial unique
    constraint). Never deleted.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    item = models.ForeignKey(
        'custodian.Item',
        on_delete=models.PROTECT,
        related_name='alerts',
        verbose_name=_('Item'),
    )

    # Snapshot at the time of the last recomputation
    current_quantity = models.IntegerField(verbose_name=_('Quantidade atual'))
    min_quantity = models.IntegerField(verbose_name=_('Quantidade Mínima'))

    alert_level = models.CharField(
        max_length=20,
        choices=AlertLevel.choices,
        verbose_name=_('Nível'),
    )
    status = models.CharField(
        max_length=20,
        choices=AlertStatus.choices,
        default=AlertStatus.ACTIVE,
        db_index=True,
        verbose_name=_('Status'),
    )

    acknowledged_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Reconhecido por'),
    )
    acknowledged_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Reconhecido em'))
    resolved_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Resolvido em'))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Criado em'))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_('Atualizado em'))

    objects = LowStockAlertQuerySet.as_manager()

    class Meta:
        verbose_name = _('Alerta de Estoque Baixo')
        verbose_name_plural = _('Alertas de Estoque Baixo')
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['item'],
                condition=Q(status__in=OPEN_ALERT_STATUSES),
                name='unique_open_alert_per_item',
            ),
        ]
        indexes = [
            models.Index(fields=['item', 'status'], name='custodian_alrt_item_status_idx'),
        ]

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_ALERT_STATUSES

    def delete(self, *args, **kwargs):
        """Prevent deletion — alerts are historical records."""
        raise ValueError("Alertas não podem ser excluídos; são registros históricos.")

    def __str__(self) -> str:
        return f"Alert: {self.item_id} {self.alert_level} ({self.current_quantity} <= {self.min_quantity})"
