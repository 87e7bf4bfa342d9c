"""
Item model — What is held in custody and how many are on hand.
"""

import uuid

from django.db import models
from django.db.models import F, Q
from django.utils.translation import gettext_lazy as _

from custodian.models.enums import ItemStatus, TransactionStatus


class ItemQuerySet(models.QuerySet):
    """Helper filters for Item queries."""

    def low_stock(self):
        """Items at or below their minimum quantity."""
        return self.filter(quantity__lte=F('min_quantity'))

    def out_of_stock(self):
        return self.filter(quantity=0)

    def with_active_transactions(self):
        """Items referenced by at least one ACTIVE transaction."""
        return self.filter(transactions__status=TransactionStatus.ACTIVE).distinct()


class Item(models.Model):
    """
    An inventory item tracked by on-hand quantity.

    Performance:
    - quantity is a running counter, updated in lock-step with each
      Transaction by the custody engine
    - Read is O(1); summing the ledger would double-count returns

    quantity is NEVER written directly. Use custodian.custody.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200, verbose_name=_('Nome'))
    location = models.CharField(
        max_length=200,
        blank=True,
        default='',
        verbose_name=_('Localização'),
    )

    quantity = models.IntegerField(
        default=0,
        verbose_name=_('Quantidade'),
        help_text=_('Atualizado somente por movimentações'),
    )
    min_quantity = models.IntegerField(
        default=0,
        verbose_name=_('Quantidade Mínima'),
        help_text=_('Alerta dispara quando quantidade <= este valor'),
    )
    max_quantity = models.IntegerField(
        null=True,
        blank=True,
        verbose_name=_('Quantidade Máxima'),
    )

    status = models.CharField(
        max_length=20,
        choices=ItemStatus.choices,
        default=ItemStatus.AVAILABLE,
        db_index=True,
        verbose_name=_('Status'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ItemQuerySet.as_manager()

    class Meta:
        verbose_name = _('Item')
        verbose_name_plural = _('Itens')
        ordering = ['name']
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name='custodian_item_quantity_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(min_quantity__gte=0),
                name='custodian_item_min_quantity_non_negative',
            ),
        ]

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_quantity

    def delete(self, *args, **kwargs):
        """
        Refuse deletion while ledger entries or alerts reference the item.

        Both are kept as history behind protected foreign keys, so only an
        item that never moved and never alerted can go.
        """
        from custodian.exceptions import CustodyError

        active = self.transactions.filter(status=TransactionStatus.ACTIVE).count()
        if active:
            raise CustodyError(
                'ITEM_HAS_ACTIVE_TRANSACTIONS',
                item_id=str(self.pk),
                active=active,
            )
        if self.transactions.exists() or self.alerts.exists():
            raise CustodyError(
                'ITEM_HAS_HISTORY',
                item_id=str(self.pk),
            )
        return super().delete(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name}: {self.quantity}"
