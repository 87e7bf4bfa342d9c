"""
Transaction model — Ledger of custody movements.
"""

import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from custodian.models.enums import TransactionStatus, TransactionType


class TransactionQuerySet(models.QuerySet):
    """Helper filters for Transaction queries."""

    def active(self):
        return self.filter(status=TransactionStatus.ACTIVE)

    def open_checkouts(self):
        """Checkouts still out of custody."""
        return self.filter(
            status=TransactionStatus.ACTIVE,
            transaction_type=TransactionType.CHECKOUT,
        )

    def overdue(self, today=None):
        """Open checkouts whose due_date has passed."""
        today = today or timezone.localdate()
        return self.open_checkouts().filter(due_date__lt=today)

    def for_user(self, user_id):
        return self.filter(user_id=user_id)


class Transaction(models.Model):
    """
    Record of one custody movement.

    Rules:
    - Only status, returned_at, condition_on_return and notes change after creation
    - CHECKIN records are settled on creation and never transition
    - CHECKOUT records transition ACTIVE → COMPLETED exactly once (return)

    Created only by the custody engine, together with the quantity change.
    """

    MUTABLE_FIELDS = frozenset({
        'status', 'returned_at', 'condition_on_return', 'notes', 'updated_at',
    })

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    item = models.ForeignKey(
        'custodian.Item',
        on_delete=models.PROTECT,
        related_name='transactions',
        verbose_name=_('Item'),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='custody_transactions',
        verbose_name=_('Usuário'),
    )

    transaction_type = models.CharField(
        max_length=20,
        choices=TransactionType.choices,
        verbose_name=_('Tipo'),
    )
    quantity = models.IntegerField(verbose_name=_('Quantidade'))
    status = models.CharField(
        max_length=20,
        choices=TransactionStatus.choices,
        default=TransactionStatus.ACTIVE,
        db_index=True,
        verbose_name=_('Status'),
    )

    due_date = models.DateField(null=True, blank=True, verbose_name=_('Devolver até'))
    returned_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Devolvido em'))
    location_used = models.CharField(
        max_length=200,
        blank=True,
        default='',
        verbose_name=_('Local de uso'),
    )
    condition_on_return = models.CharField(
        max_length=200,
        blank=True,
        default='',
        verbose_name=_('Condição na devolução'),
    )
    notes = models.TextField(blank=True, default='', verbose_name=_('Observações'))

    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Data/Hora'))
    updated_at = models.DateTimeField(auto_now=True)

    objects = TransactionQuerySet.as_manager()

    class Meta:
        verbose_name = _('Transação')
        verbose_name_plural = _('Transações')
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name='custodian_transaction_quantity_positive',
            ),
        ]
        indexes = [
            models.Index(fields=['item', 'status'], name='custodian_txn_item_status_idx'),
            models.Index(fields=['user', 'status'], name='custodian_txn_user_status_idx'),
        ]

    @property
    def is_checkout(self) -> bool:
        return self.transaction_type == TransactionType.CHECKOUT

    @property
    def is_returnable(self) -> bool:
        """Open checkout that can still be completed."""
        return self.is_checkout and self.status == TransactionStatus.ACTIVE

    @property
    def signed_quantity(self) -> int:
        """Quantity delta this movement applied to the item."""
        return -self.quantity if self.is_checkout else self.quantity

    def save(self, *args, **kwargs):
        """Allow only lifecycle fields to change once recorded."""
        if not self._state.adding:
            update_fields = kwargs.get('update_fields')
            if update_fields is None or not set(update_fields) <= self.MUTABLE_FIELDS:
                raise ValueError(
                    "Transações são imutáveis, exceto status, devolução e observações. "
                    "Use save(update_fields=[...])."
                )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion of open records."""
        if self.status == TransactionStatus.ACTIVE:
            raise ValueError("Transações ativas não podem ser excluídas.")
        return super().delete(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.transaction_type} {self.quantity}x {self.item_id} [{self.status}]"
