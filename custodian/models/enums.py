"""
Enums for Custodian models.

Stored values are upper case and must stay verbatim: existing clients
compare against them.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ItemStatus(models.TextChoices):
    """Operational status of an inventory item."""
    AVAILABLE = 'AVAILABLE', _('Disponível')
    IN_USE = 'IN_USE', _('Em uso')
    MAINTENANCE = 'MAINTENANCE', _('Em manutenção')
    LOST = 'LOST', _('Extraviado')
    EXPIRED = 'EXPIRED', _('Vencido')
    DISCONTINUED = 'DISCONTINUED', _('Descontinuado')


class TransactionType(models.TextChoices):
    """
    Direction of a movement.

    CHECKOUT: Units leave custody (quantity decreases).
    CHECKIN:  Units enter custody (quantity increases).
    """
    CHECKOUT = 'CHECKOUT', _('Retirada')
    CHECKIN = 'CHECKIN', _('Entrada')


class TransactionStatus(models.TextChoices):
    """Transaction lifecycle status."""
    ACTIVE = 'ACTIVE', _('Ativa')            # Open checkout, or settled checkin
    COMPLETED = 'COMPLETED', _('Concluída')  # Checkout returned


class AlertLevel(models.TextChoices):
    """Severity of a low-stock alert."""
    LOW = 'LOW', _('Baixo')
    CRITICAL = 'CRITICAL', _('Crítico')
    OUT_OF_STOCK = 'OUT_OF_STOCK', _('Esgotado')


class AlertStatus(models.TextChoices):
    """Low-stock alert lifecycle status."""
    ACTIVE = 'ACTIVE', _('Ativo')
    ACKNOWLEDGED = 'ACKNOWLEDGED', _('Reconhecido')
    RESOLVED = 'RESOLVED', _('Resolvido')


class ActorRole(models.TextChoices):
    """Roles resolved by the authentication layer."""
    ADMIN = 'ADMIN', _('Administrador')
    STAFF = 'STAFF', _('Equipe')
    MEDICAL_PERSONNEL = 'MEDICAL_PERSONNEL', _('Equipe médica')


OPEN_ALERT_STATUSES = [AlertStatus.ACTIVE, AlertStatus.ACKNOWLEDGED]
