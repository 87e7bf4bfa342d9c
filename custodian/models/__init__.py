"""
Custodian Models.

Core models for custody tracking:
- Item: What is held and how many are on hand
- Transaction: Ledger of checkout/checkin movements
- LowStockAlert: Low-stock condition lifecycle per Item
"""

from custodian.models.alert import LowStockAlert
from custodian.models.enums import (
    ActorRole,
    AlertLevel,
    AlertStatus,
    ItemStatus,
    TransactionStatus,
    TransactionType,
)
from custodian.models.item import Item
from custodian.models.transaction import Transaction

__all__ = [
    'ActorRole',
    'AlertLevel',
    'AlertStatus',
    'ItemStatus',
    'TransactionStatus',
    'TransactionType',
    'Item',
    'Transaction',
    'LowStockAlert',
]
