"""
Django Custodian — Motor de Custódia de Inventário.

Checkout/checkin of inventory items with on-hand quantity, movement ledger
and low-stock alerts kept consistent in a single unit of work.

Uso:
    from custodian import custody, CustodyError

    custody.create_movement(item.pk, user.pk, 'CHECKOUT', 2)
    custody.complete_checkout(txn_id, actor)
    custody.open_alert(item.pk)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'custody':
        from custodian.service import Custody
        return Custody
    elif name == 'CustodyError':
        from custodian.exceptions import CustodyError
        return CustodyError
    elif name == 'Actor':
        from custodian.protocols.actor import Actor
        return Actor
    elif name == 'Item':
        from custodian.models.item import Item
        return Item
    elif name == 'Transaction':
        from custodian.models.transaction import Transaction
        return Transaction
    elif name == 'LowStockAlert':
        from custodian.models.alert import LowStockAlert
        return LowStockAlert
    elif name == 'TransactionType':
        from custodian.models.enums import TransactionType
        return TransactionType
    elif name == 'AlertLevel':
        from custodian.models.enums import AlertLevel
        return AlertLevel
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'custody',
    'CustodyError',
    'Actor',
    'Item',
    'Transaction',
    'LowStockAlert',
    'TransactionType',
    'AlertLevel',
]

__version__ = '0.1.0'
