"""
Custody services — modular organization of custody operations.

Re-exports the stores and the engine:
    from custodian.services import ItemStore, AlertStore, TransactionLedger, CustodyMovements
"""

from custodian.services.alerts import AlertStore
from custodian.services.items import ItemStore
from custodian.services.ledger import TransactionLedger
from custodian.services.movements import CustodyMovements, MovementResult
from custodian.services.queries import CustodyQueries, CustodySummary

__all__ = [
    'ItemStore',
    'AlertStore',
    'TransactionLedger',
    'CustodyMovements',
    'MovementResult',
    'CustodyQueries',
    'CustodySummary',
]
