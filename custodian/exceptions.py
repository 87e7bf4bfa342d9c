"""
Exceptions for Custodian.

All errors are CustodyError with a structured code for programmatic handling.
"""

from typing import Any


class CustodyError(Exception):
    """
    Structured exception for custody operations.

    Usage:
        try:
            custody.create_movement(item.pk, user.pk, 'CHECKOUT', 10)
        except CustodyError as e:
            if e.code == 'INSUFFICIENT_QUANTITY':
                print(f"Só tem {e.available} disponível")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'NOT_FOUND': 'Registro não encontrado',
        'INSUFFICIENT_QUANTITY': 'Quantidade insuficiente disponível',
        'FORBIDDEN': 'Só é possível alterar as próprias transações',
        'INVALID_STATE': 'Transição inválida para o estado atual',
        'INVALID_QUANTITY': 'Quantidade inválida (deve ser positiva)',
        'INVALID_TYPE': 'Tipo de transação inválido',
        'CONFLICT': 'Modificação concorrente detectada',
        'ITEM_HAS_ACTIVE_TRANSACTIONS': 'Item possui transações ativas',
        'ITEM_HAS_HISTORY': 'Item possui histórico de transações ou alertas',
    }

    # Codes that are safe to retry as a whole unit of work
    _retryable_codes = frozenset({'CONFLICT'})

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, data={self.data!r})"

    @property
    def retryable(self) -> bool:
        """Transient store contention, safe to resubmit."""
        return self.code in self._retryable_codes

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'retryable': self.retryable,
            'data': {
                k: v if isinstance(v, (int, float, bool, type(None), list)) else str(v)
                for k, v in self.data.items()
            }
        }
