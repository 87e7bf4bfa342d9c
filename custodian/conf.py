"""
Custodian configuration.

Usage in settings.py:
    CUSTODIAN = {
        "OVERRIDE_ROLES": ["ADMIN", "STAFF"],
        "MAX_RETRIES": 3,
        "RETRY_BACKOFF_SECONDS": 0.05,
        "LOCK_TIMEOUT_MS": 5000,
        "DEFAULT_LIST_LIMIT": 100,
    }

Keys:
    OVERRIDE_ROLES: Actor roles that may complete or annotate a checkout
        owned by another user. Everyone else is limited to their own.
    MAX_RETRIES: Extra attempts for a movement that hit a lock error or a
        stale quantity. Only used when the engine opens the transaction.
    RETRY_BACKOFF_SECONDS: Sleep before the first retry, doubled after
        each further failure. Use 0 in tests.
    LOCK_TIMEOUT_MS: How long a movement waits for an item row lock
        before giving up with CONFLICT (PostgreSQL only, 0 = server default).
    DEFAULT_LIST_LIMIT: Page size of transactions_for() when the caller
        passes none.
"""

from dataclasses import dataclass, field
from typing import Any

from django.conf import settings


@dataclass
class CustodianSettings:
    """Custodian configuration settings."""

    # Roles allowed to act on transactions owned by other users
    OVERRIDE_ROLES: list[str] = field(default_factory=lambda: ["ADMIN", "STAFF"])

    # Extra attempts for a unit of work that hit lock contention
    MAX_RETRIES: int = 3

    # First backoff delay in seconds (doubled on each attempt)
    RETRY_BACKOFF_SECONDS: float = 0.05

    # Row lock wait bound in milliseconds (PostgreSQL only, 0 = server default)
    LOCK_TIMEOUT_MS: int = 5000

    # Default page size for list queries
    DEFAULT_LIST_LIMIT: int = 100


def get_custodian_settings() -> CustodianSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "CUSTODIAN", {})
    return CustodianSettings(**{
        k: v for k, v in user_settings.items()
        if k in CustodianSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_custodian_settings(), name)


custodian_settings = _LazySettings()
