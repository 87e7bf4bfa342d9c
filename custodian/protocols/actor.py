"""
Actor Protocol — identity handed over by the authentication layer.

Custodian does not authenticate anyone. Request-handling code resolves the
current (user_id, role) pair and passes it in as an Actor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from custodian.conf import custodian_settings


@dataclass(frozen=True)
class Actor:
    """Authenticated identity performing a request."""

    user_id: Any
    role: str

    @property
    def can_override_ownership(self) -> bool:
        """May act on transactions owned by other users."""
        return self.role in custodian_settings.OVERRIDE_ROLES

    def owns(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    @classmethod
    def from_user(cls, user, role: str) -> Actor:
        return cls(user_id=user.pk, role=role)
