"""
Custodian Protocols.

Defines interfaces for external system integration.
"""

from custodian.protocols.actor import Actor

__all__ = [
    "Actor",
]
