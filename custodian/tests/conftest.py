"""
Pytest fixtures for Custodian tests.
"""

from datetime import date, timedelta

import pytest
from django.contrib.auth import get_user_model

from custodian.models import ActorRole, Item
from custodian.protocols import Actor


User = get_user_model()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='enfermeira',
        password='testpass123'
    )


@pytest.fixture
def other_user(db):
    """Create a second user."""
    return User.objects.create_user(
        username='tecnico',
        password='testpass123'
    )


@pytest.fixture
def make_item(db):
    """Factory for items with a given quantity and threshold."""
    def _make(quantity=10, min_quantity=5, name='Oxímetro de pulso', **kwargs):
        return Item.objects.create(
            name=name,
            quantity=quantity,
            min_quantity=min_quantity,
            **kwargs
        )
    return _make


@pytest.fixture
def item(make_item):
    """Item with quantity=10, min_quantity=5."""
    return make_item()


@pytest.fixture
def owner(user):
    """Actor owning the user's transactions, without override rights."""
    return Actor(user_id=user.pk, role=ActorRole.MEDICAL_PERSONNEL)


@pytest.fixture
def stranger(other_user):
    """Actor without override rights on someone else's transactions."""
    return Actor(user_id=other_user.pk, role=ActorRole.MEDICAL_PERSONNEL)


@pytest.fixture
def staff(other_user):
    """Actor allowed to act on any transaction."""
    return Actor(user_id=other_user.pk, role=ActorRole.STAFF)


@pytest.fixture
def today():
    """Return today's date."""
    return date.today()


@pytest.fixture
def yesterday():
    """Return yesterday's date."""
    return date.today() - timedelta(days=1)
