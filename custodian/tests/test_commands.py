"""
Tests for management commands.
"""

from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from custodian import custody
from custodian.models import LowStockAlert


pytestmark = pytest.mark.django_db


class TestReconcileAlertsCommand:
    """Tests for reconcile_alerts."""

    def test_dry_run(self, make_item):
        """--dry-run lists items without writing."""
        make_item(quantity=0, min_quantity=3, name='Máscaras N95')
        out = StringIO()

        call_command('reconcile_alerts', '--dry-run', stdout=out)

        assert 'Máscaras N95' in out.getvalue()
        assert '1 item(ns) seria(m) ajustado(s)' in out.getvalue()
        assert LowStockAlert.objects.count() == 0

    def test_reconcile(self, make_item):
        """Opens the missing alert."""
        item = make_item(quantity=0, min_quantity=3)
        out = StringIO()

        call_command('reconcile_alerts', stdout=out)

        assert '1 item(ns) ajustado(s)' in out.getvalue()
        assert custody.open_alert(item.pk) is not None


class TestListOverdueCheckoutsCommand:
    """Tests for list_overdue_checkouts."""

    def test_lists_overdue(self, item, user, today):
        """Prints each overdue checkout and a total."""
        custody.create_movement(
            item.pk, user.pk, 'CHECKOUT', 2, due_date=today - timedelta(days=3),
        )
        custody.create_movement(item.pk, user.pk, 'CHECKOUT', 1, due_date=today)
        out = StringIO()

        call_command('list_overdue_checkouts', '--date', today.isoformat(), stdout=out)

        output = out.getvalue()
        assert 'Oxímetro de pulso | 2x' in output
        assert '1 retirada(s) vencida(s)' in output

    def test_invalid_date(self):
        with pytest.raises(CommandError):
            call_command('list_overdue_checkouts', '--date', '31/01/2025')
