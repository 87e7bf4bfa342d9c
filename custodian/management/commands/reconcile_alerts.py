"""
Management command to bring low-stock alerts in line with item quantities.

Usage:
    python manage.py reconcile_alerts
    python manage.py reconcile_alerts --dry-run
"""

from django.core.management.base import BaseCommand

from custodian import custody


class Command(BaseCommand):
    """Reconcile low-stock alerts command."""

    help = 'Recalcula os alertas de estoque baixo de todos os itens'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Mostra o que seria alterado sem executar'
        )

    def handle(self, *args, **options):
        changed = custody.reconcile_all(dry_run=options['dry_run'])

        if options['dry_run']:
            for item, alert in changed:
                current = alert.alert_level if alert else '-'
                self.stdout.write(f'{item.name}: quantidade {item.quantity}, alerta {current}')
            self.stdout.write(f'{len(changed)} item(ns) seria(m) ajustado(s)')
        else:
            self.stdout.write(
                self.style.SUCCESS(f'{len(changed)} item(ns) ajustado(s)')
            )
