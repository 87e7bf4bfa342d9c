"""
Management command to list checkouts past their due date.

Usage:
    python manage.py list_overdue_checkouts
    python manage.py list_overdue_checkouts --date 2025-01-31
"""

from datetime import date

from django.core.management.base import BaseCommand, CommandError

from custodian import custody


class Command(BaseCommand):
    """List overdue checkouts command."""

    help = 'Lista retiradas ativas com devolução vencida'

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            dest='reference_date',
            help='Data de referência (AAAA-MM-DD), padrão hoje'
        )

    def handle(self, *args, **options):
        today = None
        if options['reference_date']:
            try:
                today = date.fromisoformat(options['reference_date'])
            except ValueError:
                raise CommandError(f"Data inválida: {options['reference_date']}") from None

        overdue = custody.overdue_checkouts(today)
        for txn in overdue:
            self.stdout.write(
                f'{txn.due_date} | {txn.item.name} | {txn.quantity}x | {txn.user}'
            )
        self.stdout.write(f'{len(overdue)} retirada(s) vencida(s)')
