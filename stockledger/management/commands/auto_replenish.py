"""
Management command to run auto-replenishment.

Usage:
    python manage.py auto_replenish --actor wh-01
    python manage.py auto_replenish --actor wh-01 --date 2026-10-19
    python manage.py auto_replenish --dry-run
"""

from datetime import date

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from stockledger import ledger
from stockledger.exceptions import LedgerError


class Command(BaseCommand):
    """Create shipping instructions / inbound plans for low stock."""

    help = 'Creates shipping instructions and inbound plans for current low stock alerts'

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            type=date.fromisoformat,
            default=None,
            help='Reference date, YYYY-MM-DD (default: today)'
        )
        parser.add_argument(
            '--actor',
            default='',
            help='Actor recorded on created instructions and plans'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Lists current alerts without creating anything'
        )

    def handle(self, *args, **options):
        on_date = options['date'] or timezone.localdate()

        if options['dry_run']:
            alerts = ledger.low_stock_alerts(limit=0)
            for alert in alerts:
                self.stdout.write(
                    f'{alert.product.sku} @ {alert.location.code}: '
                    f'{alert.current_stock}/{alert.min_stock} -> order {alert.order_quantity}'
                )
            self.stdout.write(f'{len(alerts)} alert(s) would be processed')
            return

        if not options['actor']:
            raise CommandError('--actor is required unless --dry-run is given')

        try:
            result = ledger.auto_replenish(on_date, options['actor'])
        except LedgerError as exc:
            raise CommandError(f'{exc.code}: {exc.message}') from exc

        self.stdout.write(
            self.style.SUCCESS(
                f'{len(result.shipping_instructions)} shipping instruction(s), '
                f'{len(result.inbound_plans)} inbound plan(s) created, '
                f'{len(result.skipped)} skipped'
            )
        )
