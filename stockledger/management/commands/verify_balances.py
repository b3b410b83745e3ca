"""
Management command to check balances against history.

Usage:
    python manage.py verify_balances
    python manage.py verify_balances --fix
"""

from django.core.management.base import BaseCommand

from stockledger import ledger


class Command(BaseCommand):
    """Compare balances with the history fold."""

    help = 'Reports (and optionally repairs) balances that disagree with history'

    def add_arguments(self, parser):
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Rewrites diverging balances from history'
        )

    def handle(self, *args, **options):
        drifts = ledger.verify_balances(fix=options['fix'])

        for drift in drifts:
            self.stdout.write(
                f'product={drift.product_id} location={drift.location_id} '
                f'state={drift.state}: recorded {drift.recorded}, history {drift.expected}'
            )

        if not drifts:
            self.stdout.write(self.style.SUCCESS('All balances match history'))
        elif options['fix']:
            self.stdout.write(self.style.SUCCESS(f'{len(drifts)} balance(s) repaired'))
        else:
            self.stdout.write(self.style.WARNING(f'{len(drifts)} balance(s) diverge from history'))
