"""
Management command to run billing from the command line.

Usage:
    python manage.py generate_billing --start 2025-11-01 --end 2025-11-15
    python manage.py generate_billing --rate 36.50 --dry-run

Without ``--start``/``--end`` the last 15 days up to now are billed.
"""

from datetime import timedelta
from decimal import Decimal, InvalidOperation

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from apps.billing.serializers import PeriodBoundField
from apps.billing.services import (
    BillingServiceError,
    RatePolicy,
    aggregate_by_farmer,
    generate_billing,
    select_unbilled,
)


class Command(BaseCommand):
    help = 'Bill all unbilled milk collections in a period'

    def add_arguments(self, parser):
        parser.add_argument('--start', help='Period start, ISO date or datetime')
        parser.add_argument('--end', help='Period end, ISO date or datetime (a date covers the whole day)')
        parser.add_argument('--rate', help='Rate per liter; the configured base rate when omitted')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be billed without making changes',
        )

    def handle(self, *args, **options):
        now = timezone.now()
        period_start = self.parse_bound(options['start'], end_of_day=False) or now - timedelta(days=15)
        period_end = self.parse_bound(options['end'], end_of_day=True) or now
        rate_per_liter = self.parse_rate(options['rate'])

        try:
            if options['dry_run']:
                self.preview(period_start, period_end, rate_per_liter)
                return

            result = generate_billing(
                period_start=period_start,
                period_end=period_end,
                rate_per_liter=rate_per_liter,
            )
        except BillingServiceError as e:
            raise CommandError(str(e))

        if result['is_noop']:
            self.stdout.write(
                self.style.SUCCESS('No unbilled milk collections found for the specified period.')
            )
            return

        for payment in result['payments']:
            self.stdout.write(
                f'  - {payment.farmer.get_display_name()} | {payment.total_quantity} L | {payment.amount}'
            )
        self.stdout.write(self.style.SUCCESS(
            f"\nBilled {result['total_collections']} collection(s) for "
            f"{result['total_farmers']} farmer(s), total {result['total_amount']} "
            f"at {result['rate'].rate_per_liter}/L ({result['rate'].version})"
        ))

    def preview(self, period_start, period_end, rate_per_liter):
        """Print the payments a run would create."""
        rate = RatePolicy.resolve(rate_per_liter)
        aggregates = aggregate_by_farmer(select_unbilled(period_start, period_end))

        if not aggregates:
            self.stdout.write(self.style.SUCCESS('Nothing to bill in this period.'))
            return

        total = Decimal('0.00')
        for aggregate in aggregates.values():
            amount = rate.amount_for(aggregate.total_quantity)
            total += amount
            self.stdout.write(
                f'  - {aggregate.farmer.get_display_name()} | {aggregate.collections_count} collection(s) | '
                f'{aggregate.total_quantity} L | {amount}'
            )
        self.stdout.write(f'\nTotal {total} at {rate.rate_per_liter}/L ({rate.version})')
        self.stdout.write(self.style.WARNING('--dry-run mode: No changes made.'))

    def parse_bound(self, value, *, end_of_day):
        if not value:
            return None
        try:
            return PeriodBoundField(end_of_day=end_of_day).to_internal_value(value)
        except ValidationError:
            raise CommandError(f'Invalid date: {value}')

    def parse_rate(self, value):
        if value is None:
            return None
        try:
            return Decimal(value)
        except InvalidOperation:
            raise CommandError('rate_per_liter must be a positive number')
