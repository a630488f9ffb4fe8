"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data [--clear]

This creates:
- 1 administrator (admin@example.com)
- 3 farmers (farmer, priya, amit)
- 8 unbilled milk collections spread over the last two weeks

Run ``python manage.py generate_billing`` afterwards to bill them.
"""

from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User, UserRole
from apps.milk.models import MilkCollection
from apps.billing.models import Payment, PaymentCollection


FARMERS = [
    ('farmer@example.com', 'Rajesh Kumar', [
        ('15.50', '4.20', '8.50'),
        ('18.00', '4.50', '8.70'),
        ('16.50', '4.30', '8.60'),
    ]),
    ('priya@farmer.com', 'Priya Sharma', [
        ('12.00', '3.80', '8.40'),
        ('14.50', '4.00', '8.50'),
    ]),
    ('amit@farmer.com', 'Amit Patel', [
        ('20.00', '4.60', '8.80'),
        ('22.50', '4.70', '8.90'),
        ('19.00', '4.50', '8.70'),
    ]),
]


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        self.create_admin()
        farmers = self.create_farmers()
        created = self.create_collections(farmers)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write(f'  {len(farmers)} farmers, {created} unbilled collections')
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / password123 (admin)')
        for email, _, _ in FARMERS:
            self.stdout.write(f'  {email} / password123')

    def clear_data(self):
        """Clear billing data and demo users."""
        PaymentCollection.objects.all().delete()
        Payment.objects.all().delete()
        MilkCollection.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def create_admin(self):
        self.stdout.write('  Creating administrator...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'name': 'Admin User',
                'role': UserRole.ADMIN,
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('password123')
        admin.save()
        return admin

    def create_farmers(self):
        self.stdout.write('  Creating farmers...')

        farmers = {}
        for email, name, _ in FARMERS:
            farmer, _ = User.objects.get_or_create(
                email=email,
                defaults={'name': name, 'role': UserRole.FARMER}
            )
            farmer.set_password('password123')
            farmer.save()
            farmers[email] = farmer
        return farmers

    def create_collections(self, farmers):
        self.stdout.write('  Creating milk collections...')

        now = timezone.now()
        created = 0
        for email, _, deliveries in FARMERS:
            for days_ago, (quantity, fat, snf) in zip(range(12, 0, -4), deliveries):
                MilkCollection.objects.create(
                    farmer=farmers[email],
                    quantity=Decimal(quantity),
                    fat_percentage=Decimal(fat),
                    snf=Decimal(snf),
                    created_at=now - timedelta(days=days_ago),
                )
                created += 1
        return created
