from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from apps.milk.models import MilkCollection


def at(day, hour=8):
    """Aware UTC timestamp on a November 2025 day."""
    return datetime(2025, 11, day, hour, 0, tzinfo=dt_timezone.utc)


def make_collection(farmer, quantity, created_at, is_billed=False):
    return MilkCollection.objects.create(
        farmer=farmer,
        quantity=Decimal(quantity),
        fat_percentage=Decimal('4.20'),
        snf=Decimal('8.50'),
        is_billed=is_billed,
        created_at=created_at,
    )
