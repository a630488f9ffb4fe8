"""
Unbilled-collection selection.

Picks the milk collections a billing run will consume.
"""

from datetime import datetime
from typing import List

from django.db import DEFAULT_DB_ALIAS
from django.utils import timezone

from apps.milk.models import MilkCollection

from .exceptions import BillingValidationError


def validate_period(period_start: datetime, period_end: datetime) -> None:
    """
    Check that both bounds are aware datetimes and start precedes end.

    Raises:
        BillingValidationError: If a bound is missing, malformed, or the
            period is empty or inverted.
    """
    if period_start is None or period_end is None:
        raise BillingValidationError("period_start_date and period_end_date are required")

    for name, value in (('period_start_date', period_start), ('period_end_date', period_end)):
        if not isinstance(value, datetime):
            raise BillingValidationError(f"{name} must be a valid date or datetime")
        if timezone.is_naive(value):
            raise BillingValidationError(f"{name} must be timezone-aware")

    if period_start >= period_end:
        raise BillingValidationError("period_start_date must be before period_end_date")


def select_unbilled(
    period_start: datetime,
    period_end: datetime,
    *,
    lock: bool = False,
    using: str = DEFAULT_DB_ALIAS
) -> List[MilkCollection]:
    """
    Return unbilled collections created within ``[period_start, period_end]``.

    Each record comes with its farmer loaded. Results are ordered by
    creation time, then id, so aggregation order is reproducible.

    Args:
        period_start: Inclusive lower bound (aware datetime)
        period_end: Inclusive upper bound (aware datetime)
        lock: Lock the selected rows; only valid inside a transaction
        using: Database alias to read from

    Returns:
        List of MilkCollection instances, possibly empty

    Raises:
        BillingValidationError: If the period is invalid
    """
    validate_period(period_start, period_end)

    queryset = (
        MilkCollection.objects
        .using(using)
        .unbilled()
        .created_between(period_start, period_end)
        .select_related('farmer')
        .order_by('created_at', 'id')
    )
    if lock:
        # of=('self',) keeps the farmer rows unlocked on backends that support it
        queryset = queryset.select_for_update(of=('self',))

    return list(queryset)
