"""Read-side helpers for milk collection listings."""

from decimal import Decimal

from django.db.models import Avg, Count, Sum, QuerySet


def summarize_collections(queryset: QuerySet) -> dict:
    """
    Aggregate quantity and quality figures over a filtered queryset.

    Returns:
        Dictionary with total_quantity, average_fat, average_snf and
        total_records. Empty querysets report zeros.
    """
    totals = queryset.order_by().aggregate(
        total_quantity=Sum('quantity'),
        average_fat=Avg('fat_percentage'),
        average_snf=Avg('snf'),
        total_records=Count('id'),
    )
    return {
        'total_quantity': totals['total_quantity'] or Decimal('0'),
        'average_fat': _round(totals['average_fat']),
        'average_snf': _round(totals['average_snf']),
        'total_records': totals['total_records'],
    }


def _round(value) -> Decimal:
    if value is None:
        return Decimal('0.00')
    return Decimal(str(value)).quantize(Decimal('0.01'))
