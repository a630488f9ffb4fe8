"""Payment read and settlement services."""

import logging
from decimal import Decimal
from uuid import UUID

from django.db import transaction
from django.db.models import Count, Sum

from apps.billing.models import Payment, PaymentStatus

from .exceptions import PaymentNotFoundError, PaymentAlreadyPaidError

logger = logging.getLogger(__name__)


@transaction.atomic
def mark_payment_paid(*, payment_id: UUID) -> Payment:
    """
    Move a payment from PENDING to PAID.

    Uses select_for_update() so two admins settling the same payment
    cannot both succeed.

    Args:
        payment_id: UUID of the payment

    Returns:
        Updated Payment instance

    Raises:
        PaymentNotFoundError: If the payment does not exist
        PaymentAlreadyPaidError: If it was already settled
    """
    try:
        payment = (
            Payment.objects
            .select_for_update()
            .get(id=payment_id)
        )
    except Payment.DoesNotExist:
        raise PaymentNotFoundError("Payment not found")

    if payment.status == PaymentStatus.PAID:
        raise PaymentAlreadyPaidError("Payment is already marked as paid")

    payment.mark_paid()
    logger.info("Payment %s marked paid (%s)", payment.id, payment.amount)
    return payment


def summarize_payments(queryset) -> dict:
    """
    Totals and per-status breakdown for a payment queryset.

    Returns:
        dict with ``total_payments``, ``total_amount`` and ``by_status``,
        the latter mapping every status to its count and amount
    """
    queryset = queryset.order_by().prefetch_related(None)
    totals = queryset.aggregate(total_amount=Sum('amount'), total_payments=Count('id'))

    by_status = {
        status: {'count': 0, 'amount': Decimal('0.00')}
        for status in PaymentStatus.values
    }
    for row in queryset.values('status').annotate(count=Count('id'), amount=Sum('amount')):
        by_status[row['status']] = {'count': row['count'], 'amount': row['amount']}

    return {
        'total_payments': totals['total_payments'],
        'total_amount': totals['total_amount'] or Decimal('0.00'),
        'by_status': by_status,
    }
