"""
Billing generation service.

Turns every unbilled milk collection in a period into one pending payment
per farmer. The whole run happens in a single database transaction:
either every payment is created and every consumed collection is flagged
as billed, or nothing changes.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from django.db import DEFAULT_DB_ALIAS, DatabaseError, transaction

from apps.milk.models import MilkCollection
from apps.billing.models import Payment, PaymentCollection, PaymentStatus

from .exceptions import BillingConflictError, BillingTransactionError
from .collection_selection import select_unbilled, validate_period
from .farmer_aggregation import FarmerAggregate, aggregate_by_farmer
from .rate_policy import RatePolicy

logger = logging.getLogger(__name__)


def _empty_result(period_start, period_end, rate):
    return {
        'payments': [],
        'total_farmers': 0,
        'total_collections': 0,
        'total_amount': Decimal('0.00'),
        'period_start': period_start,
        'period_end': period_end,
        'rate': rate,
        'is_noop': True,
    }


def _create_payments(
    aggregates: Dict[UUID, FarmerAggregate],
    *,
    rate: RatePolicy,
    period_start: datetime,
    period_end: datetime,
    generated_by,
    using: str
) -> List[Payment]:
    """
    Create one pending payment per farmer plus its collection links.

    Every amount is priced before the first insert, so an amount that
    does not fit a payment fails without writing anything.
    """
    priced = [(aggregate, rate.amount_for(aggregate.total_quantity)) for aggregate in aggregates.values()]
    payments = []
    links = []

    for aggregate, amount in priced:
        payment = Payment.objects.using(using).create(
            farmer=aggregate.farmer,
            amount=amount,
            total_quantity=aggregate.total_quantity,
            rate_per_liter=rate.rate_per_liter,
            rate_version=rate.version,
            period_start_date=period_start,
            period_end_date=period_end,
            status=PaymentStatus.PENDING,
            generated_by=generated_by,
        )
        payments.append(payment)
        links.extend(
            PaymentCollection(payment=payment, collection_id=collection_id)
            for collection_id in aggregate.collection_ids
        )

    PaymentCollection.objects.using(using).bulk_create(links)
    return payments


def _mark_billed(collection_ids: List[UUID], *, using: str) -> None:
    """
    Flag the consumed collections as billed.

    Only rows still unbilled are touched. A short count means another run
    billed one of them after selection.

    Raises:
        BillingConflictError: If fewer rows were updated than requested
    """
    updated = (
        MilkCollection.objects
        .using(using)
        .filter(id__in=collection_ids, is_billed=False)
        .update(is_billed=True)
    )
    if updated != len(collection_ids):
        raise BillingConflictError(
            f"Expected to bill {len(collection_ids)} collections, updated {updated}"
        )


def generate_billing(
    *,
    period_start: datetime,
    period_end: datetime,
    rate_per_liter: Optional[Decimal] = None,
    generated_by=None,
    using: str = DEFAULT_DB_ALIAS
) -> dict:
    """
    Bill all unbilled collections created within ``[period_start, period_end]``.

    Steps, inside one transaction:
        1. Select and lock unbilled collections in the period
        2. Aggregate liters per farmer
        3. Create a PENDING payment per farmer with its collection links
        4. Flag exactly the selected collections as billed

    An empty selection is a successful no-op; nothing is written.

    Args:
        period_start: Inclusive period start (aware datetime)
        period_end: Inclusive period end (aware datetime)
        rate_per_liter: Rate override; the configured base rate when None
        generated_by: Admin user running the billing, recorded on payments
        using: Database alias to bill against

    Returns:
        dict with ``payments``, ``total_farmers``, ``total_collections``,
        ``total_amount``, ``period_start``, ``period_end``, ``rate``
        (the RatePolicy applied) and ``is_noop``

    Raises:
        BillingValidationError: If the period or rate is invalid, or a
            farmer's total does not fit a payment; nothing is written
        BillingConflictError: If a concurrent run billed a selected record
        BillingTransactionError: If the database rejects any write; the
            run is rolled back in full
    """
    validate_period(period_start, period_end)
    rate = RatePolicy.resolve(rate_per_liter)

    try:
        with transaction.atomic(using=using):
            records = select_unbilled(period_start, period_end, lock=True, using=using)
            if not records:
                logger.info(
                    "Billing for %s - %s: no unbilled collections, nothing to do",
                    period_start.isoformat(), period_end.isoformat()
                )
                return _empty_result(period_start, period_end, rate)

            aggregates = aggregate_by_farmer(records)
            payments = _create_payments(
                aggregates,
                rate=rate,
                period_start=period_start,
                period_end=period_end,
                generated_by=generated_by,
                using=using,
            )
            collection_ids = [
                collection_id
                for aggregate in aggregates.values()
                for collection_id in aggregate.collection_ids
            ]
            _mark_billed(collection_ids, using=using)
    except BillingConflictError:
        logger.warning(
            "Billing for %s - %s rolled back: collections billed concurrently",
            period_start.isoformat(), period_end.isoformat()
        )
        raise
    except DatabaseError as exc:
        logger.exception(
            "Billing for %s - %s failed and was rolled back",
            period_start.isoformat(), period_end.isoformat()
        )
        raise BillingTransactionError("Failed to generate billing") from exc

    total_amount = sum((payment.amount for payment in payments), Decimal('0.00'))
    logger.info(
        "Billing for %s - %s: %d payments, %d collections, total %s at %s/L (%s)",
        period_start.isoformat(), period_end.isoformat(),
        len(payments), len(collection_ids), total_amount,
        rate.rate_per_liter, rate.version
    )

    return {
        'payments': payments,
        'total_farmers': len(payments),
        'total_collections': len(collection_ids),
        'total_amount': total_amount,
        'period_start': period_start,
        'period_end': period_end,
        'rate': rate,
        'is_noop': False,
    }
