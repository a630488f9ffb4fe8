"""
Billing app services layer.

Billing runs select unbilled collections, aggregate them per farmer and
commit the resulting payments in one transaction.
"""

from .exceptions import (
    BillingServiceError,
    BillingValidationError,
    BillingTransactionError,
    BillingConflictError,
    PaymentNotFoundError,
    PaymentAlreadyPaidError,
)
from .rate_policy import (
    RatePolicy,
    MANUAL_RATE_VERSION,
)
from .collection_selection import (
    select_unbilled,
    validate_period,
)
from .farmer_aggregation import (
    FarmerAggregate,
    aggregate_by_farmer,
)
from .billing_generation import (
    generate_billing,
)
from .payment_management import (
    mark_payment_paid,
    summarize_payments,
)

__all__ = [
    # Exceptions
    'BillingServiceError',
    'BillingValidationError',
    'BillingTransactionError',
    'BillingConflictError',
    'PaymentNotFoundError',
    'PaymentAlreadyPaidError',

    # Rates
    'RatePolicy',
    'MANUAL_RATE_VERSION',

    # Selection and aggregation
    'select_unbilled',
    'validate_period',
    'FarmerAggregate',
    'aggregate_by_farmer',

    # Generation
    'generate_billing',

    # Payments
    'mark_payment_paid',
    'summarize_payments',
]
