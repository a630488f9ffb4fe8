"""
Rate policy for milk billing.

A billing run prices every liter at one flat rate. The rate and the
version label it came from are stored on each payment so historical
amounts stay reproducible after the base rate changes.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from django.conf import settings

from .exceptions import BillingValidationError

CURRENCY_QUANTUM = Decimal('0.01')
RATE_QUANTUM = Decimal('0.0001')
MANUAL_RATE_VERSION = 'manual'

# Exclusive upper bounds set by the Payment columns
MAX_RATE_PER_LITER = Decimal('1000000')
MAX_TOTAL_QUANTITY = Decimal('10000000000')
MAX_AMOUNT = Decimal('10000000000')


@dataclass(frozen=True)
class RatePolicy:
    """Flat per-liter price, tagged with the version it was issued under."""

    rate_per_liter: Decimal
    version: str

    def __post_init__(self):
        try:
            rate = Decimal(str(self.rate_per_liter)).quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)
        except (InvalidOperation, TypeError, ValueError):
            raise BillingValidationError("rate_per_liter must be a positive number")
        if rate <= 0:
            raise BillingValidationError("rate_per_liter must be a positive number")
        if rate >= MAX_RATE_PER_LITER:
            raise BillingValidationError(f"rate_per_liter must be less than {MAX_RATE_PER_LITER}")
        object.__setattr__(self, 'rate_per_liter', rate)

    @classmethod
    def base(cls) -> 'RatePolicy':
        """The configured cooperative base rate."""
        return cls(
            rate_per_liter=Decimal(str(settings.MILK_BASE_RATE_PER_LITER)),
            version=settings.MILK_RATE_POLICY_VERSION,
        )

    @classmethod
    def resolve(cls, rate_per_liter: Optional[Decimal] = None) -> 'RatePolicy':
        """Return the base policy, or a manual one when a rate is supplied."""
        if rate_per_liter is None:
            return cls.base()
        return cls(rate_per_liter=rate_per_liter, version=MANUAL_RATE_VERSION)

    def amount_for(self, quantity: Decimal) -> Decimal:
        """
        Price ``quantity`` liters, rounded half-up to the currency unit.

        Raises:
            BillingValidationError: If the quantity or the amount does not
                fit a payment record
        """
        quantity = Decimal(quantity)
        if quantity >= MAX_TOTAL_QUANTITY:
            raise BillingValidationError(f"Billed quantity {quantity} exceeds the payment limit")

        amount = (quantity * self.rate_per_liter).quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)
        if amount >= MAX_AMOUNT:
            raise BillingValidationError(f"Billed amount {amount} exceeds the payment limit")
        return amount
