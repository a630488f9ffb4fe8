"""
Domain-specific exceptions for billing services.

These exceptions represent business rule violations and infrastructure
failures during billing; views catch them and convert them to HTTP
responses.
"""


class BillingServiceError(Exception):
    """Base exception for all billing service errors."""
    pass


class BillingValidationError(BillingServiceError):
    """Raised when period bounds or the rate are missing or invalid."""
    pass


class BillingTransactionError(BillingServiceError):
    """Raised when the billing transaction fails and is rolled back."""
    pass


class BillingConflictError(BillingTransactionError):
    """Raised when a concurrent run already billed a selected collection."""
    pass


class PaymentNotFoundError(BillingServiceError):
    """Raised when a payment does not exist."""
    pass


class PaymentAlreadyPaidError(BillingServiceError):
    """Raised when marking an already paid payment as paid."""
    pass
