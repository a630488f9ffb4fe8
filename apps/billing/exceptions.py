"""
HTTP-facing exceptions for the billing app.

Service-layer errors live in ``services/exceptions.py`` and are
converted to these in views.
"""
from rest_framework.exceptions import APIException


class BillingGenerationFailedError(APIException):
    """The billing transaction was rolled back."""
    status_code = 500
    default_detail = 'Failed to generate billing'
    default_code = 'billing_failed'


class BillingConflictAPIError(APIException):
    """Another billing run claimed some of the selected collections."""
    status_code = 409
    default_detail = 'Collections in this period were billed by another run. Retry the request.'
    default_code = 'billing_conflict'


class PaymentAlreadyPaidAPIError(APIException):
    """Payment was settled before."""
    status_code = 400
    default_detail = 'Payment is already marked as paid'
    default_code = 'already_paid'
