"""
HTTP-facing exceptions for the milk app.

Service-layer errors live in ``services/exceptions.py`` and are
converted to these in views.
"""
from rest_framework.exceptions import APIException


class FarmerNotFoundAPIError(APIException):
    """Referenced farmer does not exist."""
    status_code = 404
    default_detail = 'Farmer not found.'
    default_code = 'farmer_not_found'


class InvalidCollectionAPIError(APIException):
    """Collection measurements rejected by the intake service."""
    status_code = 400
    default_detail = 'Invalid milk collection.'
    default_code = 'invalid_collection'
