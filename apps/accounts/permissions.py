"""
Role-based permission classes shared by the milk and billing apps.

Administrators manage farmers, record collections and run billing.
Farmers may only read records they own.
"""
from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """
    Allow access only to users with the ADMIN role.

    Usage:
        @permission_classes([IsAuthenticated, IsAdminRole])
        def generate_billing(request):
            ...
    """

    message = 'Admin access required'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin)


class IsAdminOrOwner(BasePermission):
    """
    Allow administrators everything and farmers access to their own objects.

    The object must expose a ``farmer_id`` attribute.
    """

    message = 'Access denied'

    def has_object_permission(self, request, view, obj):
        user = request.user
        if user.is_admin:
            return True
        return user.is_farmer and obj.farmer_id == user.id
