"""Read-only farmer identity lookups used by the collection and billing apps."""

from uuid import UUID

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError

from apps.accounts.models import UserRole

from .exceptions import FarmerNotFoundError

User = get_user_model()


def get_farmer(*, farmer_id: UUID) -> User:
    """
    Return the active farmer with the given id.

    Raises:
        FarmerNotFoundError: If no farmer with that id exists, or the id is
            not a valid UUID, or the user is not a farmer.
    """
    try:
        return User.objects.get(id=farmer_id, role=UserRole.FARMER, is_active=True)
    except (User.DoesNotExist, ValidationError, ValueError):
        raise FarmerNotFoundError(f"Farmer with ID {farmer_id} not found")
