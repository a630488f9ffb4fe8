"""Login for cooperative staff and farmers."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework_simplejwt.tokens import RefreshToken

from ..models import UserRole
from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Check a login attempt and stamp last_login.

    Only accounts holding one of the cooperative roles can log in; a row
    with any other role is treated as unknown.

    Raises:
        InvalidCredentialsError: Unknown email, wrong password or no role
        InactiveAccountError: Account is deactivated
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email__iexact=email, role__in=UserRole.values)
        )
    except User.DoesNotExist:
        logger.info("Rejected login for %s: no account with a cooperative role", email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.check_password(password):
        logger.info("Rejected login for %s: bad password", email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        logger.info("Rejected login for %s: %s account is deactivated", email, user.role)
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    logger.info("Login for %s as %s", user.email, user.role)

    return user


def issue_tokens(*, user: User) -> dict:
    """JWT pair whose claims carry the user's role, so clients can route without a profile call."""
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }
