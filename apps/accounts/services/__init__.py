"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    InvalidCredentialsError,
    InactiveAccountError,
    FarmerNotFoundError,
)
from .user_authentication import authenticate_user, issue_tokens
from .farmer_lookup import get_farmer

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'FarmerNotFoundError',
    # Services
    'authenticate_user',
    'issue_tokens',
    'get_farmer',
]
