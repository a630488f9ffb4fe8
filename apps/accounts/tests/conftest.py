import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def admin_user(db):
    """Create and return a cooperative administrator."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        name='Admin User',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def farmer(db):
    """Create and return a farmer."""
    return User.objects.create_farmer(
        email='farmer@example.com',
        password='TestPass123!',
        name='Rajesh Kumar',
    )


@pytest.fixture
def farmer_inactive(db):
    """Create and return a deactivated farmer."""
    return User.objects.create_farmer(
        email='inactive@example.com',
        password='TestPass123!',
        name='Inactive Farmer',
        is_active=False,
    )


@pytest.fixture
def admin_client(api_client, admin_user):
    """Return API client authenticated as administrator."""
    refresh = RefreshToken.for_user(admin_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def farmer_client(api_client, farmer):
    """Return API client authenticated as farmer."""
    refresh = RefreshToken.for_user(farmer)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client
