import pytest
from decimal import Decimal
from datetime import datetime, timezone as dt_timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from .helpers import at, make_collection


@pytest.fixture(autouse=True)
def base_rate(settings):
    """Pin the configured base rate regardless of environment."""
    settings.MILK_BASE_RATE_PER_LITER = Decimal('35.00')
    settings.MILK_RATE_POLICY_VERSION = 'base-v1'


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
def farmer_a(db):
    """Create and return the first farmer."""
    return User.objects.create_farmer(
        email='farmer@example.com',
        password='TestPass123!',
        name='Rajesh Kumar',
    )


@pytest.fixture
def farmer_b(db):
    """Create and return the second farmer."""
    return User.objects.create_farmer(
        email='priya@farmer.com',
        password='TestPass123!',
        name='Priya Sharma',
    )


def authenticated_client(user):
    """Return a fresh API client authenticated as ``user`` using JWT."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def admin_client(admin_user):
    """Return API client authenticated as administrator."""
    return authenticated_client(admin_user)


@pytest.fixture
def farmer_client(farmer_a):
    """Return API client authenticated as the first farmer."""
    return authenticated_client(farmer_a)


@pytest.fixture
def farmer_b_client(farmer_b):
    """Return API client authenticated as the second farmer."""
    return authenticated_client(farmer_b)


@pytest.fixture
def period():
    """November 2025, both ends inclusive."""
    return at(1, 0), datetime(2025, 11, 30, 23, 59, 59, tzinfo=dt_timezone.utc)


@pytest.fixture
def scenario(farmer_a, farmer_b):
    """
    Farmer A: 15.5 L + 18.0 L, farmer B: 12.0 L, all unbilled in November.

    Also one October collection and one already billed November
    collection that a November run must ignore.
    """
    return {
        'a1': make_collection(farmer_a, '15.50', at(3)),
        'b1': make_collection(farmer_b, '12.00', at(4)),
        'a2': make_collection(farmer_a, '18.00', at(5)),
        'october': make_collection(
            farmer_a, '20.00', datetime(2025, 10, 25, 8, 0, tzinfo=dt_timezone.utc)
        ),
        'billed': make_collection(farmer_b, '30.00', at(6), is_billed=True),
    }
