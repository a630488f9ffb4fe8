import pytest
from decimal import Decimal
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.milk.models import MilkCollection


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
def other_farmer(db):
    """Create and return another farmer."""
    return User.objects.create_farmer(
        email='priya@farmer.com',
        password='TestPass123!',
        name='Priya Sharma',
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


@pytest.fixture
def collections(farmer, other_farmer):
    """
    Create collections for two farmers.

    farmer: 15.50 L and 18.00 L (unbilled), 16.50 L (billed)
    other_farmer: 12.00 L (unbilled)
    """
    now = timezone.now()
    return [
        MilkCollection.objects.create(
            farmer=farmer,
            quantity=Decimal('15.50'),
            fat_percentage=Decimal('4.20'),
            snf=Decimal('8.50'),
            created_at=now - timedelta(days=3),
        ),
        MilkCollection.objects.create(
            farmer=farmer,
            quantity=Decimal('18.00'),
            fat_percentage=Decimal('4.50'),
            snf=Decimal('8.70'),
            created_at=now - timedelta(days=2),
        ),
        MilkCollection.objects.create(
            farmer=farmer,
            quantity=Decimal('16.50'),
            fat_percentage=Decimal('4.30'),
            snf=Decimal('8.60'),
            is_billed=True,
            created_at=now - timedelta(days=20),
        ),
        MilkCollection.objects.create(
            farmer=other_farmer,
            quantity=Decimal('12.00'),
            fat_percentage=Decimal('3.80'),
            snf=Decimal('8.40'),
            created_at=now - timedelta(days=1),
        ),
    ]
