import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken
from apps.accounts.models import UserRole


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, farmer):
        """Successfully login with valid credentials."""
        url = reverse('users:login')
        data = {
            'email': 'farmer@example.com',
            'password': 'TestPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['email'] == farmer.email
        assert response.data['user']['role'] == UserRole.FARMER

    def test_login_token_carries_role(self, api_client, admin_user):
        """Access token includes the user's role claim."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': admin_user.email,
            'password': 'TestPass123!',
        })

        token = AccessToken(response.data['tokens']['access'])
        assert token['role'] == UserRole.ADMIN

    def test_login_case_insensitive_email(self, api_client, farmer):
        """Email lookup ignores case."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'FARMER@example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_200_OK

    def test_login_updates_last_login(self, api_client, farmer):
        """Login records the last login time."""
        url = reverse('users:login')
        api_client.post(url, {'email': farmer.email, 'password': 'TestPass123!'})

        farmer.refresh_from_db()
        assert farmer.last_login is not None

    def test_login_wrong_password(self, api_client, farmer):
        """Login fails with wrong password."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': farmer.email,
            'password': 'WrongPassword!',
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == 'Invalid credentials'

    def test_login_unknown_email(self, api_client):
        """Login fails for an unknown account."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'nobody@example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_account(self, api_client, farmer_inactive):
        """Deactivated accounts cannot login."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': farmer_inactive.email,
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_missing_fields(self, api_client):
        """Login requires email and password."""
        url = reverse('users:login')
        response = api_client.post(url, {'email': 'farmer@example.com'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password' in response.data


# =============================================================================
# Current User Tests
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET /api/auth/user/"""

    def test_get_current_user(self, farmer_client, farmer):
        """Get the authenticated user's profile."""
        url = reverse('users:current-user')
        response = farmer_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == farmer.email
        assert response.data['name'] == 'Rajesh Kumar'
        assert 'password' not in response.data

    def test_get_current_user_unauthenticated(self, api_client):
        """Unauthenticated request is rejected."""
        url = reverse('users:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Health Check Tests
# =============================================================================

@pytest.mark.django_db
class TestHealthCheck:
    """Tests for GET /api/health/"""

    def test_health_check(self, api_client):
        """Health check reports the database as reachable."""
        response = api_client.get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['status'] == 'ok'

    def test_plain_http_is_not_redirected(self, api_client, settings):
        """Test runs serve plain http without an https redirect."""
        assert settings.SECURE_SSL_REDIRECT is False

        response = api_client.get(reverse('health-check'), secure=False)

        assert response.status_code == status.HTTP_200_OK
        assert 'Location' not in response
