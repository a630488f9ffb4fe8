from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status

from apps.billing.models import Payment, PaymentStatus
from apps.milk.models import MilkCollection

from .helpers import at, make_collection


NOVEMBER = {
    'period_start_date': '2025-11-01',
    'period_end_date': '2025-11-30',
}


# =============================================================================
# Generate Billing Tests
# =============================================================================

@pytest.mark.django_db
class TestGenerateBilling:
    """Tests for POST /api/billing/generate/"""

    def test_generate_success(self, admin_client, scenario):
        """Admin bills the period; one payment per farmer."""
        url = reverse('billing:generate')
        response = admin_client.post(url, NOVEMBER, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert 'Billing generated successfully' in response.data['message']

        payments = response.data['payments_generated']
        assert len(payments) == 2
        assert {p['farmer']['name']: p['amount'] for p in payments} == {
            'Rajesh Kumar': '1172.50',
            'Priya Sharma': '420.00',
        }
        assert {p['farmer']['name']: p['collections_count'] for p in payments} == {
            'Rajesh Kumar': 2,
            'Priya Sharma': 1,
        }
        assert all(p['status'] == PaymentStatus.PENDING for p in payments)

        summary = response.data['summary']
        assert summary['total_farmers'] == 2
        assert summary['total_collections'] == 3
        assert summary['total_amount'] == '1592.50'
        assert summary['rate_per_liter'] == '35.0000'
        assert summary['rate_version'] == 'base-v1'

    def test_generate_records_admin(self, admin_client, admin_user, scenario):
        """Payments remember who generated them."""
        url = reverse('billing:generate')
        admin_client.post(url, NOVEMBER, format='json')

        assert set(Payment.objects.values_list('generated_by', flat=True)) == {admin_user.id}

    def test_generate_twice_is_noop(self, admin_client, scenario):
        """Second run for the same period creates nothing."""
        url = reverse('billing:generate')
        admin_client.post(url, NOVEMBER, format='json')
        response = admin_client.post(url, NOVEMBER, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'No unbilled milk collections found for the specified period'
        assert response.data['payments_generated'] == []
        assert response.data['summary']['total_farmers'] == 0
        assert response.data['summary']['total_collections'] == 0
        assert response.data['summary']['total_amount'] == '0.00'
        assert Payment.objects.count() == 2

    def test_generate_with_rate(self, admin_client, scenario):
        """A supplied rate overrides the base rate."""
        url = reverse('billing:generate')
        response = admin_client.post(url, {**NOVEMBER, 'rate_per_liter': '40'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['summary']['total_amount'] == '1820.00'
        assert response.data['summary']['rate_version'] == 'manual'

    def test_generate_legacy_field_names(self, admin_client, scenario):
        """camelCase request fields are still accepted."""
        url = reverse('billing:generate')
        response = admin_client.post(url, {
            'periodStartDate': '2025-11-01',
            'periodEndDate': '2025-11-30',
            'ratePerLiter': 35,
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['summary']['total_amount'] == '1592.50'

    def test_bare_end_date_covers_whole_day(self, admin_client, farmer_a):
        """A collection late on the end date is billed."""
        make_collection(farmer_a, '10.00', at(30, 22))

        url = reverse('billing:generate')
        response = admin_client.post(url, NOVEMBER, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['summary']['total_collections'] == 1

    def test_missing_start(self, admin_client, scenario):
        """Start date is required."""
        url = reverse('billing:generate')
        response = admin_client.post(url, {'period_end_date': '2025-11-30'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'period_start_date is required'

    def test_inverted_period(self, admin_client, scenario):
        """Start after end is rejected and nothing is billed."""
        url = reverse('billing:generate')
        response = admin_client.post(url, {
            'period_start_date': '2025-11-10',
            'period_end_date': '2025-11-01',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'period_start_date must be before period_end_date'
        assert not Payment.objects.exists()

    @pytest.mark.parametrize('rate', [0, -5, 'abc'])
    def test_invalid_rate(self, admin_client, scenario, rate):
        """Rate must be a positive number."""
        url = reverse('billing:generate')
        response = admin_client.post(url, {**NOVEMBER, 'rate_per_liter': rate}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'rate_per_liter must be a positive number'
        assert not Payment.objects.exists()

    @pytest.mark.parametrize('rate', ['1000000', '1e12'])
    def test_rate_too_large(self, admin_client, scenario, rate):
        """A rate the payment columns cannot hold is rejected before billing."""
        url = reverse('billing:generate')
        response = admin_client.post(url, {**NOVEMBER, 'rate_per_liter': rate}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'rate_per_liter must be less than 1000000'
        assert not Payment.objects.exists()
        assert list(MilkCollection.objects.filter(is_billed=True)) == [scenario['billed']]

    def test_amount_too_large(self, admin_client, farmer_a, farmer_b):
        """A farmer total that overflows a payment rolls the run back."""
        make_collection(farmer_b, '10.00', at(3))
        make_collection(farmer_a, '20000.00', at(4))
        url = reverse('billing:generate')
        response = admin_client.post(url, {**NOVEMBER, 'rate_per_liter': '999999'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'exceeds the payment limit' in response.data['error']
        assert not Payment.objects.exists()
        assert not MilkCollection.objects.filter(is_billed=True).exists()

    @pytest.mark.parametrize('body', [[1, 2], 'november', 42])
    def test_body_not_an_object(self, admin_client, scenario, body):
        """A JSON body that is not an object is a bad request."""
        url = reverse('billing:generate')
        response = admin_client.post(url, body, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid request body'
        assert not Payment.objects.exists()

    def test_farmer_forbidden(self, farmer_client, scenario):
        """Farmers cannot run billing."""
        url = reverse('billing:generate')
        response = farmer_client.post(url, NOVEMBER, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['detail'] == 'Admin access required'
        assert not Payment.objects.exists()

    def test_unauthenticated(self, api_client, scenario):
        """Billing requires authentication."""
        url = reverse('billing:generate')
        response = api_client.post(url, NOVEMBER, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_transaction_failure(self, admin_client, scenario):
        """Store failure returns 500 and leaves nothing behind."""
        url = reverse('billing:generate')
        with patch(
            'apps.billing.services.billing_generation._mark_billed',
            side_effect=DatabaseError('connection lost'),
        ):
            response = admin_client.post(url, NOVEMBER, format='json')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['detail'] == 'Failed to generate billing'
        assert 'connection lost' not in str(response.data)
        assert not Payment.objects.exists()
        assert not MilkCollection.objects.filter(is_billed=True).exclude(id=scenario['billed'].id).exists()


# =============================================================================
# Payment List Tests
# =============================================================================

@pytest.mark.django_db
class TestPaymentList:
    """Tests for GET /api/billing/payments/"""

    @pytest.fixture(autouse=True)
    def billed(self, admin_client, scenario):
        admin_client.post(reverse('billing:generate'), NOVEMBER, format='json')

    def test_admin_sees_all(self, admin_client):
        """Administrators see every payment with a status breakdown."""
        url = reverse('billing:payment-list')
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        assert response.data['summary']['total_amount'] == '1592.50'
        assert response.data['summary']['by_status']['PENDING']['count'] == 2
        assert response.data['summary']['by_status']['PAID']['count'] == 0

    def test_farmer_sees_own(self, farmer_b_client):
        """Farmers only see their own payments."""
        response = farmer_b_client.get(reverse('billing:payment-list'))

        assert response.data['count'] == 1
        assert response.data['results'][0]['amount'] == '420.00'
        assert response.data['summary']['total_amount'] == '420.00'

    def test_filter_by_status(self, admin_client):
        """Filter by payment status."""
        payment = Payment.objects.get(amount=Decimal('420.00'))
        payment.mark_paid()

        url = reverse('billing:payment-list')
        response = admin_client.get(url, {'status': 'PAID'})

        assert response.data['count'] == 1
        assert response.data['results'][0]['id'] == str(payment.id)

    def test_filter_by_farmer(self, admin_client, farmer_a):
        """Administrators can filter by farmer."""
        url = reverse('billing:payment-list')
        response = admin_client.get(url, {'farmer': str(farmer_a.id)})

        assert response.data['count'] == 1
        assert response.data['results'][0]['amount'] == '1172.50'

    def test_invalid_status_filter(self, admin_client):
        """Unknown status is rejected."""
        url = reverse('billing:payment-list')
        response = admin_client.get(url, {'status': 'LOST'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Payment Detail Tests
# =============================================================================

@pytest.mark.django_db
class TestPaymentDetail:
    """Tests for GET /api/billing/payments/{id}/"""

    @pytest.fixture
    def payment(self, admin_client, scenario, farmer_a):
        admin_client.post(reverse('billing:generate'), NOVEMBER, format='json')
        return Payment.objects.get(farmer=farmer_a)

    def test_owner_sees_covered_collections(self, farmer_client, payment, scenario):
        """Detail lists the collections the payment covers."""
        url = reverse('billing:payment-detail', kwargs={'pk': payment.id})
        response = farmer_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert set(response.data['collection_ids']) == {
            str(scenario['a1'].id), str(scenario['a2'].id),
        }
        assert response.data['collections_count'] == 2
        assert response.data['generated_by'] == 'Admin User'

    def test_other_farmer_cannot_see(self, farmer_b_client, payment):
        """A farmer cannot read another farmer's payment."""
        url = reverse('billing:payment-detail', kwargs={'pk': payment.id})
        response = farmer_b_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Mark Paid Tests
# =============================================================================

@pytest.mark.django_db
class TestMarkPaid:
    """Tests for POST /api/billing/payments/{id}/mark_paid/"""

    @pytest.fixture
    def payment(self, admin_client, scenario, farmer_a):
        admin_client.post(reverse('billing:generate'), NOVEMBER, format='json')
        return Payment.objects.get(farmer=farmer_a)

    def test_admin_marks_paid(self, admin_client, payment):
        """Admin settles a pending payment."""
        url = reverse('billing:payment-mark-paid', kwargs={'pk': payment.id})
        response = admin_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == PaymentStatus.PAID
        assert response.data['paid_at'] is not None
        assert response.data['amount'] == '1172.50'

    def test_already_paid(self, admin_client, payment):
        """Settling twice is rejected."""
        url = reverse('billing:payment-mark-paid', kwargs={'pk': payment.id})
        admin_client.post(url)
        response = admin_client.post(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['detail'] == 'Payment is already marked as paid'

    def test_farmer_cannot_mark_paid(self, farmer_client, payment):
        """Farmers cannot settle their own payment."""
        url = reverse('billing:payment-mark-paid', kwargs={'pk': payment.id})
        response = farmer_client.post(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        payment.refresh_from_db()
        assert payment.status == PaymentStatus.PENDING
