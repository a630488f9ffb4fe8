from datetime import date, datetime, time

from django.utils.dateparse import parse_date
from rest_framework import serializers

from apps.accounts.serializers import FarmerIdentitySerializer
from .models import Payment, PaymentStatus
from .services.rate_policy import MAX_RATE_PER_LITER


# =============================================================================
# Fields
# =============================================================================

class PeriodBoundField(serializers.DateTimeField):
    """
    Billing period bound given as an ISO date or datetime.

    A bare date means the start of that day, or the last instant of it
    when ``end_of_day`` is set, so an end date covers the whole day.
    """

    def __init__(self, *, end_of_day=False, **kwargs):
        self.end_of_day = end_of_day
        super().__init__(**kwargs)

    def to_internal_value(self, value):
        day = None
        if isinstance(value, date) and not isinstance(value, datetime):
            day = value
        elif isinstance(value, str):
            try:
                day = parse_date(value.strip())
            except ValueError:
                self.fail('invalid', format='YYYY-MM-DD')

        if day is None:
            return super().to_internal_value(value)

        moment = datetime.combine(day, time.max if self.end_of_day else time.min)
        return self.enforce_timezone(moment)


# =============================================================================
# Input Serializers
# =============================================================================

def _bound_messages(name):
    return {
        'required': f'{name} is required',
        'null': f'{name} is required',
        'invalid': f'{name} must be a valid ISO date or datetime',
        'date': f'{name} must be a valid ISO date or datetime',
    }


class GenerateBillingInputSerializer(serializers.Serializer):
    """
    Validate a billing run request.

    Fields:
        period_start_date: Inclusive start (date or datetime)
        period_end_date: Inclusive end; a bare date covers the whole day
        rate_per_liter: Optional rate override, must be positive
    """

    period_start_date = PeriodBoundField(error_messages=_bound_messages('period_start_date'))
    period_end_date = PeriodBoundField(
        end_of_day=True,
        error_messages=_bound_messages('period_end_date'),
    )
    rate_per_liter = serializers.DecimalField(
        max_digits=None,
        decimal_places=None,
        required=False,
        allow_null=True,
        error_messages={'invalid': 'rate_per_liter must be a positive number'},
    )

    def validate_rate_per_liter(self, value):
        if value is None:
            return value
        if value <= 0:
            raise serializers.ValidationError('rate_per_liter must be a positive number')
        if value >= MAX_RATE_PER_LITER:
            raise serializers.ValidationError(f'rate_per_liter must be less than {MAX_RATE_PER_LITER}')
        return value

    def validate(self, attrs):
        if attrs['period_start_date'] >= attrs['period_end_date']:
            raise serializers.ValidationError(
                'period_start_date must be before period_end_date'
            )
        return attrs


class PaymentFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for payment filtering.

    Query Parameters:
        farmer (UUID): Filter by farmer ID (admins only)
        status (str): PENDING or PAID
        date_from (date): Payments generated on or after this date
        date_to (date): Payments generated on or before this date
    """

    farmer = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        """Validate date range."""
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')

        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({
                'date_to': 'End date must be after start date'
            })

        return attrs


# =============================================================================
# Output Serializers
# =============================================================================

class PaymentSerializer(serializers.ModelSerializer):
    """Serializer for payments in listings and billing results."""

    farmer = FarmerIdentitySerializer(read_only=True)
    collections_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id',
            'farmer',
            'amount',
            'total_quantity',
            'rate_per_liter',
            'rate_version',
            'collections_count',
            'period_start_date',
            'period_end_date',
            'status',
            'paid_at',
            'created_at',
        ]
        read_only_fields = fields


class PaymentDetailSerializer(PaymentSerializer):
    """Payment with the collections it covers and who generated it."""

    collection_ids = serializers.SerializerMethodField()
    generated_by = serializers.SerializerMethodField()

    class Meta(PaymentSerializer.Meta):
        fields = PaymentSerializer.Meta.fields + [
            'collection_ids',
            'generated_by',
            'updated_at',
        ]
        read_only_fields = fields

    def get_collection_ids(self, obj):
        return [str(link.collection_id) for link in obj.covered_collections.all()]

    def get_generated_by(self, obj):
        if obj.generated_by is None:
            return None
        return obj.generated_by.get_display_name()


class BillingSummarySerializer(serializers.Serializer):
    """Totals of one billing run."""

    total_farmers = serializers.IntegerField()
    total_collections = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=20, decimal_places=2)
    period_start_date = serializers.DateTimeField()
    period_end_date = serializers.DateTimeField()
    rate_per_liter = serializers.DecimalField(max_digits=10, decimal_places=4)
    rate_version = serializers.CharField()

    @classmethod
    def from_result(cls, result):
        """Build from the dict returned by ``generate_billing``."""
        return cls({
            'total_farmers': result['total_farmers'],
            'total_collections': result['total_collections'],
            'total_amount': result['total_amount'],
            'period_start_date': result['period_start'],
            'period_end_date': result['period_end'],
            'rate_per_liter': result['rate'].rate_per_liter,
            'rate_version': result['rate'].version,
        })


class PaymentStatusBreakdownSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=20, decimal_places=2)


class PaymentListSummarySerializer(serializers.Serializer):
    """Totals reported alongside a payment listing."""

    total_payments = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=20, decimal_places=2)
    by_status = serializers.DictField(child=PaymentStatusBreakdownSerializer())
