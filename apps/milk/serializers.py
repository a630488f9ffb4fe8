from decimal import Decimal
from rest_framework import serializers
from apps.accounts.serializers import FarmerIdentitySerializer
from .models import MilkCollection


# =============================================================================
# Input Serializers
# =============================================================================

class MilkCollectionFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for collection filtering.

    Query Parameters:
        farmer (UUID): Filter by farmer ID (admins only)
        is_billed (bool): Filter by billed flag
        date_from (date): Collections created on or after this date
        date_to (date): Collections created on or before this date
    """

    farmer = serializers.UUIDField(required=False)
    is_billed = serializers.BooleanField(required=False)
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


class MilkCollectionCreateSerializer(serializers.Serializer):
    """
    Validate input for recording a collection.

    Range checks mirror the model validators so bad input is rejected
    before the intake service is called.
    """

    farmer = serializers.UUIDField()
    quantity = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0.01'),
        error_messages={'min_value': 'Quantity must be a positive number'},
    )
    fat_percentage = serializers.DecimalField(
        max_digits=4,
        decimal_places=2,
        min_value=Decimal('0'),
        max_value=Decimal('10'),
        error_messages={
            'min_value': 'Fat percentage must be a number between 0 and 10',
            'max_value': 'Fat percentage must be a number between 0 and 10',
        },
    )
    snf = serializers.DecimalField(
        max_digits=4,
        decimal_places=2,
        min_value=Decimal('0'),
        max_value=Decimal('15'),
        required=False,
        allow_null=True,
        error_messages={
            'min_value': 'SNF must be a number between 0 and 15',
            'max_value': 'SNF must be a number between 0 and 15',
        },
    )


# =============================================================================
# Output Serializers
# =============================================================================

class MilkCollectionSerializer(serializers.ModelSerializer):
    """Serializer for milk collection records."""

    farmer = FarmerIdentitySerializer(read_only=True)

    class Meta:
        model = MilkCollection
        fields = [
            'id',
            'farmer',
            'quantity',
            'fat_percentage',
            'snf',
            'is_billed',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class MilkCollectionSummarySerializer(serializers.Serializer):
    """Totals reported alongside a collection listing."""

    total_quantity = serializers.DecimalField(max_digits=14, decimal_places=2)
    average_fat = serializers.DecimalField(max_digits=6, decimal_places=2)
    average_snf = serializers.DecimalField(max_digits=6, decimal_places=2)
    total_records = serializers.IntegerField()
