from django.db import models
from django.utils import timezone
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
import uuid


DEFAULT_SNF = Decimal('8.50')


class MilkCollectionQuerySet(models.QuerySet):

    def unbilled(self):
        return self.filter(is_billed=False)

    def billed(self):
        return self.filter(is_billed=True)

    def for_farmer(self, farmer):
        return self.filter(farmer=farmer)

    def created_between(self, start, end):
        """Inclusive on both bounds."""
        return self.filter(created_at__gte=start, created_at__lte=end)


class MilkCollection(models.Model):
    """A single milk delivery from a farmer to the collection centre."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    farmer = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='milk_collections'
    )

    # Measurements
    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text='Liters delivered'
    )
    fat_percentage = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('10'))]
    )
    snf = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        default=DEFAULT_SNF,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('15'))],
        help_text='Solids-not-fat percentage'
    )

    # Set exclusively by the billing run that consumes this record
    is_billed = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = MilkCollectionQuerySet.as_manager()

    class Meta:
        db_table = 'milk_collections'
        indexes = [
            models.Index(fields=['is_billed', 'created_at'], name='milk_coll_billed_created_idx'),
            models.Index(fields=['farmer', 'created_at'], name='milk_coll_farmer_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        state = 'billed' if self.is_billed else 'unbilled'
        return f"{self.farmer.get_display_name()} - {self.quantity} L ({state})"
