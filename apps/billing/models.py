from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid


class PaymentStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    PAID = 'PAID', 'Paid'


class Payment(models.Model):
    """
    Amount owed to a farmer for the collections consumed by one billing run.

    ``amount`` is fixed at generation time from ``total_quantity`` and the
    rate policy recorded alongside it; later rate changes never touch it.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    farmer = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='payments'
    )

    # Financial details
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    total_quantity = models.DecimalField(max_digits=12, decimal_places=2)
    rate_per_liter = models.DecimalField(max_digits=10, decimal_places=4)
    rate_version = models.CharField(max_length=50)

    # Billing period the run was issued for
    period_start_date = models.DateTimeField()
    period_end_date = models.DateTimeField()

    status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        db_index=True
    )
    paid_at = models.DateTimeField(null=True, blank=True)

    generated_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments_generated'
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        indexes = [
            models.Index(fields=['farmer', 'status'], name='payments_farmer_status_idx'),
            models.Index(fields=['status', 'created_at'], name='payments_status_created_idx'),
            models.Index(fields=['period_start_date', 'period_end_date'], name='payments_period_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.farmer.get_display_name()} - {self.amount} ({self.status})"

    @property
    def collections_count(self):
        return self.covered_collections.count()

    def mark_paid(self):
        """Mark payment as paid."""
        self.status = PaymentStatus.PAID
        self.paid_at = timezone.now()
        self.save(update_fields=['status', 'paid_at', 'updated_at'])


class PaymentCollection(models.Model):
    """
    Link between a payment and one collection it paid for.

    ``collection`` is unique, so a collection can back at most one payment.
    """

    payment = models.ForeignKey(
        Payment,
        on_delete=models.CASCADE,
        related_name='covered_collections'
    )
    collection = models.OneToOneField(
        'milk.MilkCollection',
        on_delete=models.PROTECT,
        related_name='payment_link'
    )

    class Meta:
        db_table = 'payment_collections'

    def __str__(self):
        return f"{self.payment_id} <- {self.collection_id}"
