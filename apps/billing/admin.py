from django.contrib import admin
from django.utils import timezone
from .models import Payment, PaymentCollection, PaymentStatus


class PaymentCollectionInline(admin.TabularInline):
    """Collections a payment covers. Written only by billing runs."""
    model = PaymentCollection
    extra = 0
    fields = ['collection']
    readonly_fields = ['collection']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Admin for generated payments. Amounts are fixed at generation."""

    list_display = [
        'farmer',
        'amount',
        'total_quantity',
        'rate_per_liter',
        'rate_version',
        'status',
        'period_start_date',
        'period_end_date',
        'created_at',
    ]
    list_filter = ['status', 'rate_version', 'created_at']
    search_fields = ['farmer__email', 'farmer__name']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    list_select_related = ['farmer']
    inlines = [PaymentCollectionInline]
    readonly_fields = [
        'farmer',
        'amount',
        'total_quantity',
        'rate_per_liter',
        'rate_version',
        'period_start_date',
        'period_end_date',
        'status',
        'paid_at',
        'generated_by',
        'created_at',
        'updated_at',
    ]
    actions = ['mark_selected_paid']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.action(description='Mark selected payments as paid')
    def mark_selected_paid(self, request, queryset):
        count = queryset.filter(status=PaymentStatus.PENDING).update(
            status=PaymentStatus.PAID,
            paid_at=timezone.now(),
        )
        self.message_user(request, f'Marked {count} payment(s) as paid.')
