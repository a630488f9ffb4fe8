from django.contrib import admin
from .models import MilkCollection


@admin.register(MilkCollection)
class MilkCollectionAdmin(admin.ModelAdmin):
    """Admin for milk collections; billed records are read-only."""

    list_display = ['farmer', 'quantity', 'fat_percentage', 'snf', 'is_billed', 'created_at']
    list_filter = ['is_billed', 'created_at']
    search_fields = ['farmer__email', 'farmer__name']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    list_select_related = ['farmer']
    readonly_fields = ['is_billed', 'updated_at']

    def get_readonly_fields(self, request, obj=None):
        if obj is not None and obj.is_billed:
            return ['farmer', 'quantity', 'fat_percentage', 'snf', 'is_billed', 'created_at', 'updated_at']
        return super().get_readonly_fields(request, obj)

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.is_billed:
            return False
        return super().has_delete_permission(request, obj)
