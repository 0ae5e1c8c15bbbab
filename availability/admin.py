from django.contrib import admin
from .models import AvailabilityConfig


@admin.register(AvailabilityConfig)
class AvailabilityConfigAdmin(admin.ModelAdmin):
    """Single configuration row; adding a second one is not allowed."""
    list_display = ("id", "weekly_days", "cutoff_time", "is_temporarily_closed", "updated_at")
    readonly_fields = ("updated_at",)

    def has_add_permission(self, request):
        return not AvailabilityConfig.objects.exists()

    def save_model(self, request, obj, form, change):
        obj.pk = AvailabilityConfig.SINGLETON_PK
        super().save_model(request, obj, form, change)
