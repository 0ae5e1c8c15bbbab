from django.contrib import admin
from .models import BroadcastCampaign, BroadcastRecipient


class BroadcastRecipientInline(admin.TabularInline):
    model = BroadcastRecipient
    extra = 0
    can_delete = False
    fields = ("phone", "status", "attempts", "next_attempt_at", "updated_at")
    readonly_fields = fields


@admin.register(BroadcastCampaign)
class BroadcastCampaignAdmin(admin.ModelAdmin):
    """Campaigns are read-only here; they are created through the API."""
    list_display = (
        "id",
        "created_at",
        "total_numbers",
        "sent_first_round",
        "failed_first_round",
        "retry_scheduled",
    )
    ordering = ("-created_at", "-id")
    readonly_fields = list_display + ("message",)
    inlines = [BroadcastRecipientInline]

    def has_add_permission(self, request):
        return False


@admin.register(BroadcastRecipient)
class BroadcastRecipientAdmin(admin.ModelAdmin):
    list_display = ("id", "campaign", "phone", "status", "attempts", "next_attempt_at")
    list_filter = ("status",)
    search_fields = ("phone",)
