from django.contrib import admin
from .models import Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """
    Profile list with the linked user id, phone and role.
    """
    list_display = ("id", "user_id_display", "name", "phone", "role_display", "created_at")
    list_select_related = ("user",)
    search_fields = ("name", "phone", "user__username")
    list_filter = ("user__is_staff", "created_at")
    ordering = ("-created_at", "-id")
    readonly_fields = ("created_at",)

    def user_id_display(self, obj):
        return obj.user_id
    user_id_display.short_description = "user id"
    user_id_display.admin_order_field = "user__id"

    def role_display(self, obj):
        return obj.role
    role_display.short_description = "role"
    role_display.admin_order_field = "user__is_staff"
