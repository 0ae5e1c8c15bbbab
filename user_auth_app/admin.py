from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

User = get_user_model()

# Unregister the default admin first so this one replaces it.
try:
    admin.site.unregister(User)
except admin.sites.NotRegistered:
    pass


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """
    User list with id, profile phone and admin flags.
    """
    list_display = (
        "id",
        "username",
        "profile_phone_display",
        "is_staff",
        "is_active",
        "date_joined",
        "last_login",
    )
    list_select_related = ("profile",)
    ordering = ("-date_joined", "-id")
    search_fields = ("username", "profile__name", "profile__phone")
    list_filter = ("is_staff", "is_superuser", "is_active")

    def profile_phone_display(self, obj):
        prof = getattr(obj, "profile", None)
        return getattr(prof, "phone", "") or ""
    profile_phone_display.short_description = "phone"
    profile_phone_display.admin_order_field = "profile__phone"
