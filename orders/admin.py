from django.contrib import admin
from django.utils.html import format_html
from .models import Order, OrderNotification, OrderStatusEvent


class OrderStatusEventInline(admin.TabularInline):
    model = OrderStatusEvent
    extra = 0
    can_delete = False
    fields = ("status", "at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


class OrderNotificationInline(admin.TabularInline):
    model = OrderNotification
    extra = 0
    can_delete = False
    fields = ("message_type", "outcome", "provider", "provider_response", "created_at")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Order overview:
    - list: tracking code, status badge, customer, phone, total, source, created
    - filters: status, source, created (date hierarchy)
    - search: tracking code, customer name, phone
    - histories are read-only inlines; status changes go through the API so
      they are recorded and trigger SMS
    """
    list_display = (
        "id",
        "tracking_code",
        "status_badge",
        "customer_name",
        "phone",
        "total",
        "source",
        "created_at",
    )
    list_filter = ("status", "source", "created_at")
    date_hierarchy = "created_at"
    ordering = ("-created_at", "-id")
    search_fields = ("tracking_code", "customer_name", "phone")

    readonly_fields = (
        "tracking_code",
        "status",
        "user",
        "customer_name",
        "phone",
        "location",
        "items",
        "total",
        "source",
        "created_at",
        "updated_at",
    )
    fields = readonly_fields
    inlines = [OrderStatusEventInline, OrderNotificationInline]

    def has_add_permission(self, request):
        return False

    def status_badge(self, obj):
        color = {
            "pending": "#9ca3af",
            "in_progress": "#0ea5e9",
            "arrived": "#f59e0b",
            "delivered": "#22c55e",
            "canceled": "#ef4444",
            "no_show": "#6b7280",
        }.get(obj.status, "#9ca3af")
        return format_html(
            '<span style="display:inline-block;padding:2px 8px;border-radius:999px;'
            'font-size:12px;font-weight:600;color:#fff;background:{};">{}</span>',
            color,
            obj.status,
        )
    status_badge.short_description = "status"
    status_badge.admin_order_field = "status"
