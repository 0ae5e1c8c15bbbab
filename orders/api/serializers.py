"""Orders API serializers.

Input serializers for placing, editing and re-notifying orders, and output
serializers for the admin view (full order with both histories) and the
public tracking view (customer-facing fields only, no phone number).
Line item prices sent by clients are dropped here and recomputed by the
pricing module.
"""

from rest_framework import serializers

from common.phone import is_valid_phone, normalize_phone
from notifications.messages import MessageType, tracking_url
from orders.models import Order, OrderNotification, OrderStatusEvent
from orders.pricing import VARIANT_PRICES


class LineItemInputSerializer(serializers.Serializer):
    """A single requested item. Any price fields in the payload are ignored."""

    variant = serializers.ChoiceField(choices=list(VARIANT_PRICES))
    ketchup = serializers.BooleanField(default=True)
    spices = serializers.BooleanField(default=True)
    extra_ketchup = serializers.BooleanField(default=False)
    extra_felafil = serializers.BooleanField(default=False)
    quantity = serializers.IntegerField(min_value=1, default=1)


class OrderCreateSerializer(serializers.Serializer):
    """Input serializer for online and manual orders."""

    customer_name = serializers.CharField(max_length=150)
    phone = serializers.CharField(max_length=30)
    location = serializers.CharField(max_length=255)
    items = LineItemInputSerializer(many=True, allow_empty=False)

    def validate_phone(self, value):
        """Normalize to international format and reject non-mobile numbers."""
        phone = normalize_phone(value)
        if not is_valid_phone(phone):
            raise serializers.ValidationError("Invalid phone number.")
        return phone


class OrderEditSerializer(serializers.Serializer):
    """PATCH payload for self-service edits; every field is optional."""

    customer_name = serializers.CharField(max_length=150, required=False)
    location = serializers.CharField(max_length=255, required=False)
    items = LineItemInputSerializer(many=True, allow_empty=False, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError(
                "Provide at least one of: customer_name, location, items."
            )
        return attrs


class OrderStatusEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusEvent
        fields = ["status", "at"]


class OrderNotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderNotification
        fields = ["message_type", "provider", "provider_response", "outcome", "created_at"]


class OrderOutputSerializer(serializers.ModelSerializer):
    """Full order representation for staff."""

    status_history = OrderStatusEventSerializer(many=True, read_only=True)
    notifications = OrderNotificationSerializer(many=True, read_only=True)
    track_url = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "tracking_code",
            "track_url",
            "user",
            "customer_name",
            "phone",
            "location",
            "items",
            "total",
            "status",
            "source",
            "status_history",
            "notifications",
            "created_at",
            "updated_at",
        ]

    def get_track_url(self, obj):
        return tracking_url(obj.tracking_code)


class OrderTrackSerializer(serializers.ModelSerializer):
    """Customer-facing representation returned by the public tracking endpoint."""

    status_history = OrderStatusEventSerializer(many=True, read_only=True)
    track_url = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "tracking_code",
            "track_url",
            "customer_name",
            "location",
            "items",
            "total",
            "status",
            "status_history",
            "created_at",
        ]

    def get_track_url(self, obj):
        return tracking_url(obj.tracking_code)


class OrderStatusPatchSerializer(serializers.Serializer):
    """Patch serializer used to update only the order status."""

    status = serializers.ChoiceField(choices=Order.Status.choices)


class ResendSmsSerializer(serializers.Serializer):
    """Input for re-sending a confirmation or arrival SMS."""

    order_id = serializers.IntegerField()
    type = serializers.ChoiceField(choices=MessageType.choices)
