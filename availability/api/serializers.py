"""Availability API serializers."""

from rest_framework import serializers

from ..models import WEEKDAYS, AvailabilityConfig


class AvailabilityConfigSerializer(serializers.ModelSerializer):
    """Read/write representation of the singleton configuration.

    `weekly_days` must be a subset of Mon..Sun; it is stored in weekday order
    without duplicates. `cutoff_time` is accepted and rendered as HH:MM.
    """

    weekly_days = serializers.ListField(
        child=serializers.ChoiceField(choices=WEEKDAYS), allow_empty=True
    )
    cutoff_time = serializers.TimeField(format="%H:%M", input_formats=["%H:%M", "%H:%M:%S"])
    temp_close_reason = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True
    )

    class Meta:
        model = AvailabilityConfig
        fields = [
            "weekly_days",
            "cutoff_time",
            "is_temporarily_closed",
            "temp_close_reason",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]

    def validate_weekly_days(self, value):
        chosen = set(value)
        return [d for d in WEEKDAYS if d in chosen]

    def validate_temp_close_reason(self, value):
        return value or ""
