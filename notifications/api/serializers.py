"""Broadcast API serializers."""

from django.db.models import Count
from rest_framework import serializers

from ..models import BroadcastCampaign


class BroadcastCreateSerializer(serializers.Serializer):
    """Input for POST /api/admin/broadcast/."""

    message = serializers.CharField(max_length=1000, trim_whitespace=True)


class BroadcastCampaignSerializer(serializers.ModelSerializer):
    """Campaign with recipient counts per delivery status."""

    recipients_by_status = serializers.SerializerMethodField()

    class Meta:
        model = BroadcastCampaign
        fields = [
            "id",
            "message",
            "total_numbers",
            "sent_first_round",
            "failed_first_round",
            "retry_scheduled",
            "recipients_by_status",
            "created_at",
        ]

    def get_recipients_by_status(self, obj):
        rows = obj.recipients.values("status").annotate(n=Count("id"))
        return {row["status"]: row["n"] for row in rows}
