"""Notifications app models.

Delivery outcomes shared by order notification history and broadcasts, and
the persisted state of bulk SMS campaigns. Failed broadcast recipients are
kept as `retry_pending` rows with a due time so the delayed second wave
survives process restarts.
"""

from django.db import models


class Outcome(models.TextChoices):
    SENT = "sent", "sent"
    FAILED = "failed", "failed"


class BroadcastCampaign(models.Model):
    """A single free-text message fanned out to every known phone number."""

    message = models.TextField()
    total_numbers = models.PositiveIntegerField(default=0)
    sent_first_round = models.PositiveIntegerField(default=0)
    failed_first_round = models.PositiveIntegerField(default=0)
    retry_scheduled = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:
        """Readable representation for admin and debugging."""
        return (
            f"Broadcast<{self.id} {self.sent_first_round}/{self.total_numbers} sent"
            f"{' retry' if self.retry_scheduled else ''}>"
        )


class BroadcastRecipient(models.Model):
    """Delivery state of one phone number within a campaign."""

    class Status(models.TextChoices):
        SENT = "sent", "sent"
        RETRY_PENDING = "retry_pending", "retry_pending"
        RETRYING = "retrying", "retrying"
        FAILED = "failed", "failed"

    campaign = models.ForeignKey(
        BroadcastCampaign,
        on_delete=models.CASCADE,
        related_name="recipients",
    )
    phone = models.CharField(max_length=20)
    status = models.CharField(max_length=20, choices=Status.choices)
    attempts = models.PositiveSmallIntegerField(default=0)
    next_attempt_at = models.DateTimeField(null=True, blank=True)
    last_response = models.JSONField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("id",)
        constraints = [
            models.UniqueConstraint(
                fields=["campaign", "phone"],
                name="unique_recipient_per_campaign",
            )
        ]
        indexes = [models.Index(fields=["status", "next_attempt_at"], name="broadcast_status_due_idx")]

    def __str__(self) -> str:
        return f"Recipient<{self.campaign_id}:{self.phone} {self.status}>"
