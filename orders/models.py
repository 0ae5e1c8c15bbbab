"""Orders app models.

Defines the Order model and its two append-only histories. Line items are
embedded in the order as a JSON list and priced server-side when the order is
built; `total` is a snapshot of their sum. Status changes and notification
attempts are separate rows, so concurrent appends never overwrite each other.
"""

from django.conf import settings
from django.db import models

from notifications.messages import MessageType
from notifications.models import Outcome


class Order(models.Model):
    """A customer's order, placed online or entered by staff."""

    class Status(models.TextChoices):
        PENDING = "pending", "pending"
        IN_PROGRESS = "in_progress", "in_progress"
        ARRIVED = "arrived", "arrived"
        DELIVERED = "delivered", "delivered"
        CANCELED = "canceled", "canceled"
        NO_SHOW = "no_show", "no_show"

    class Source(models.TextChoices):
        ONLINE = "online", "online"
        MANUAL = "manual", "manual"

    TERMINAL_STATUSES = frozenset({Status.DELIVERED, Status.CANCELED, Status.NO_SHOW})

    tracking_code = models.CharField(max_length=12, unique=True, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="orders",
        null=True,
        blank=True,
    )

    customer_name = models.CharField(max_length=150)
    phone = models.CharField(max_length=20, db_index=True)
    location = models.CharField(max_length=255)
    items = models.JSONField(default=list)
    total = models.PositiveIntegerField()

    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True
    )
    source = models.CharField(max_length=10, choices=Source.choices, default=Source.ONLINE)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at", "-id")

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES

    def __str__(self) -> str:
        """Readable representation for admin and debugging."""
        return f"Order<{self.id} {self.tracking_code} {self.status}>"


class OrderStatusEvent(models.Model):
    """One entry of an order's status history. Never edited or deleted."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="status_history")
    status = models.CharField(max_length=20, choices=Order.Status.choices)
    at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("at", "id")

    def __str__(self) -> str:
        return f"StatusEvent<{self.order_id} {self.status} {self.at:%Y-%m-%d %H:%M}>"


class OrderNotification(models.Model):
    """One SMS attempt for an order, with the provider's raw response."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="notifications")
    message_type = models.CharField(max_length=20, choices=MessageType.choices)
    provider = models.CharField(max_length=30, blank=True, default="")
    provider_response = models.JSONField(null=True, blank=True)
    outcome = models.CharField(max_length=10, choices=Outcome.choices)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("created_at", "id")

    def __str__(self) -> str:
        return f"Notification<{self.order_id} {self.message_type} {self.outcome}>"
