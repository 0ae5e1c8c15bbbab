"""Customer-facing SMS templates."""

from django.conf import settings
from django.db import models


class MessageType(models.TextChoices):
    CONFIRMATION = "confirmation", "confirmation"
    ARRIVAL = "arrival", "arrival"


def tracking_url(code: str) -> str:
    return f"{settings.TRACKING_BASE_URL}/track/{code}"


def confirmation_text(order) -> str:
    return (
        f"Hi {order.customer_name}! Your Ertib order {order.tracking_code} is confirmed. "
        f"Total: {order.total} birr. Track it: {tracking_url(order.tracking_code)}"
    )


def arrival_text(order) -> str:
    return f"Hi {order.customer_name}, your Ertib has arrived. Please come and take it."


_TEMPLATES = {
    MessageType.CONFIRMATION: confirmation_text,
    MessageType.ARRIVAL: arrival_text,
}


def render_message(message_type: str, order) -> str:
    """Render the template for `message_type`; raises ValueError for unknown types."""
    try:
        template = _TEMPLATES[MessageType(message_type)]
    except ValueError:
        raise ValueError(f"Unknown message type: {message_type!r}")
    return template(order)
