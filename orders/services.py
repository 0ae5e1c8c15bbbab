"""Order lifecycle operations.

Views call into this module; it owns validation that goes beyond field
shapes, the status state machine, and notification side effects. Order
writes happen inside a transaction. SMS work is dispatched only after the
transaction commits, and SMS failures are recorded in the order's
notification history instead of being raised.
"""

import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from availability.clock import day_bounds, service_date
from availability.gate import check_service_available
from common.phone import is_valid_phone, normalize_phone
from notifications.dispatch import dispatch
from notifications.gateway import send_message
from notifications.messages import MessageType, render_message

from .duplicates import is_duplicate, phone_lock, recent_orders_for_phone
from .exceptions import DuplicateOrder, InvalidTransition, OrderLocked
from .models import Order, OrderNotification, OrderStatusEvent
from .pricing import build_line_items
from .tracking import generate_tracking_code

logger = logging.getLogger(__name__)

REQUIRED_CUSTOMER_FIELDS = ("customer_name", "phone", "location")


# ----------------------------- helpers (module-level) -----------------------------

def _validated_phone(raw) -> str:
    phone = normalize_phone(raw)
    if not phone or not is_valid_phone(phone):
        raise ValidationError({"phone": "Invalid phone number."})
    return phone


def _require_fields(customer: dict, items):
    missing = [f for f in REQUIRED_CUSTOMER_FIELDS if not str(customer.get(f) or "").strip()]
    if not items:
        missing.append("items")
    if missing:
        raise ValidationError({f: "This field is required." for f in missing})


def validate_transition(current: str, new: str):
    """Reject unknown statuses and any move out of a terminal status."""
    if new not in Order.Status.values:
        raise ValidationError({"status": f"Invalid status '{new}'."})
    if current in Order.TERMINAL_STATUSES:
        raise InvalidTransition(f"Order is already '{current}'; status can no longer change.")


def _todays_order(code: str, now=None, lock=False) -> Order:
    """Order with this tracking code created on the current service day, else 404."""
    start, end = day_bounds(service_date(now))
    qs = Order.objects.filter(
        tracking_code=(code or "").strip().upper(),
        created_at__gte=start,
        created_at__lt=end,
    )
    if lock:
        qs = qs.select_for_update()
    order = qs.first()
    if order is None:
        raise NotFound("Order not found.")
    return order


def _require_pending(order: Order):
    if order.status != Order.Status.PENDING:
        raise OrderLocked(f"Order is already '{order.status}' and can no longer be changed.")


# ------------------------------------ notifications ------------------------------------

def send_order_notification(order_id: int, message_type: str):
    """Send one templated SMS for an order and append the outcome to its history."""
    order = Order.objects.filter(pk=order_id).first()
    if order is None:
        logger.warning(f"Order {order_id} vanished before its {message_type} SMS was sent")
        return None

    result = send_message(order.phone, render_message(message_type, order))
    return OrderNotification.objects.create(
        order=order,
        message_type=message_type,
        provider=result.provider,
        provider_response=result.info,
        outcome=result.outcome,
    )


# -------------------------------------- operations --------------------------------------

def create_order(customer: dict, items, source=Order.Source.ONLINE, user=None, now=None) -> Order:
    """
    Validate, price and persist a new order, then confirm it by SMS.

    The duplicate check and the insert run under a per-phone lock inside one
    transaction, so two simultaneous submissions of the same basket cannot
    both pass the check.

    Args:
        customer: {"customer_name", "phone", "location"}
        items: Raw line items (variant, flags, quantity); prices are ignored
        source: Order.Source.ONLINE (self-service) or Order.Source.MANUAL (staff)
        user: Owning user, or None for guest checkout
        now: Reference time for the duplicate window

    Returns:
        The persisted Order (status pending, one status history entry)

    Raises:
        ValidationError: Missing fields, invalid phone, bad items
        DuplicateOrder: Same phone and basket within the duplicate window (online only)
    """
    _require_fields(customer, items)
    phone = _validated_phone(customer["phone"])
    line_items, total = build_line_items(items)

    with phone_lock(phone), transaction.atomic():
        if source == Order.Source.ONLINE:
            recent = list(recent_orders_for_phone(phone, now).select_for_update())
            if is_duplicate(phone, items, recent_orders=recent, now=now):
                logger.info(f"Rejected duplicate order from {phone}")
                raise DuplicateOrder()

        order = Order.objects.create(
            tracking_code=generate_tracking_code(),
            user=user if user is not None and user.is_authenticated else None,
            customer_name=customer["customer_name"].strip(),
            phone=phone,
            location=customer["location"].strip(),
            items=line_items,
            total=total,
            status=Order.Status.PENDING,
            source=source,
        )
        OrderStatusEvent.objects.create(order=order, status=order.status)
        dispatch(send_order_notification, order.pk, MessageType.CONFIRMATION)

    logger.info(f"Order {order.tracking_code} created ({source}, total {total})")
    return order


def update_status(order_id: int, new_status: str) -> Order:
    """Move an order to `new_status`, append history, and SMS on arrival."""
    if new_status not in Order.Status.values:
        raise ValidationError({"status": f"Invalid status '{new_status}'."})

    with transaction.atomic():
        order = Order.objects.select_for_update().filter(pk=order_id).first()
        if order is None:
            raise NotFound("Order not found.")
        validate_transition(order.status, new_status)

        order.status = new_status
        order.save(update_fields=["status", "updated_at"])
        OrderStatusEvent.objects.create(order=order, status=new_status)

        if new_status == Order.Status.ARRIVED:
            dispatch(send_order_notification, order.pk, MessageType.ARRIVAL)

    logger.info(f"Order {order.tracking_code} -> {new_status}")
    return order


def resend_notification(order_id: int, message_type: str) -> OrderNotification:
    """Send the confirmation or arrival SMS again; the attempt is always recorded."""
    if message_type not in MessageType.values:
        raise ValidationError({"type": "Invalid SMS type."})
    if not Order.objects.filter(pk=order_id).exists():
        raise NotFound("Order not found.")
    return send_order_notification(order_id, message_type)


def track_by_code(code: str, now=None) -> Order:
    """Public lookup; only orders placed today (service zone) are visible."""
    return _todays_order(code, now)


def edit_by_code(code: str, changes: dict, now=None) -> Order:
    """
    Self-service edit of today's pending order before the cutoff.

    Accepts `customer_name`, `location` and `items`; a new item list is
    repriced and the total recomputed.
    """
    now = now or timezone.now()
    check_service_available(now)

    with transaction.atomic():
        order = _todays_order(code, now, lock=True)
        _require_pending(order)

        for field in ("customer_name", "location"):
            if field in changes:
                value = str(changes[field] or "").strip()
                if not value:
                    raise ValidationError({field: "This field may not be blank."})
                setattr(order, field, value)

        if "items" in changes:
            if not changes["items"]:
                raise ValidationError({"items": "At least one item is required."})
            order.items, order.total = build_line_items(changes["items"])

        order.save()

    logger.info(f"Order {order.tracking_code} edited by customer")
    return order


def cancel_by_code(code: str, now=None) -> Order:
    """Self-service cancellation of today's pending order before the cutoff."""
    now = now or timezone.now()
    check_service_available(now)

    with transaction.atomic():
        order = _todays_order(code, now, lock=True)
        _require_pending(order)
        order.status = Order.Status.CANCELED
        order.save(update_fields=["status", "updated_at"])
        OrderStatusEvent.objects.create(order=order, status=order.status)

    logger.info(f"Order {order.tracking_code} canceled by customer")
    return order


def delete_order(order_id: int):
    """Irreversibly delete an order and its histories (admin only)."""
    order = Order.objects.filter(pk=order_id).first()
    if order is None:
        raise NotFound("Order not found.")
    code = order.tracking_code
    order.delete()
    logger.warning(f"Order {code} deleted by admin")
