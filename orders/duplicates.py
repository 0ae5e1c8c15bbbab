"""Duplicate submission detection.

Catches double taps from flaky mobile clients: the same phone submitting an
equivalent basket within DUPLICATE_WINDOW. Items are compared as multisets of
their semantic signature (variant, flags, quantity); prices and item order
are ignored.
"""

import threading
import zlib
from collections import Counter
from datetime import timedelta

from django.utils import timezone

from .models import Order
from .pricing import FLAG_DEFAULTS, normalize_item

DUPLICATE_WINDOW = timedelta(minutes=2)

# Striped locks: one phone always maps to the same lock, memory stays bounded.
_PHONE_LOCKS = tuple(threading.Lock() for _ in range(64))


def phone_lock(phone: str) -> threading.Lock:
    """Process-wide lock serializing order creation for `phone`."""
    return _PHONE_LOCKS[zlib.crc32(phone.encode()) % len(_PHONE_LOCKS)]


def item_signature(item: dict) -> tuple:
    normalized = normalize_item(item)
    return (normalized["variant"],) + tuple(normalized[f] for f in FLAG_DEFAULTS) + (
        normalized["quantity"],
    )


def items_equivalent(a, b) -> bool:
    return Counter(item_signature(i) for i in a) == Counter(item_signature(i) for i in b)


def recent_orders_for_phone(phone: str, now=None):
    """
    Orders from `phone` created in the closed interval
    [now - DUPLICATE_WINDOW, now].

    Orders created after `now` are excluded, so a past `now` looks only at
    the window that ended then.
    """
    now = now or timezone.now()
    return Order.objects.filter(
        phone=phone,
        created_at__gte=now - DUPLICATE_WINDOW,
        created_at__lte=now,
    )


def is_duplicate(phone: str, items, recent_orders=None, now=None) -> bool:
    if recent_orders is None:
        recent_orders = recent_orders_for_phone(phone, now)
    return any(items_equivalent(order.items, items) for order in recent_orders)
