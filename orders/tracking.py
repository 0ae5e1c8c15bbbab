"""Tracking codes: `FD-` followed by six random digits.

Codes are checked against existing orders and regenerated on collision; the
unique constraint on Order.tracking_code is the final guard.
"""

import logging
import secrets

from .exceptions import TrackingCodeUnavailable
from .models import Order

logger = logging.getLogger(__name__)

TRACKING_PREFIX = "FD"
MAX_ATTEMPTS = 10


def random_code() -> str:
    return f"{TRACKING_PREFIX}-{secrets.randbelow(1_000_000):06d}"


def generate_tracking_code() -> str:
    for _ in range(MAX_ATTEMPTS):
        code = random_code()
        if not Order.objects.filter(tracking_code=code).exists():
            return code
        logger.warning(f"Tracking code collision on {code}, regenerating")
    raise TrackingCodeUnavailable()
