"""Service availability decision.

`is_service_available` is a pure function of a timestamp and a config
record. Wall-clock reasoning happens in the service zone (see `clock`),
never in the host's local time.
"""

from dataclasses import dataclass
from typing import Optional

from django.utils import timezone

from .clock import to_service_time
from .exceptions import ServiceClosed
from .models import WEEKDAYS, AvailabilityConfig

TEMPORARILY_CLOSED_FALLBACK = "Service is temporarily closed."


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None


ALLOWED = Decision(True)


def is_service_available(now, config) -> Decision:
    """Decide whether new orders (and self-service edits) are accepted at `now`."""
    if config is None:
        return ALLOWED

    if config.is_temporarily_closed:
        return Decision(False, config.temp_close_reason or TEMPORARILY_CLOSED_FALLBACK)

    local = to_service_time(now)
    enabled = set(config.weekly_days or [])
    if WEEKDAYS[local.weekday()] not in enabled:
        days = ", ".join(d for d in WEEKDAYS if d in enabled) or "no days"
        return Decision(False, f"Service not available today. We serve only {days}.")

    if local.time() >= config.cutoff_time:
        return Decision(
            False,
            f"Service is closed for today. We accept orders before {config.cutoff_time:%H:%M}.",
        )

    return ALLOWED


def check_service_available(now=None) -> Decision:
    """Raise ServiceClosed unless the stored configuration allows service at `now`."""
    decision = is_service_available(now or timezone.now(), AvailabilityConfig.current())
    if not decision.allowed:
        raise ServiceClosed(decision.reason)
    return decision
