"""Canonical service clock.

Every "what day / what time is it" question in the project is answered in
the zone named by the SERVICE_TIME_ZONE setting.
"""

import datetime
from zoneinfo import ZoneInfo

from django.conf import settings
from django.utils import timezone


def service_zone() -> ZoneInfo:
    return ZoneInfo(settings.SERVICE_TIME_ZONE)


def to_service_time(value: datetime.datetime) -> datetime.datetime:
    """Interpret naive datetimes in the service zone; convert aware ones to it."""
    zone = service_zone()
    if timezone.is_naive(value):
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def service_now() -> datetime.datetime:
    return to_service_time(timezone.now())


def service_date(value=None) -> datetime.date:
    """Calendar date of `value` (default: now) in the service zone."""
    return to_service_time(value if value is not None else timezone.now()).date()


def day_bounds(day: datetime.date):
    """Aware [start, end) datetimes covering `day` in the service zone."""
    zone = service_zone()
    start = datetime.datetime.combine(day, datetime.time.min, tzinfo=zone)
    end = datetime.datetime.combine(day + datetime.timedelta(days=1), datetime.time.min, tzinfo=zone)
    return start, end
