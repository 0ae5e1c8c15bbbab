"""Availability app models.

Defines the process-wide AvailabilityConfig record. There is at most one
row (pk=1); the latest admin write wins and no history is kept.
"""

import datetime

from django.db import models, transaction

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def default_weekly_days():
    return ["Mon", "Tue", "Wed", "Thu"]


class AvailabilityConfig(models.Model):
    """Service days, daily cutoff and temporary closure switch."""

    SINGLETON_PK = 1

    weekly_days = models.JSONField(default=default_weekly_days)
    cutoff_time = models.TimeField(default=datetime.time(18, 0))
    is_temporarily_closed = models.BooleanField(default=False)
    temp_close_reason = models.CharField(max_length=255, blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    @classmethod
    def current(cls):
        """Return the configuration row, or None if it was never written."""
        return cls.objects.filter(pk=cls.SINGLETON_PK).first()

    @classmethod
    def save_settings(cls, **fields):
        """Create or update the singleton row under a row lock."""
        with transaction.atomic():
            config = cls.objects.select_for_update().filter(pk=cls.SINGLETON_PK).first()
            if config is None:
                config = cls(pk=cls.SINGLETON_PK)
            for name, value in fields.items():
                setattr(config, name, value)
            config.save()
        return config

    def __str__(self) -> str:
        """Readable representation for admin and debugging."""
        days = ",".join(self.weekly_days or [])
        state = "closed" if self.is_temporarily_closed else "open"
        return f"Availability<{days} until {self.cutoff_time:%H:%M} {state}>"
