"""
Clock capability

Supplies "now" as a local wall-clock datetime. Callers pass a clock into the
availability checks so tests can pin the current moment.
"""
from datetime import datetime

from django.conf import settings
from django.utils import timezone


class SystemClock:
    """Local time in the project's TIME_ZONE."""

    def now(self) -> datetime:
        if settings.USE_TZ:
            return timezone.localtime()
        return timezone.now()


class FixedClock:
    """A clock frozen at a given local datetime."""

    def __init__(self, moment: datetime):
        self.moment = moment

    def now(self) -> datetime:
        return self.moment


system_clock = SystemClock()
