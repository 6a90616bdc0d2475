# booking_api/core/clock.py
"""Clock source ("now") for the scheduling core"""
import logging
from datetime import datetime, timezone

import pytz

logger = logging.getLogger(__name__)


class Clock:
    """Wall clock returning the current UTC instant."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)

    def local_now(self, tz_name: str) -> datetime:
        """
        Current naive wall-clock time in the tenant's timezone.

        Booking times are stored as naive local hour:minute values, so "now"
        is brought into the same frame before any comparison.
        """
        return to_local_naive(self.now_utc(), tz_name)


class FixedClock(Clock):
    """Clock pinned to a given instant (naive values are read as UTC)."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self.instant = instant

    def now_utc(self) -> datetime:
        return self.instant


def get_timezone(tz_name: str):
    try:
        return pytz.timezone(tz_name or "UTC")
    except pytz.UnknownTimeZoneError:
        logger.error(f"Invalid timezone '{tz_name}', using UTC")
        return pytz.UTC


def to_local_naive(instant: datetime, tz_name: str) -> datetime:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(get_timezone(tz_name)).replace(tzinfo=None)


def is_valid_timezone(tz_name: str) -> bool:
    return tz_name in pytz.all_timezones_set


_default_clock = Clock()


def get_clock() -> Clock:
    """FastAPI dependency; overridden in tests with a FixedClock."""
    return _default_clock
