# booking_api/utils/time_utils.py
"""Helpers for naive local clock values (HH:MM) and calendar dates"""
import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from booking_api.config.settings import get_settings

TIME_PATTERN = r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$"
_TIME_RE = re.compile(TIME_PATTERN)

MINUTES_PER_DAY = 24 * 60

# Index matches day_of_week: 0 = Sunday ... 6 = Saturday
DAY_NAMES = {
    "en": ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
    "es": ["Domingo", "Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado"],
}


def is_valid_time_format(value: str) -> bool:
    return bool(value) and bool(_TIME_RE.match(value))


def parse_time(value: Union[str, time]) -> time:
    """Parse an ``HH:MM`` string into a ``datetime.time`` (minute precision)."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    if not is_valid_time_format(value):
        raise ValueError(f"Invalid time format '{value}' (use HH:MM)")
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def format_time(value: Optional[time]) -> Optional[str]:
    if value is None:
        return None
    return f"{value.hour:02d}:{value.minute:02d}"


def time_to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def minutes_to_time(minutes: int) -> time:
    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        raise ValueError(f"{minutes} minutes is outside a single day")
    return time(minutes // 60, minutes % 60)


def day_of_week(target_date: date) -> int:
    """Day-of-week index used by business hours (0 = Sunday)."""
    return (target_date.weekday() + 1) % 7


def day_name(dow: int, locale: Optional[str] = None) -> str:
    """Day name in the given locale, or DAY_NAME_LOCALE; unknown locales read English"""
    names = DAY_NAMES.get((locale or get_settings().DAY_NAME_LOCALE).lower(), DAY_NAMES["en"])
    return names[dow]


def combine(target_date: date, value: time) -> datetime:
    return datetime.combine(target_date, value)


def add_minutes(target_date: date, value: time, minutes: int) -> datetime:
    return combine(target_date, value) + timedelta(minutes=minutes)
