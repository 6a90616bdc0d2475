"""
Booking Window Validator

Decides whether a requested start instant respects the tenant's advance
booking policy relative to "now". Both values are naive local wall-clock
datetimes in the tenant's timezone.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

TOO_SOON = "min_advance_not_met"
TOO_FAR = "max_advance_exceeded"
SAME_DAY_NOT_ALLOWED = "same_day_not_allowed"


@dataclass(frozen=True)
class WindowCheck:
    is_valid: bool
    reason: Optional[str] = None
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"is_valid": self.is_valid, "reason": self.reason, "message": self.message}


VALID = WindowCheck(is_valid=True)


def earliest_bookable(policy: Any, now: datetime) -> datetime:
    return now + timedelta(hours=policy.min_advance_booking_hours)


def last_bookable_date(policy: Any, now: datetime):
    """Any time on this date is still acceptable."""
    return (now + timedelta(days=policy.max_advance_booking_days)).date()


def validate_booking_window(policy: Any, now: datetime, requested: datetime) -> WindowCheck:
    if requested < earliest_bookable(policy, now):
        return WindowCheck(
            is_valid=False,
            reason=TOO_SOON,
            message=f"Bookings require at least {policy.min_advance_booking_hours} hours notice",
        )

    if requested.date() > last_bookable_date(policy, now):
        return WindowCheck(
            is_valid=False,
            reason=TOO_FAR,
            message=f"Bookings cannot be made more than {policy.max_advance_booking_days} days ahead",
        )

    if not policy.allow_same_day_booking and requested.date() == now.date():
        return WindowCheck(
            is_valid=False,
            reason=SAME_DAY_NOT_ALLOWED,
            message="Same-day bookings are not allowed",
        )

    return VALID
