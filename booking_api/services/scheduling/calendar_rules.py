"""
Calendar Rule Resolver

Merges recurring weekly hours with date-specific overrides into a single
effective open/closed window for one calendar date.
"""
from dataclasses import dataclass
from datetime import date, time
from typing import Any, Dict, Iterable, Optional

from booking_api.utils.time_utils import day_of_week, format_time

CLOSED_WEEKLY = "weekly_closed"
CLOSED_BY_OVERRIDE = "override_closed"


@dataclass(frozen=True)
class EffectiveWindow:
    date: date
    is_open: bool
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    closed_reason: Optional[str] = None
    override_reason: Optional[str] = None
    source: str = "weekly"

    def contains(self, start: time, end: time) -> bool:
        """True when [start, end) fits inside [open, close)."""
        if not self.is_open:
            return False
        return self.open_time <= start and end <= self.close_time

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "is_open": self.is_open,
            "open_time": format_time(self.open_time),
            "close_time": format_time(self.close_time),
            "closed_reason": self.closed_reason,
            "override_reason": self.override_reason,
            "source": self.source,
        }


def resolve_effective_window(
        weekly_hours: Iterable[Any],
        override: Optional[Any],
        target_date: date
) -> EffectiveWindow:
    """
    Resolve the effective window for a date.

    Args:
        weekly_hours: rows with day_of_week / is_open / open_time / close_time
        override: the date's override row, if any
        target_date: calendar date to resolve

    Returns:
        EffectiveWindow

    An override replaces the weekly rule for its date entirely. Without one,
    the weekly entry for the date's day of week applies; a missing entry is
    treated as closed.
    """
    if override is not None:
        if not override.is_open or override.open_time is None or override.close_time is None:
            return EffectiveWindow(
                date=target_date,
                is_open=False,
                closed_reason=CLOSED_BY_OVERRIDE,
                override_reason=override.reason,
                source="override",
            )
        return EffectiveWindow(
            date=target_date,
            is_open=True,
            open_time=override.open_time,
            close_time=override.close_time,
            override_reason=override.reason,
            source="override",
        )

    dow = day_of_week(target_date)
    rule = next((h for h in weekly_hours if h.day_of_week == dow), None)

    if rule is None or not rule.is_open or rule.open_time is None or rule.close_time is None:
        return EffectiveWindow(date=target_date, is_open=False, closed_reason=CLOSED_WEEKLY)

    return EffectiveWindow(
        date=target_date,
        is_open=True,
        open_time=rule.open_time,
        close_time=rule.close_time,
    )
