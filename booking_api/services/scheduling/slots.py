"""
Slot Generator

Turns an effective window into discrete candidate start times. Generation
ignores buffer time and existing appointments; those are applied when each
candidate is conflict-checked.
"""
from datetime import time
from typing import Iterator

from booking_api.utils.time_utils import minutes_to_time, time_to_minutes


def generate_slot_starts(
        open_time: time,
        close_time: time,
        duration: int,
        granularity: int
) -> Iterator[time]:
    """
    Yield candidate start times in [open, close) every ``granularity`` minutes
    while ``start + duration <= close``.

    Calling it again restarts the sequence. A duration longer than the window
    yields nothing.
    """
    if duration <= 0:
        raise ValueError("duration must be positive")
    if granularity <= 0:
        raise ValueError("granularity must be positive")

    close_minutes = time_to_minutes(close_time)
    current = time_to_minutes(open_time)

    while current + duration <= close_minutes:
        yield minutes_to_time(current)
        current += granularity
