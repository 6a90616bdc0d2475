"""
Conflict Detector

Checks a requested time range against the appointments already on a date.
Every occupying appointment is widened by the buffer on both sides and
tested for overlap against the raw requested range.
"""
from dataclasses import dataclass, field
from datetime import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from booking_api.models.appointment import OCCUPYING_STATUSES
from booking_api.services.scheduling.slots import generate_slot_starts
from booking_api.utils.time_utils import format_time, time_to_minutes


@dataclass
class AppointmentConflict:
    has_conflict: bool
    conflicting: List[Any] = field(default_factory=list)
    suggested_times: List[time] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "has_conflict": self.has_conflict,
            "conflicting_appointments": [appt.summary() for appt in self.conflicting],
            "suggested_times": [format_time(t) for t in self.suggested_times],
        }


def intervals_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start < b_end and b_start < a_end


def occupied_range(appointment: Any, buffer: int):
    """Minutes blocked by an appointment, buffer included: [start - buffer, end + buffer)."""
    return (
        time_to_minutes(appointment.start_time) - buffer,
        time_to_minutes(appointment.end_time) + buffer,
    )


def find_conflicts(
        existing: Iterable[Any],
        start: time,
        duration: int,
        buffer: int,
        exclude_appointment_id: Optional[Any] = None
) -> List[Any]:
    """
    Return the occupying appointments that collide with [start, start + duration).

    Args:
        existing: appointments on the same tenant/date
        start: requested start time
        duration: requested duration in minutes
        buffer: tenant buffer time in minutes
        exclude_appointment_id: appointment to ignore (reschedules)
    """
    req_start = time_to_minutes(start)
    req_end = req_start + duration

    conflicts = []
    for appt in existing:
        if exclude_appointment_id is not None and appt.id == exclude_appointment_id:
            continue
        if appt.status not in OCCUPYING_STATUSES:
            continue
        occ_start, occ_end = occupied_range(appt, buffer)
        if intervals_overlap(req_start, req_end, occ_start, occ_end):
            conflicts.append(appt)

    conflicts.sort(key=lambda a: a.start_time)
    return conflicts


def suggest_alternatives(
        existing: List[Any],
        open_time: time,
        close_time: time,
        requested_start: time,
        duration: int,
        buffer: int,
        granularity: int,
        limit: int,
        exclude_appointment_id: Optional[Any] = None,
        is_allowed: Optional[Callable[[time], bool]] = None
) -> List[time]:
    """
    Nearest conflict-free slots on the same date, ordered by distance from
    the requested start (earlier wins a tie).
    """
    if limit <= 0:
        return []

    requested = time_to_minutes(requested_start)
    candidates = []

    for candidate in generate_slot_starts(open_time, close_time, duration, granularity):
        if candidate == requested_start:
            continue
        if is_allowed is not None and not is_allowed(candidate):
            continue
        if find_conflicts(existing, candidate, duration, buffer, exclude_appointment_id):
            continue
        candidates.append(candidate)

    candidates.sort(key=lambda t: (abs(time_to_minutes(t) - requested), time_to_minutes(t)))
    return candidates[:limit]


def check_conflict(
        existing: List[Any],
        start: time,
        duration: int,
        buffer: int,
        exclude_appointment_id: Optional[Any] = None,
        open_time: Optional[time] = None,
        close_time: Optional[time] = None,
        granularity: Optional[int] = None,
        limit: int = 3,
        is_allowed: Optional[Callable[[time], bool]] = None
) -> AppointmentConflict:
    """
    Conflict check with alternatives. Suggestions are only computed when a
    window is known and the request actually conflicts.
    """
    conflicting = find_conflicts(existing, start, duration, buffer, exclude_appointment_id)
    if not conflicting:
        return AppointmentConflict(has_conflict=False)

    suggestions = []
    if open_time is not None and close_time is not None:
        suggestions = suggest_alternatives(
            existing,
            open_time,
            close_time,
            start,
            duration,
            buffer,
            granularity or duration,
            limit,
            exclude_appointment_id,
            is_allowed,
        )

    return AppointmentConflict(
        has_conflict=True,
        conflicting=conflicting,
        suggested_times=suggestions,
    )
