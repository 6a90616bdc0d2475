"""
Appointment State Machine

PENDING -> CONFIRMED -> IN_PROGRESS -> COMPLETED, with CANCELLED reachable
from PENDING/CONFIRMED and NO_SHOW only from CONFIRMED. COMPLETED,
CANCELLED and NO_SHOW are terminal.
"""
from datetime import datetime
from typing import Dict, FrozenSet, Optional

from booking_api.core.exceptions import InvalidTransitionError
from booking_api.models.appointment import AppointmentStatus

S = AppointmentStatus

TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    S.PENDING: frozenset({S.CONFIRMED, S.CANCELLED}),
    S.CONFIRMED: frozenset({S.IN_PROGRESS, S.CANCELLED, S.NO_SHOW}),
    S.IN_PROGRESS: frozenset({S.COMPLETED}),
    S.COMPLETED: frozenset(),
    S.CANCELLED: frozenset(),
    S.NO_SHOW: frozenset(),
}

TERMINAL_STATUSES = frozenset(status for status, targets in TRANSITIONS.items() if not targets)


def can_transition(current: str, target: str) -> bool:
    return S(target) in TRANSITIONS[S(current)]


def transition(appointment, target: AppointmentStatus, at: datetime, reason: Optional[str] = None):
    """
    Move an appointment to ``target``, stamping the matching timestamp.

    Raises:
        InvalidTransitionError: if the move is not in the transition table
    """
    current = appointment.status
    if not can_transition(current, target):
        raise InvalidTransitionError(S(current).value, S(target).value)

    appointment.status = S(target).value

    if target == S.CONFIRMED:
        appointment.confirmed_at = at
    elif target == S.IN_PROGRESS:
        appointment.started_at = at
    elif target == S.COMPLETED:
        appointment.completed_at = at
    elif target == S.CANCELLED:
        appointment.cancelled_at = at
        appointment.cancellation_reason = reason

    return appointment
