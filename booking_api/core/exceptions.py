# booking_api/core/exceptions.py
"""
Typed outcomes of the scheduling core.

Every error here is an expected result that the HTTP layer turns into a JSON
body; only infrastructure failures are treated as fatal.
"""
from typing import Any, Dict, List, Optional


class SchedulingError(Exception):
    """Base class for all expected scheduling outcomes."""
    code = "scheduling_error"
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(SchedulingError):
    """Malformed input, rejected before touching the store."""
    code = "validation_error"
    status_code = 400


class NotFoundError(SchedulingError):
    code = "not_found"
    status_code = 404


class WindowError(SchedulingError):
    """Requested time violates the tenant's booking window."""
    code = "booking_window_violation"
    status_code = 422

    def __init__(self, message: str, rule: str, details: Optional[Dict[str, Any]] = None):
        self.rule = rule
        details = dict(details or {})
        details["rule"] = rule
        super().__init__(message, details)


class ClosedDayError(SchedulingError):
    """Requested date has no open window."""
    code = "closed_day"
    status_code = 422

    def __init__(self, message: str, reason: str, details: Optional[Dict[str, Any]] = None):
        self.reason = reason
        details = dict(details or {})
        details["reason"] = reason
        super().__init__(message, details)


class OutsideHoursError(SchedulingError):
    """Requested interval does not fit inside the day's effective window."""
    code = "outside_business_hours"
    status_code = 422


class ConflictError(SchedulingError):
    """Requested interval overlaps an appointment that occupies the calendar."""
    code = "time_conflict"
    status_code = 409

    def __init__(
            self,
            message: str,
            conflicting: Optional[List[Dict[str, Any]]] = None,
            suggested_times: Optional[List[str]] = None,
    ):
        self.conflicting = conflicting or []
        self.suggested_times = suggested_times or []
        super().__init__(message, {
            "conflicting_appointments": self.conflicting,
            "suggested_times": self.suggested_times,
        })


class ConcurrencyError(ConflictError):
    """The atomic booking step lost a race; callers treat it as a conflict."""
    code = "concurrent_booking"


class InvalidTransitionError(SchedulingError):
    code = "invalid_state_transition"
    status_code = 409

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot change appointment status from {current} to {target}",
            {"current_status": current, "requested_status": target},
        )
