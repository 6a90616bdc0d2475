# booking_api/schemas/__init__.py
from .schedule import (
    BusinessHoursEntry,
    BusinessHoursUpdateRequest,
    SpecialHoursCreateRequest,
    SpecialHoursUpdateRequest,
    BookingPolicyUpdateRequest,
)
from .appointment import (
    AppointmentCreateRequest,
    AppointmentRescheduleRequest,
    AppointmentCancelRequest,
    ConflictCheckRequest,
)

__all__ = [
    "BusinessHoursEntry",
    "BusinessHoursUpdateRequest",
    "SpecialHoursCreateRequest",
    "SpecialHoursUpdateRequest",
    "BookingPolicyUpdateRequest",
    "AppointmentCreateRequest",
    "AppointmentRescheduleRequest",
    "AppointmentCancelRequest",
    "ConflictCheckRequest",
]
