# booking_api/models/__init__.py
from .base import Base
from .business import Business, BusinessHours
from .availability import AvailabilityOverride
from .booking_policy import BookingPolicy, DEFAULT_POLICY
from .service import Service
from .appointment import Appointment, AppointmentStatus, OCCUPYING_STATUSES

__all__ = [
    "Base",
    "Business",
    "BusinessHours",
    "AvailabilityOverride",
    "BookingPolicy",
    "DEFAULT_POLICY",
    "Service",
    "Appointment",
    "AppointmentStatus",
    "OCCUPYING_STATUSES",
]
