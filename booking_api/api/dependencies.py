# ============================================================================
# FILE: booking_api/api/dependencies.py
# Service factories wired to the request-scoped session and clock
# ============================================================================
from fastapi import Depends
from sqlalchemy.orm import Session

from booking_api.config.database import get_db
from booking_api.core.clock import Clock, get_clock
from booking_api.services.appointment.appointment_service import AppointmentService
from booking_api.services.availability.availability_service import AvailabilityService


def get_availability_service(
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
) -> AvailabilityService:
    return AvailabilityService(db, clock)


def get_appointment_service(
        db: Session = Depends(get_db),
        clock: Clock = Depends(get_clock)
) -> AppointmentService:
    return AppointmentService(db, clock)
