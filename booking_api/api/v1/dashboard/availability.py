# ============================================================================
# booking_api/api/v1/dashboard/availability.py
# Slot and conflict queries - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Path, Query
from datetime import date
from typing import Optional
from uuid import UUID

from booking_api.api.dependencies import get_availability_service
from booking_api.core.exceptions import ValidationError
from booking_api.schemas.appointment import ConflictCheckRequest
from booking_api.services.availability.availability_service import AvailabilityService
from booking_api.utils.time_utils import parse_time

router = APIRouter(prefix="/businesses/{business_id}/availability", tags=["availability"])


@router.get("/slots")
async def get_available_slots(
        business_id: UUID = Path(..., description="The business ID"),
        target_date: date = Query(..., alias="date", description="Date to list slots for (YYYY-MM-DD)"),
        duration: Optional[int] = Query(None, description="Slot length in minutes"),
        service_id: Optional[UUID] = Query(None, description="Use this service's duration"),
        service: AvailabilityService = Depends(get_availability_service)
):
    """
    Every slot of the day, each flagged available or not.
    A closed date returns an empty slot list with the closed reason.
    """
    return service.get_available_slots(business_id, target_date, duration, service_id).to_dict()


@router.get("/week")
async def get_weekly_availability(
        business_id: UUID = Path(..., description="The business ID"),
        start_date: date = Query(..., description="First day of the summary"),
        duration: Optional[int] = Query(None, description="Slot length in minutes"),
        service: AvailabilityService = Depends(get_availability_service)
):
    days = service.get_weekly_availability(business_id, start_date, duration=duration)
    return {
        "start_date": start_date.isoformat(),
        "days": [day.to_dict() for day in days]
    }


@router.post("/check-conflict")
async def check_conflict(
        data: ConflictCheckRequest,
        business_id: UUID = Path(..., description="The business ID"),
        service: AvailabilityService = Depends(get_availability_service)
):
    try:
        start = parse_time(data.start_time)
    except ValueError:
        raise ValidationError("Invalid start time format (use HH:MM)", {"start_time": data.start_time})

    conflict = service.check_conflict(
        business_id,
        data.date,
        start,
        duration=data.duration,
        exclude_appointment_id=data.exclude_appointment_id
    )
    return conflict.to_dict()
