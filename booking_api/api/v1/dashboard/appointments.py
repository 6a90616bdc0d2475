# ============================================================================
# booking_api/api/v1/dashboard/appointments.py
# Booking and lifecycle endpoints - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from uuid import UUID

from booking_api.api.dependencies import get_appointment_service
from booking_api.config.database import get_db
from booking_api.schemas.appointment import (
    AppointmentCancelRequest,
    AppointmentCreateRequest,
    AppointmentRescheduleRequest,
)
from booking_api.services.appointment.appointment_query_service import AppointmentQueryService
from booking_api.services.appointment.appointment_service import AppointmentService

router = APIRouter(prefix="/businesses/{business_id}/appointments", tags=["appointments"])


@router.get("")
async def list_appointments(
        business_id: UUID = Path(..., description="The business ID"),
        start_date: Optional[date] = Query(None, description="Filter appointments on or after this date"),
        end_date: Optional[date] = Query(None, description="Filter appointments on or before this date"),
        status: Optional[str] = Query(None,
                                      description="Filter by status (PENDING, CONFIRMED, IN_PROGRESS, COMPLETED, CANCELLED, NO_SHOW)"),
        client_id: Optional[str] = Query(None, description="Filter by client"),
        skip: int = Query(0, ge=0, description="Number of records to skip"),
        limit: int = Query(50, ge=1, le=100, description="Number of records to return"),
        db: Session = Depends(get_db)
):
    return AppointmentQueryService.list_appointments(
        db=db,
        business_id=business_id,
        start_date=start_date,
        end_date=end_date,
        status=status,
        client_id=client_id,
        skip=skip,
        limit=limit
    )


@router.post("", status_code=201)
async def create_appointment(
        data: AppointmentCreateRequest,
        business_id: UUID = Path(..., description="The business ID"),
        service: AppointmentService = Depends(get_appointment_service)
):
    """
    Book an appointment.
    Returns 409 with suggested times when the slot is taken.
    """
    appointment = service.create_appointment(business_id, data)
    return {"message": "Appointment created", "appointment": appointment.to_dict()}


@router.get("/{appointment_id}")
async def get_appointment(
        business_id: UUID = Path(..., description="The business ID"),
        appointment_id: UUID = Path(..., description="The appointment ID"),
        service: AppointmentService = Depends(get_appointment_service)
):
    return service.get_appointment(business_id, appointment_id).to_dict()


@router.post("/{appointment_id}/reschedule")
async def reschedule_appointment(
        data: AppointmentRescheduleRequest,
        business_id: UUID = Path(..., description="The business ID"),
        appointment_id: UUID = Path(..., description="The appointment ID"),
        service: AppointmentService = Depends(get_appointment_service)
):
    appointment = service.reschedule(business_id, appointment_id, data)
    return {"message": "Appointment rescheduled", "appointment": appointment.to_dict()}


@router.post("/{appointment_id}/confirm")
async def confirm_appointment(
        business_id: UUID = Path(..., description="The business ID"),
        appointment_id: UUID = Path(..., description="The appointment ID"),
        service: AppointmentService = Depends(get_appointment_service)
):
    return service.confirm(business_id, appointment_id).to_dict()


@router.post("/{appointment_id}/cancel")
async def cancel_appointment(
        data: Optional[AppointmentCancelRequest] = None,
        business_id: UUID = Path(..., description="The business ID"),
        appointment_id: UUID = Path(..., description="The appointment ID"),
        service: AppointmentService = Depends(get_appointment_service)
):
    reason = data.reason if data else None
    return service.cancel(business_id, appointment_id, reason).to_dict()


@router.post("/{appointment_id}/start")
async def start_appointment(
        business_id: UUID = Path(..., description="The business ID"),
        appointment_id: UUID = Path(..., description="The appointment ID"),
        service: AppointmentService = Depends(get_appointment_service)
):
    return service.start(business_id, appointment_id).to_dict()


@router.post("/{appointment_id}/complete")
async def complete_appointment(
        business_id: UUID = Path(..., description="The business ID"),
        appointment_id: UUID = Path(..., description="The appointment ID"),
        service: AppointmentService = Depends(get_appointment_service)
):
    return service.complete(business_id, appointment_id).to_dict()


@router.post("/{appointment_id}/no-show")
async def mark_no_show(
        business_id: UUID = Path(..., description="The business ID"),
        appointment_id: UUID = Path(..., description="The appointment ID"),
        service: AppointmentService = Depends(get_appointment_service)
):
    return service.mark_no_show(business_id, appointment_id).to_dict()
