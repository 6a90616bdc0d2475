# ============================================================================
# booking_api/api/v1/dashboard/schedule.py
# Weekly hours, special hours and booking policy - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from uuid import UUID

from booking_api.config.database import get_db
from booking_api.schemas.schedule import (
    BookingPolicyUpdateRequest,
    BusinessHoursUpdateRequest,
    SpecialHoursCreateRequest,
    SpecialHoursUpdateRequest,
)
from booking_api.services.schedule.schedule_service import ScheduleService

router = APIRouter(prefix="/businesses/{business_id}/schedule", tags=["schedule"])


# ============================================================================
# Business hours
# ============================================================================

@router.get("/business-hours")
async def get_business_hours(
        business_id: UUID = Path(..., description="The business ID"),
        db: Session = Depends(get_db)
):
    """Weekly opening hours (defaults are created on first access)"""
    hours = ScheduleService.get_business_hours(db, business_id)
    return {"business_hours": [h.to_dict() for h in hours]}


@router.put("/business-hours")
async def update_business_hours(
        data: BusinessHoursUpdateRequest,
        business_id: UUID = Path(..., description="The business ID"),
        db: Session = Depends(get_db)
):
    hours = ScheduleService.update_business_hours(db, business_id, data.business_hours)
    return {
        "message": "Business hours updated",
        "business_hours": [h.to_dict() for h in hours]
    }


# ============================================================================
# Special hours
# ============================================================================

@router.get("/special-hours")
async def list_special_hours(
        business_id: UUID = Path(..., description="The business ID"),
        start_date: Optional[date] = Query(None, description="Include overrides on or after this date"),
        end_date: Optional[date] = Query(None, description="Include overrides on or before this date"),
        db: Session = Depends(get_db)
):
    overrides = ScheduleService.list_special_hours(db, business_id, start_date, end_date)
    return {"special_hours": [o.to_dict() for o in overrides]}


@router.post("/special-hours", status_code=201)
async def create_special_hours(
        data: SpecialHoursCreateRequest,
        business_id: UUID = Path(..., description="The business ID"),
        db: Session = Depends(get_db)
):
    """Add a date override (holiday closure or custom hours)"""
    override = ScheduleService.create_special_hour(db, business_id, data)
    return {"message": "Special hours created", "special_hours": override.to_dict()}


@router.put("/special-hours/{special_hours_id}")
async def update_special_hours(
        data: SpecialHoursUpdateRequest,
        business_id: UUID = Path(..., description="The business ID"),
        special_hours_id: int = Path(..., description="The override ID"),
        db: Session = Depends(get_db)
):
    override = ScheduleService.update_special_hour(db, business_id, special_hours_id, data)
    return {"message": "Special hours updated", "special_hours": override.to_dict()}


@router.delete("/special-hours/{special_hours_id}")
async def delete_special_hours(
        business_id: UUID = Path(..., description="The business ID"),
        special_hours_id: int = Path(..., description="The override ID"),
        db: Session = Depends(get_db)
):
    ScheduleService.delete_special_hour(db, business_id, special_hours_id)
    return {"message": "Special hours deleted"}


# ============================================================================
# Booking policy
# ============================================================================

@router.get("/booking-policy")
async def get_booking_policy(
        business_id: UUID = Path(..., description="The business ID"),
        db: Session = Depends(get_db)
):
    policy = ScheduleService.get_booking_policy(db, business_id)
    return {"booking_policy": policy.to_dict()}


@router.put("/booking-policy")
async def update_booking_policy(
        data: BookingPolicyUpdateRequest,
        business_id: UUID = Path(..., description="The business ID"),
        db: Session = Depends(get_db)
):
    policy = ScheduleService.update_booking_policy(db, business_id, data)
    return {"message": "Booking policy updated", "booking_policy": policy.to_dict()}
