"""
Pydantic schemas for booking requests
"""
from datetime import date as date_type
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from booking_api.utils.time_utils import TIME_PATTERN


class AppointmentCreateRequest(BaseModel):
    """Request body for booking an appointment"""
    client_id: str = Field(..., min_length=1, max_length=64)
    service_id: UUID
    date: date_type
    start_time: str = Field(..., pattern=TIME_PATTERN, description="Local start time HH:MM")
    duration: Optional[int] = Field(None, description="Minutes; defaults to the service or policy duration")
    notes: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": "client-42",
                "service_id": "9b7c2c1e-8f0e-4a7d-9d55-3c1f0a6b2e11",
                "date": "2026-11-02",
                "start_time": "10:30",
                "notes": "First visit"
            }
        }


class AppointmentRescheduleRequest(BaseModel):
    date: Optional[date_type] = Field(None, description="New date; defaults to the current one")
    start_time: str = Field(..., pattern=TIME_PATTERN)
    duration: Optional[int] = None


class AppointmentCancelRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class ConflictCheckRequest(BaseModel):
    date: date_type
    start_time: str = Field(..., pattern=TIME_PATTERN)
    duration: Optional[int] = None
    exclude_appointment_id: Optional[UUID] = None
