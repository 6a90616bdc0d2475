"""
Pydantic schemas for business hours, special hours and booking policy.

These only describe request shapes; domain rules (open before close, policy
bounds) are checked by the schedule service.
"""
from datetime import date as date_type
from typing import List, Optional

from pydantic import BaseModel, Field

from booking_api.utils.time_utils import TIME_PATTERN


class BusinessHoursEntry(BaseModel):
    """Hours for one day of the week (0 = Sunday)"""
    day_of_week: int = Field(..., ge=0, le=6)
    is_open: bool
    open_time: Optional[str] = Field(None, pattern=TIME_PATTERN, description="HH:MM")
    close_time: Optional[str] = Field(None, pattern=TIME_PATTERN, description="HH:MM")


class BusinessHoursUpdateRequest(BaseModel):
    business_hours: List[BusinessHoursEntry] = Field(..., min_length=1, max_length=7)

    class Config:
        json_schema_extra = {
            "example": {
                "business_hours": [
                    {"day_of_week": 1, "is_open": True, "open_time": "09:00", "close_time": "17:00"},
                    {"day_of_week": 0, "is_open": False},
                ]
            }
        }


class SpecialHoursCreateRequest(BaseModel):
    """A date override; when open it must carry the complete window"""
    date: date_type
    is_open: bool
    open_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    close_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    reason: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class SpecialHoursUpdateRequest(BaseModel):
    is_open: bool
    open_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    close_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    reason: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class BookingPolicyUpdateRequest(BaseModel):
    default_duration: int = Field(..., description="Minutes (15-480)")
    buffer_time: int = Field(..., description="Minutes between appointments (0-60)")
    max_advance_booking_days: int = Field(..., description="0-365")
    min_advance_booking_hours: int = Field(..., description="0-168")
    allow_same_day_booking: bool = True
