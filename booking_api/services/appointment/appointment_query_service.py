# ============================================================================
# booking_api/services/appointment/appointment_query_service.py
# Read-only appointment queries - no FastAPI dependencies
# ============================================================================
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional, Dict, Any
from uuid import UUID

from booking_api.core.exceptions import ValidationError
from booking_api.models.appointment import Appointment, AppointmentStatus


class AppointmentQueryService:
    """Listing and lookup of a business's appointments."""

    @staticmethod
    def list_appointments(
            db: Session,
            business_id: UUID,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
            status: Optional[str] = None,
            client_id: Optional[str] = None,
            skip: int = 0,
            limit: int = 50
    ) -> Dict[str, Any]:
        """Get paginated list of appointments with filters."""
        if start_date and end_date and start_date > end_date:
            raise ValidationError("start_date must not be after end_date")
        if status and status not in AppointmentStatus.__members__:
            raise ValidationError(f"Unknown status: {status}", {"status": status})

        query = db.query(Appointment).filter(Appointment.business_id == business_id)

        if start_date:
            query = query.filter(Appointment.date >= start_date)
        if end_date:
            query = query.filter(Appointment.date <= end_date)
        if status:
            query = query.filter(Appointment.status == status)
        if client_id:
            query = query.filter(Appointment.client_id == client_id)

        query = query.order_by(Appointment.date.asc(), Appointment.start_time.asc())
        total = query.count()
        appointments = query.offset(skip).limit(limit).all()

        return {
            "business_id": str(business_id),
            "total_appointments": total,
            "page": {
                "skip": skip,
                "limit": limit,
                "total_pages": (total + limit - 1) // limit if total > 0 else 0
            },
            "filters": {
                "start_date": start_date.isoformat() if start_date else None,
                "end_date": end_date.isoformat() if end_date else None,
                "status": status,
                "client_id": client_id
            },
            "appointments": [appt.to_dict() for appt in appointments]
        }
