# booking_api/models/appointment.py
from sqlalchemy import Column, String, Integer, Text, Date, Time, DateTime, Numeric, ForeignKey, Index, Uuid
from sqlalchemy.sql import func
import enum
import uuid
from booking_api.models.base import Base
from booking_api.utils.time_utils import format_time


class AppointmentStatus(str, enum.Enum):
    """Lifecycle of a booked appointment."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


# Statuses whose appointments block the calendar
OCCUPYING_STATUSES = (
    AppointmentStatus.PENDING.value,
    AppointmentStatus.CONFIRMED.value,
    AppointmentStatus.IN_PROGRESS.value,
)


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appointments_business_date", "business_id", "date"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id"), nullable=False)
    service_id = Column(Uuid(as_uuid=True), ForeignKey("services.id"), nullable=True)
    client_id = Column(String(64), nullable=False, index=True)  # owned by the CRM

    # Local calendar date and clock times in the business timezone
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes

    status = Column(String(20), nullable=False, default=AppointmentStatus.PENDING.value)
    price = Column(Numeric(10, 2), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Appointment(id={self.id}, date={self.date}, start={self.start_time}, status={self.status})>"

    @property
    def occupies_calendar(self) -> bool:
        return self.status in OCCUPYING_STATUSES

    def summary(self):
        """Short form used in conflict reports"""
        return {
            "id": str(self.id),
            "date": self.date.isoformat(),
            "start_time": format_time(self.start_time),
            "end_time": format_time(self.end_time),
            "status": self.status,
        }

    def to_dict(self):
        return {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "client_id": self.client_id,
            "service_id": str(self.service_id) if self.service_id else None,
            "date": self.date.isoformat(),
            "start_time": format_time(self.start_time),
            "end_time": format_time(self.end_time),
            "duration": self.duration,
            "status": self.status,
            "price": float(self.price) if self.price is not None else None,
            "notes": self.notes,
            "cancellation_reason": self.cancellation_reason,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "confirmed_at": self.confirmed_at.isoformat() if self.confirmed_at else None,
            "cancelled_at": self.cancelled_at.isoformat() if self.cancelled_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
