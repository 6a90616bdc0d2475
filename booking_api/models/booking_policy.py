# booking_api/models/booking_policy.py
from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func
from booking_api.models.base import Base

DEFAULT_POLICY = {
    "default_duration": 30,
    "buffer_time": 5,
    "max_advance_booking_days": 30,
    "min_advance_booking_hours": 2,
    "allow_same_day_booking": True,
}


class BookingPolicy(Base):
    """Per-tenant booking rules"""
    __tablename__ = "booking_policies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    business_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        unique=True
    )

    default_duration = Column(Integer, nullable=False, default=30)  # minutes
    buffer_time = Column(Integer, nullable=False, default=5)  # minutes between appointments
    max_advance_booking_days = Column(Integer, nullable=False, default=30)
    min_advance_booking_hours = Column(Integer, nullable=False, default=2)
    allow_same_day_booking = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @classmethod
    def defaults(cls, business_id) -> "BookingPolicy":
        """Unsaved policy carrying the platform defaults"""
        return cls(business_id=business_id, **DEFAULT_POLICY)

    def to_dict(self):
        return {
            "default_duration": self.default_duration,
            "buffer_time": self.buffer_time,
            "max_advance_booking_days": self.max_advance_booking_days,
            "min_advance_booking_hours": self.min_advance_booking_hours,
            "allow_same_day_booking": self.allow_same_day_booking,
        }
