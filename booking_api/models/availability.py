# booking_api/models/availability.py
from sqlalchemy import Column, String, Integer, Boolean, Time, Date, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.sql import func
from booking_api.models.base import Base
from booking_api.utils.time_utils import format_time


class AvailabilityOverride(Base):
    """Specific date overrides (holidays, time-off, special hours)"""
    __tablename__ = "availability_overrides"
    __table_args__ = (
        UniqueConstraint("business_id", "date", name="uq_availability_override_date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False)

    date = Column(Date, nullable=False, index=True)
    is_open = Column(Boolean, nullable=False)  # False = day off
    open_time = Column(Time, nullable=True)
    close_time = Column(Time, nullable=True)
    reason = Column(String(100), nullable=True)  # "Holiday", "Vacation", etc.
    description = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "is_open": self.is_open,
            "open_time": format_time(self.open_time),
            "close_time": format_time(self.close_time),
            "reason": self.reason,
            "description": self.description,
        }
