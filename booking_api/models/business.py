# booking_api/models/business.py
"""
Business Model - the tenant that owns hours, booking policy and appointments
"""
from sqlalchemy import (
    Column, String, Boolean, DateTime, Integer, Time, ForeignKey, UniqueConstraint, Uuid
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from booking_api.models.base import Base
from booking_api.utils.time_utils import day_name, format_time


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)

    # IANA timezone the tenant's local clock values are expressed in
    timezone = Column(String(50), default="UTC", nullable=False)

    # Bumped by every booking transaction; the UPDATE doubles as a per-tenant lock
    booking_version = Column(Integer, default=0, nullable=False)

    business_hours = relationship(
        "BusinessHours", back_populates="business", cascade="all, delete-orphan"
    )

    # Technical fields
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    is_active = Column(Boolean, default=True)

    def __repr__(self):
        return f"<Business(id={self.id}, name={self.name})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "name": self.name,
            "timezone": self.timezone,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class BusinessHours(Base):
    """Recurring weekly hours, one row per day of week"""
    __tablename__ = "business_hours"
    __table_args__ = (
        UniqueConstraint("business_id", "day_of_week", name="uq_business_hours_day"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    is_open = Column(Boolean, default=False, nullable=False)
    open_time = Column(Time, nullable=True)
    close_time = Column(Time, nullable=True)

    business = relationship("Business", back_populates="business_hours")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<BusinessHours(business_id={self.business_id}, day={self.day_of_week})>"

    def to_dict(self):
        return {
            "id": self.id,
            "day_of_week": self.day_of_week,
            "day_name": day_name(self.day_of_week),
            "is_open": self.is_open,
            "open_time": format_time(self.open_time),
            "close_time": format_time(self.close_time),
        }
