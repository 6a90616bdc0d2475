# booking_api/services/schedule/schedule_service.py
"""Service for managing a business's weekly hours, date overrides and booking policy"""
import logging
from datetime import date, time
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from booking_api.core.exceptions import NotFoundError, ValidationError
from booking_api.models.availability import AvailabilityOverride
from booking_api.models.booking_policy import BookingPolicy, DEFAULT_POLICY
from booking_api.models.business import Business, BusinessHours
from booking_api.schemas.schedule import (
    BookingPolicyUpdateRequest,
    BusinessHoursEntry,
    SpecialHoursCreateRequest,
    SpecialHoursUpdateRequest,
)
from booking_api.utils.time_utils import day_name, parse_time

logger = logging.getLogger(__name__)

# Mon-Fri 09:00-18:00, weekend closed
DEFAULT_BUSINESS_HOURS = [
    (0, False, None, None),
    (1, True, time(9, 0), time(18, 0)),
    (2, True, time(9, 0), time(18, 0)),
    (3, True, time(9, 0), time(18, 0)),
    (4, True, time(9, 0), time(18, 0)),
    (5, True, time(9, 0), time(18, 0)),
    (6, False, None, None),
]

POLICY_BOUNDS = {
    "default_duration": (15, 480),
    "buffer_time": (0, 60),
    "max_advance_booking_days": (0, 365),
    "min_advance_booking_hours": (0, 168),
}


def validate_open_window(
        is_open: bool,
        open_time: Optional[str],
        close_time: Optional[str],
        label: str
) -> Tuple[Optional[time], Optional[time]]:
    """
    Validate an open/close pair and return parsed times.

    A closed day carries no times; an open day needs both, with open < close.
    """
    if not is_open:
        return None, None

    if not open_time or not close_time:
        raise ValidationError(f"{label}: open and close times are required when open")

    try:
        opens = parse_time(open_time)
        closes = parse_time(close_time)
    except ValueError:
        raise ValidationError(f"{label}: invalid time format (use HH:MM)")

    if opens >= closes:
        raise ValidationError(f"{label}: open time must be before close time")

    return opens, closes


def validate_business_hours_data(entries: List[BusinessHoursEntry]) -> List[Tuple[int, bool, Optional[time], Optional[time]]]:
    seen = set()
    parsed = []
    for entry in entries:
        if entry.day_of_week in seen:
            raise ValidationError(f"{day_name(entry.day_of_week)}: listed more than once")
        seen.add(entry.day_of_week)

        opens, closes = validate_open_window(
            entry.is_open, entry.open_time, entry.close_time, day_name(entry.day_of_week)
        )
        parsed.append((entry.day_of_week, entry.is_open, opens, closes))
    return parsed


def validate_policy_data(data: BookingPolicyUpdateRequest) -> None:
    for field_name, (low, high) in POLICY_BOUNDS.items():
        value = getattr(data, field_name)
        if value < low or value > high:
            raise ValidationError(
                f"{field_name} must be between {low} and {high}",
                {"field": field_name, "min": low, "max": high},
            )


class ScheduleService:
    """Handles weekly hours, special hours and booking policy"""

    @staticmethod
    def get_business(db: Session, business_id: UUID) -> Business:
        business = db.query(Business).filter(
            Business.id == business_id,
            Business.is_active == True
        ).first()
        if not business:
            raise NotFoundError("Business not found", {"business_id": str(business_id)})
        return business

    # ------------------------------------------------------------------
    # Weekly hours
    # ------------------------------------------------------------------

    @staticmethod
    def list_business_hours(db: Session, business_id: UUID) -> List[BusinessHours]:
        """Read-only lookup; no defaults are written"""
        return db.query(BusinessHours).filter(
            BusinessHours.business_id == business_id
        ).order_by(BusinessHours.day_of_week.asc()).all()

    @staticmethod
    def load_business_hours(db: Session, business_id: UUID) -> List[BusinessHours]:
        """Stored weekly hours, or unsaved rows carrying the defaults"""
        hours = ScheduleService.list_business_hours(db, business_id)
        if hours:
            return hours
        return [
            BusinessHours(
                business_id=business_id,
                day_of_week=dow,
                is_open=is_open,
                open_time=opens,
                close_time=closes,
            )
            for dow, is_open, opens, closes in DEFAULT_BUSINESS_HOURS
        ]

    @staticmethod
    def get_business_hours(db: Session, business_id: UUID) -> List[BusinessHours]:
        """Weekly hours, creating the defaults the first time a business asks"""
        ScheduleService.get_business(db, business_id)

        hours = ScheduleService.list_business_hours(db, business_id)
        if hours:
            return hours

        logger.info(f"Initializing default business hours for business {business_id}")
        for dow, is_open, opens, closes in DEFAULT_BUSINESS_HOURS:
            db.add(BusinessHours(
                business_id=business_id,
                day_of_week=dow,
                is_open=is_open,
                open_time=opens,
                close_time=closes,
            ))
        db.commit()
        return ScheduleService.list_business_hours(db, business_id)

    @staticmethod
    def update_business_hours(
            db: Session,
            business_id: UUID,
            entries: List[BusinessHoursEntry]
    ) -> List[BusinessHours]:
        """Upsert the given days in one transaction"""
        parsed = validate_business_hours_data(entries)
        ScheduleService.get_business(db, business_id)

        existing = {
            h.day_of_week: h for h in ScheduleService.list_business_hours(db, business_id)
        }
        if not existing:
            # First write for this business: start from the default week it was being served
            for row in ScheduleService.load_business_hours(db, business_id):
                db.add(row)
                existing[row.day_of_week] = row

        for dow, is_open, opens, closes in parsed:
            row = existing.get(dow)
            if row is None:
                row = BusinessHours(business_id=business_id, day_of_week=dow)
                db.add(row)
            row.is_open = is_open
            row.open_time = opens
            row.close_time = closes

        db.commit()
        logger.info(f"Updated business hours for business {business_id} ({len(parsed)} days)")
        return ScheduleService.list_business_hours(db, business_id)

    # ------------------------------------------------------------------
    # Special hours (date overrides)
    # ------------------------------------------------------------------

    @staticmethod
    def get_override(db: Session, business_id: UUID, target_date: date) -> Optional[AvailabilityOverride]:
        return db.query(AvailabilityOverride).filter(
            AvailabilityOverride.business_id == business_id,
            AvailabilityOverride.date == target_date
        ).first()

    @staticmethod
    def list_special_hours(
            db: Session,
            business_id: UUID,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None
    ) -> List[AvailabilityOverride]:
        if start_date and end_date and start_date > end_date:
            raise ValidationError("start_date must not be after end_date")

        ScheduleService.get_business(db, business_id)
        query = db.query(AvailabilityOverride).filter(AvailabilityOverride.business_id == business_id)

        if start_date:
            query = query.filter(AvailabilityOverride.date >= start_date)
        if end_date:
            query = query.filter(AvailabilityOverride.date <= end_date)

        return query.order_by(AvailabilityOverride.date.asc()).all()

    @staticmethod
    def create_special_hour(
            db: Session,
            business_id: UUID,
            data: SpecialHoursCreateRequest
    ) -> AvailabilityOverride:
        opens, closes = validate_open_window(
            data.is_open, data.open_time, data.close_time, data.date.isoformat()
        )
        ScheduleService.get_business(db, business_id)

        if ScheduleService.get_override(db, business_id, data.date):
            raise ValidationError(
                "Special hours already exist for this date",
                {"date": data.date.isoformat()},
            )

        override = AvailabilityOverride(
            business_id=business_id,
            date=data.date,
            is_open=data.is_open,
            open_time=opens,
            close_time=closes,
            reason=data.reason,
            description=data.description,
        )
        db.add(override)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with another create for the same date
            db.rollback()
            raise ValidationError(
                "Special hours already exist for this date",
                {"date": data.date.isoformat()},
            )
        db.refresh(override)

        logger.info(f"Created special hours {override.id} for business {business_id} on {data.date}")
        return override

    @staticmethod
    def _get_owned_override(db: Session, business_id: UUID, override_id: int) -> AvailabilityOverride:
        override = db.query(AvailabilityOverride).filter(
            AvailabilityOverride.id == override_id,
            AvailabilityOverride.business_id == business_id
        ).first()
        if not override:
            raise NotFoundError("Special hours not found", {"special_hours_id": override_id})
        return override

    @staticmethod
    def update_special_hour(
            db: Session,
            business_id: UUID,
            override_id: int,
            data: SpecialHoursUpdateRequest
    ) -> AvailabilityOverride:
        opens, closes = validate_open_window(data.is_open, data.open_time, data.close_time, "Special hours")
        override = ScheduleService._get_owned_override(db, business_id, override_id)

        override.is_open = data.is_open
        override.open_time = opens
        override.close_time = closes
        override.reason = data.reason
        override.description = data.description

        db.commit()
        db.refresh(override)
        return override

    @staticmethod
    def delete_special_hour(db: Session, business_id: UUID, override_id: int) -> None:
        override = ScheduleService._get_owned_override(db, business_id, override_id)
        db.delete(override)
        db.commit()
        logger.info(f"Deleted special hours {override_id} for business {business_id}")

    # ------------------------------------------------------------------
    # Booking policy
    # ------------------------------------------------------------------

    @staticmethod
    def load_booking_policy(db: Session, business_id: UUID) -> BookingPolicy:
        """Stored policy, or an unsaved one with the defaults"""
        policy = db.query(BookingPolicy).filter(BookingPolicy.business_id == business_id).first()
        return policy or BookingPolicy.defaults(business_id)

    @staticmethod
    def get_booking_policy(db: Session, business_id: UUID) -> BookingPolicy:
        ScheduleService.get_business(db, business_id)

        policy = db.query(BookingPolicy).filter(BookingPolicy.business_id == business_id).first()
        if policy:
            return policy

        logger.info(f"Initializing default booking policy for business {business_id}")
        policy = BookingPolicy(business_id=business_id, **DEFAULT_POLICY)
        db.add(policy)
        db.commit()
        db.refresh(policy)
        return policy

    @staticmethod
    def update_booking_policy(
            db: Session,
            business_id: UUID,
            data: BookingPolicyUpdateRequest
    ) -> BookingPolicy:
        validate_policy_data(data)
        ScheduleService.get_business(db, business_id)

        policy = db.query(BookingPolicy).filter(BookingPolicy.business_id == business_id).first()
        if policy is None:
            policy = BookingPolicy(business_id=business_id)
            db.add(policy)

        policy.default_duration = data.default_duration
        policy.buffer_time = data.buffer_time
        policy.max_advance_booking_days = data.max_advance_booking_days
        policy.min_advance_booking_hours = data.min_advance_booking_hours
        policy.allow_same_day_booking = data.allow_same_day_booking

        db.commit()
        db.refresh(policy)
        logger.info(f"Updated booking policy for business {business_id}")
        return policy
