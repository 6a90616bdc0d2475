# booking_api/services/availability/availability_service.py
"""
Availability orchestration: resolves a date's window, generates slots, and
marks each one against the booking window and existing appointments.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from booking_api.config.settings import Settings, get_settings
from booking_api.core.clock import Clock
from booking_api.core.exceptions import (
    ClosedDayError,
    ConflictError,
    NotFoundError,
    OutsideHoursError,
    ValidationError,
    WindowError,
)
from booking_api.models.appointment import Appointment, OCCUPYING_STATUSES
from booking_api.models.booking_policy import BookingPolicy
from booking_api.models.business import Business, BusinessHours
from booking_api.models.service import Service
from booking_api.services.schedule.schedule_service import ScheduleService
from booking_api.services.scheduling.booking_window import validate_booking_window
from booking_api.services.scheduling.calendar_rules import EffectiveWindow, resolve_effective_window
from booking_api.services.scheduling.conflicts import AppointmentConflict, check_conflict, find_conflicts
from booking_api.services.scheduling.slots import generate_slot_starts
from booking_api.utils.time_utils import MINUTES_PER_DAY, combine, format_time, minutes_to_time, time_to_minutes

logger = logging.getLogger(__name__)

MIN_DURATION = 15
MAX_DURATION = 480

SLOT_CONFLICT = "conflict"


@dataclass
class BookingContext:
    """Tenant configuration fetched once per request and passed explicitly"""
    business: Business
    policy: BookingPolicy
    weekly_hours: List[BusinessHours]
    now: datetime  # tenant-local wall clock

    @property
    def business_id(self) -> UUID:
        return self.business.id


@dataclass(frozen=True)
class AvailableSlot:
    time: time
    available: bool
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"time": format_time(self.time), "available": self.available, "reason": self.reason}


@dataclass
class DayAvailability:
    window: EffectiveWindow
    duration: int
    slots: List[AvailableSlot] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.window.date.isoformat(),
            "is_open": self.window.is_open,
            "open_time": format_time(self.window.open_time),
            "close_time": format_time(self.window.close_time),
            "closed_reason": self.window.closed_reason,
            "override_reason": self.window.override_reason,
            "duration": self.duration,
            "slots": [slot.to_dict() for slot in self.slots],
        }


def validate_duration(duration: int) -> int:
    if duration is None or duration < MIN_DURATION or duration > MAX_DURATION:
        raise ValidationError(
            f"Duration must be between {MIN_DURATION} and {MAX_DURATION} minutes",
            {"duration": duration},
        )
    return duration


def end_of(start: time, duration: int) -> time:
    """End time of an appointment that must finish on the same day"""
    end_minutes = time_to_minutes(start) + duration
    if end_minutes >= MINUTES_PER_DAY:
        raise OutsideHoursError(
            "Appointment must end on the same day",
            {"start_time": format_time(start), "duration": duration},
        )
    return minutes_to_time(end_minutes)


class AvailabilityService:
    """Answers "what is free on date D" and "can S/duration be booked"."""

    def __init__(self, db: Session, clock: Clock, settings: Optional[Settings] = None):
        self.db = db
        self.clock = clock
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Data loading
    # ------------------------------------------------------------------

    def load_context(self, business_id: UUID) -> BookingContext:
        business = ScheduleService.get_business(self.db, business_id)
        return BookingContext(
            business=business,
            policy=ScheduleService.load_booking_policy(self.db, business_id),
            weekly_hours=ScheduleService.load_business_hours(self.db, business_id),
            now=self.clock.local_now(business.timezone or self.settings.DEFAULT_TIMEZONE),
        )

    def resolve_window(self, ctx: BookingContext, target_date: date) -> EffectiveWindow:
        override = ScheduleService.get_override(self.db, ctx.business_id, target_date)
        return resolve_effective_window(ctx.weekly_hours, override, target_date)

    def occupying_appointments(
            self,
            business_id: UUID,
            target_date: date,
            exclude_appointment_id: Optional[UUID] = None
    ) -> List[Appointment]:
        query = self.db.query(Appointment).filter(
            Appointment.business_id == business_id,
            Appointment.date == target_date,
            Appointment.status.in_(OCCUPYING_STATUSES)
        )
        if exclude_appointment_id is not None:
            query = query.filter(Appointment.id != exclude_appointment_id)
        return query.order_by(Appointment.start_time.asc()).all()

    def resolve_duration(
            self,
            ctx: BookingContext,
            duration: Optional[int] = None,
            service: Optional[Service] = None
    ) -> int:
        """Explicit duration, else the service's, else the policy default"""
        if duration is None and service is not None and service.duration:
            duration = service.duration
        if duration is None:
            duration = ctx.policy.default_duration
        return validate_duration(duration)

    def get_service(self, business_id: UUID, service_id: UUID) -> Service:
        service = self.db.query(Service).filter(
            Service.id == service_id,
            Service.business_id == business_id,
            Service.is_active == True
        ).first()
        if not service:
            raise NotFoundError("Service not found", {"service_id": str(service_id)})
        return service

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _is_bookable_time(self, ctx: BookingContext, target_date: date):
        def is_allowed(candidate: time) -> bool:
            return validate_booking_window(ctx.policy, ctx.now, combine(target_date, candidate)).is_valid
        return is_allowed

    def day_availability(
            self,
            ctx: BookingContext,
            target_date: date,
            duration: int
    ) -> DayAvailability:
        window = self.resolve_window(ctx, target_date)
        result = DayAvailability(window=window, duration=duration)
        if not window.is_open:
            return result

        existing = self.occupying_appointments(ctx.business_id, target_date)
        buffer = ctx.policy.buffer_time

        for candidate in generate_slot_starts(window.open_time, window.close_time, duration, duration):
            check = validate_booking_window(ctx.policy, ctx.now, combine(target_date, candidate))
            if not check.is_valid:
                result.slots.append(AvailableSlot(candidate, False, check.reason))
            elif find_conflicts(existing, candidate, duration, buffer):
                result.slots.append(AvailableSlot(candidate, False, SLOT_CONFLICT))
            else:
                result.slots.append(AvailableSlot(candidate, True))

        return result

    def get_available_slots(
            self,
            business_id: UUID,
            target_date: date,
            duration: Optional[int] = None,
            service_id: Optional[UUID] = None
    ) -> DayAvailability:
        """
        Slots for one date, each marked available or not with a reason.

        A closed date yields no slots and carries the closed reason.
        """
        ctx = self.load_context(business_id)
        service = self.get_service(business_id, service_id) if service_id else None
        duration = self.resolve_duration(ctx, duration, service)
        return self.day_availability(ctx, target_date, duration)

    def get_weekly_availability(
            self,
            business_id: UUID,
            start_date: date,
            days: Optional[int] = None,
            duration: Optional[int] = None
    ) -> List[DayAvailability]:
        days = days or self.settings.WEEKLY_AVAILABILITY_DAYS
        ctx = self.load_context(business_id)
        duration = self.resolve_duration(ctx, duration)
        return [
            self.day_availability(ctx, start_date + timedelta(days=offset), duration)
            for offset in range(days)
        ]

    def check_conflict(
            self,
            business_id: UUID,
            target_date: date,
            start: time,
            duration: Optional[int] = None,
            exclude_appointment_id: Optional[UUID] = None
    ) -> AppointmentConflict:
        ctx = self.load_context(business_id)
        duration = self.resolve_duration(ctx, duration)
        window = self.resolve_window(ctx, target_date)
        return self._check(ctx, window, target_date, start, duration, exclude_appointment_id)

    def _check(
            self,
            ctx: BookingContext,
            window: EffectiveWindow,
            target_date: date,
            start: time,
            duration: int,
            exclude_appointment_id: Optional[UUID]
    ) -> AppointmentConflict:
        existing = self.occupying_appointments(ctx.business_id, target_date)
        return check_conflict(
            existing,
            start,
            duration,
            ctx.policy.buffer_time,
            exclude_appointment_id=exclude_appointment_id,
            open_time=window.open_time,
            close_time=window.close_time,
            granularity=duration,
            limit=self.settings.MAX_SUGGESTED_ALTERNATIVES,
            is_allowed=self._is_bookable_time(ctx, target_date),
        )

    # ------------------------------------------------------------------
    # Booking validation (runs inside the booking transaction)
    # ------------------------------------------------------------------

    def ensure_bookable(
            self,
            ctx: BookingContext,
            target_date: date,
            start: time,
            duration: int,
            exclude_appointment_id: Optional[UUID] = None
    ) -> Tuple[EffectiveWindow, time]:
        """
        Raise the first typed error that blocks booking [start, start + duration).

        Returns:
            (window, end_time)
        """
        window = self.resolve_window(ctx, target_date)
        if not window.is_open:
            message = "The business is closed on this date"
            if window.override_reason:
                message = f"{message}: {window.override_reason}"
            raise ClosedDayError(message, window.closed_reason, {"date": target_date.isoformat()})

        end = end_of(start, duration)
        if not window.contains(start, end):
            raise OutsideHoursError(
                f"Appointment must be between {format_time(window.open_time)} and {format_time(window.close_time)}",
                {
                    "open_time": format_time(window.open_time),
                    "close_time": format_time(window.close_time),
                },
            )

        check = validate_booking_window(ctx.policy, ctx.now, combine(target_date, start))
        if not check.is_valid:
            raise WindowError(check.message, check.reason)

        conflict = self._check(ctx, window, target_date, start, duration, exclude_appointment_id)
        if conflict.has_conflict:
            logger.info(
                f"Booking conflict for business {ctx.business_id} on {target_date} at {format_time(start)}"
            )
            payload = conflict.to_dict()
            raise ConflictError(
                "The requested time overlaps an existing appointment",
                conflicting=payload["conflicting_appointments"],
                suggested_times=payload["suggested_times"],
            )

        return window, end
