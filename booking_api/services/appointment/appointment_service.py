# ============================================================================
# booking_api/services/appointment/appointment_service.py
# ============================================================================
"""Service for booking appointments and driving their lifecycle"""
import logging
from datetime import date, time
from typing import Any, Callable, Dict, List, Optional, TypeVar
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from booking_api.config.settings import Settings, get_settings
from booking_api.core.clock import Clock
from booking_api.core.exceptions import (
    ConcurrencyError,
    NotFoundError,
    SchedulingError,
    ValidationError,
)
from booking_api.models.appointment import Appointment, AppointmentStatus
from booking_api.models.business import Business
from booking_api.schemas.appointment import AppointmentCreateRequest, AppointmentRescheduleRequest
from booking_api.services.availability.availability_service import (
    AvailabilityService,
    BookingContext,
    validate_duration,
)
from booking_api.services.scheduling.conflicts import AppointmentConflict, find_conflicts
from booking_api.services.scheduling import state_machine
from booking_api.utils.time_utils import format_time, parse_time

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_NOTES_LENGTH = 500

# SQLSTATEs raised when PostgreSQL aborts a transaction that lost a race
_LOCK_FAILURE_CODES = {"40001", "40P01", "55P03"}

RESCHEDULABLE_STATUSES = (
    AppointmentStatus.PENDING.value,
    AppointmentStatus.CONFIRMED.value,
)


def _is_lock_failure(exc: OperationalError) -> bool:
    pgcode = getattr(exc.orig, "pgcode", None)
    if pgcode in _LOCK_FAILURE_CODES:
        return True
    return "database is locked" in str(exc.orig).lower()


def _parse_start(value: str) -> time:
    try:
        return parse_time(value)
    except ValueError:
        raise ValidationError("Invalid start time format (use HH:MM)", {"start_time": value})


class AppointmentService:
    """Creates, reschedules and transitions appointments"""

    def __init__(self, db: Session, clock: Clock, settings: Optional[Settings] = None):
        self.db = db
        self.clock = clock
        self.settings = settings or get_settings()
        self.availability = AvailabilityService(db, clock, self.settings)

    # ------------------------------------------------------------------
    # Atomic booking unit
    # ------------------------------------------------------------------

    def _lock_business(self, business_id: UUID) -> None:
        """
        Serialize bookings per tenant.

        The UPDATE row-locks the business on PostgreSQL and takes the write
        lock on SQLite until the transaction ends.
        """
        self.db.execute(
            update(Business)
            .where(Business.id == business_id)
            .values(booking_version=Business.booking_version + 1)
            .execution_options(synchronize_session=False)
        )

    def _verify_no_overlap(self, ctx: BookingContext, appointment: Appointment) -> None:
        """Re-read the date after the write; any other occupant means we lost a race."""
        others = self.availability.occupying_appointments(
            ctx.business_id, appointment.date, exclude_appointment_id=appointment.id
        )
        clashes = find_conflicts(others, appointment.start_time, appointment.duration, ctx.policy.buffer_time)
        if clashes:
            raise ConcurrencyError(
                "Another booking claimed this time",
                conflicting=[appt.summary() for appt in clashes],
            )

    def _lost_race(
            self,
            message: str,
            alternatives: Optional[Callable[[], AppointmentConflict]],
            conflicting: Optional[List[Dict[str, Any]]] = None
    ) -> ConcurrencyError:
        """ConcurrencyError for the losing request, with fresh suggestions when it can compute them"""
        suggested: List[str] = []
        if alternatives is not None:
            payload = alternatives().to_dict()
            suggested = payload["suggested_times"]
            conflicting = conflicting or payload["conflicting_appointments"]
        return ConcurrencyError(message, conflicting=conflicting, suggested_times=suggested)

    def _run_atomic(
            self,
            operation: Callable[[], T],
            description: str,
            alternatives: Optional[Callable[[], AppointmentConflict]] = None
    ) -> T:
        """
        Run lock -> validate -> write -> verify -> commit, retrying once on a lost race.

        ``alternatives`` re-checks the requested slot after a final loss so the
        ConcurrencyError carries suggested times.
        """
        retries = self.settings.BOOKING_RETRY_ATTEMPTS
        attempt = 0

        while True:
            try:
                result = operation()
                self.db.commit()
                return result
            except ConcurrencyError as e:
                self.db.rollback()
                if attempt >= retries:
                    logger.warning(f"Concurrent booking lost for {description}, giving up")
                    raise self._lost_race(str(e), alternatives, e.conflicting) from e
            except OperationalError as e:
                self.db.rollback()
                if not _is_lock_failure(e):
                    logger.exception(f"Database failure while booking {description}")
                    raise
                if attempt >= retries:
                    logger.warning(f"Booking lock contention for {description}, giving up")
                    raise self._lost_race("The calendar is busy, please try again", alternatives) from e
            except SchedulingError:
                self.db.rollback()
                raise
            except SQLAlchemyError:
                self.db.rollback()
                logger.exception(f"Database failure while booking {description}")
                raise

            attempt += 1
            logger.warning(f"Concurrent booking detected for {description}, retrying ({attempt}/{retries})")

    # ------------------------------------------------------------------
    # Booking
    # ------------------------------------------------------------------

    def create_appointment(self, business_id: UUID, request: AppointmentCreateRequest) -> Appointment:
        """
        Book an appointment in PENDING status.

        Raises:
            ValidationError, NotFoundError, ClosedDayError, OutsideHoursError,
            WindowError, ConflictError (ConcurrencyError when a race is lost twice)
        """
        start = _parse_start(request.start_time)
        if request.duration is not None:
            validate_duration(request.duration)
        if request.notes and len(request.notes) > MAX_NOTES_LENGTH:
            raise ValidationError(f"Notes cannot exceed {MAX_NOTES_LENGTH} characters")

        def operation() -> Appointment:
            self._lock_business(business_id)
            ctx = self.availability.load_context(business_id)
            service = self.availability.get_service(business_id, request.service_id)
            duration = self.availability.resolve_duration(ctx, request.duration, service)

            _, end = self.availability.ensure_bookable(ctx, request.date, start, duration)

            appointment = Appointment(
                business_id=business_id,
                client_id=request.client_id,
                service_id=service.id,
                date=request.date,
                start_time=start,
                end_time=end,
                duration=duration,
                status=AppointmentStatus.PENDING.value,
                price=service.price,
                notes=request.notes,
            )
            self.db.add(appointment)
            self.db.flush()

            self._verify_no_overlap(ctx, appointment)
            return appointment

        def alternatives() -> AppointmentConflict:
            ctx = self.availability.load_context(business_id)
            service = self.availability.get_service(business_id, request.service_id)
            duration = self.availability.resolve_duration(ctx, request.duration, service)
            return self.availability.check_conflict(business_id, request.date, start, duration)

        appointment = self._run_atomic(
            operation, f"business {business_id} on {request.date} at {request.start_time}", alternatives
        )
        self.db.refresh(appointment)

        logger.info(
            f"Created appointment {appointment.id} for business {business_id} "
            f"on {appointment.date} {format_time(appointment.start_time)}-{format_time(appointment.end_time)}"
        )
        return appointment

    def reschedule(
            self,
            business_id: UUID,
            appointment_id: UUID,
            request: AppointmentRescheduleRequest
    ) -> Appointment:
        """Move a PENDING/CONFIRMED appointment, ignoring its own current slot"""
        start = _parse_start(request.start_time)
        if request.duration is not None:
            validate_duration(request.duration)

        def operation() -> Appointment:
            self._lock_business(business_id)
            ctx = self.availability.load_context(business_id)
            appointment = self.get_appointment(business_id, appointment_id)

            if appointment.status not in RESCHEDULABLE_STATUSES:
                raise ValidationError(
                    f"Appointments in status {appointment.status} cannot be rescheduled",
                    {"status": appointment.status},
                )

            target_date: date = request.date or appointment.date
            duration = request.duration or appointment.duration

            _, end = self.availability.ensure_bookable(
                ctx, target_date, start, duration, exclude_appointment_id=appointment.id
            )

            appointment.date = target_date
            appointment.start_time = start
            appointment.end_time = end
            appointment.duration = duration
            self.db.flush()

            self._verify_no_overlap(ctx, appointment)
            return appointment

        def alternatives() -> AppointmentConflict:
            appointment = self.get_appointment(business_id, appointment_id)
            return self.availability.check_conflict(
                business_id,
                request.date or appointment.date,
                start,
                request.duration or appointment.duration,
                exclude_appointment_id=appointment.id,
            )

        appointment = self._run_atomic(operation, f"appointment {appointment_id}", alternatives)
        self.db.refresh(appointment)

        logger.info(
            f"Rescheduled appointment {appointment.id} to {appointment.date} {format_time(appointment.start_time)}"
        )
        return appointment

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def get_appointment(self, business_id: UUID, appointment_id: UUID) -> Appointment:
        appointment = self.db.query(Appointment).filter(
            Appointment.id == appointment_id,
            Appointment.business_id == business_id
        ).first()
        if not appointment:
            raise NotFoundError("Appointment not found", {"appointment_id": str(appointment_id)})
        return appointment

    def _transition(
            self,
            business_id: UUID,
            appointment_id: UUID,
            *targets: AppointmentStatus,
            reason: Optional[str] = None
    ) -> Appointment:
        appointment = self.get_appointment(business_id, appointment_id)
        previous = appointment.status
        now = self.clock.now_utc()

        try:
            for target in targets:
                state_machine.transition(appointment, target, now, reason)
            self.db.commit()
        except SchedulingError:
            self.db.rollback()
            raise

        self.db.refresh(appointment)
        logger.info(f"Appointment {appointment.id} moved from {previous} to {appointment.status}")
        return appointment

    def confirm(self, business_id: UUID, appointment_id: UUID) -> Appointment:
        return self._transition(business_id, appointment_id, AppointmentStatus.CONFIRMED)

    def cancel(self, business_id: UUID, appointment_id: UUID, reason: Optional[str] = None) -> Appointment:
        return self._transition(business_id, appointment_id, AppointmentStatus.CANCELLED, reason=reason)

    def start(self, business_id: UUID, appointment_id: UUID) -> Appointment:
        return self._transition(business_id, appointment_id, AppointmentStatus.IN_PROGRESS)

    def complete(self, business_id: UUID, appointment_id: UUID) -> Appointment:
        """IN_PROGRESS -> COMPLETED; a CONFIRMED appointment passes through IN_PROGRESS."""
        appointment = self.get_appointment(business_id, appointment_id)
        if appointment.status == AppointmentStatus.CONFIRMED.value:
            return self._transition(
                business_id, appointment_id, AppointmentStatus.IN_PROGRESS, AppointmentStatus.COMPLETED
            )
        return self._transition(business_id, appointment_id, AppointmentStatus.COMPLETED)

    def mark_no_show(self, business_id: UUID, appointment_id: UUID) -> Appointment:
        return self._transition(business_id, appointment_id, AppointmentStatus.NO_SHOW)
