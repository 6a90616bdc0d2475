"""
Tests for slot listing, weekly summaries and conflict checks against the store.

Run with: pytest tests/test_availability_service.py -v
"""
import uuid
from datetime import date, datetime, time

import pytest

from booking_api.core.clock import FixedClock
from booking_api.core.exceptions import NotFoundError, ValidationError
from booking_api.schemas.schedule import SpecialHoursCreateRequest
from booking_api.services.availability.availability_service import AvailabilityService
from booking_api.services.schedule.schedule_service import ScheduleService

MONDAY = date(2026, 11, 2)
TUESDAY = date(2026, 11, 3)
SATURDAY = date(2026, 11, 7)
SUNDAY = date(2026, 11, 8)


def slot_map(day):
    return {slot["time"]: slot for slot in day.to_dict()["slots"]}


# ============================================================================
# DAILY SLOTS
# ============================================================================

class TestDailySlots:

    def test_open_day_lists_every_slot(self, availability_service, business):
        day = availability_service.get_available_slots(business.id, TUESDAY)
        assert len(day.slots) == 16
        assert all(slot.available for slot in day.slots)
        assert day.duration == 30

    def test_closed_weekday_has_no_slots(self, availability_service, business):
        day = availability_service.get_available_slots(business.id, SUNDAY)
        assert day.slots == []
        assert not day.window.is_open
        assert day.to_dict()["closed_reason"] == "weekly_closed"

    def test_closed_override_wins_over_weekly_hours(self, db, availability_service, business):
        ScheduleService.create_special_hour(
            db, business.id, SpecialHoursCreateRequest(date=TUESDAY, is_open=False, reason="Training")
        )
        day = availability_service.get_available_slots(business.id, TUESDAY)
        assert day.slots == []
        assert day.window.closed_reason == "override_closed"
        assert day.window.override_reason == "Training"

    def test_open_override_on_closed_day(self, db, availability_service, business):
        ScheduleService.create_special_hour(
            db, business.id,
            SpecialHoursCreateRequest(date=SATURDAY, is_open=True, open_time="10:00", close_time="12:00")
        )
        day = availability_service.get_available_slots(business.id, SATURDAY)
        assert [s.time for s in day.slots] == [time(10, 0), time(10, 30), time(11, 0), time(11, 30)]

    def test_minimum_notice_applies_today(self, availability_service, business):
        """Now is 08:00 with 2 hours notice, so the day starts at 10:00."""
        slots = slot_map(availability_service.get_available_slots(business.id, MONDAY))
        assert slots["09:00"]["available"] is False
        assert slots["09:30"]["reason"] == "min_advance_not_met"
        assert slots["10:00"]["available"] is True

    def test_beyond_max_advance_is_unavailable(self, availability_service, business):
        day = availability_service.get_available_slots(business.id, date(2026, 12, 3))
        assert day.slots
        assert {s.reason for s in day.slots} == {"max_advance_exceeded"}

    def test_booked_time_and_buffer_are_unavailable(self, availability_service, business, book):
        book(TUESDAY, "10:00")
        slots = slot_map(availability_service.get_available_slots(business.id, TUESDAY))
        for taken in ("09:30", "10:00", "10:30"):
            assert slots[taken]["available"] is False
            assert slots[taken]["reason"] == "conflict"
        assert slots["09:00"]["available"] is True
        assert slots["11:00"]["available"] is True

    def test_cancelling_frees_the_slot(self, appointment_service, availability_service, business, book):
        appt = book(TUESDAY, "10:00")
        appointment_service.cancel(business.id, appt.id, "Client cancelled")
        slots = slot_map(availability_service.get_available_slots(business.id, TUESDAY))
        assert slots["10:00"]["available"] is True

    def test_service_duration_drives_slot_length(self, availability_service, business, long_service):
        day = availability_service.get_available_slots(business.id, TUESDAY, service_id=long_service.id)
        assert day.duration == 60
        assert len(day.slots) == 8

    def test_explicit_duration_is_validated(self, availability_service, business):
        with pytest.raises(ValidationError):
            availability_service.get_available_slots(business.id, TUESDAY, duration=10)

    def test_unknown_service(self, availability_service, business):
        with pytest.raises(NotFoundError):
            availability_service.get_available_slots(business.id, TUESDAY, service_id=uuid.uuid4())

    def test_defaults_are_used_without_being_stored(self, db, availability_service, bare_business):
        """Nothing configured: Mon-Fri 09:00-18:00 and 30 minute slots, nothing written."""
        day = availability_service.get_available_slots(bare_business.id, TUESDAY)
        assert len(day.slots) == 18
        assert day.slots[-1].time == time(17, 30)
        assert availability_service.get_available_slots(bare_business.id, SUNDAY).slots == []
        assert ScheduleService.list_business_hours(db, bare_business.id) == []


class TestTenantTimezone:

    def test_now_is_read_in_the_business_timezone(self, db, business):
        """15:00 UTC is 10:00 in New York, so with 2 hours notice 12:00 opens."""
        business.timezone = "America/New_York"
        db.commit()

        service = AvailabilityService(db, FixedClock(datetime(2026, 11, 2, 15, 0)))
        slots = slot_map(service.get_available_slots(business.id, MONDAY))
        assert slots["11:30"]["available"] is False
        assert slots["12:00"]["available"] is True


# ============================================================================
# WEEKLY SUMMARY
# ============================================================================

def test_weekly_availability_covers_seven_days(availability_service, business):
    days = availability_service.get_weekly_availability(business.id, MONDAY)
    assert [d.window.date for d in days][0] == MONDAY
    assert len(days) == 7
    assert [d.window.is_open for d in days] == [True, True, True, True, True, False, False]


def test_weekly_availability_custom_length(availability_service, business):
    assert len(availability_service.get_weekly_availability(business.id, MONDAY, days=3)) == 3


# ============================================================================
# CONFLICT CHECK
# ============================================================================

class TestCheckConflict:

    def test_free_time(self, availability_service, business):
        result = availability_service.check_conflict(business.id, TUESDAY, time(14, 0))
        assert not result.has_conflict

    def test_conflict_with_suggestions(self, availability_service, business, book):
        book(TUESDAY, "10:00")
        result = availability_service.check_conflict(business.id, TUESDAY, time(10, 0)).to_dict()
        assert result["has_conflict"] is True
        assert len(result["conflicting_appointments"]) == 1
        assert result["suggested_times"] == ["09:00", "11:00", "11:30"]

    def test_excluding_the_appointment_itself(self, availability_service, business, book):
        appt = book(TUESDAY, "10:00")
        result = availability_service.check_conflict(
            business.id, TUESDAY, time(10, 15), exclude_appointment_id=appt.id
        )
        assert not result.has_conflict
