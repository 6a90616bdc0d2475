"""
Tests for weekly hours, special hours and booking policy management.

Run with: pytest tests/test_schedule_service.py -v
"""
import uuid
from datetime import date, time

import pytest

from booking_api.core.exceptions import NotFoundError, ValidationError
from booking_api.schemas.schedule import (
    BookingPolicyUpdateRequest,
    BusinessHoursEntry,
    SpecialHoursCreateRequest,
    SpecialHoursUpdateRequest,
)
from booking_api.services.schedule.schedule_service import ScheduleService

CHRISTMAS = date(2026, 12, 25)


# ============================================================================
# BUSINESS HOURS
# ============================================================================

class TestBusinessHours:

    def test_defaults_created_on_first_read(self, db, bare_business):
        """Mon-Fri 09:00-18:00, weekend closed."""
        hours = ScheduleService.get_business_hours(db, bare_business.id)
        assert len(hours) == 7
        by_day = {h.day_of_week: h for h in hours}
        assert not by_day[0].is_open and not by_day[6].is_open
        assert by_day[1].open_time == time(9, 0)
        assert by_day[5].close_time == time(18, 0)

    def test_existing_hours_are_returned_untouched(self, db, business):
        hours = ScheduleService.get_business_hours(db, business.id)
        assert hours[1].close_time == time(17, 0)

    def test_day_name_follows_sunday_first_numbering(self, db, business):
        hours = ScheduleService.get_business_hours(db, business.id)
        assert [h.to_dict()["day_name"] for h in hours][:2] == ["Sunday", "Monday"]

    def test_upsert_single_day(self, db, business):
        entries = [BusinessHoursEntry(day_of_week=6, is_open=True, open_time="10:00", close_time="14:00")]
        hours = ScheduleService.update_business_hours(db, business.id, entries)
        assert len(hours) == 7
        saturday = hours[6]
        assert saturday.is_open
        assert (saturday.open_time, saturday.close_time) == (time(10, 0), time(14, 0))

    def test_first_update_keeps_the_default_week(self, db, bare_business):
        """A single-day change on a business with nothing stored must not close the other days"""
        entries = [BusinessHoursEntry(day_of_week=6, is_open=True, open_time="10:00", close_time="14:00")]
        hours = ScheduleService.update_business_hours(db, bare_business.id, entries)

        assert len(hours) == 7
        assert [h.is_open for h in hours] == [False, True, True, True, True, True, True]
        assert (hours[2].open_time, hours[2].close_time) == (time(9, 0), time(18, 0))
        assert (hours[6].open_time, hours[6].close_time) == (time(10, 0), time(14, 0))
        assert len(ScheduleService.get_business_hours(db, bare_business.id)) == 7

    def test_first_update_leaves_slots_on_untouched_days(self, db, bare_business, availability_service):
        tuesday = date(2026, 11, 3)
        before = availability_service.get_available_slots(bare_business.id, tuesday)

        entries = [BusinessHoursEntry(day_of_week=6, is_open=True, open_time="10:00", close_time="14:00")]
        ScheduleService.update_business_hours(db, bare_business.id, entries)

        after = availability_service.get_available_slots(bare_business.id, tuesday)
        assert len(after.slots) == len(before.slots) == 18

    def test_closing_a_day_clears_its_times(self, db, business):
        entries = [BusinessHoursEntry(day_of_week=1, is_open=False, open_time="09:00", close_time="17:00")]
        monday = ScheduleService.update_business_hours(db, business.id, entries)[1]
        assert not monday.is_open
        assert monday.open_time is None

    def test_open_must_precede_close(self, db, business):
        entries = [BusinessHoursEntry(day_of_week=1, is_open=True, open_time="17:00", close_time="09:00")]
        with pytest.raises(ValidationError):
            ScheduleService.update_business_hours(db, business.id, entries)
        assert ScheduleService.list_business_hours(db, business.id)[1].open_time == time(9, 0)

    def test_open_day_needs_both_times(self, db, business):
        entries = [BusinessHoursEntry(day_of_week=1, is_open=True, open_time="09:00")]
        with pytest.raises(ValidationError):
            ScheduleService.update_business_hours(db, business.id, entries)

    def test_duplicate_days_are_rejected(self, db, business):
        entries = [
            BusinessHoursEntry(day_of_week=2, is_open=False),
            BusinessHoursEntry(day_of_week=2, is_open=False),
        ]
        with pytest.raises(ValidationError):
            ScheduleService.update_business_hours(db, business.id, entries)

    def test_unknown_business(self, db):
        with pytest.raises(NotFoundError):
            ScheduleService.get_business_hours(db, uuid.uuid4())


# ============================================================================
# SPECIAL HOURS
# ============================================================================

class TestSpecialHours:

    def test_create_closed_override(self, db, business):
        override = ScheduleService.create_special_hour(
            db, business.id, SpecialHoursCreateRequest(date=CHRISTMAS, is_open=False, reason="Holiday")
        )
        assert override.id is not None
        assert override.open_time is None
        assert override.reason == "Holiday"

    def test_second_override_for_same_date_is_rejected(self, db, business):
        data = SpecialHoursCreateRequest(date=CHRISTMAS, is_open=False)
        ScheduleService.create_special_hour(db, business.id, data)
        with pytest.raises(ValidationError):
            ScheduleService.create_special_hour(db, business.id, data)

    def test_open_override_needs_a_window(self, db, business):
        with pytest.raises(ValidationError):
            ScheduleService.create_special_hour(
                db, business.id, SpecialHoursCreateRequest(date=CHRISTMAS, is_open=True, open_time="10:00")
            )

    def test_update_override(self, db, business):
        override = ScheduleService.create_special_hour(
            db, business.id, SpecialHoursCreateRequest(date=CHRISTMAS, is_open=False, reason="Holiday")
        )
        updated = ScheduleService.update_special_hour(
            db, business.id, override.id,
            SpecialHoursUpdateRequest(is_open=True, open_time="10:00", close_time="13:00", reason="Half day")
        )
        assert updated.is_open
        assert updated.close_time == time(13, 0)
        assert updated.reason == "Half day"

    def test_update_replaces_reason_and_description(self, db, business):
        override = ScheduleService.create_special_hour(
            db, business.id,
            SpecialHoursCreateRequest(date=CHRISTMAS, is_open=False, reason="Holiday", description="Closed all day")
        )
        updated = ScheduleService.update_special_hour(
            db, business.id, override.id, SpecialHoursUpdateRequest(is_open=False)
        )
        assert updated.reason is None
        assert updated.description is None

    def test_racing_create_for_same_date_is_a_validation_error(self, db, business, monkeypatch):
        """The unique (business, date) constraint catches a create the lookup missed"""
        data = SpecialHoursCreateRequest(date=CHRISTMAS, is_open=False, reason="Holiday")
        ScheduleService.create_special_hour(db, business.id, data)

        monkeypatch.setattr(ScheduleService, "get_override", staticmethod(lambda *args: None))
        with pytest.raises(ValidationError):
            ScheduleService.create_special_hour(db, business.id, data)

        monkeypatch.undo()
        assert len(ScheduleService.list_special_hours(db, business.id)) == 1

    def test_update_and_delete_unknown_override(self, db, business):
        with pytest.raises(NotFoundError):
            ScheduleService.update_special_hour(db, business.id, 999, SpecialHoursUpdateRequest(is_open=False))
        with pytest.raises(NotFoundError):
            ScheduleService.delete_special_hour(db, business.id, 999)

    def test_override_of_another_business_is_not_found(self, db, business, bare_business):
        override = ScheduleService.create_special_hour(
            db, bare_business.id, SpecialHoursCreateRequest(date=CHRISTMAS, is_open=False)
        )
        with pytest.raises(NotFoundError):
            ScheduleService.delete_special_hour(db, business.id, override.id)

    def test_delete_override(self, db, business):
        override = ScheduleService.create_special_hour(
            db, business.id, SpecialHoursCreateRequest(date=CHRISTMAS, is_open=False)
        )
        ScheduleService.delete_special_hour(db, business.id, override.id)
        assert ScheduleService.get_override(db, business.id, CHRISTMAS) is None

    def test_list_by_inclusive_range(self, db, business):
        for day in (date(2026, 12, 24), CHRISTMAS, date(2026, 12, 31)):
            ScheduleService.create_special_hour(db, business.id, SpecialHoursCreateRequest(date=day, is_open=False))

        listed = ScheduleService.list_special_hours(db, business.id, date(2026, 12, 24), CHRISTMAS)
        assert [o.date for o in listed] == [date(2026, 12, 24), CHRISTMAS]

    def test_inverted_range_is_rejected(self, db, business):
        with pytest.raises(ValidationError):
            ScheduleService.list_special_hours(db, business.id, CHRISTMAS, date(2026, 12, 1))


# ============================================================================
# BOOKING POLICY
# ============================================================================

class TestBookingPolicy:

    def test_defaults_created_on_first_read(self, db, bare_business):
        policy = ScheduleService.get_booking_policy(db, bare_business.id)
        assert policy.id is not None
        assert policy.to_dict() == {
            "default_duration": 30,
            "buffer_time": 5,
            "max_advance_booking_days": 30,
            "min_advance_booking_hours": 2,
            "allow_same_day_booking": True,
        }

    def test_load_does_not_persist_defaults(self, db, bare_business):
        policy = ScheduleService.load_booking_policy(db, bare_business.id)
        assert policy.buffer_time == 5
        assert policy.id is None

    def test_update_policy(self, db, business):
        data = BookingPolicyUpdateRequest(
            default_duration=45,
            buffer_time=0,
            max_advance_booking_days=60,
            min_advance_booking_hours=24,
            allow_same_day_booking=False,
        )
        policy = ScheduleService.update_booking_policy(db, business.id, data)
        assert policy.default_duration == 45
        assert not policy.allow_same_day_booking

    @pytest.mark.parametrize("field,value", [
        ("default_duration", 10),
        ("default_duration", 481),
        ("buffer_time", 61),
        ("max_advance_booking_days", 366),
        ("min_advance_booking_hours", 169),
        ("buffer_time", -1),
    ])
    def test_out_of_bounds_values_are_rejected(self, db, business, field, value):
        values = {
            "default_duration": 30,
            "buffer_time": 10,
            "max_advance_booking_days": 30,
            "min_advance_booking_hours": 2,
        }
        values[field] = value
        with pytest.raises(ValidationError):
            ScheduleService.update_booking_policy(db, business.id, BookingPolicyUpdateRequest(**values))
