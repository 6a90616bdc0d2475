from datetime import date, time

import pytest

from booking_api.config.settings import get_settings
from booking_api.utils.time_utils import day_name, day_of_week, format_time, minutes_to_time, parse_time


def test_sunday_is_day_zero():
    assert day_of_week(date(2026, 11, 8)) == 0
    assert day_of_week(date(2026, 11, 7)) == 6
    assert day_of_week(date(2026, 11, 2)) == 1


def test_parse_and_format():
    assert parse_time("9:05") == time(9, 5)
    assert format_time(parse_time("23:59")) == "23:59"
    assert format_time(None) is None


@pytest.mark.parametrize("value", ["24:00", "12:60", "noon", ""])
def test_rejects_malformed_times(value):
    with pytest.raises(ValueError):
        parse_time(value)


def test_minutes_must_stay_within_a_day():
    assert minutes_to_time(0) == time(0, 0)
    with pytest.raises(ValueError):
        minutes_to_time(24 * 60)


def test_day_names_follow_locale(monkeypatch):
    assert day_name(1) == "Monday"
    assert day_name(1, "es") == "Lunes"
    assert day_name(6, "ES") == "Sábado"
    assert day_name(0, "fr") == "Sunday"

    monkeypatch.setattr(get_settings(), "DAY_NAME_LOCALE", "es")
    assert day_name(3) == "Miércoles"
