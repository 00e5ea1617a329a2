"""Tests for the business-hours mapper (America/Los_Angeles, PDT = UTC-7)."""

from datetime import datetime, time, timezone

from app.mappers.business_hours import (
    closed_fallback,
    get_business_hours,
    parse_business_days,
)


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_open_on_weekday_morning():
    info = get_business_hours(_utc(2026, 10, 19, 16, 0))  # Mon 09:00 PDT
    assert info.business_hours is True
    assert info.weekday == "Mon"
    assert info.time_hhmm == "09:00"
    assert info.timezone == "America/Los_Angeles"


def test_open_on_saturday():
    info = get_business_hours(_utc(2026, 10, 24, 17, 0))  # Sat 10:00 PDT
    assert info.business_hours is True
    assert info.weekday == "Sat"


def test_closed_on_sunday():
    info = get_business_hours(_utc(2026, 10, 18, 18, 0))  # Sun 11:00 PDT
    assert info.business_hours is False
    assert info.weekday == "Sun"


def test_closed_before_open():
    info = get_business_hours(_utc(2026, 10, 19, 14, 59))  # Mon 07:59 PDT
    assert info.business_hours is False
    assert info.time_hhmm == "07:59"


def test_close_is_end_exclusive():
    assert get_business_hours(_utc(2026, 10, 20, 2, 59)).business_hours is True  # Mon 19:59
    assert get_business_hours(_utc(2026, 10, 20, 3, 0)).business_hours is False  # Mon 20:00


def test_custom_window_and_days():
    info = get_business_hours(
        _utc(2026, 10, 24, 17, 0),  # Sat 10:00 PDT
        open_at=time(9, 30),
        close_at=time(17, 0),
        days=parse_business_days("Mon,Tue,Wed,Thu,Fri"),
    )
    assert info.business_hours is False


def test_holiday_closes_the_day():
    july_4 = _utc(2026, 7, 4, 17, 0)  # Sat 10:00 PDT, Independence Day
    assert get_business_hours(july_4).business_hours is True
    assert get_business_hours(july_4, holiday_country="US").business_hours is False


def test_other_timezone():
    info = get_business_hours(_utc(2026, 10, 19, 12, 0), timezone_name="Europe/Kyiv")
    assert info.time_hhmm == "15:00"
    assert info.business_hours is True


def test_parse_business_days():
    assert parse_business_days("mon, TUE,Wednesday,xyz") == ("Mon", "Tue", "Wed")
    assert parse_business_days("") == ()


def test_closed_fallback():
    info = closed_fallback("America/Los_Angeles", "boom")
    assert info.business_hours is False
    assert info.weekday == "Unknown"
    assert info.time_hhmm == "00:00"
    assert info.error == "boom"
