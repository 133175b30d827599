"""Unit tests for timezone utilities."""

from datetime import date, datetime, timedelta, timezone

import pytest
from freezegun import freeze_time

from vaxremind.utils.timezone import (
    get_local_today,
    next_run_at,
    parse_daily_time,
    parse_timezone_offset,
    seconds_until_next_run,
)


# TC-TZ-001: Offset parsing
@pytest.mark.parametrize("offset,expected", [
    ("+03:00", timedelta(hours=3)),
    ("-05:30", timedelta(hours=-5, minutes=-30)),
    ("+00:00", timedelta(0)),
    (" +03:00 ", timedelta(hours=3)),
])
def test_parse_timezone_offset(offset, expected):
    assert parse_timezone_offset(offset) == expected


@pytest.mark.parametrize("offset", ["03:00", "+3:00", "+15:00", "+03:75", "EAT", ""])
def test_parse_timezone_offset_invalid(offset):
    with pytest.raises(ValueError):
        parse_timezone_offset(offset)


def test_parse_daily_time():
    assert parse_daily_time("08:00").hour == 8

    with pytest.raises(ValueError):
        parse_daily_time("8am")
    with pytest.raises(ValueError):
        parse_daily_time("25:00")


# TC-TZ-002: Local date in East Africa Time
@freeze_time("2024-03-09 22:30:00")
def test_local_today_crosses_midnight():
    """Test that 22:30 UTC is already the next day in +03:00."""
    assert get_local_today("+03:00") == date(2024, 3, 10)
    assert get_local_today("+00:00") == date(2024, 3, 9)


# TC-TZ-003: Next daily run
def test_next_run_later_today():
    # 04:00 UTC is 07:00 in Nairobi
    now = datetime(2024, 3, 10, 4, 0, tzinfo=timezone.utc)

    result = next_run_at("08:00", "+03:00", now)

    assert result == datetime(2024, 3, 10, 5, 0, tzinfo=timezone.utc)
    assert result.utcoffset() == timedelta(hours=3)


def test_next_run_at_exact_time_is_tomorrow():
    """Test that a run moment equal to now is not repeated."""
    now = datetime(2024, 3, 10, 5, 0, tzinfo=timezone.utc)

    result = next_run_at("08:00", "+03:00", now)

    assert result == datetime(2024, 3, 11, 5, 0, tzinfo=timezone.utc)


def test_next_run_uses_local_calendar_day():
    # 22:30 UTC on the 9th is 01:30 on the 10th locally
    now = datetime(2024, 3, 9, 22, 30, tzinfo=timezone.utc)

    result = next_run_at("08:00", "+03:00", now)

    assert result.date() == date(2024, 3, 10)
    assert seconds_until_next_run("08:00", "+03:00", now) == 6.5 * 3600
