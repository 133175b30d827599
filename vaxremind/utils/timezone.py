"""Timezone utility functions for the reminder service."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from loguru import logger


def parse_timezone_offset(offset_str: str) -> timedelta:
    """Parse timezone offset string to timedelta.

    Args:
        offset_str: Timezone offset in format "+03:00" or "-05:00"

    Returns:
        timedelta representing the offset

    Raises:
        ValueError: If offset string format is invalid

    Examples:
        >>> parse_timezone_offset("+03:00")
        datetime.timedelta(seconds=10800)
    """
    try:
        offset_str = offset_str.strip()

        if len(offset_str) != 6 or offset_str[0] not in ['+', '-']:
            raise ValueError(f"Invalid timezone offset format: {offset_str}")

        sign = 1 if offset_str[0] == '+' else -1

        hours_str, minutes_str = offset_str[1:].split(':')
        hours = int(hours_str)
        minutes = int(minutes_str)

        if not (0 <= hours <= 14):
            raise ValueError(f"Hours out of range: {hours}")
        if not (0 <= minutes <= 59):
            raise ValueError(f"Minutes out of range: {minutes}")

        total_minutes = sign * (hours * 60 + minutes)
        return timedelta(minutes=total_minutes)

    except (ValueError, IndexError, AttributeError) as e:
        logger.error(f"Failed to parse timezone offset '{offset_str}': {e}")
        raise ValueError(f"Invalid timezone offset format: {offset_str}") from e


def get_timezone(offset_str: str) -> timezone:
    """Build a fixed-offset tzinfo from an offset string."""
    return timezone(parse_timezone_offset(offset_str))


def parse_daily_time(time_str: str) -> time:
    """Parse "HH:MM" wall-clock time.

    Raises:
        ValueError: If time string format is invalid
    """
    try:
        hour_str, minute_str = time_str.strip().split(':')
        return time(hour=int(hour_str), minute=int(minute_str))
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid time format (expected HH:MM): {time_str}") from e


def get_local_now(offset_str: str) -> datetime:
    """Get current aware datetime in the given fixed offset."""
    return datetime.now(timezone.utc).astimezone(get_timezone(offset_str))


def get_local_today(offset_str: str) -> date:
    """Get the current calendar date in the given fixed offset.

    Examples:
        >>> # If UTC time is 2024-03-09 22:30
        >>> get_local_today("+03:00")
        datetime.date(2024, 3, 10)
    """
    today = get_local_now(offset_str).date()
    logger.debug(f"Local date for offset {offset_str}: {today.isoformat()}")
    return today


def next_run_at(
    run_time: str,
    offset_str: str,
    now: Optional[datetime] = None,
) -> datetime:
    """Compute the next daily run moment strictly after ``now``.

    Args:
        run_time: Wall-clock time in "HH:MM" format
        offset_str: Timezone offset of the wall clock (e.g. "+03:00")
        now: Aware datetime to compute from (default: current time)

    Returns:
        Aware datetime of the next run in the given offset
    """
    tz = get_timezone(offset_str)
    local_now = (now or datetime.now(timezone.utc)).astimezone(tz)
    target = datetime.combine(local_now.date(), parse_daily_time(run_time), tzinfo=tz)

    if target <= local_now:
        target += timedelta(days=1)

    return target


def seconds_until_next_run(
    run_time: str,
    offset_str: str,
    now: Optional[datetime] = None,
) -> float:
    """Seconds to wait from ``now`` until the next daily run."""
    current = now or datetime.now(timezone.utc)
    return (next_run_at(run_time, offset_str, current) - current).total_seconds()
