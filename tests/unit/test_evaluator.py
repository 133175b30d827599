"""Unit tests for the due-date policy."""

from datetime import date, datetime, timedelta

import pytest

from vaxremind.data.models import DoseStatus
from vaxremind.services.evaluator import ReminderKind, classify, days_until

TODAY = date(2024, 3, 10)


# TC-EVAL-001: Two days ahead
def test_due_in_two_days_is_two_days_before():
    """Test that a pending dose due in exactly 2 days gets the advance reminder."""
    assert classify(TODAY + timedelta(days=2), DoseStatus.PENDING, TODAY) == ReminderKind.TWO_DAYS_BEFORE


# TC-EVAL-002: Due today
def test_due_today_is_due_today():
    """Test that a pending dose due today gets the same-day reminder."""
    assert classify(TODAY, DoseStatus.PENDING, TODAY) == ReminderKind.DUE_TODAY


# TC-EVAL-003: Other distances
@pytest.mark.parametrize("offset", [1, 3, 5, 30, -1, -2, -30])
def test_other_distances_need_no_reminder(offset):
    """Test that tomorrow, further ahead and overdue doses produce nothing."""
    assert classify(TODAY + timedelta(days=offset), DoseStatus.PENDING, TODAY) is None


# TC-EVAL-004: Given doses are exempt
@pytest.mark.parametrize("offset", [0, 2, -1, 5])
def test_given_dose_never_reminded(offset):
    """Test that an administered dose never produces a reminder."""
    assert classify(TODAY + timedelta(days=offset), DoseStatus.GIVEN, TODAY) is None


# TC-EVAL-005: Missing due date
def test_missing_due_date_needs_no_reminder():
    """Test that a dose without due date is ignored."""
    assert classify(None, DoseStatus.PENDING, TODAY) is None


# TC-EVAL-006: Missed status still follows the date policy
def test_missed_status_follows_date_policy():
    """Test that only Given is exempt; a Missed dose due today is still reminded."""
    assert classify(TODAY, DoseStatus.MISSED, TODAY) == ReminderKind.DUE_TODAY


# TC-EVAL-007: Calendar-day truncation
def test_same_day_due_time_earlier_than_now_counts_as_today():
    """Test that times of day are ignored (due 00:00, now 16:30 -> still today)."""
    due = datetime(2024, 3, 10, 0, 0)
    now = datetime(2024, 3, 10, 16, 30)
    assert days_until(due, now) == 0
    assert classify(due, DoseStatus.PENDING, now) == ReminderKind.DUE_TODAY


def test_two_days_ahead_with_late_now_is_still_two_days():
    """Test that a late 'now' does not shrink the distance to 1 day."""
    due = datetime(2024, 3, 12, 0, 0)
    now = datetime(2024, 3, 10, 23, 59)
    assert classify(due, DoseStatus.PENDING, now) == ReminderKind.TWO_DAYS_BEFORE


def test_month_boundary():
    """Test distance across a month boundary (leap year)."""
    assert classify(date(2024, 3, 1), DoseStatus.PENDING, date(2024, 2, 28)) == ReminderKind.TWO_DAYS_BEFORE
