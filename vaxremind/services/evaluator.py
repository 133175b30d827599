"""Due-date policy for vaccination reminders."""

from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from vaxremind.data.models import DoseStatus

# Days before the due date on which the advance reminder goes out
ADVANCE_NOTICE_DAYS = 2


class ReminderKind(str, Enum):
    """Why a reminder fires today."""

    TWO_DAYS_BEFORE = "two_days_before"
    DUE_TODAY = "due_today"


def days_until(due_date: Union[date, datetime], today: Union[date, datetime]) -> int:
    """Whole calendar days from ``today`` to ``due_date``.

    Datetimes are truncated to their calendar date first, so a due time
    earlier than "now" on the same day still counts as 0.
    """
    if isinstance(due_date, datetime):
        due_date = due_date.date()
    if isinstance(today, datetime):
        today = today.date()
    return (due_date - today).days


def classify(
    due_date: Optional[Union[date, datetime]],
    status: DoseStatus,
    today: Union[date, datetime],
) -> Optional[ReminderKind]:
    """Classify a dose into the reminder to send today, if any.

    Args:
        due_date: Dose due date, or None when the schedule has none
        status: Dose administration status
        today: Run date

    Returns:
        DUE_TODAY on the due date, TWO_DAYS_BEFORE two days ahead,
        None otherwise (no due date, already given, or any other distance
        including overdue doses)
    """
    if due_date is None or status == DoseStatus.GIVEN:
        return None

    diff_days = days_until(due_date, today)

    if diff_days == 0:
        return ReminderKind.DUE_TODAY
    if diff_days == ADVANCE_NOTICE_DAYS:
        return ReminderKind.TWO_DAYS_BEFORE
    return None
