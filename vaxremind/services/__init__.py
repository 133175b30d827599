"""Reminder services: due-date policy, composition, dispatch and runs."""

from .composer import compose
from .dispatcher import NotificationAttempt, NotificationDispatcher
from .evaluator import ReminderKind, classify
from .runner import ReminderRunner, RunState, RunSummary
from .scheduler import ReminderScheduler

__all__ = [
    "NotificationAttempt",
    "NotificationDispatcher",
    "ReminderKind",
    "ReminderRunner",
    "ReminderScheduler",
    "RunState",
    "RunSummary",
    "classify",
    "compose",
]
