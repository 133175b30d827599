"""Data layer for the reminder service.

This module provides data models, registry storage and the sent-marker log.
"""

from .models import Child, DoseStatus, ScheduledDose
from .sent_log import SentLog
from .storage import ChildStore

__all__ = [
    "Child",
    "ChildStore",
    "DoseStatus",
    "ScheduledDose",
    "SentLog",
]
