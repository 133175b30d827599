"""Data models for the reminder service."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from loguru import logger


class DoseStatus(str, Enum):
    """Administration status of a scheduled dose."""

    PENDING = "Pending"
    GIVEN = "Given"
    MISSED = "Missed"

    @classmethod
    def parse(cls, value: Optional[str]) -> "DoseStatus":
        """Normalize a stored status string.

        Matches by prefix, case-insensitively, so decorated values written
        by the registry UI (e.g. "Given ✅") map to their status. Unknown or
        missing values are treated as pending.
        """
        if not value:
            return cls.PENDING
        normalized = str(value).strip().lower()
        for status in cls:
            if normalized.startswith(status.value.lower()):
                return status
        logger.warning(f"Unknown dose status '{value}', treating as Pending")
        return cls.PENDING


def _first(data: dict, *keys: str) -> Any:
    """Return the first non-empty value among alias keys."""
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return value
    return None


def _text(value: Any) -> Optional[str]:
    """Coerce a stored scalar to a stripped string; empty becomes None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_due_date(value: Any) -> Optional[date]:
    """Parse a stored due date into a calendar date.

    Accepts ``date``/``datetime`` objects and ISO strings; a time part is
    truncated. Unparseable values yield None.

    Examples:
        >>> parse_due_date("2024-03-12")
        datetime.date(2024, 3, 12)
        >>> parse_due_date("2024-03-12T08:30:00")
        datetime.date(2024, 3, 12)
    """
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        logger.warning(f"Unparseable due date '{value}', ignoring")
        return None


@dataclass
class Child:
    """Child data model.

    Attributes:
        id: Opaque child identifier from the registry
        name: Child display name
        guardian_phone: Guardian phone number or None
        guardian_email: Guardian email address or None
        guardian_name: Guardian display name
    """

    id: str
    name: str
    guardian_phone: Optional[str] = None
    guardian_email: Optional[str] = None
    guardian_name: str = ""

    @property
    def has_phone(self) -> bool:
        return _text(self.guardian_phone) is not None

    @property
    def has_email(self) -> bool:
        return _text(self.guardian_email) is not None

    def to_dict(self) -> dict:
        """Convert child to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "guardian_phone": self.guardian_phone,
            "guardian_email": self.guardian_email,
            "guardian_name": self.guardian_name,
        }

    @classmethod
    def from_dict(cls, data: dict, child_id: Optional[str] = None) -> "Child":
        """Create child from a stored record.

        Accepts both the canonical field names and the registry's
        historical ones (``childName``, ``contact``/``guardianPhone``,
        ``guardianEmail``, ``guardianName``).

        Args:
            data: Stored child record
            child_id: Identifier to use when the record has none

        Returns:
            Child instance

        Raises:
            ValueError: If the record has no identifier
        """
        identifier = _first(data, "id", "childId") or child_id
        if not identifier:
            raise ValueError("Child record has no id")

        return cls(
            id=str(identifier),
            name=_text(_first(data, "name", "childName")) or "",
            guardian_phone=_text(_first(data, "guardian_phone", "guardianPhone", "contact")),
            guardian_email=_text(_first(data, "guardian_email", "guardianEmail")),
            guardian_name=_text(_first(data, "guardian_name", "guardianName", "guardian")) or "",
        )


@dataclass
class ScheduledDose:
    """Scheduled vaccine dose for one child.

    Attributes:
        id: Dose identifier, unique within the child's schedule
        child_id: Owning child
        vaccine: Vaccine name (e.g. "BCG", "PCV")
        dose_label: Dose label (e.g. "Dose 1", "Birth dose")
        due_date: Calendar due date or None
        status: Administration status
        date_given: Date the dose was administered (set when Given)
        batch: Vaccine batch number (set when Given)
        health_worker: Administering health worker (set when Given)
        notes: Free-form notes
    """

    id: str
    child_id: str
    vaccine: str
    dose_label: str = ""
    due_date: Optional[date] = None
    status: DoseStatus = DoseStatus.PENDING
    date_given: Optional[str] = None
    batch: Optional[str] = None
    health_worker: Optional[str] = None
    notes: Optional[str] = None

    @property
    def due_date_text(self) -> str:
        return self.due_date.isoformat() if self.due_date else ""

    def to_dict(self) -> dict:
        """Convert dose to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "child_id": self.child_id,
            "vaccine": self.vaccine,
            "dose_label": self.dose_label,
            "due_date": self.due_date_text or None,
            "status": self.status.value,
            "date_given": self.date_given,
            "batch": self.batch,
            "health_worker": self.health_worker,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict, child_id: str, index: int = 0) -> "ScheduledDose":
        """Create dose from a stored schedule entry.

        Args:
            data: Stored schedule entry
            child_id: Owning child identifier
            index: Position in the schedule, used to build an id when missing

        Returns:
            ScheduledDose instance
        """
        vaccine = _first(data, "vaccine", "vaccine_name", "name") or ""
        dose_label = _first(data, "dose_label", "doseLabel") or ""
        identifier = _first(data, "id", "docId") or f"{index}:{vaccine}:{dose_label}"

        return cls(
            id=str(identifier),
            child_id=child_id,
            vaccine=vaccine,
            dose_label=dose_label,
            due_date=parse_due_date(_first(data, "due_date", "dueDate")),
            status=DoseStatus.parse(data.get("status")),
            date_given=_first(data, "date_given", "dateGiven"),
            batch=data.get("batch") or None,
            health_worker=_first(data, "health_worker", "healthWorker"),
            notes=data.get("notes") or None,
        )
