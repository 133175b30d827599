"""Sample registry records for testing."""

from datetime import date, timedelta

# Child record as written by the registration form
SAMPLE_CHILD_REGISTRY_FORMAT = {
    "childName": "Amani Otieno",
    "contact": "+254712345678",
    "guardianEmail": "mama.amani@example.com",
    "guardianName": "Grace Otieno",
}

# Child record in canonical format
SAMPLE_CHILD_CANONICAL = {
    "id": "child-002",
    "name": "Baraka Mwangi",
    "guardian_phone": "+254722000111",
    "guardian_email": None,
    "guardian_name": "Peter Mwangi",
}

# Schedule entries as written by the registration form and the update page
SAMPLE_SCHEDULE_REGISTRY_FORMAT = [
    {
        "vaccine": "BCG",
        "doseLabel": "Dose 1",
        "dueDate": "2024-01-01",
        "status": "Given ✅",
        "dateGiven": "2024-01-01",
        "batch": "BCG-2291",
        "healthWorker": "Nurse Wanjiru",
    },
    {
        "vaccine": "OPV",
        "doseLabel": "Dose 1",
        "dueDate": "2024-02-12",
        "status": "Pending",
    },
]


def schedule_entry(
    vaccine: str,
    due: date,
    status: str = "Pending",
    dose_label: str = "Dose 1",
    entry_id: str = "",
) -> dict:
    """Build a schedule entry in registry format."""
    entry = {
        "vaccine": vaccine,
        "doseLabel": dose_label,
        "dueDate": due.isoformat(),
        "status": status,
    }
    if entry_id:
        entry["id"] = entry_id
    return entry


def due_in(today: date, days: int) -> date:
    return today + timedelta(days=days)
