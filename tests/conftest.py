"""Shared fixtures for tests."""

import json
import tempfile
from pathlib import Path

import pytest

from tests.fixtures.mock_channels import make_mock_channel
from vaxremind.channels.base import Channel
from vaxremind.config import EmailSettings, SmsSettings
from vaxremind.data.models import Child, DoseStatus, ScheduledDose
from vaxremind.data.storage import ChildStore
from vaxremind.services.dispatcher import NotificationDispatcher


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data.

    Yields:
        Path: Path to temporary directory
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def child_store(temp_data_dir):
    """Create ChildStore with temp directory."""
    return ChildStore(data_dir=temp_data_dir)


@pytest.fixture
def write_registry(temp_data_dir):
    """Write raw child and schedule records into the temp registry.

    Returns:
        Callable(child_id, child_record, schedule_entries=None)
    """
    def _write(child_id: str, child_record: dict, schedule_entries=None):
        children_dir = temp_data_dir / "children"
        schedules_dir = temp_data_dir / "schedules"
        children_dir.mkdir(parents=True, exist_ok=True)
        schedules_dir.mkdir(parents=True, exist_ok=True)

        (children_dir / f"{child_id}.json").write_text(
            json.dumps(child_record, ensure_ascii=False), encoding="utf-8"
        )
        if schedule_entries is not None:
            (schedules_dir / f"{child_id}.json").write_text(
                json.dumps(schedule_entries, ensure_ascii=False), encoding="utf-8"
            )

    return _write


@pytest.fixture
def sms_settings():
    return SmsSettings(username="sandbox", api_key="test-api-key", sender_id=None, timeout=5.0)


@pytest.fixture
def email_settings():
    return EmailSettings(
        host="smtp.example.com",
        port=587,
        user="reminders@example.com",
        password="secret",
        sender='"Vaccine System" <reminders@example.com>',
        use_tls=True,
        timeout=5.0,
    )


@pytest.fixture
def mock_sms_channel():
    """Create mock SMS channel that always succeeds."""
    return make_mock_channel(Channel.SMS)


@pytest.fixture
def mock_email_channel():
    """Create mock email channel that always succeeds."""
    return make_mock_channel(Channel.EMAIL)


@pytest.fixture
def dispatcher(mock_sms_channel, mock_email_channel):
    """Create NotificationDispatcher over the mock channels, without sent log."""
    return NotificationDispatcher(mock_sms_channel, mock_email_channel)


@pytest.fixture
def child_with_both():
    return Child(
        id="child-001",
        name="Amani Otieno",
        guardian_phone="+254712345678",
        guardian_email="mama.amani@example.com",
        guardian_name="Grace Otieno",
    )


@pytest.fixture
def pending_dose():
    return ScheduledDose(
        id="dose-opv-1",
        child_id="child-001",
        vaccine="OPV",
        dose_label="Dose 1",
        status=DoseStatus.PENDING,
    )
