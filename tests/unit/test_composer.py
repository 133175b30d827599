"""Unit tests for reminder message composition."""

from vaxremind.channels.base import Channel
from vaxremind.services.composer import compose
from vaxremind.services.evaluator import ReminderKind


# TC-COMPOSE-001: SMS advance reminder
def test_sms_two_days_before_is_bilingual():
    """Test SMS text for the advance reminder."""
    body = compose("Amani", "OPV", "2024-03-12", ReminderKind.TWO_DAYS_BEFORE, Channel.SMS)

    assert body.text == (
        "EN: Reminder: Amani needs OPV in 2 days (2024-03-12).\n"
        "SW: Kumbusho: Amani atapokea OPV ndani ya siku 2 (2024-03-12)."
    )
    assert body.subject is None
    assert body.html is None


# TC-COMPOSE-002: SMS same-day reminder marked urgent
def test_sms_due_today_marked_today():
    """Test SMS text for the due-date reminder."""
    body = compose("Amani", "OPV", "2024-03-10", ReminderKind.DUE_TODAY, Channel.SMS)

    assert "TODAY" in body.text
    assert "LEO" in body.text
    assert "in 2 days" not in body.text


# TC-COMPOSE-003: Email variant
def test_email_has_subject_html_and_text():
    """Test email body contains both language sections and a text alternative."""
    body = compose("Amani", "PCV", "2024-03-12", ReminderKind.TWO_DAYS_BEFORE, Channel.EMAIL)

    assert body.subject == "Vaccination Reminder for Amani"
    assert "<h3>English</h3>" in body.html
    assert "<h3>Kiswahili</h3>" in body.html
    assert "<strong>PCV</strong>" in body.html
    assert "ndani ya siku 2" in body.html
    assert body.text.startswith("EN: Reminder: Amani needs PCV")


def test_email_due_today():
    body = compose("Amani", "PCV", "2024-03-10", ReminderKind.DUE_TODAY, Channel.EMAIL)

    assert "TODAY (2024-03-10)" in body.html
    assert "LEO (2024-03-10)" in body.html


# TC-COMPOSE-004: Deterministic output
def test_compose_is_deterministic():
    """Test that identical inputs produce identical output."""
    first = compose("Amani", "OPV", "2024-03-12", ReminderKind.DUE_TODAY, Channel.EMAIL)
    second = compose("Amani", "OPV", "2024-03-12", ReminderKind.DUE_TODAY, Channel.EMAIL)

    assert first == second
    assert first.html.encode("utf-8") == second.html.encode("utf-8")


# TC-COMPOSE-005: Markup in names is literal text
def test_html_fields_are_escaped():
    """Test that names with markup characters cannot inject HTML."""
    body = compose("<b>Zawadi</b> & co", "MR {x}", "2024-03-12", ReminderKind.DUE_TODAY, Channel.EMAIL)

    assert "<b>Zawadi</b>" not in body.html
    assert "&lt;b&gt;Zawadi&lt;/b&gt; &amp; co" in body.html
    assert "MR {x}" in body.html
    # Plain text keeps the original characters
    assert "<b>Zawadi</b> & co" in body.text
