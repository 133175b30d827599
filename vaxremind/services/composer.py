"""Bilingual (English / Kiswahili) reminder messages."""

from html import escape

from vaxremind.channels.base import Channel, MessageBody
from vaxremind.services.evaluator import ReminderKind

SMS_TEMPLATES = {
    ReminderKind.TWO_DAYS_BEFORE: (
        "EN: Reminder: {child} needs {vaccine} in 2 days ({due}).\n"
        "SW: Kumbusho: {child} atapokea {vaccine} ndani ya siku 2 ({due})."
    ),
    ReminderKind.DUE_TODAY: (
        "EN: Reminder: {child} needs {vaccine} TODAY ({due}).\n"
        "SW: Kumbusho: {child} anahitaji {vaccine} LEO ({due})."
    ),
}

EMAIL_TEMPLATES = {
    ReminderKind.TWO_DAYS_BEFORE: (
        "<h3>English</h3>\n"
        "<p><strong>{child}</strong> is due for <strong>{vaccine}</strong> in 2 days ({due}).</p>\n"
        "\n"
        "<h3>Kiswahili</h3>\n"
        "<p><strong>{child}</strong> anapaswa kupata chanjo ya <strong>{vaccine}</strong> "
        "ndani ya siku 2 ({due}).</p>"
    ),
    ReminderKind.DUE_TODAY: (
        "<h3>English</h3>\n"
        "<p><strong>{child}</strong> is scheduled for <strong>{vaccine}</strong> TODAY ({due}).</p>\n"
        "\n"
        "<h3>Kiswahili</h3>\n"
        "<p><strong>{child}</strong> anapaswa kupokea chanjo ya <strong>{vaccine}</strong> "
        "LEO ({due}).</p>"
    ),
}

EMAIL_SUBJECT = "Vaccination Reminder for {child}"


def compose(
    child_name: str,
    vaccine_name: str,
    due_date_text: str,
    kind: ReminderKind,
    channel: Channel,
) -> MessageBody:
    """Compose the reminder for one channel.

    SMS gets the short two-line text for low-literacy and narrow-bandwidth
    phones. Email gets a subject, an HTML body with one section per
    language, and the SMS text as plain-text alternative.

    Args:
        child_name: Child display name
        vaccine_name: Vaccine name
        due_date_text: Due date as shown to guardians (YYYY-MM-DD)
        kind: Reminder kind
        channel: Target channel

    Returns:
        MessageBody for the channel
    """
    text = SMS_TEMPLATES[kind].format(
        child=child_name, vaccine=vaccine_name, due=due_date_text
    )

    if channel == Channel.SMS:
        return MessageBody(text=text)

    html = EMAIL_TEMPLATES[kind].format(
        child=escape(child_name),
        vaccine=escape(vaccine_name),
        due=escape(due_date_text),
    )
    return MessageBody(
        text=text,
        subject=EMAIL_SUBJECT.format(child=child_name),
        html=html,
    )
