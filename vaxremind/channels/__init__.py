"""Delivery channels for guardian reminders."""

from .base import Channel, DeliveryChannel, DeliveryResult, MessageBody, Outcome
from .email import EmailChannel
from .sms import SmsChannel

__all__ = [
    "Channel",
    "DeliveryChannel",
    "DeliveryResult",
    "EmailChannel",
    "MessageBody",
    "Outcome",
    "SmsChannel",
]
