"""Exceptions and outcome codes for the reminder service."""

from enum import Enum


class ReminderError(Exception):
    """Base exception for reminder service errors."""
    pass


class StoreUnavailable(ReminderError):
    """Raised when children or schedules cannot be read from the store."""
    pass


class AbortedError(ReminderError):
    """Raised when a reminder run cannot enumerate children."""
    pass


class ConfigError(ValueError):
    """Raised when configuration values are invalid."""
    pass


class FailureCause(str, Enum):
    """Why a channel attempt failed."""

    INVALID_DESTINATION = "invalid_destination"
    PROVIDER_ERROR = "provider_error"
    TIMEOUT = "timeout"


class SkipReason(str, Enum):
    """Why a channel attempt was not made."""

    NOT_CONFIGURED = "not_configured"
    NO_DESTINATION = "no_destination"
    ALREADY_SENT = "already_sent"
