"""Common types for delivery channels."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from vaxremind.errors import FailureCause, SkipReason


class Channel(str, Enum):
    """Notification transport."""

    SMS = "sms"
    EMAIL = "email"


class Outcome(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class MessageBody:
    """Composed message for one channel.

    Attributes:
        text: Plain-text body (the whole message for SMS)
        subject: Subject line (email only)
        html: HTML body (email only)
    """

    text: str
    subject: Optional[str] = None
    html: Optional[str] = None


@dataclass(frozen=True)
class DeliveryResult:
    """Result of a single send call.

    Attributes:
        outcome: Sent, failed or skipped
        reason: FailureCause for failures, SkipReason for skips
        detail: Provider message or exception text for logs
        provider_id: Provider message ID when available
    """

    outcome: Outcome
    reason: Optional[Union[FailureCause, SkipReason]] = None
    detail: str = ""
    provider_id: Optional[str] = None

    @classmethod
    def sent(cls, provider_id: Optional[str] = None, detail: str = "") -> "DeliveryResult":
        return cls(Outcome.SENT, provider_id=provider_id, detail=detail)

    @classmethod
    def failed(cls, cause: FailureCause, detail: str = "") -> "DeliveryResult":
        return cls(Outcome.FAILED, reason=cause, detail=detail)

    @classmethod
    def skipped(cls, reason: SkipReason, detail: str = "") -> "DeliveryResult":
        return cls(Outcome.SKIPPED, reason=reason, detail=detail)

    @property
    def is_sent(self) -> bool:
        return self.outcome == Outcome.SENT


class DeliveryChannel(ABC):
    """Uniform send capability over an external transport.

    Implementations make at most one provider round-trip per call and
    never raise: every transport error is returned as a failed result.
    """

    channel: Channel

    @property
    @abstractmethod
    def configured(self) -> bool:
        """Whether credentials for this channel are provisioned."""

    @abstractmethod
    def is_valid_destination(self, destination: str) -> bool:
        """Whether the destination has the shape this channel accepts."""

    @abstractmethod
    async def _deliver(self, destination: str, body: MessageBody) -> DeliveryResult:
        """Perform the provider call for a validated destination."""

    async def send(self, destination: Optional[str], body: MessageBody) -> DeliveryResult:
        """Send a message to one destination.

        Args:
            destination: Phone number or email address
            body: Composed message

        Returns:
            DeliveryResult; never raises
        """
        if not self.configured:
            return DeliveryResult.skipped(SkipReason.NOT_CONFIGURED)

        if not destination or not destination.strip():
            return DeliveryResult.skipped(SkipReason.NO_DESTINATION)

        destination = destination.strip()
        if not self.is_valid_destination(destination):
            return DeliveryResult.failed(
                FailureCause.INVALID_DESTINATION,
                f"Malformed {self.channel.value} destination",
            )

        try:
            return await self._deliver(destination, body)
        except Exception as e:
            return DeliveryResult.failed(
                FailureCause.PROVIDER_ERROR, f"{type(e).__name__}: {e}"
            )
