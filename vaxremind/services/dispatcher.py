"""Notification dispatcher: fan-out of one reminder over all reachable channels."""

import asyncio
from dataclasses import dataclass
from datetime import date
from typing import Optional

from vaxremind.channels.base import Channel, DeliveryChannel, DeliveryResult, Outcome
from vaxremind.data.models import Child, ScheduledDose
from vaxremind.data.sent_log import SentLog
from vaxremind.errors import FailureCause, SkipReason
from vaxremind.services.composer import compose
from vaxremind.services.evaluator import ReminderKind
from vaxremind.utils import log_operation, logger, mask_destination


@dataclass(frozen=True)
class NotificationAttempt:
    """Outcome of one channel attempt for one (child, dose, kind)."""

    child_id: str
    dose_id: str
    kind: ReminderKind
    channel: Channel
    destination: str
    result: DeliveryResult

    @property
    def outcome(self) -> Outcome:
        return self.result.outcome


class NotificationDispatcher:
    """Dispatcher for guardian reminders.

    For one dose needing a reminder:
    - composes one message per channel
    - attempts SMS iff the guardian has a phone, email iff an email
    - runs the channel attempts concurrently and independently
    - consults and updates the sent-marker log when one is configured
    """

    def __init__(
        self,
        sms_channel: DeliveryChannel,
        email_channel: DeliveryChannel,
        sent_log: Optional[SentLog] = None,
    ):
        """Initialize dispatcher.

        Args:
            sms_channel: SMS delivery channel
            email_channel: Email delivery channel
            sent_log: Sent-marker log for same-day deduplication (optional)
        """
        self.channels = {
            Channel.SMS: sms_channel,
            Channel.EMAIL: email_channel,
        }
        self.sent_log = sent_log
        logger.debug("NotificationDispatcher initialized")

    def reachable_destinations(self, child: Child) -> dict[Channel, str]:
        """Map each reachable channel to the guardian's address on it."""
        destinations = {}
        if child.has_phone:
            destinations[Channel.SMS] = str(child.guardian_phone).strip()
        if child.has_email:
            destinations[Channel.EMAIL] = str(child.guardian_email).strip()
        return destinations

    async def dispatch(
        self,
        child: Child,
        dose: ScheduledDose,
        kind: ReminderKind,
        run_date: Optional[date] = None,
    ) -> list[NotificationAttempt]:
        """Deliver one reminder on every reachable channel.

        Args:
            child: Child the dose belongs to
            dose: Dose needing a reminder
            kind: Reminder kind
            run_date: Run date used as the sent-marker key

        Returns:
            One NotificationAttempt per channel attempted; never raises
        """
        try:
            destinations = self.reachable_destinations(child)
        except Exception as e:
            logger.exception(f"Cannot read contacts of child {child.id}: {e}")
            return []

        if not destinations:
            logger.info(
                f"No reachable channel for child {child.id} "
                f"({dose.vaccine}, {kind.value}), nothing sent"
            )
            return []

        attempts = await asyncio.gather(*(
            self._attempt(child, dose, kind, channel, destination, run_date)
            for channel, destination in destinations.items()
        ))
        return list(attempts)

    async def _attempt(
        self,
        child: Child,
        dose: ScheduledDose,
        kind: ReminderKind,
        channel: Channel,
        destination: str,
        run_date: Optional[date],
    ) -> NotificationAttempt:
        """Run a single channel attempt, isolated from the other channel."""
        try:
            if await self._already_sent(child, dose, kind, channel, run_date):
                result = DeliveryResult.skipped(SkipReason.ALREADY_SENT)
            else:
                body = compose(child.name, dose.vaccine, dose.due_date_text, kind, channel)
                result = await self.channels[channel].send(destination, body)
                if result.is_sent:
                    await self._mark_sent(child, dose, kind, channel, run_date)
        except Exception as e:
            logger.exception(
                f"Unexpected error on {channel.value} for child {child.id}, dose {dose.id}: {e}"
            )
            result = DeliveryResult.failed(FailureCause.PROVIDER_ERROR, f"{type(e).__name__}: {e}")

        self._log_result(child, dose, kind, channel, destination, result)
        return NotificationAttempt(
            child_id=child.id,
            dose_id=dose.id,
            kind=kind,
            channel=channel,
            destination=destination,
            result=result,
        )

    async def _already_sent(
        self,
        child: Child,
        dose: ScheduledDose,
        kind: ReminderKind,
        channel: Channel,
        run_date: Optional[date],
    ) -> bool:
        if self.sent_log is None or run_date is None:
            return False
        try:
            return await self.sent_log.was_sent(child.id, dose.id, kind.value, run_date, channel.value)
        except Exception as e:
            # At-least-once: an unknown marker state means send
            logger.error(f"Sent-marker lookup failed, sending anyway: {type(e).__name__}: {e}")
            return False

    async def _mark_sent(
        self,
        child: Child,
        dose: ScheduledDose,
        kind: ReminderKind,
        channel: Channel,
        run_date: Optional[date],
    ) -> None:
        if self.sent_log is None or run_date is None:
            return
        try:
            await self.sent_log.mark_sent(child.id, dose.id, kind.value, run_date, channel.value)
        except Exception as e:
            logger.error(f"Failed to record sent marker for dose {dose.id}: {type(e).__name__}: {e}")

    def _log_result(
        self,
        child: Child,
        dose: ScheduledDose,
        kind: ReminderKind,
        channel: Channel,
        destination: str,
        result: DeliveryResult,
    ) -> None:
        masked = mask_destination(destination)
        reason = result.reason.value if result.reason else None

        if result.outcome == Outcome.SENT:
            logger.info(f"{channel.value.upper()} reminder sent to {masked} for child {child.id} ({dose.vaccine})")
        elif result.outcome == Outcome.FAILED:
            logger.warning(
                f"{channel.value.upper()} reminder to {masked} failed for child {child.id} "
                f"({dose.vaccine}): {reason} {result.detail}"
            )
        else:
            logger.info(f"{channel.value.upper()} reminder for child {child.id} skipped: {reason}")

        log_operation(
            "delivery",
            child_id=child.id,
            dose_id=dose.id,
            kind=kind.value,
            channel=channel.value,
            destination=masked,
            outcome=result.outcome.value,
            reason=reason,
        )
