"""Reminder run orchestrator."""

import asyncio
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from vaxremind.channels.base import Outcome
from vaxremind.data.models import Child
from vaxremind.data.storage import ChildStore
from vaxremind.errors import AbortedError, StoreUnavailable
from vaxremind.services.dispatcher import NotificationAttempt, NotificationDispatcher
from vaxremind.services.evaluator import classify
from vaxremind.utils import log_operation, logger
from vaxremind.utils.timezone import get_local_today


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    COMPLETED_WITH_ERRORS = "completed_with_errors"
    ABORTED = "aborted"


@dataclass
class RunSummary:
    """Counters of one reminder run.

    Attributes:
        started_at: Run start (UTC)
        finished_at: Run end (UTC)
        run_date: Calendar date the doses were evaluated against
        children_scanned: Children whose schedule was read
        doses_evaluated: Doses passed through the due-date policy
        notifications_sent: Channel attempts delivered
        notifications_failed: Channel attempts that failed
        notifications_skipped: Channel attempts skipped (not configured, already sent)
        children_failed: IDs of children whose schedule could not be read
        state: Terminal run state
    """

    started_at: datetime
    run_date: date
    finished_at: Optional[datetime] = None
    children_scanned: int = 0
    doses_evaluated: int = 0
    notifications_sent: int = 0
    notifications_failed: int = 0
    notifications_skipped: int = 0
    children_failed: list[str] = field(default_factory=list)
    state: RunState = RunState.RUNNING

    @property
    def ok(self) -> bool:
        """Run-level success; partial delivery failures still count as success."""
        return self.state in (RunState.COMPLETED, RunState.COMPLETED_WITH_ERRORS)

    def record(self, attempts: list[NotificationAttempt]) -> None:
        """Add channel attempt outcomes to the counters."""
        for attempt in attempts:
            if attempt.outcome == Outcome.SENT:
                self.notifications_sent += 1
            elif attempt.outcome == Outcome.FAILED:
                self.notifications_failed += 1
            else:
                self.notifications_skipped += 1

    def status_line(self) -> str:
        """Human-readable one-line summary."""
        line = (
            f"Reminder run {self.state.value} for {self.run_date.isoformat()}: "
            f"{self.notifications_sent} sent, {self.notifications_failed} failed, "
            f"{self.notifications_skipped} skipped; "
            f"{self.children_scanned} children, {self.doses_evaluated} doses evaluated"
        )
        if self.children_failed:
            line += f"; {len(self.children_failed)} child schedule(s) unavailable"
        return line

    def to_dict(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "run_date": self.run_date.isoformat(),
            "children_scanned": self.children_scanned,
            "doses_evaluated": self.doses_evaluated,
            "notifications_sent": self.notifications_sent,
            "notifications_failed": self.notifications_failed,
            "notifications_skipped": self.notifications_skipped,
            "children_failed": list(self.children_failed),
            "state": self.state.value,
        }


class ReminderRunner:
    """Batch process over all children.

    Lists children, evaluates each child's schedule against a run date
    fixed once at the start, dispatches the actionable reminders and
    aggregates the outcomes. Per-child and per-channel failures are
    recorded and never abort the run; only failing to list children does.
    """

    def __init__(
        self,
        store: ChildStore,
        dispatcher: NotificationDispatcher,
        timezone_offset: str = "+03:00",
        max_concurrent_children: int = 5,
    ):
        """Initialize reminder runner.

        Args:
            store: Registry with children and schedules
            dispatcher: Notification dispatcher
            timezone_offset: Offset whose calendar date is "today"
            max_concurrent_children: Upper bound on children processed at once
        """
        self.store = store
        self.dispatcher = dispatcher
        self.timezone_offset = timezone_offset
        self.max_concurrent_children = max_concurrent_children
        self.state = RunState.IDLE

    async def run(self, today: Optional[date] = None) -> RunSummary:
        """Execute one full reminder run.

        Args:
            today: Run date (default: current date in the reminder time zone)

        Returns:
            RunSummary of the run

        Raises:
            AbortedError: If the children cannot be listed
        """
        run_date = today or get_local_today(self.timezone_offset)
        summary = RunSummary(started_at=datetime.now(timezone.utc), run_date=run_date)
        self.state = RunState.RUNNING

        logger.info(f"Starting reminder run for {run_date.isoformat()}")

        try:
            children = await self.store.list_children()
        except StoreUnavailable as e:
            self.state = RunState.ABORTED
            logger.error(f"Reminder run aborted, cannot list children: {e}")
            log_operation("reminder_run", run_date=run_date.isoformat(), state=self.state.value)
            raise AbortedError(f"Cannot list children: {e}") from e

        logger.info(f"Found {len(children)} children in registry")

        semaphore = asyncio.Semaphore(self.max_concurrent_children)

        async def guarded(child: Child) -> None:
            async with semaphore:
                try:
                    await self.process_child(child, run_date, summary)
                except Exception as e:
                    # Continue with other children even if one fails
                    logger.exception(f"Error processing reminders for child {child.id}: {e}")
                    summary.children_failed.append(child.id)

        await asyncio.gather(*(guarded(child) for child in children))

        summary.finished_at = datetime.now(timezone.utc)
        if summary.children_failed or summary.notifications_failed:
            summary.state = RunState.COMPLETED_WITH_ERRORS
        else:
            summary.state = RunState.COMPLETED
        self.state = summary.state

        logger.info(summary.status_line())
        log_operation("reminder_run", **summary.to_dict())
        return summary

    async def process_child(self, child: Child, run_date: date, summary: RunSummary) -> None:
        """Evaluate and dispatch reminders for one child.

        Args:
            child: Child to process
            run_date: Run date
            summary: Summary to accumulate into
        """
        try:
            doses = await self.store.list_schedule(child.id)
        except StoreUnavailable as e:
            logger.error(f"Skipping child {child.id}, schedule unavailable: {e}")
            summary.children_failed.append(child.id)
            return

        summary.children_scanned += 1

        if not doses:
            logger.debug(f"No vaccines scheduled for child {child.id}")
            return

        for dose in doses:
            summary.doses_evaluated += 1
            kind = classify(dose.due_date, dose.status, run_date)

            if kind is None:
                logger.debug(
                    f"Child {child.id}: {dose.vaccine} {dose.dose_label} "
                    f"(due {dose.due_date_text or 'n/a'}, {dose.status.value}) needs no reminder"
                )
                continue

            logger.info(
                f"Child {child.id}: {dose.vaccine} {dose.dose_label} due "
                f"{dose.due_date_text}, sending {kind.value} reminder"
            )
            attempts = await self.dispatcher.dispatch(child, dose, kind, run_date)
            summary.record(attempts)
