"""Daily and on-demand triggers for reminder runs."""

import asyncio
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from vaxremind.data.sent_log import SentLog
from vaxremind.errors import AbortedError
from vaxremind.services.runner import ReminderRunner, RunSummary
from vaxremind.utils import logger
from vaxremind.utils.timezone import get_local_today, next_run_at, seconds_until_next_run

# Sent markers older than this are of no use for same-day deduplication
SENT_MARKER_RETENTION_DAYS = 30


class ReminderScheduler:
    """Background scheduler for vaccination reminder runs.

    Runs as a background task that sleeps until the configured wall-clock
    time in the reminder time zone and performs one full run per day.
    On-demand runs go through the same entry point; a lock keeps at most
    one run in flight.

    Features:
    - Daily run at DAILY_RUN_TIME in REMINDER_TIMEZONE_OFFSET
    - On-demand run_now() with identical behaviour
    - Keeps the last summary for status reporting
    - Purges stale sent markers after each daily run
    """

    def __init__(
        self,
        runner: ReminderRunner,
        run_time: str = "08:00",
        timezone_offset: str = "+03:00",
        sent_log: Optional[SentLog] = None,
    ):
        """Initialize reminder scheduler.

        Args:
            runner: ReminderRunner executing the runs
            run_time: Daily run time in "HH:MM"
            timezone_offset: Offset of the daily run time (e.g. "+03:00")
            sent_log: Sent-marker log to purge (optional)
        """
        self.runner = runner
        self.run_time = run_time
        self.timezone_offset = timezone_offset
        self.sent_log = sent_log

        self.last_summary: Optional[RunSummary] = None
        self.last_run_at: Optional[datetime] = None
        self._last_daily_run_date: Optional[date] = None

        self._lock = asyncio.Lock()
        self._running = False
        self._task: Optional[asyncio.Task] = None

        logger.info("ReminderScheduler initialized")

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self):
        """Start the scheduler loop."""
        if self._running:
            logger.warning("Scheduler already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._scheduler_loop())
        logger.info("Scheduler started")

    async def stop(self):
        """Stop the scheduler gracefully."""
        if not self._running:
            logger.warning("Scheduler not running")
            return

        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        logger.info("Scheduler stopped")

    async def _scheduler_loop(self):
        """Main scheduler loop: sleep until the next daily run, then run."""
        logger.info(
            f"Scheduler loop started (daily at {self.run_time}, UTC{self.timezone_offset})"
        )

        while self._running:
            delay = seconds_until_next_run(self.run_time, self.timezone_offset)
            next_at = next_run_at(self.run_time, self.timezone_offset)
            logger.info(f"Next reminder run at {next_at.isoformat()} (in {delay:.0f}s)")

            await asyncio.sleep(delay)
            await self._run_daily()

    async def _run_daily(self) -> None:
        """Perform the daily run unless one already ran for today's date."""
        run_date = get_local_today(self.timezone_offset)
        if run_date == self._last_daily_run_date:
            logger.info(f"Daily reminder run for {run_date.isoformat()} already done, skipping")
            return
        self._last_daily_run_date = run_date

        try:
            await self.run_now(trigger="daily", today=run_date)
        except AbortedError as e:
            logger.error(f"Daily reminder run aborted: {e}")
        except Exception as e:
            logger.exception(f"Error in scheduler loop: {e}")

        await self._purge_sent_markers()

    async def run_now(self, trigger: str = "manual", today: Optional[date] = None) -> RunSummary:
        """Execute one full reminder run.

        Used by both the daily loop and on-demand requests.

        Args:
            trigger: Trigger source, for logs only
            today: Run date override (default: today in the reminder time zone)

        Returns:
            RunSummary of the run

        Raises:
            AbortedError: If the run could not enumerate children
        """
        if self._lock.locked():
            logger.info(f"Reminder run in progress, {trigger} run will start after it")

        async with self._lock:
            logger.info(f"Reminder run triggered ({trigger})")
            self.last_run_at = datetime.now(timezone.utc)
            summary = await self.runner.run(today=today)
            self.last_summary = summary
            return summary

    async def _purge_sent_markers(self) -> None:
        if self.sent_log is None:
            return
        cutoff = get_local_today(self.timezone_offset) - timedelta(days=SENT_MARKER_RETENTION_DAYS)
        try:
            await self.sent_log.purge_before(cutoff)
        except Exception as e:
            logger.error(f"Failed to purge sent markers: {type(e).__name__}: {e}")
