"""Sent-marker log that keeps reminder delivery effectively-once per day."""

from datetime import date, datetime, timezone
from pathlib import Path
from typing import Union

import aiosqlite

from vaxremind.utils import logger


class SentLog:
    """SQLite record of delivered reminders.

    One row per (child, dose, reminder kind, run date, channel). A row is
    written only after a successful send, so a channel that failed is
    tried again on the next run of the same day while a delivered one is
    not repeated.
    """

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)

    async def init(self) -> None:
        """Initialize database with schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute("PRAGMA journal_mode=WAL")

            await db.execute("""
                CREATE TABLE IF NOT EXISTS sent_markers (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    child_id TEXT NOT NULL,
                    dose_id TEXT NOT NULL,
                    kind TEXT NOT NULL,
                    run_date TEXT NOT NULL,
                    channel TEXT NOT NULL,
                    sent_at INTEGER NOT NULL,
                    UNIQUE(child_id, dose_id, kind, run_date, channel)
                )
            """)

            await db.execute(
                "CREATE INDEX IF NOT EXISTS idx_sent_markers_run_date "
                "ON sent_markers(run_date)"
            )

            await db.commit()
        logger.debug(f"Sent-marker log ready at {self.db_path}")

    async def was_sent(
        self,
        child_id: str,
        dose_id: str,
        kind: str,
        run_date: date,
        channel: str,
    ) -> bool:
        """Check whether a reminder was already delivered.

        Returns:
            True if a marker exists for the key, False otherwise
        """
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT COUNT(*) FROM sent_markers "
                "WHERE child_id = ? AND dose_id = ? AND kind = ? "
                "AND run_date = ? AND channel = ?",
                (child_id, dose_id, kind, run_date.isoformat(), channel)
            )
            count = (await cursor.fetchone())[0]
            return count > 0

    async def mark_sent(
        self,
        child_id: str,
        dose_id: str,
        kind: str,
        run_date: date,
        channel: str,
    ) -> bool:
        """Record a delivered reminder.

        Returns:
            True if the marker was written, False if it already existed
        """
        now = int(datetime.now(timezone.utc).timestamp())
        async with aiosqlite.connect(self.db_path) as db:
            try:
                await db.execute(
                    "INSERT INTO sent_markers "
                    "(child_id, dose_id, kind, run_date, channel, sent_at) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (child_id, dose_id, kind, run_date.isoformat(), channel, now)
                )
                await db.commit()
                return True
            except aiosqlite.IntegrityError:
                # Duplicate key: already marked by an earlier run
                return False

    async def purge_before(self, cutoff: date) -> int:
        """Delete markers older than ``cutoff``.

        Returns:
            Number of removed markers
        """
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "DELETE FROM sent_markers WHERE run_date < ?",
                (cutoff.isoformat(),)
            )
            await db.commit()
            removed = cursor.rowcount
        if removed:
            logger.info(f"Purged {removed} sent marker(s) older than {cutoff.isoformat()}")
        return removed
