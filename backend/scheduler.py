"""Scheduler for the daily Kite batch sync."""

import logging
import signal
import sys
from datetime import datetime, timezone
from typing import Callable, Optional

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from config import settings
from database import session_scope
from services.batch_sync_service import BatchSyncResult, BatchSyncService

logger = logging.getLogger(__name__)


class DailySyncScheduler:
    """Runs :class:`BatchSyncService` once a day at a fixed time."""

    def __init__(
        self,
        hour: Optional[int] = None,
        minute: Optional[int] = None,
        batch_service: Optional[BatchSyncService] = None,
        session_factory: Callable = session_scope,
    ):
        """Initialize the scheduler.

        Args:
            hour: Hour of day to run (defaults to settings)
            minute: Minute of the hour to run (defaults to settings)
            batch_service: Batch runner (defaults to a new BatchSyncService)
            session_factory: Context manager yielding a database session
        """
        self.hour = settings.SYNC_SCHEDULE_HOUR if hour is None else hour
        self.minute = settings.SYNC_SCHEDULE_MINUTE if minute is None else minute
        self.batch_service = batch_service or BatchSyncService()
        self.session_factory = session_factory
        self.scheduler = BlockingScheduler()
        self._run_count = 0
        self._shutdown_requested = False

    def run_once(self) -> Optional[BatchSyncResult]:
        """Execute a single batch sync.

        Errors are logged rather than raised so the scheduler keeps its
        daily cadence; the next run happens as usual.
        """
        self._run_count += 1
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        logger.info("[Run %d] Daily Kite sync starting at %s", self._run_count, timestamp)

        try:
            with self.session_factory() as db:
                result = self.batch_service.run(db)
        except Exception as e:
            logger.error("[Run %d] Daily Kite sync aborted: %s", self._run_count, e, exc_info=True)
            return None

        logger.info(
            "[Run %d] Daily Kite sync finished: %d synced, %d failed, %d skipped",
            self._run_count, result.users_synced, result.users_failed, result.users_skipped,
        )
        return result

    def _handle_signal(self, signum, frame) -> None:
        """Handle shutdown signals gracefully."""
        if self._shutdown_requested:
            logger.warning("Received second shutdown signal, forcing exit...")
            sys.exit(1)

        logger.info("Received shutdown signal, stopping scheduler...")
        self._shutdown_requested = True
        self.stop()

    def add_job(self) -> None:
        self.scheduler.add_job(
            self.run_once,
            trigger=CronTrigger(hour=self.hour, minute=self.minute),
            id="kite_daily_sync",
            name="Kite daily sync",
            replace_existing=True,
        )

    def start(self) -> None:
        """Start the scheduler (blocking)."""
        signal.signal(signal.SIGINT, self._handle_signal)
        signal.signal(signal.SIGTERM, self._handle_signal)

        self.add_job()
        logger.info("Starting daily Kite sync scheduler at %02d:%02d", self.hour, self.minute)

        try:
            self.scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            pass
        finally:
            logger.info("Scheduler stopped")

    def stop(self) -> None:
        """Stop the scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler shutdown complete")
