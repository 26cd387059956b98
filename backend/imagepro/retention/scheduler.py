"""In-process scheduler for retention passes.

RetentionScheduler owns an APScheduler AsyncIOScheduler that fires the
retention pass hourly, on the hour (UTC), and offers run_now() for manual
triggering. At most one pass runs at a time per scheduler:
- a scheduled firing while a pass is in progress is skipped
- run_now() while a pass is in progress waits for that pass and returns its
  result instead of starting an overlapping one
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .schemas import PassOutcome, RetentionFailure
from .service import RetentionService

logger = logging.getLogger(__name__)

JOB_ID = "retention.cleanup"
HOURLY_ON_THE_HOUR = "0 * * * *"

# A firing delayed by a busy loop still runs if it is at most this late
MISFIRE_GRACE_SECONDS = 300


class RetentionScheduler:
    """Start/stop lifecycle around the recurring retention job.

    Example:
        scheduler = RetentionScheduler(service)
        scheduler.start()          # inside a running event loop
        result = await scheduler.run_now()
        scheduler.stop()
    """

    def __init__(
        self,
        service: RetentionService,
        cron: str = HOURLY_ON_THE_HOUR,
        timezone: str = "UTC",
    ):
        self.service = service
        self.cron = cron
        self.timezone = timezone
        self.last_result: Optional[PassOutcome] = None
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._current: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    @property
    def pass_in_progress(self) -> bool:
        return self._current is not None and not self._current.done()

    @property
    def next_run_time(self) -> Optional[datetime]:
        job = self._scheduler.get_job(JOB_ID) if self.is_running else None
        return job.next_run_time if job else None

    def start(self) -> bool:
        """Register the recurring job and start firing.

        Must be called with a running event loop. Calling start() on a running
        scheduler does nothing, so one scheduler never holds two timers.

        Returns:
            True if the scheduler was started, False if it was already running
        """
        if self.is_running:
            logger.debug("Cleanup scheduler already running")
            return False

        scheduler = AsyncIOScheduler(timezone=self.timezone)
        scheduler.add_job(
            self._scheduled_run,
            CronTrigger.from_crontab(self.cron, timezone=self.timezone),
            id=JOB_ID,
            name="Retention cleanup",
            max_instances=1,
            coalesce=True,
            misfire_grace_time=MISFIRE_GRACE_SECONDS,
            replace_existing=True,
        )
        scheduler.start()
        self._scheduler = scheduler

        logger.info(f"Cleanup scheduler started - cron '{self.cron}' ({self.timezone})")
        return True

    def stop(self) -> None:
        """Remove the recurring job. A pass already in progress is not cancelled."""
        if not self.is_running:
            return

        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Cleanup scheduler stopped")

    async def run_now(self) -> PassOutcome:
        """Run a retention pass immediately and return its result."""
        if self.pass_in_progress:
            logger.info("Retention pass already in progress, joining it")
            return await asyncio.shield(self._current)

        logger.info("Running immediate cleanup...")
        return await self._start_pass(trigger="manual")

    async def _start_pass(self, trigger: str) -> PassOutcome:
        task = asyncio.create_task(self.service.run_retention_pass(trigger=trigger))
        task.add_done_callback(self._remember_result)
        self._current = task
        # A cancelled caller must not cancel the pass itself
        return await asyncio.shield(task)

    def _remember_result(self, task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is None:
            self.last_result = task.result()

    async def _scheduled_run(self) -> None:
        if self.pass_in_progress:
            logger.warning("Skipping scheduled cleanup, previous pass still running")
            return

        logger.info("Running scheduled cleanup...")
        result = await self._start_pass(trigger="scheduled")

        if isinstance(result, RetentionFailure):
            logger.error(f"Scheduled cleanup failed: {result.error}")
        else:
            logger.info(
                f"Scheduled cleanup finished: {result.deleted_count} deleted, "
                f"{result.error_count} errors",
                extra={
                    "trigger": "scheduled",
                    "deleted_count": result.deleted_count,
                    "error_count": result.error_count,
                    "orphans_deleted": result.orphans_deleted,
                    "orphan_errors": result.orphan_errors,
                    "duration_seconds": result.duration_seconds,
                }
            )
