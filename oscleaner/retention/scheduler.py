"""
Daily cleanup scheduler.

Runs one cleanup cycle per day at a configured UTC time, with status
tracking and graceful shutdown on SIGINT/SIGTERM.
"""

import asyncio
import logging
import signal
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from oscleaner.config.settings import parse_schedule

from .manager import CleanupManager


@dataclass
class SchedulerStatus:
    """Status information for the scheduler."""
    running: bool
    last_run: Optional[datetime]
    next_run: Optional[datetime]
    total_runs: int
    successful_runs: int
    failed_runs: int
    last_error: Optional[str]
    uptime_seconds: float


class CleanupScheduler:
    """
    Automated daily scheduler for index cleanup.

    The loop wakes up every ``check_interval_minutes`` and runs the cleanup
    once the scheduled time of day has passed, at most once per date.
    """

    def __init__(self, manager: CleanupManager, schedule: str = "03:00", check_interval_minutes: int = 15):
        self.manager = manager
        self.schedule = schedule
        self.hour, self.minute = parse_schedule(schedule)
        self.check_interval_minutes = max(1, check_interval_minutes)
        self.logger = logging.getLogger(__name__)

        self._running = False
        self._task: Optional[asyncio.Task] = None
        self._stopped: Optional[asyncio.Event] = None
        self._start_time: Optional[datetime] = None
        self._last_run: Optional[datetime] = None
        self._total_runs = 0
        self._successful_runs = 0
        self._failed_runs = 0
        self._last_error: Optional[str] = None

    def _scheduled_time(self, now: datetime) -> datetime:
        return now.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)

    def should_run(self, now: datetime) -> bool:
        """True once today's slot has passed and no run happened on this date yet."""
        if now < self._scheduled_time(now):
            return False
        return self._last_run is None or self._last_run.date() < now.date()

    def next_run_time(self, now: datetime) -> datetime:
        """Today's slot if it is still ahead (or not yet served), else tomorrow's."""
        slot = self._scheduled_time(now)
        if now < slot or self.should_run(now):
            return slot
        return slot + timedelta(days=1)

    async def start(self):
        """Start the scheduler loop."""
        if self._running:
            self.logger.warning("Cleanup scheduler is already running")
            return

        self.logger.info("Starting cleanup scheduler...")
        self._running = True
        self._start_time = datetime.now(timezone.utc)
        self._stopped = asyncio.Event()
        self._task = asyncio.create_task(self._scheduler_loop())
        self.logger.info(f"Cleanup scheduler started (schedule: {self.schedule} UTC, "
                         f"check interval: {self.check_interval_minutes}m)")

    async def stop(self):
        """Stop the scheduler loop."""
        if not self._running:
            return

        self.logger.info("Stopping cleanup scheduler...")
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        if self._stopped:
            self._stopped.set()
        self.logger.info("Cleanup scheduler stopped")

    async def run_forever(self):
        """Start the scheduler and block until a termination signal stops it."""
        await self.start()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: self._handle_signal(s))
        await self._stopped.wait()

    def _handle_signal(self, signum):
        self.logger.info(f"Received signal {signal.Signals(signum).name}, initiating graceful shutdown...")
        asyncio.ensure_future(self.stop())

    async def _scheduler_loop(self):
        """Main scheduler loop."""
        while self._running:
            try:
                if self.should_run(datetime.now(timezone.utc)):
                    await self.run_once()

                await asyncio.sleep(self.check_interval_minutes * 60)

            except asyncio.CancelledError:
                break
            except Exception as e:
                self.logger.error(f"Error in scheduler loop: {e}")
                self._last_error = str(e)
                await asyncio.sleep(self.check_interval_minutes * 60)

    async def run_once(self):
        """Run one cleanup cycle and record its outcome."""
        cycle_start = datetime.now(timezone.utc)
        self.logger.info("Starting scheduled cleanup cycle")
        self._total_runs += 1
        self._last_run = cycle_start

        try:
            result = await self.manager.run_cleanup()
        except Exception as e:
            self.logger.error(f"Cleanup cycle failed: {e}")
            self._failed_runs += 1
            self._last_error = str(e)
            return None

        if result.succeeded:
            self._successful_runs += 1
            self._last_error = None
        else:
            self._failed_runs += 1
            if result.failed_services:
                self._last_error = f"Failed to list indices for: {', '.join(result.failed_services)}"
            else:
                self._last_error = "Cleanup finished with failures"

        return result

    def get_status(self) -> SchedulerStatus:
        """Get current scheduler status."""
        now = datetime.now(timezone.utc)
        uptime = (now - self._start_time).total_seconds() if self._start_time else 0.0
        return SchedulerStatus(
            running=self._running,
            last_run=self._last_run,
            next_run=self.next_run_time(now) if self._running else None,
            total_runs=self._total_runs,
            successful_runs=self._successful_runs,
            failed_runs=self._failed_runs,
            last_error=self._last_error,
            uptime_seconds=uptime
        )


def create_cleanup_scheduler(manager: CleanupManager, schedule: str = "03:00",
                             check_interval_minutes: int = 15) -> CleanupScheduler:
    """Create a new CleanupScheduler instance."""
    return CleanupScheduler(manager, schedule, check_interval_minutes)
