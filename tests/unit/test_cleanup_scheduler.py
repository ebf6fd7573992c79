"""
Unit tests for the cleanup scheduler.

Tests schedule evaluation, run bookkeeping and scheduler status.
"""

import asyncio
import unittest
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest

from oscleaner.retention.models import CleanupResult, ServiceResult
from oscleaner.retention.scheduler import CleanupScheduler, SchedulerStatus, create_cleanup_scheduler


def make_result(services=None, notification_sent=None):
    return CleanupResult(
        run_id="cleanup_20240105_030000",
        started_at=datetime(2024, 1, 5, 3, 0, tzinfo=timezone.utc),
        run_date=date(2024, 1, 5),
        dry_run=False,
        services=services or [],
        notification_sent=notification_sent
    )


def at(hour, minute, day=5):
    return datetime(2024, 1, day, hour, minute, tzinfo=timezone.utc)


class TestSchedule(unittest.TestCase):
    """Test schedule evaluation."""

    def setUp(self):
        """Set up test fixtures."""
        self.scheduler = CleanupScheduler(Mock(), schedule="03:00", check_interval_minutes=15)

    def test_invalid_schedule(self):
        with self.assertRaises(ValueError):
            CleanupScheduler(Mock(), schedule="3 o'clock")

    def test_before_slot(self):
        self.assertFalse(self.scheduler.should_run(at(2, 59)))

    def test_after_slot(self):
        self.assertTrue(self.scheduler.should_run(at(3, 0)))
        self.assertTrue(self.scheduler.should_run(at(23, 0)))

    def test_once_per_day(self):
        self.scheduler._last_run = at(3, 5)

        self.assertFalse(self.scheduler.should_run(at(4, 0)))
        self.assertFalse(self.scheduler.should_run(at(2, 0, day=6)))
        self.assertTrue(self.scheduler.should_run(at(3, 0, day=6)))

    def test_next_run_time(self):
        self.assertEqual(self.scheduler.next_run_time(at(1, 0)), at(3, 0))

        self.scheduler._last_run = at(3, 5)
        self.assertEqual(self.scheduler.next_run_time(at(4, 0)), at(3, 0, day=6))

    def test_minimum_check_interval(self):
        scheduler = CleanupScheduler(Mock(), check_interval_minutes=0)
        self.assertEqual(scheduler.check_interval_minutes, 1)

    def test_factory(self):
        scheduler = create_cleanup_scheduler(Mock(), "04:30", 5)
        self.assertEqual((scheduler.hour, scheduler.minute), (4, 30))
        self.assertEqual(scheduler.check_interval_minutes, 5)


class TestRunOnce:
    """Test run bookkeeping."""

    @pytest.fixture
    def manager(self):
        manager = Mock()
        manager.run_cleanup = AsyncMock(return_value=make_result())
        return manager

    @pytest.mark.asyncio
    async def test_successful_run(self, manager):
        scheduler = CleanupScheduler(manager)

        result = await scheduler.run_once()

        assert result is manager.run_cleanup.return_value
        status = scheduler.get_status()
        assert isinstance(status, SchedulerStatus)
        assert status.total_runs == 1
        assert status.successful_runs == 1
        assert status.failed_runs == 0
        assert status.last_error is None
        assert status.last_run is not None

    @pytest.mark.asyncio
    async def test_run_with_failed_service(self, manager):
        manager.run_cleanup.return_value = make_result([ServiceResult("search-prod", fetch_error="boom")])
        scheduler = CleanupScheduler(manager)

        await scheduler.run_once()

        status = scheduler.get_status()
        assert status.failed_runs == 1
        assert status.last_error == "Failed to list indices for: search-prod"

    @pytest.mark.asyncio
    async def test_rejected_notification_counts_as_failure(self, manager):
        manager.run_cleanup.return_value = make_result(notification_sent=False)
        scheduler = CleanupScheduler(manager)

        await scheduler.run_once()

        assert scheduler.get_status().failed_runs == 1

    @pytest.mark.asyncio
    async def test_exception_is_recorded(self, manager):
        manager.run_cleanup.side_effect = RuntimeError("rules file vanished")
        scheduler = CleanupScheduler(manager)

        result = await scheduler.run_once()

        assert result is None
        status = scheduler.get_status()
        assert status.failed_runs == 1
        assert status.last_error == "rules file vanished"

    @pytest.mark.asyncio
    async def test_start_and_stop(self, manager):
        scheduler = CleanupScheduler(manager, schedule="00:00")

        await scheduler.start()
        await asyncio.sleep(0)
        assert scheduler.get_status().running is True
        assert scheduler.get_status().next_run is not None

        await scheduler.stop()
        status = scheduler.get_status()
        assert status.running is False
        assert status.next_run is None
        # the 00:00 slot has always passed, so the loop ran once right away
        assert status.total_runs == 1
