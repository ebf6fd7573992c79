"""
Main cleanup manager - runs one complete cleanup cycle.

This is the entry point used by the CLI and the scheduler. It wires the
rules, the orchestrator, the plan executor, audit logging, metrics and the
notification channel together.
"""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional

from oscleaner.config.rules_config import RulesConfigManager
from oscleaner.config.settings import CleanerSettings
from oscleaner.notifications.webhook_notification import WebhookNotificationChannel

from .cleanup_logging import CleanupReportLogger
from .executor import PlanExecutor
from .models import CleanupResult, CleanupRun, ServiceRules
from .orchestrator import CleanupOrchestrator

logger = logging.getLogger(__name__)


class CleanupManager:
    """
    Runs cleanup cycles for all configured services.

    Deletion decisions are taken on a single listing snapshot per service;
    deletes happen afterwards and the notification is sent last.
    """

    def __init__(self,
                 settings: CleanerSettings,
                 client,
                 notifier: Optional[WebhookNotificationChannel] = None,
                 report_logger: Optional[CleanupReportLogger] = None,
                 metrics=None,
                 rules: Optional[List[ServiceRules]] = None):
        self.settings = settings
        self.client = client
        self.orchestrator = CleanupOrchestrator(client)
        self.report_logger = report_logger or CleanupReportLogger(settings.reports_dir)
        self.metrics = metrics
        self._rules = rules

        if notifier is None and settings.notifications_enabled:
            notifier = WebhookNotificationChannel(
                settings.notification_webhook_url,
                settings.aiven_project,
                title_link=settings.title_link
            )
        self.notifier = notifier

    def get_rules(self) -> List[ServiceRules]:
        """
        Rules for all services.

        Rules passed to the constructor are used as given; otherwise the rules
        file is read again on every call so a running scheduler picks up edits.
        """
        if self._rules is not None:
            return self._rules
        return RulesConfigManager(self.settings.rules_file).services

    async def plan(self, today: Optional[date] = None) -> CleanupRun:
        """Compute deletion plans and summaries without deleting anything."""
        today = today or datetime.now(timezone.utc).date()
        return await self.orchestrator.run(self.get_rules(), today)

    async def run_cleanup(self, today: Optional[date] = None, dry_run: Optional[bool] = None) -> CleanupResult:
        """
        Run one cleanup cycle.

        Args:
            today: Reference date for index ages. Defaults to the current UTC date.
            dry_run: Log deletions without executing them. Defaults to the settings value.

        Returns:
            The cycle result with per-service outcomes.
        """
        started_at = datetime.now(timezone.utc)
        today = today or started_at.date()
        if dry_run is None:
            dry_run = self.settings.dry_run

        rules = self.get_rules()
        logger.info(f"Starting cleanup for {len(rules)} services (date={today}, dry_run={dry_run})")

        run = await self.orchestrator.run(rules, today)
        service_results = await PlanExecutor(self.client, dry_run=dry_run).execute(run)

        result = CleanupResult(
            run_id=f"cleanup_{started_at.strftime('%Y%m%d_%H%M%S')}",
            started_at=started_at,
            run_date=today,
            dry_run=dry_run,
            services=service_results
        )

        if not dry_run and self.notifier is not None:
            result.notification_sent = await self.notifier.send_cleanup_result(result)

        result.duration_seconds = (datetime.now(timezone.utc) - started_at).total_seconds()

        self.report_logger.log_cleanup_result(result)
        if self.metrics is not None:
            self.metrics.record_result(result)

        if result.failed_services:
            logger.error(f"Failed to list indices for services: {', '.join(result.failed_services)}")

        return result


def create_cleanup_manager(settings: CleanerSettings, client, **kwargs) -> CleanupManager:
    """Create a new CleanupManager instance."""
    return CleanupManager(settings, client, **kwargs)
