"""
Cleanup orchestration across services.

Fetches each service's index listing once, then runs the deletion planner and
the summary aggregator over that snapshot. The orchestrator only decides:
deleting and notifying happen later, on the returned CleanupRun.
"""

import logging
from datetime import date
from typing import TYPE_CHECKING, Sequence

from .models import CleanupRun, ServiceRules
from .rules import plan_deletions
from .summary import aggregate

if TYPE_CHECKING:
    from oscleaner.connectors.base import ClusterClient

logger = logging.getLogger(__name__)


class CleanupOrchestrator:
    """Builds deletion plans and summary reports for all configured services."""

    def __init__(self, client: "ClusterClient"):
        self.client = client

    async def run(self, all_service_rules: Sequence[ServiceRules], today: date) -> CleanupRun:
        """
        Plan one cleanup run.

        A failure to list one service's indices is recorded in
        ``CleanupRun.failures`` and does not stop the other services.
        """
        run = CleanupRun(run_date=today)

        for service_rules in all_service_rules:
            service = service_rules.service
            run.services.append(service)

            try:
                indices = await self.client.list_indices(service)
            except Exception as e:
                logger.error(f"Failed to list indices for service {service}: {e}")
                run.failures[service] = str(e)
                continue

            run.snapshots[service] = indices
            run.deletions[service] = plan_deletions(indices, service_rules, today)
            run.summary[service] = aggregate(indices, service_rules.summary_reports)

            logger.info(
                f"Service {service}: {len(indices)} indices listed, "
                f"{len(run.deletions[service])} planned for deletion"
            )

        return run
