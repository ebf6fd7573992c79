"""
Applies deletion plans to the cluster.
"""

import logging
from typing import TYPE_CHECKING, List

from .models import CleanupRun, IndexDeletion, ServiceResult
from .summary import format_size

if TYPE_CHECKING:
    from oscleaner.connectors.base import ClusterClient

logger = logging.getLogger(__name__)


class PlanExecutor:
    """Deletes planned indices service by service, or only logs them in dry-run mode."""

    def __init__(self, client: "ClusterClient", dry_run: bool = False):
        self.client = client
        self.dry_run = dry_run

    async def execute(self, run: CleanupRun) -> List[ServiceResult]:
        """Apply every plan of the run, keeping the run's service order."""
        results = []
        for service in run.services:
            if service in run.failures:
                results.append(ServiceResult(
                    service=service,
                    fetch_error=run.failures[service],
                    message=f"Failed to list indices for {service}: {run.failures[service]}"
                ))
                continue
            results.append(await self._execute_service(run, service))
        return results

    async def _execute_service(self, run: CleanupRun, service: str) -> ServiceResult:
        plan = run.deletions[service]
        result = ServiceResult(
            service=service,
            total_bytes=sum(index.size_bytes for index in run.snapshots[service]),
            summary=run.summary.get(service, {})
        )

        for index in plan.entries:
            deletion = IndexDeletion(
                service=service,
                name=index.name,
                size_bytes=index.size_bytes,
                success=False,
                dry_run=self.dry_run
            )

            if self.dry_run:
                logger.info(f"Deleting index {index.name} with size {index.size_bytes} bytes (dry-run)")
                deletion.success = True
            else:
                logger.info(f"Deleting index {index.name} with size {index.size_bytes} bytes")
                try:
                    await self.client.delete_index(service, index.name)
                    deletion.success = True
                except Exception as e:
                    logger.warning(f"Failed to delete index {index.name} of {service}: {e}")
                    deletion.error = str(e)
                    result.failures += 1

            if deletion.success:
                result.total_deleted_bytes += index.size_bytes
            result.deletes.append(deletion)

        result.message = (
            f"Cleanup finished for {service} service: {format_size(result.total_deleted_bytes)} "
            f"data has been deleted. (Remaining data size: {format_size(result.total_remaining_bytes)})"
        )
        logger.info(result.message)
        return result
