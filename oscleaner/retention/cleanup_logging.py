"""
Logging and audit records for cleanup runs.

Each service result gets one log line; each run is appended as a JSON line to
a daily audit file so that past deletions can be reviewed later.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, Optional

from .models import CleanupResult, ServiceResult
from .summary import format_size

logger = logging.getLogger(__name__)


class CleanupReportLogger:
    """Handles logging and audit records for cleanup runs."""

    def __init__(self, logs_dir: Optional[str] = "logs/cleanup"):
        self.logs_dir = Path(logs_dir) if logs_dir else None

    def log_service_result(self, result: ServiceResult):
        """Log one service's outcome at a level matching its status."""
        if result.fetch_error is not None:
            logger.error(f"❌ Cleanup failed for {result.service}: {result.fetch_error}")
        elif result.failures:
            logger.warning(f"⚠️ Cleanup for {result.service} finished with "
                           f"{result.failures} failed deletions - {result.message}")
        else:
            logger.info(f"✅ {result.message} ({len(result.deletes)} indices)")

        for name, total in result.summary.items():
            logger.info(f"Summary for {result.service} (pre-cleanup): {name}: {format_size(total)}")

    def log_cleanup_result(self, result: CleanupResult):
        """Log every service of a run and store the audit record."""
        for service_result in result.services:
            self.log_service_result(service_result)

        status = "failed" if result.has_failures else "success"
        logger.info(f"Cleanup run {result.run_id} {status}: "
                    f"{format_size(result.total_deleted_bytes)} deleted across "
                    f"{len(result.services)} services in {self._format_duration(result.duration_seconds)}"
                    f"{' (dry-run)' if result.dry_run else ''}")

        self._store_run_record(self.build_run_record(result))

    def _format_duration(self, duration_seconds: float) -> str:
        """Format duration in a human-readable format."""
        if duration_seconds < 60:
            return f"{duration_seconds:.2f}s"
        elif duration_seconds < 3600:
            return f"{duration_seconds / 60:.1f}m"
        else:
            return f"{duration_seconds / 3600:.1f}h"

    def build_run_record(self, result: CleanupResult) -> Dict[str, Any]:
        """Serializable audit record of a cleanup run."""
        return {
            "run_id": result.run_id,
            "started_at": result.started_at.isoformat(),
            "run_date": result.run_date.isoformat(),
            "dry_run": result.dry_run,
            "duration_seconds": round(result.duration_seconds, 3),
            "status": "failed" if result.has_failures else "success",
            "notification_sent": result.notification_sent,
            "total_deleted_bytes": result.total_deleted_bytes,
            "services": [
                {
                    "service": service_result.service,
                    "fetch_error": service_result.fetch_error,
                    "total_bytes": service_result.total_bytes,
                    "total_deleted_bytes": service_result.total_deleted_bytes,
                    "total_remaining_bytes": service_result.total_remaining_bytes,
                    "failures": service_result.failures,
                    "summary": dict(service_result.summary),
                    "deletes": [
                        {
                            "name": deletion.name,
                            "size_bytes": deletion.size_bytes,
                            "success": deletion.success,
                            "error": deletion.error
                        }
                        for deletion in service_result.deletes
                    ]
                }
                for service_result in result.services
            ]
        }

    def _store_run_record(self, record: Dict[str, Any]):
        """Append the run record to the daily audit file."""
        if self.logs_dir is None:
            return

        try:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            log_date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
            log_file = self.logs_dir / f"cleanup_runs_{log_date}.jsonl"

            with open(log_file, 'a') as f:
                f.write(json.dumps(record) + '\n')

            logger.debug(f"Cleanup run record stored: {log_file}")

        except Exception as e:
            logger.error(f"Failed to store cleanup run record: {e}")
