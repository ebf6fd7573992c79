"""
Prometheus metrics for cleanup runs.

Metrics live in a private registry so that several instances (tests, one-off
runs) do not collide in the global default registry.
"""

import logging
import time
from typing import Optional

from prometheus_client import (
    Counter, Gauge, Histogram,
    CollectorRegistry, generate_latest, start_http_server
)

from oscleaner.retention.models import CleanupResult


class CleanupMetrics:
    """Records the outcome of cleanup runs as Prometheus metrics."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self.logger = logging.getLogger(__name__)

        self.runs_total = Counter(
            'oscleaner_runs_total',
            'Total number of cleanup runs',
            ['status'],
            registry=self.registry
        )
        self.deleted_indices_total = Counter(
            'oscleaner_deleted_indices_total',
            'Total number of deleted indices',
            ['service'],
            registry=self.registry
        )
        self.deleted_bytes_total = Counter(
            'oscleaner_deleted_bytes_total',
            'Total size of deleted indices in bytes',
            ['service'],
            registry=self.registry
        )
        self.delete_failures_total = Counter(
            'oscleaner_delete_failures_total',
            'Total number of failed index deletions',
            ['service'],
            registry=self.registry
        )
        self.list_failures_total = Counter(
            'oscleaner_list_failures_total',
            'Total number of failed index listings',
            ['service'],
            registry=self.registry
        )
        self.summary_bytes = Gauge(
            'oscleaner_summary_bytes',
            'Pre-cleanup size of indices per summary report',
            ['service', 'report'],
            registry=self.registry
        )
        self.run_duration = Histogram(
            'oscleaner_run_duration_seconds',
            'Duration of cleanup runs',
            registry=self.registry
        )
        self.last_run_timestamp = Gauge(
            'oscleaner_last_run_timestamp_seconds',
            'Unix time of the last completed cleanup run',
            registry=self.registry
        )

    def record_result(self, result: CleanupResult) -> None:
        """Update metrics from a finished cleanup run. Dry runs only update summaries."""
        status = "failed" if result.has_failures else "success"
        if result.dry_run:
            status = "dry_run"
        self.runs_total.labels(status=status).inc()
        self.run_duration.observe(result.duration_seconds)
        self.last_run_timestamp.set(time.time())

        for service_result in result.services:
            service = service_result.service
            if service_result.fetch_error is not None:
                self.list_failures_total.labels(service=service).inc()
                continue

            for name, total in service_result.summary.items():
                self.summary_bytes.labels(service=service, report=name).set(total)

            if result.dry_run:
                continue

            deleted = [deletion for deletion in service_result.deletes if deletion.success]
            self.deleted_indices_total.labels(service=service).inc(len(deleted))
            self.deleted_bytes_total.labels(service=service).inc(service_result.total_deleted_bytes)
            if service_result.failures:
                self.delete_failures_total.labels(service=service).inc(service_result.failures)

    def render(self) -> bytes:
        """Text exposition of the registry."""
        return generate_latest(self.registry)

    def serve(self, port: int) -> None:
        """Expose the registry over HTTP on ``port``."""
        start_http_server(port, registry=self.registry)
        self.logger.info(f"Metrics endpoint listening on port {port}")
