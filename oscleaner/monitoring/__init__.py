"""
Monitoring for the index cleaner: Prometheus metrics of cleanup runs.
"""

from .cleanup_metrics import CleanupMetrics

__all__ = [
    'CleanupMetrics'
]
