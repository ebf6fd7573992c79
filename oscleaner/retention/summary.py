"""
Pre-cleanup size aggregation for notifications.
"""

from typing import Iterable, Sequence

from .models import IndexInfo, SummaryReport, SummarySpec
from .patterns import filter_by_pattern

_SIZE_UNITS = ["", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi"]


def aggregate(indices: Iterable[IndexInfo], specs: Sequence[SummarySpec]) -> SummaryReport:
    """
    Sum index sizes per summary spec.

    Every spec is present in the result, in declaration order, even when no
    index matches it. Deletion eligibility plays no part here; callers pass
    the listing taken before any delete.
    """
    indices = list(indices)
    report: SummaryReport = {}
    for spec in specs:
        total = sum(index.size_bytes for index in filter_by_pattern(indices, spec.pattern))
        report[spec.name] = report.get(spec.name, 0) + total
    return report


def format_size(num_bytes: int) -> str:
    """Human readable size with binary units, truncated to whole units."""
    num = int(num_bytes)
    for unit in _SIZE_UNITS:
        if num < 1024:
            return f"{num}{unit}B"
        num //= 1024
    return f"{num}YiB"
