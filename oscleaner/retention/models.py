"""
Data models for the index retention system.

This module contains the data classes shared by the rule engine, the plan
executor and the notification layer.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, List, Dict

DEFAULT_DATE_PATTERN = "%Y.%m.%d"


@dataclass(frozen=True)
class IndexRule:
    """Age based deletion rule for indices matching a glob pattern."""
    index_pattern: str
    age_threshold: int
    date_pattern: str = DEFAULT_DATE_PATTERN


@dataclass(frozen=True)
class SummarySpec:
    """Named size aggregation over indices matching a glob pattern."""
    pattern: str
    name: str


@dataclass(frozen=True)
class ServiceRules:
    """Rule set for one managed search service."""
    service: str
    rules: List[IndexRule]
    summary_reports: List[SummarySpec] = field(default_factory=list)


@dataclass(frozen=True)
class IndexInfo:
    """Index metadata as reported by the cluster."""
    name: str
    size_bytes: int
    creation_time: Optional[datetime] = None


@dataclass
class DeletionPlan:
    """Ordered, duplicate-free list of indices to delete for one service."""
    service: str
    entries: List[IndexInfo] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [entry.name for entry in self.entries]

    @property
    def total_bytes(self) -> int:
        return sum(entry.size_bytes for entry in self.entries)

    def __len__(self) -> int:
        return len(self.entries)


# name -> total bytes, in summary spec declaration order
SummaryReport = Dict[str, int]


@dataclass
class CleanupRun:
    """Decisions taken for every configured service in one run."""
    run_date: date
    deletions: Dict[str, DeletionPlan] = field(default_factory=dict)
    summary: Dict[str, SummaryReport] = field(default_factory=dict)
    snapshots: Dict[str, List[IndexInfo]] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)
    services: List[str] = field(default_factory=list)

    @property
    def failed_services(self) -> List[str]:
        return [service for service in self.services if service in self.failures]

    @property
    def succeeded(self) -> bool:
        return not self.failures


@dataclass
class IndexDeletion:
    """Outcome of a single index deletion."""
    service: str
    name: str
    size_bytes: int
    success: bool
    dry_run: bool = False
    error: Optional[str] = None


@dataclass
class ServiceResult:
    """Outcome of applying one service's deletion plan."""
    service: str
    deletes: List[IndexDeletion] = field(default_factory=list)
    total_bytes: int = 0
    total_deleted_bytes: int = 0
    failures: int = 0
    summary: SummaryReport = field(default_factory=dict)
    fetch_error: Optional[str] = None
    message: str = ""

    @property
    def total_remaining_bytes(self) -> int:
        return self.total_bytes - self.total_deleted_bytes

    @property
    def has_failures(self) -> bool:
        return self.fetch_error is not None or self.failures > 0


@dataclass
class CleanupResult:
    """Outcome of a complete cleanup cycle."""
    run_id: str
    started_at: datetime
    run_date: date
    dry_run: bool
    services: List[ServiceResult] = field(default_factory=list)
    duration_seconds: float = 0.0
    notification_sent: Optional[bool] = None

    @property
    def failed_services(self) -> List[str]:
        return [result.service for result in self.services if result.fetch_error is not None]

    @property
    def has_failures(self) -> bool:
        return any(result.has_failures for result in self.services)

    @property
    def total_deleted_bytes(self) -> int:
        return sum(result.total_deleted_bytes for result in self.services)

    @property
    def succeeded(self) -> bool:
        return not self.has_failures and self.notification_sent is not False
