"""
Index retention engine.

Matches index names against rule patterns, derives their age from a trailing
date suffix, plans deletions and aggregates pre-cleanup size summaries.
"""

from .models import (
    DEFAULT_DATE_PATTERN, IndexRule, SummarySpec, ServiceRules, IndexInfo,
    DeletionPlan, SummaryReport, CleanupRun, IndexDeletion, ServiceResult, CleanupResult
)
from .patterns import matches
from .dates import extract_suffix_date, format_suffix_date
from .rules import is_eligible, plan_deletions
from .summary import aggregate, format_size
from .orchestrator import CleanupOrchestrator
from .executor import PlanExecutor

__all__ = [
    'DEFAULT_DATE_PATTERN',
    'IndexRule',
    'SummarySpec',
    'ServiceRules',
    'IndexInfo',
    'DeletionPlan',
    'SummaryReport',
    'CleanupRun',
    'IndexDeletion',
    'ServiceResult',
    'CleanupResult',
    'matches',
    'extract_suffix_date',
    'format_suffix_date',
    'is_eligible',
    'plan_deletions',
    'aggregate',
    'format_size',
    'CleanupOrchestrator',
    'PlanExecutor'
]
