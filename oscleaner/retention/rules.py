"""
Rule evaluation and deletion planning.

Pure decision functions: they take an index listing snapshot and a rule set
and decide which indices are old enough to delete. Nothing here talks to the
cluster.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from .models import DeletionPlan, IndexInfo, IndexRule, ServiceRules
from .patterns import matches
from .dates import age_in_days, extract_suffix_date

logger = logging.getLogger(__name__)


def is_hidden_index(name: str) -> bool:
    """System indices (``.kibana``, ``.opendistro-*``...) start with a dot."""
    return name.startswith(".")


def index_age_days(index: IndexInfo, rule: IndexRule, today: date) -> Optional[int]:
    """Age of the index according to the rule's date pattern, or None if unknown."""
    suffix_date = extract_suffix_date(index.name, rule.date_pattern)
    if suffix_date is None:
        return None
    return age_in_days(suffix_date, today)


def is_eligible(index: IndexInfo, rule: IndexRule, today: date) -> bool:
    """
    Decide whether a single rule makes an index deletable.

    The index must match the rule pattern and carry a parseable date suffix
    that is not in the future; it is eligible once its age reaches the
    threshold (inclusive).
    """
    if not matches(rule.index_pattern, index.name):
        return False

    age = index_age_days(index, rule, today)
    if age is None or age < 0:
        return False

    return age >= rule.age_threshold


def plan_deletions(indices: Iterable[IndexInfo], service_rules: ServiceRules, today: date) -> DeletionPlan:
    """
    Build the deletion plan for one service.

    An index is planned if any rule makes it eligible. Each index appears at
    most once and the plan keeps the order of the input listing.
    """
    plan = DeletionPlan(service=service_rules.service)
    planned = set()

    for index in indices:
        if index.name in planned:
            continue

        if is_hidden_index(index.name):
            if any(matches(rule.index_pattern, index.name) for rule in service_rules.rules):
                logger.info(f"Index with name {index.name} is protected.")
            continue

        for rule in service_rules.rules:
            if is_eligible(index, rule, today):
                logger.debug(
                    f"Index {index.name} is {index_age_days(index, rule, today)} days old "
                    f"(rule {rule.index_pattern}, threshold {rule.age_threshold})"
                )
                plan.entries.append(index)
                planned.add(index.name)
                break

            if matches(rule.index_pattern, index.name) and index_age_days(index, rule, today) is None:
                logger.warning(
                    f"Index {index.name} matches {rule.index_pattern} but has no "
                    f"date suffix in format {rule.date_pattern}; skipping"
                )

    return plan
