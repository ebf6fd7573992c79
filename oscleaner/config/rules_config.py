"""
Rules document loading and validation.

The rules document is a YAML list of service entries::

    - service: my-opensearch
      rules:
        - index_pattern: "*-logs-*"
          age_threshold: 14
          date_pattern: "%Y.%m.%d"
      summary_reports:
        - pattern: "*-logs-*"
          name: Logs
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from oscleaner.retention.models import DEFAULT_DATE_PATTERN, IndexRule, ServiceRules, SummarySpec

logger = logging.getLogger(__name__)


class RulesConfigError(ValueError):
    """Raised when the rules document cannot be read or is invalid."""


class RulesConfigManager:
    """Loads the rules document into ServiceRules objects."""

    def __init__(self, rules_path: str):
        self.rules_path = Path(rules_path)
        self.services = self._load_rules()

    def _load_rules(self) -> List[ServiceRules]:
        """Load rules from the YAML file."""
        if not self.rules_path.exists():
            raise RulesConfigError(f"Rules file not found: {self.rules_path}")

        try:
            with open(self.rules_path, 'r') as f:
                rules_data = yaml.safe_load(f)
        except OSError as e:
            raise RulesConfigError(f"Error reading rules file {self.rules_path}: {e}") from e
        except yaml.YAMLError as e:
            raise RulesConfigError(f"Error parsing YAML in {self.rules_path}: {e}") from e

        services = parse_rules(rules_data)
        logger.info(f"Loaded rules for {len(services)} services from {self.rules_path}")
        return services

    def get_service(self, service: str) -> ServiceRules:
        """Get the rules of one service."""
        for service_rules in self.services:
            if service_rules.service == service:
                return service_rules
        raise KeyError(service)

    def get_service_names(self) -> List[str]:
        return [service_rules.service for service_rules in self.services]


def parse_rules(rules_data: Any) -> List[ServiceRules]:
    """Parse and validate a loaded rules document."""
    if rules_data is None:
        return []
    if not isinstance(rules_data, list):
        raise RulesConfigError("Rules document must be a list of service entries")

    services = [_parse_service(entry, position) for position, entry in enumerate(rules_data)]

    seen = set()
    for service_rules in services:
        if service_rules.service in seen:
            raise RulesConfigError(f"Service {service_rules.service} is configured more than once")
        seen.add(service_rules.service)

    return services


def _parse_service(entry: Dict[str, Any], position: int) -> ServiceRules:
    if not isinstance(entry, dict):
        raise RulesConfigError(f"Service entry #{position} must be a mapping")

    service = entry.get('service')
    if not isinstance(service, str) or not service:
        raise RulesConfigError(f"Service entry #{position} needs a non-empty 'service' name")

    rules_data = entry.get('rules')
    if not isinstance(rules_data, list):
        raise RulesConfigError(f"Service {service}: 'rules' must be a list")

    reports_data = entry.get('summary_reports') or []
    if not isinstance(reports_data, list):
        raise RulesConfigError(f"Service {service}: 'summary_reports' must be a list")

    return ServiceRules(
        service=service,
        rules=[_parse_rule(service, rule, i) for i, rule in enumerate(rules_data)],
        summary_reports=[_parse_summary(service, report, i) for i, report in enumerate(reports_data)]
    )


def _parse_rule(service: str, rule: Dict[str, Any], position: int) -> IndexRule:
    if not isinstance(rule, dict):
        raise RulesConfigError(f"Service {service}: rule #{position} must be a mapping")

    index_pattern = rule.get('index_pattern')
    if not isinstance(index_pattern, str):
        raise RulesConfigError(f"Service {service}: rule #{position} needs an 'index_pattern'")

    age_threshold = rule.get('age_threshold')
    # bool is an int subclass, reject it explicitly
    if isinstance(age_threshold, bool) or not isinstance(age_threshold, int) or age_threshold < 0:
        raise RulesConfigError(
            f"Service {service}: rule {index_pattern} needs a non-negative integer 'age_threshold'"
        )

    date_pattern = rule.get('date_pattern')
    if date_pattern is None:
        date_pattern = DEFAULT_DATE_PATTERN
    elif not isinstance(date_pattern, str) or not date_pattern:
        raise RulesConfigError(f"Service {service}: rule {index_pattern} has an invalid 'date_pattern'")

    return IndexRule(index_pattern=index_pattern, age_threshold=age_threshold, date_pattern=date_pattern)


def _parse_summary(service: str, report: Dict[str, Any], position: int) -> SummarySpec:
    if not isinstance(report, dict):
        raise RulesConfigError(f"Service {service}: summary report #{position} must be a mapping")

    pattern = report.get('pattern')
    name = report.get('name')
    if not isinstance(pattern, str) or not isinstance(name, str):
        raise RulesConfigError(
            f"Service {service}: summary report #{position} needs 'pattern' and 'name'"
        )
    return SummarySpec(pattern=pattern, name=name)


def load_rules(rules_path: str) -> List[ServiceRules]:
    """Load the rules document at ``rules_path``."""
    return RulesConfigManager(rules_path).services
