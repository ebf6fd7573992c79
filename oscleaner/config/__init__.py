"""
Configuration: environment settings and the rules document.
"""

from .settings import CleanerSettings, load_settings, parse_schedule
from .rules_config import RulesConfigError, RulesConfigManager, load_rules, parse_rules

__all__ = [
    'CleanerSettings',
    'load_settings',
    'parse_schedule',
    'RulesConfigError',
    'RulesConfigManager',
    'load_rules',
    'parse_rules'
]
