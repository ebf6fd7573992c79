"""
Runtime settings loader.

Settings come from environment variables (optionally from a .env file) and
are built once at process start, then passed explicitly to the components
that need them.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

from oscleaner.connectors.aiven import DEFAULT_API_URL


class CleanerSettings(BaseModel):
    """Index cleaner configuration."""
    rules_file: str = "rules.yaml"
    dry_run: bool = False
    aiven_api_token: str = ""
    aiven_project: str = ""
    aiven_api_url: str = DEFAULT_API_URL
    notification_webhook_url: str = ""
    notification_title_link: str = ""
    cleanup_schedule: str = "03:00"
    check_interval_minutes: int = 15
    reports_dir: str = "logs/cleanup"
    metrics_port: int = 0
    log_level: str = "INFO"

    @field_validator("cleanup_schedule")
    @classmethod
    def _check_schedule(cls, value: str) -> str:
        parse_schedule(value)
        return value

    @field_validator("check_interval_minutes", "metrics_port")
    @classmethod
    def _check_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must be non-negative")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level {value}")
        return level

    @property
    def notifications_enabled(self) -> bool:
        return bool(self.notification_webhook_url)

    @property
    def title_link(self) -> Optional[str]:
        return self.notification_title_link or None


def parse_schedule(value: str) -> tuple:
    """Parse an 'HH:MM' schedule into (hour, minute)."""
    try:
        hour_str, minute_str = value.split(":")
        hour, minute = int(hour_str), int(minute_str)
    except ValueError:
        raise ValueError(f"schedule must be in HH:MM format, got {value!r}")
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"schedule out of range: {value!r}")
    return hour, minute


_ENV_FIELDS = {
    "RULES_FILE": "rules_file",
    "CLEANUP_DRY_RUN": "dry_run",
    "AIVEN_API_TOKEN": "aiven_api_token",
    "AIVEN_PROJECT": "aiven_project",
    "AIVEN_API_URL": "aiven_api_url",
    "NOTIFICATION_WEBHOOK_URL": "notification_webhook_url",
    "NOTIFICATION_TITLE_LINK": "notification_title_link",
    "CLEANUP_SCHEDULE": "cleanup_schedule",
    "CHECK_INTERVAL_MINUTES": "check_interval_minutes",
    "REPORTS_DIR": "reports_dir",
    "METRICS_PORT": "metrics_port",
    "LOG_LEVEL": "log_level",
}


def load_settings(env_file: Optional[str] = None, **overrides) -> CleanerSettings:
    """
    Load settings from the environment.

    A .env file is read first if present; variables already set in the
    environment win. Keyword overrides (e.g. from CLI flags) win over both.
    """
    load_dotenv(env_file)

    values = {}
    for env_name, field_name in _ENV_FIELDS.items():
        value = (os.getenv(env_name) or "").strip()
        if value:
            values[field_name] = value

    values.update({key: value for key, value in overrides.items() if value is not None})
    return CleanerSettings(**values)
