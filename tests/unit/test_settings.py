"""
Unit tests for runtime settings.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from oscleaner.config.settings import CleanerSettings, load_settings, parse_schedule

MISSING_ENV_FILE = "/nonexistent/oscleaner.env"


class TestLoadSettings:
    """Test suite for load_settings()."""

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        settings = load_settings(MISSING_ENV_FILE)

        assert settings.rules_file == "rules.yaml"
        assert settings.dry_run is False
        assert settings.aiven_api_url == "https://api.aiven.io"
        assert settings.cleanup_schedule == "03:00"
        assert settings.check_interval_minutes == 15
        assert settings.reports_dir == "logs/cleanup"
        assert settings.metrics_port == 0
        assert settings.log_level == "INFO"
        assert settings.notifications_enabled is False
        assert settings.title_link is None

    @patch.dict(os.environ, {
        'RULES_FILE': '/etc/oscleaner/rules.yaml',
        'CLEANUP_DRY_RUN': 'true',
        'AIVEN_API_TOKEN': ' secret-token ',
        'AIVEN_PROJECT': 'my-project',
        'NOTIFICATION_WEBHOOK_URL': 'https://hooks.example.com/T000/B000',
        'NOTIFICATION_TITLE_LINK': 'https://console.example.com/project',
        'CHECK_INTERVAL_MINUTES': '5',
        'LOG_LEVEL': 'debug',
    }, clear=True)
    def test_environment(self):
        settings = load_settings(MISSING_ENV_FILE)

        assert settings.rules_file == '/etc/oscleaner/rules.yaml'
        assert settings.dry_run is True
        assert settings.aiven_api_token == 'secret-token'
        assert settings.aiven_project == 'my-project'
        assert settings.notifications_enabled is True
        assert settings.title_link == 'https://console.example.com/project'
        assert settings.check_interval_minutes == 5
        assert settings.log_level == 'DEBUG'

    @patch.dict(os.environ, {'CLEANUP_DRY_RUN': '', 'NOTIFICATION_WEBHOOK_URL': '  '}, clear=True)
    def test_empty_values_are_ignored(self):
        settings = load_settings(MISSING_ENV_FILE)

        assert settings.dry_run is False
        assert settings.notifications_enabled is False

    @patch.dict(os.environ, {'CLEANUP_DRY_RUN': 'false', 'RULES_FILE': 'env.yaml'}, clear=True)
    def test_overrides_win(self):
        settings = load_settings(MISSING_ENV_FILE, dry_run=True, rules_file=None)

        assert settings.dry_run is True
        assert settings.rules_file == 'env.yaml'

    @patch.dict(os.environ, {}, clear=True)
    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("AIVEN_PROJECT=from-dotenv\nCLEANUP_SCHEDULE=04:30\n")

        settings = load_settings(str(env_file))

        assert settings.aiven_project == 'from-dotenv'
        assert settings.cleanup_schedule == '04:30'

    @patch.dict(os.environ, {'CLEANUP_SCHEDULE': '25:00'}, clear=True)
    def test_invalid_schedule(self):
        with pytest.raises(ValueError):
            load_settings(MISSING_ENV_FILE)


class TestCleanerSettings:
    """Test settings validation."""

    def test_negative_interval(self):
        with pytest.raises(ValidationError):
            CleanerSettings(check_interval_minutes=-1)

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            CleanerSettings(log_level='LOUD')


@pytest.mark.parametrize("value,expected", [
    ("03:00", (3, 0)),
    ("00:00", (0, 0)),
    ("23:59", (23, 59)),
    ("4:05", (4, 5)),
])
def test_parse_schedule(value, expected):
    assert parse_schedule(value) == expected


@pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "12", "12:00:00", ""])
def test_parse_schedule_invalid(value):
    with pytest.raises(ValueError):
        parse_schedule(value)
