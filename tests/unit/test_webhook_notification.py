"""
Unit tests for the webhook notification channel.
"""

import asyncio
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from oscleaner.notifications.webhook_notification import (
    WebhookNotificationChannel, SUCCESS_COLOR, FAILURE_COLOR
)
from oscleaner.retention.models import CleanupResult, IndexDeletion, ServiceResult

GIB = 1024 ** 3


def make_result(services, dry_run=False):
    return CleanupResult(
        run_id="cleanup_20240105_030000",
        started_at=datetime(2024, 1, 5, 3, 0, tzinfo=timezone.utc),
        run_date=date(2024, 1, 5),
        dry_run=dry_run,
        services=services
    )


@pytest.fixture
def channel():
    return WebhookNotificationChannel(
        "https://hooks.example.com/services/T000/B000",
        "my-project",
        title_link="https://console.example.com/project/my-project"
    )


@pytest.fixture
def success_result():
    return make_result([
        ServiceResult(
            service="search-prod",
            deletes=[IndexDeletion("search-prod", "app-logs-2024.01.01", GIB, success=True)],
            total_bytes=3 * GIB,
            total_deleted_bytes=GIB,
            summary={"Logs": 3 * GIB},
            message="Cleanup finished for search-prod service: 1GiB data has been deleted. "
                    "(Remaining data size: 2GiB)"
        )
    ])


class TestWebhookPayload:
    """Test payload rendering."""

    def test_requires_url(self):
        with pytest.raises(ValueError):
            WebhookNotificationChannel("", "my-project")

    def test_success_payload(self, channel, success_result):
        payload = channel.build_payload(success_result)

        attachment = payload["attachments"][0]
        assert attachment["color"] == SUCCESS_COLOR
        assert attachment["title"] == "my-project - Opensearch index cleanup"
        assert attachment["title_link"] == "https://console.example.com/project/my-project"

        text = attachment["text"]
        assert text.startswith(
            "Cleanup finished for search-prod service: 1GiB data has been deleted. "
            "(Remaining data size: 2GiB) - :white_check_mark:"
        )
        assert "Summary for search-prod (pre-cleanup):\nLogs: 3GiB" in text
        assert "Details:" in text
        assert f":white_check_mark: - app-logs-2024.01.01 (search-prod) - size: {GIB} bytes" in text

    def test_nothing_deleted(self, channel):
        result = make_result([
            ServiceResult(service="search-prod", total_bytes=10,
                          message="Cleanup finished for search-prod service: 0B data has been deleted. "
                                  "(Remaining data size: 10B)")
        ])

        text = channel.build_payload(result)["attachments"][0]["text"]

        assert text.endswith("Not found any old indices by pre-defined rules.")
        assert "Details:" not in text
        assert "Summary for" not in text

    def test_failures_turn_payload_red(self, channel, success_result):
        success_result.services.append(ServiceResult(
            service="search-staging",
            fetch_error="Aiven API error 404: Service not found",
            message="Failed to list indices for search-staging: Aiven API error 404: Service not found"
        ))

        attachment = channel.build_payload(success_result)["attachments"][0]

        assert attachment["color"] == FAILURE_COLOR
        assert "Failed to list indices for search-staging: Aiven API error 404: Service not found - :x:" \
            in attachment["text"]

    def test_failed_delete_is_marked(self, channel):
        result = make_result([
            ServiceResult(
                service="search-prod",
                deletes=[IndexDeletion("search-prod", "app-logs-2024.01.01", GIB, success=False, error="boom")],
                total_bytes=GIB,
                failures=1,
                message="Cleanup finished for search-prod service: 0B data has been deleted. "
                        "(Remaining data size: 1GiB)"
            )
        ])

        attachment = channel.build_payload(result)["attachments"][0]

        assert attachment["color"] == FAILURE_COLOR
        assert ":x: - app-logs-2024.01.01 (search-prod)" in attachment["text"]
        assert "(Remaining data size: 1GiB) - :x:" in attachment["text"]

    def test_without_title_link(self, success_result):
        channel = WebhookNotificationChannel("https://hooks.example.com/x", "my-project")
        assert channel.build_payload(success_result)["attachments"][0]["title_link"] is None


class TestWebhookDelivery:
    """Test payload delivery."""

    @pytest.mark.asyncio
    async def test_send_success(self, channel, success_result):
        with patch('aiohttp.ClientSession.post') as mock_post:
            mock_response = AsyncMock()
            mock_response.status = 200
            mock_post.return_value.__aenter__.return_value = mock_response

            result = await channel.send_cleanup_result(success_result)

            assert result is True
            mock_post.assert_called_once()
            args, kwargs = mock_post.call_args
            assert args[0] == "https://hooks.example.com/services/T000/B000"
            assert kwargs["json"] == channel.build_payload(success_result)

    @pytest.mark.asyncio
    async def test_send_rejected(self, channel, success_result):
        with patch('aiohttp.ClientSession.post') as mock_post:
            mock_response = AsyncMock()
            mock_response.status = 400
            mock_response.text = AsyncMock(return_value="invalid_payload")
            mock_post.return_value.__aenter__.return_value = mock_response

            result = await channel.send_cleanup_result(success_result)

            assert result is False

    @pytest.mark.asyncio
    async def test_send_timeout(self, channel, success_result):
        with patch('aiohttp.ClientSession.post') as mock_post:
            mock_post.side_effect = asyncio.TimeoutError()

            result = await channel.send_cleanup_result(success_result)

            assert result is False

    @pytest.mark.asyncio
    async def test_send_connection_error(self, channel, success_result):
        with patch('aiohttp.ClientSession.post') as mock_post:
            mock_post.side_effect = aiohttp.ClientConnectionError("connection refused")

            result = await channel.send_cleanup_result(success_result)

            assert result is False
