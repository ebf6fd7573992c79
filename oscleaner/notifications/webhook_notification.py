"""
Webhook notification channel for cleanup results.

Posts a Slack-compatible attachment message summarizing a cleanup run:
- one status line per service
- pre-cleanup size summaries
- the list of deleted indices
"""

import asyncio
from typing import Dict, Any, Optional, List

import aiohttp
import structlog

from oscleaner.retention.models import CleanupResult
from oscleaner.retention.summary import format_size

logger = structlog.get_logger(__name__)

SUCCESS_COLOR = "#2EB67D"
FAILURE_COLOR = "#E01E5A"
SUCCESS_ICON = ":white_check_mark:"
FAILURE_ICON = ":x:"


class WebhookNotificationChannel:
    """
    Webhook notification channel for cleanup results.

    Renders a CleanupResult into an attachment payload and delivers it to an
    incoming-webhook endpoint (Slack, Mattermost, Rocket.Chat...).
    """

    def __init__(self,
                 webhook_url: str,
                 project: str,
                 title_link: Optional[str] = None,
                 timeout_seconds: int = 30):
        """
        Initialize webhook notification channel.

        Args:
            webhook_url: Incoming webhook URL
            project: Project name shown in the message title
            title_link: Optional link attached to the title
            timeout_seconds: Total request timeout
        """
        if not webhook_url:
            raise ValueError("Webhook URL is required")

        self.webhook_url = webhook_url
        self.project = project
        self.title_link = title_link or None
        self.timeout_seconds = timeout_seconds

        logger.info("Webhook notification channel initialized", project=project)

    def _format_text(self, result: CleanupResult) -> str:
        short_descriptions: List[str] = []
        deleted_indexes: List[str] = []
        report_texts: List[str] = []

        for service_result in result.services:
            service = service_result.service

            if service_result.fetch_error is not None:
                short_descriptions.append(f"{service_result.message} - {FAILURE_ICON}")
                continue

            status = SUCCESS_ICON if service_result.failures == 0 else FAILURE_ICON
            short_descriptions.append(f"{service_result.message} - {status}")

            for deletion in service_result.deletes:
                if deletion.success:
                    deleted_indexes.append(
                        f"{SUCCESS_ICON} - {deletion.name} ({service}) - size: {deletion.size_bytes} bytes"
                    )
                else:
                    deleted_indexes.append(f"{FAILURE_ICON} - {deletion.name} ({service})")

            if service_result.summary:
                body = "\n".join(f"{name}: {format_size(total)}" for name, total in service_result.summary.items())
                report_texts.append(f"Summary for {service} (pre-cleanup):\n{body}\n")

        reports_text = ("\n\n" + "\n".join(report_texts)) if report_texts else ""
        if deleted_indexes:
            details_text = "\n\nDetails:\n\n" + "\n".join(deleted_indexes)
        else:
            details_text = "\n\nNot found any old indices by pre-defined rules."

        return "\n".join(short_descriptions) + reports_text + details_text

    def build_payload(self, result: CleanupResult) -> Dict[str, Any]:
        """Build the webhook payload for a cleanup result."""
        return {
            "attachments": [
                {
                    "color": FAILURE_COLOR if result.has_failures else SUCCESS_COLOR,
                    "text": self._format_text(result),
                    "title": f"{self.project} - Opensearch index cleanup",
                    "title_link": self.title_link
                }
            ]
        }

    async def send_cleanup_result(self, result: CleanupResult) -> bool:
        """
        Send a cleanup result to the webhook.

        Returns:
            True if the webhook accepted the message, False otherwise
        """
        payload = self.build_payload(result)

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.webhook_url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=self.timeout_seconds)
                ) as response:
                    if 200 <= response.status < 300:
                        logger.info("Cleanup notification sent",
                                    run_id=result.run_id,
                                    status_code=response.status)
                        return True

                    error_text = await response.text()
                    logger.warning("Notification response is not successful",
                                   run_id=result.run_id,
                                   status_code=response.status,
                                   error=error_text)
                    return False

        except asyncio.TimeoutError:
            logger.error("Webhook notification timeout", run_id=result.run_id)
            return False
        except aiohttp.ClientError as e:
            logger.error("Notification error", run_id=result.run_id, error=str(e))
            return False
