"""
Notification channels for cleanup results.
"""

from .webhook_notification import WebhookNotificationChannel

__all__ = [
    'WebhookNotificationChannel'
]
