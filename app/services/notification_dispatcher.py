"""
Notification Dispatcher - Deliver a notification to its recipient.

If NOTIFICATION_WEBHOOK_URL is configured, each notification is POSTed as
JSON to that endpoint (e.g. a push/SMS gateway). Otherwise delivery is
simulated: the message is logged and counted as sent.
"""

import logging
from typing import Dict, Optional

import requests

from app.core.settings import settings

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Sends one notification per call. Returns True on success."""

    def __init__(self, webhook_url: Optional[str] = None, timeout: Optional[float] = None):
        self.webhook_url = webhook_url if webhook_url is not None else settings.NOTIFICATION_WEBHOOK_URL
        self.timeout = timeout if timeout is not None else settings.NOTIFICATION_WEBHOOK_TIMEOUT_SECONDS

    def deliver(self, notification: Dict) -> bool:
        if not self.webhook_url:
            logger.info(
                f"[SIMULATED] Notification {notification.get('notification_id')} "
                f"to user {notification.get('user_id')}: {notification.get('message')}"
            )
            return True

        payload = {
            "notification_id": notification.get("notification_id"),
            "user_id": notification.get("user_id"),
            "type": notification.get("type"),
            "message": notification.get("message"),
            "report_id": notification.get("report_id"),
        }

        try:
            resp = requests.post(self.webhook_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Notification webhook request failed for {payload['notification_id']}: {e}")
            return False

        if resp.status_code >= 300:
            logger.warning(
                f"Notification webhook returned {resp.status_code} for {payload['notification_id']}"
            )
            return False
        return True
