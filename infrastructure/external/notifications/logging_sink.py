"""
Default notification sink: records each notification in the structured log.

Swap for a push provider adapter implementing NotificationSink.
"""
from __future__ import annotations

from application.ports.notifications import Notification
from core.logging_config import get_logger


logger = get_logger(__name__)


class LoggingNotificationSink:
    async def send(self, notification: Notification) -> None:
        logger.info(
            "notification_sent",
            user_id=notification.user_id,
            title=notification.title,
            body=notification.body,
            data=notification.data,
        )
