"""
Fire-and-forget notification dispatch.

Deliveries run as background tasks on the running loop; a failing sink is
logged and never propagates to the caller.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Set

from application.ports.notifications import Notification, NotificationSink
from core.logging_config import get_logger


logger = get_logger(__name__)


class NotificationDispatcher:
    def __init__(self, sink: NotificationSink) -> None:
        self._sink = sink
        # strong refs so pending tasks are not garbage collected
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def dispatch(self, notification: Notification) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("notification_dropped_no_loop", user_id=notification.user_id, title=notification.title)
            return
        task = loop.create_task(self._deliver(notification))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, notification: Notification) -> None:
        try:
            await self._sink.send(notification)
        except Exception as exc:
            logger.warning(
                "notification_delivery_failed",
                user_id=notification.user_id,
                title=notification.title,
                error=str(exc),
            )

    async def drain(self, timeout: Optional[float] = 5.0) -> None:
        """Wait for in-flight deliveries (shutdown, tests)."""
        if not self._pending:
            return
        done, still_pending = await asyncio.wait(set(self._pending), timeout=timeout)
        self._pending.difference_update(done)
        if still_pending:
            logger.warning("notification_drain_timeout", pending=len(still_pending))
