import asyncio
import pytest

from application.ports.notifications import Notification
from application.services.notification_dispatcher import NotificationDispatcher
from infrastructure.external.notifications import LoggingNotificationSink


class BrokenSink:
    def __init__(self) -> None:
        self.calls = 0

    async def send(self, notification: Notification) -> None:
        self.calls += 1
        raise RuntimeError("push provider down")


class SlowSink:
    def __init__(self) -> None:
        self.sent = []

    async def send(self, notification: Notification) -> None:
        await asyncio.sleep(0.01)
        self.sent.append(notification)


def _note(user_id: str = "seller-1") -> Notification:
    return Notification(user_id=user_id, title="New Sale!", body="₹900.00 added to your wallet", data={"type": "payment"})


@pytest.mark.asyncio
async def test_dispatch_does_not_wait_for_delivery():
    sink = SlowSink()
    dispatcher = NotificationDispatcher(sink)

    dispatcher.dispatch(_note())
    assert sink.sent == []
    assert dispatcher.pending == 1

    await dispatcher.drain()
    assert len(sink.sent) == 1
    assert dispatcher.pending == 0


@pytest.mark.asyncio
async def test_failing_sink_is_contained():
    sink = BrokenSink()
    dispatcher = NotificationDispatcher(sink)

    dispatcher.dispatch(_note())
    dispatcher.dispatch(_note("buyer-1"))
    await dispatcher.drain()

    assert sink.calls == 2
    assert dispatcher.pending == 0


def test_dispatch_without_loop_is_dropped():
    sink = SlowSink()
    dispatcher = NotificationDispatcher(sink)
    dispatcher.dispatch(_note())
    assert dispatcher.pending == 0


@pytest.mark.asyncio
async def test_logging_sink_accepts_notifications():
    dispatcher = NotificationDispatcher(LoggingNotificationSink())
    dispatcher.dispatch(_note())
    await dispatcher.drain()
    assert dispatcher.pending == 0
