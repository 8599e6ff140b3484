"""
Notification sink port.

Delivery is best-effort; the application never waits on it for correctness.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field


class Notification(BaseModel):
    user_id: str
    title: str
    body: str
    data: dict[str, str] = Field(default_factory=dict)


@runtime_checkable
class NotificationSink(Protocol):
    async def send(self, notification: Notification) -> None: ...
