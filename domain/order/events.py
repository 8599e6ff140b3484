"""
Order domain events.

Dataclass events record lifecycle facts after a transaction commits; the
application turns them into notifications. The domain stays free of
infrastructure imports.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
import uuid


@dataclass
class OrderEvent:
    order_id: str
    buyer_id: str
    product_id: str
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class OrderCompleted(OrderEvent):
    seller_id: str = ""
    seller_earning: Decimal = Decimal("0")
    platform_fee: Decimal = Decimal("0")


@dataclass
class OrderFailed(OrderEvent):
    reason: Optional[str] = None
