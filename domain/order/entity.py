"""
Order domain entity - one purchase attempt and its settlement figures
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from domain.common.exceptions import DomainValidationException


class OrderStatus(str, Enum):
    """Order status"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Normalize a timestamp to UTC (naive values are treated as UTC)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def generate_order_id() -> str:
    """ORD_ followed by 20 upper-case hex characters of a fresh UUID4."""
    return "ORD_" + uuid.uuid4().hex[:20].upper()


@dataclass
class Order:
    """
    Order aggregate

    Business rules:
    1. amount must be positive and is fixed at creation
    2. pending -> completed | failed, completed is final; a failed order
       still moves to completed when the gateway later reports SUCCESS
    3. fee/earning are only set by settlement
    """

    id: str
    buyer_id: str
    seller_id: str
    product_id: str
    amount: Decimal
    currency: str = "INR"
    status: OrderStatus = OrderStatus.PENDING

    platform_fee: Optional[Decimal] = None
    seller_earning: Optional[Decimal] = None
    payment_session_id: Optional[str] = None
    failure_reason: Optional[str] = None

    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    failed_at: Optional[datetime] = None

    def __post_init__(self):
        if self.amount is None or Decimal(self.amount) <= 0:
            raise DomainValidationException(
                f"Order amount must be positive: {self.amount}",
                field="amount",
            )
        self.amount = Decimal(self.amount)
        self.status = OrderStatus(self.status)
        self.created_at = ensure_utc(self.created_at)
        self.completed_at = ensure_utc(self.completed_at)
        self.failed_at = ensure_utc(self.failed_at)

    @classmethod
    def create_pending(
        cls,
        *,
        order_id: str,
        buyer_id: str,
        seller_id: str,
        product_id: str,
        amount: Decimal,
        currency: str,
        payment_session_id: Optional[str],
    ) -> "Order":
        return cls(
            id=order_id,
            buyer_id=buyer_id,
            seller_id=seller_id,
            product_id=product_id,
            amount=amount,
            currency=currency,
            status=OrderStatus.PENDING,
            payment_session_id=payment_session_id,
            created_at=datetime.now(timezone.utc),
        )

    def is_completed(self) -> bool:
        return self.status is OrderStatus.COMPLETED

    def is_owned_by(self, user_id: str) -> bool:
        return self.buyer_id == user_id
