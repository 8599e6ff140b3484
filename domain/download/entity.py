"""
Download token entity - a single-use, time-boxed capability
"""
from __future__ import annotations

import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from domain.order.entity import ensure_utc


def generate_token_value() -> str:
    """Random UUID4 plus 128 extra random bits; unrelated to any order/product id."""
    return f"{uuid.uuid4()}-{secrets.token_hex(16)}"


@dataclass
class DownloadToken:
    token: str
    user_id: str
    product_id: str
    target_url: str
    expires_at: datetime
    used: bool = False
    created_at: Optional[datetime] = None
    used_at: Optional[datetime] = None

    def __post_init__(self):
        self.expires_at = ensure_utc(self.expires_at)
        self.created_at = ensure_utc(self.created_at)
        self.used_at = ensure_utc(self.used_at)

    @classmethod
    def issue(cls, *, user_id: str, product_id: str, target_url: str, ttl: timedelta, now: datetime) -> "DownloadToken":
        return cls(
            token=generate_token_value(),
            user_id=user_id,
            product_id=product_id,
            target_url=target_url,
            expires_at=now + ttl,
            used=False,
            created_at=now,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = ensure_utc(now) or datetime.now(timezone.utc)
        return now > self.expires_at
