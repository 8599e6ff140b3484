"""
Product domain entity
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


PURCHASABLE_STATUS = "approved"


@dataclass
class Product:
    """A digital product listed by a seller"""

    id: str
    seller_id: str
    title: str
    price: Decimal
    discount_price: Optional[Decimal] = None
    status: str = "pending"
    sales: int = 0
    thumbnail_url: Optional[str] = None
    # cipher envelope, never plaintext
    download_link: Optional[str] = None
    created_at: Optional[datetime] = None

    def is_purchasable(self) -> bool:
        return self.status == PURCHASABLE_STATUS

    def charge_amount(self) -> Decimal:
        """Discount price wins when set, otherwise the list price."""
        if self.discount_price is not None and Decimal(self.discount_price) > 0:
            return Decimal(self.discount_price)
        return Decimal(self.price)

    def has_download_link(self) -> bool:
        return bool(self.download_link)
