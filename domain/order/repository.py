"""
Order repository interface
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from .entity import Order
from .service import Settlement


class OrderRepository(ABC):
    """Order persistence contract. Status changes are conditional writes only."""

    @abstractmethod
    async def create(self, order: Order) -> Order:
        """Persist a new pending order"""
        pass

    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def find_completed(self, buyer_id: str, product_id: str) -> Optional[Order]:
        """Completed order for a buyer/product pair, if any"""
        pass

    @abstractmethod
    async def list_completed_by_buyer(self, buyer_id: str, skip: int = 0, limit: int = 100) -> List[Order]:
        pass

    @abstractmethod
    async def mark_completed(self, order_id: str, settlement: Settlement, completed_at: datetime) -> bool:
        """
        Compare-and-set the order to completed.

        Returns False when the order is already completed (or missing), i.e.
        another delivery won the race.
        """
        pass

    @abstractmethod
    async def mark_failed(self, order_id: str, failed_at: datetime, reason: Optional[str] = None) -> bool:
        """Compare-and-set pending -> failed. Returns False if the order was not pending."""
        pass
