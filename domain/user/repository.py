"""
User repository interface - wallet and purchase-set access
"""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
from .entity import User


class UserRepository(ABC):
    """User repository contract. Wallet fields only move through increments."""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def credit_wallet(self, user_id: str, amount: Decimal) -> None:
        """Atomically add amount to wallet_balance and total_earnings.

        Raises UserNotFoundException when the user row does not exist.
        """
        pass

    @abstractmethod
    async def add_purchase(self, user_id: str, product_id: str) -> None:
        """Add a product to the user's purchase set.

        Raises AlreadyPurchasedException if the pair is already present.
        """
        pass
