"""
Product repository interface
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from .entity import Product


class ProductRepository(ABC):

    @abstractmethod
    async def get_by_id(self, product_id: str) -> Optional[Product]:
        pass

    @abstractmethod
    async def get_many(self, product_ids: Iterable[str]) -> Dict[str, Product]:
        """Products keyed by id; unknown ids are simply absent"""
        pass

    @abstractmethod
    async def increment_sales(self, product_id: str, by: int = 1) -> None:
        """Atomically bump the sale counter. Raises ProductNotFoundException if missing."""
        pass
