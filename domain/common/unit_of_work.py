"""Unit of Work abstraction"""
from __future__ import annotations

from abc import ABC, abstractmethod

from domain.app_config.repository import AppConfigRepository
from domain.download.repository import DownloadTokenRepository
from domain.order.repository import OrderRepository
from domain.product.repository import ProductRepository
from domain.user.repository import UserRepository


class AbstractUnitOfWork(ABC):
    """Transaction boundary for the application layer.

    Everything done through the repositories of one unit commits together or
    not at all.
    """

    order_repository: OrderRepository
    user_repository: UserRepository
    product_repository: ProductRepository
    download_token_repository: DownloadTokenRepository
    app_config_repository: AppConfigRepository

    def __init__(self, *, readonly: bool = False) -> None:
        self._committed = False
        self._readonly = readonly
        self.order_repository = None  # type: ignore[assignment]
        self.user_repository = None  # type: ignore[assignment]
        self.product_repository = None  # type: ignore[assignment]
        self.download_token_repository = None  # type: ignore[assignment]
        self.app_config_repository = None  # type: ignore[assignment]

    async def __aenter__(self) -> "AbstractUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc:
            await self.rollback()
        else:
            # auto-commit only for writable units not committed explicitly
            if not self._readonly and not self._committed:
                await self.commit()

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...
