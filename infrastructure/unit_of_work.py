"""SQLAlchemy Unit of Work implementation"""
from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction

from domain.common.unit_of_work import AbstractUnitOfWork
from infrastructure.repositories.app_config_repository import SQLAlchemyAppConfigRepository
from infrastructure.repositories.download_token_repository import SQLAlchemyDownloadTokenRepository
from infrastructure.repositories.order_repository import SQLAlchemyOrderRepository
from infrastructure.repositories.product_repository import SQLAlchemyProductRepository
from infrastructure.repositories.user_repository import SQLAlchemyUserRepository


class SQLAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    One AsyncSession shared by all repositories of the unit.

    Readonly units never open an explicit transaction and never commit; they
    are used for lookups that must not hold write locks.
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        session: Optional[AsyncSession] = None,
        *,
        readonly: bool = False,
    ) -> None:
        super().__init__(readonly=readonly)
        self._session_factory = session_factory
        self._owns_session = session is None
        self.session: Optional[AsyncSession] = session
        self._transaction: Optional[AsyncSessionTransaction] = None

    def _bind_repositories(self, session: Optional[AsyncSession]) -> None:
        if session is None:
            self.order_repository = None  # type: ignore[assignment]
            self.user_repository = None  # type: ignore[assignment]
            self.product_repository = None  # type: ignore[assignment]
            self.download_token_repository = None  # type: ignore[assignment]
            self.app_config_repository = None  # type: ignore[assignment]
            return
        self.order_repository = SQLAlchemyOrderRepository(session)
        self.user_repository = SQLAlchemyUserRepository(session)
        self.product_repository = SQLAlchemyProductRepository(session)
        self.download_token_repository = SQLAlchemyDownloadTokenRepository(session)
        self.app_config_repository = SQLAlchemyAppConfigRepository(session)

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        if self.session is None:
            self.session = self._session_factory()
        self._bind_repositories(self.session)
        if not self._readonly:
            self._transaction = await self.session.begin()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        finally:
            if self._transaction is not None and self._transaction.is_active:
                await self._transaction.close()
            self._transaction = None
            if self._owns_session and self.session is not None:
                await self.session.close()
                self.session = None
            self._bind_repositories(None)

    async def commit(self) -> None:
        if not self._readonly and self.session is not None and self.session.in_transaction():
            await self.session.commit()
        self._committed = True

    async def rollback(self) -> None:
        if self.session is not None and self.session.in_transaction():
            await self.session.rollback()
        self._committed = False
