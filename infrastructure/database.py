"""
Database engine and session factory management

A ``Database`` is built once at startup (FastAPI lifespan) and handed to
whatever needs sessions; nothing here is created at import time.
"""
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.logging_config import get_logger
from infrastructure.models import Base


logger = get_logger(__name__)


def _build_async_url(database_url: str) -> str:
    """Make sure the URL names an async driver"""
    url = make_url(database_url)
    drivername = url.drivername

    if "+" in drivername:
        return database_url

    driver_map = {
        "postgresql": "postgresql+asyncpg",
        "postgres": "postgresql+asyncpg",
        "sqlite": "sqlite+aiosqlite",
    }

    if drivername not in driver_map:
        raise ValueError(f"Unsupported database driver: {drivername}. Use an async driver or update the database url")

    async_driver = driver_map[drivername]
    return url.set(drivername=async_driver).render_as_string(hide_password=False)


class Database:
    """Owns the async engine and the session factory"""

    def __init__(self, url: str, *, echo: bool = False, engine: Optional[AsyncEngine] = None) -> None:
        self.url = _build_async_url(url)
        self.engine: AsyncEngine = engine or create_async_engine(self.url, echo=echo)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
        )

    async def create_tables(self) -> None:
        """Create every table known to the ORM metadata"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_tables_created")

    async def ping(self) -> bool:
        """True when a trivial query round-trips."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.warning("database_ping_failed", error=str(exc))
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("database_disposed")
