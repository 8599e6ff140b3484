"""
Download token repository implementation - SQLAlchemy data access
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.logging_config import get_logger
from domain.download.entity import DownloadToken
from domain.download.repository import DownloadTokenRepository
from infrastructure.models.download_token import DownloadTokenModel


logger = get_logger(__name__)


class SQLAlchemyDownloadTokenRepository(DownloadTokenRepository):
    """SQLAlchemy implementation of the download token repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: DownloadTokenModel) -> DownloadToken:
        return DownloadToken(
            token=model.token,
            user_id=model.user_id,
            product_id=model.product_id,
            target_url=model.target_url,
            expires_at=model.expires_at,
            used=bool(model.used),
            created_at=model.created_at,
            used_at=model.used_at,
        )

    async def create(self, token: DownloadToken) -> DownloadToken:
        db_token = DownloadTokenModel(
            token=token.token,
            user_id=token.user_id,
            product_id=token.product_id,
            target_url=token.target_url,
            used=False,
            expires_at=token.expires_at,
            created_at=token.created_at,
        )
        self.session.add(db_token)
        await self.session.flush()
        logger.info(
            "download_token_created",
            user_id=token.user_id,
            product_id=token.product_id,
            expires_at=token.expires_at.isoformat(),
        )
        return token

    async def get(self, token: str) -> Optional[DownloadToken]:
        result = await self.session.execute(
            select(DownloadTokenModel).where(DownloadTokenModel.token == token)
        )
        db_token = result.scalar_one_or_none()
        return self._to_entity(db_token) if db_token else None

    async def mark_used(self, token: str, used_at: datetime) -> bool:
        result = await self.session.execute(
            update(DownloadTokenModel)
            .where(
                DownloadTokenModel.token == token,
                DownloadTokenModel.used == False,  # noqa: E712
            )
            .values(used=True, used_at=used_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
