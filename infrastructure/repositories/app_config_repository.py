"""
Platform configuration repository implementation
"""
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.app_config.repository import APP_CONFIG_ID, AppConfigRepository
from infrastructure.models.app_config import AppConfigModel


class SQLAlchemyAppConfigRepository(AppConfigRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_commission_rate(self) -> Optional[Decimal]:
        result = await self.session.execute(
            select(AppConfigModel.commission_rate).where(AppConfigModel.id == APP_CONFIG_ID)
        )
        rate = result.scalar_one_or_none()
        return Decimal(str(rate)) if rate is not None else None
