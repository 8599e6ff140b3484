"""
User repository implementation - SQLAlchemy data access
"""
from decimal import Decimal
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.logging_config import get_logger
from domain.common.exceptions import AlreadyPurchasedException, UserNotFoundException
from domain.user.entity import User
from domain.user.repository import UserRepository
from infrastructure.models.user import UserModel, UserPurchaseModel


logger = get_logger(__name__)


class SQLAlchemyUserRepository(UserRepository):
    """SQLAlchemy implementation of the user repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            full_name=model.full_name,
            phone=model.phone,
            role=model.role,
            wallet_balance=model.wallet_balance,
            total_earnings=model.total_earnings,
            created_at=model.created_at,
        )

    async def get_by_id(self, user_id: str) -> Optional[User]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        db_user = result.scalar_one_or_none()
        return self._to_entity(db_user) if db_user else None

    async def credit_wallet(self, user_id: str, amount: Decimal) -> None:
        result = await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(
                wallet_balance=UserModel.wallet_balance + amount,
                total_earnings=UserModel.total_earnings + amount,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            logger.warning("credit_wallet_user_missing", user_id=user_id)
            raise UserNotFoundException(user_id)

    async def add_purchase(self, user_id: str, product_id: str) -> None:
        try:
            self.session.add(UserPurchaseModel(user_id=user_id, product_id=product_id))
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            logger.warning("add_purchase_conflict", user_id=user_id, product_id=product_id)
            raise AlreadyPurchasedException(user_id, product_id)
