"""
Order repository implementation - SQLAlchemy data access
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.logging_config import get_logger
from domain.order.entity import Order, OrderStatus
from domain.order.repository import OrderRepository
from domain.order.service import Settlement
from infrastructure.models.order import OrderModel


logger = get_logger(__name__)


class SQLAlchemyOrderRepository(OrderRepository):
    """SQLAlchemy implementation of the order repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: OrderModel) -> Order:
        return Order(
            id=model.id,
            buyer_id=model.buyer_id,
            seller_id=model.seller_id,
            product_id=model.product_id,
            amount=model.amount,
            currency=model.currency,
            status=OrderStatus(model.status),
            platform_fee=model.platform_fee,
            seller_earning=model.seller_earning,
            payment_session_id=model.payment_session_id,
            failure_reason=model.failure_reason,
            created_at=model.created_at,
            completed_at=model.completed_at,
            failed_at=model.failed_at,
        )

    def _to_model(self, entity: Order) -> OrderModel:
        return OrderModel(
            id=entity.id,
            buyer_id=entity.buyer_id,
            seller_id=entity.seller_id,
            product_id=entity.product_id,
            amount=entity.amount,
            currency=entity.currency,
            status=entity.status.value,
            payment_session_id=entity.payment_session_id,
            created_at=entity.created_at,
        )

    async def create(self, order: Order) -> Order:
        db_order = self._to_model(order)
        self.session.add(db_order)
        await self.session.flush()
        await self.session.refresh(db_order)
        return self._to_entity(db_order)

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        result = await self.session.execute(
            select(OrderModel).where(OrderModel.id == order_id)
        )
        db_order = result.scalar_one_or_none()
        return self._to_entity(db_order) if db_order else None

    async def find_completed(self, buyer_id: str, product_id: str) -> Optional[Order]:
        result = await self.session.execute(
            select(OrderModel)
            .where(
                OrderModel.buyer_id == buyer_id,
                OrderModel.product_id == product_id,
                OrderModel.status == OrderStatus.COMPLETED.value,
            )
            .limit(1)
        )
        db_order = result.scalar_one_or_none()
        return self._to_entity(db_order) if db_order else None

    async def list_completed_by_buyer(self, buyer_id: str, skip: int = 0, limit: int = 100) -> List[Order]:
        # newest first, id as tie breaker so paging is stable
        query = (
            select(OrderModel)
            .where(
                OrderModel.buyer_id == buyer_id,
                OrderModel.status == OrderStatus.COMPLETED.value,
            )
            .order_by(OrderModel.completed_at.desc(), OrderModel.id.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def mark_completed(self, order_id: str, settlement: Settlement, completed_at: datetime) -> bool:
        result = await self.session.execute(
            update(OrderModel)
            .where(
                OrderModel.id == order_id,
                # pending or failed; a late SUCCESS wins over an earlier FAILED
                OrderModel.status != OrderStatus.COMPLETED.value,
            )
            .values(
                status=OrderStatus.COMPLETED.value,
                platform_fee=settlement.platform_fee,
                seller_earning=settlement.seller_earning,
                completed_at=completed_at,
                failure_reason=None,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount > 0:
            logger.info("order_marked_completed", order_id=order_id)
            return True
        return False

    async def mark_failed(self, order_id: str, failed_at: datetime, reason: Optional[str] = None) -> bool:
        result = await self.session.execute(
            update(OrderModel)
            .where(
                OrderModel.id == order_id,
                OrderModel.status == OrderStatus.PENDING.value,
            )
            .values(
                status=OrderStatus.FAILED.value,
                failed_at=failed_at,
                failure_reason=reason,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount > 0:
            logger.info("order_marked_failed", order_id=order_id, reason=reason)
            return True
        return False
