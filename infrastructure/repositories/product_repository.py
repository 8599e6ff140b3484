"""
Product repository implementation - SQLAlchemy data access
"""
from typing import Dict, Iterable, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.common.exceptions import ProductNotFoundException
from domain.product.entity import Product
from domain.product.repository import ProductRepository
from infrastructure.models.product import ProductModel


class SQLAlchemyProductRepository(ProductRepository):
    """SQLAlchemy implementation of the product repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: ProductModel) -> Product:
        return Product(
            id=model.id,
            seller_id=model.seller_id,
            title=model.title,
            price=model.price,
            discount_price=model.discount_price,
            status=model.status,
            sales=model.sales,
            thumbnail_url=model.thumbnail_url,
            download_link=model.download_link,
            created_at=model.created_at,
        )

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        result = await self.session.execute(
            select(ProductModel).where(ProductModel.id == product_id)
        )
        db_product = result.scalar_one_or_none()
        return self._to_entity(db_product) if db_product else None

    async def get_many(self, product_ids: Iterable[str]) -> Dict[str, Product]:
        ids = list(set(product_ids))
        if not ids:
            return {}
        result = await self.session.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        )
        return {m.id: self._to_entity(m) for m in result.scalars().all()}

    async def increment_sales(self, product_id: str, by: int = 1) -> None:
        result = await self.session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(sales=ProductModel.sales + by)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise ProductNotFoundException(product_id)
