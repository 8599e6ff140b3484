"""
Product database model - SQLAlchemy ORM mapping
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, Text
from datetime import datetime, timezone

from .base import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(128), primary_key=True, comment="Product ID")
    seller_id = Column(String(128), nullable=False, index=True, comment="Seller user ID")
    title = Column(String(255), nullable=False, comment="Title")

    price = Column(Numeric(precision=15, scale=2), nullable=False, comment="List price")
    discount_price = Column(Numeric(precision=15, scale=2), nullable=True, comment="Discounted price")

    status = Column(
        String(20),
        nullable=False,
        default="pending",
        index=True,
        comment="pending/approved/rejected"
    )
    sales = Column(Integer, nullable=False, default=0, comment="Completed sale count")

    thumbnail_url = Column(String(1024), nullable=True, comment="Thumbnail URL")
    # iv_hex:cipher_hex envelope
    download_link = Column(Text, nullable=True, comment="Encrypted download location")

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        comment="Creation time"
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
        comment="Last update time"
    )

    def __repr__(self):
        return f"<ProductModel(id='{self.id}', title='{self.title}', status='{self.status}')>"
