"""
Order database model - SQLAlchemy ORM mapping
Infrastructure detail only; business rules live in domain.order
"""
from sqlalchemy import Column, String, Numeric, DateTime, Index
from datetime import datetime, timezone

from .base import Base


class OrderModel(Base):
    """
    Order table

    status only moves through conditional UPDATEs issued by the repository.
    """
    __tablename__ = "orders"

    # ORD_ + 20 hex chars
    id = Column(String(32), primary_key=True, comment="Order ID")

    buyer_id = Column(String(128), nullable=False, index=True, comment="Buyer user ID")
    seller_id = Column(String(128), nullable=False, index=True, comment="Seller user ID")
    product_id = Column(String(128), nullable=False, index=True, comment="Product ID")

    amount = Column(Numeric(precision=15, scale=2), nullable=False, comment="Charged amount")
    currency = Column(String(3), nullable=False, default="INR", comment="ISO-4217 currency")

    status = Column(
        String(20),
        nullable=False,
        default="pending",
        index=True,
        comment="pending/completed/failed"
    )

    # settlement figures, written once on completion
    platform_fee = Column(Numeric(precision=15, scale=2), nullable=True, comment="Platform commission")
    seller_earning = Column(Numeric(precision=15, scale=2), nullable=True, comment="Seller share")

    payment_session_id = Column(String(255), nullable=True, comment="Gateway payment session ID")
    failure_reason = Column(String(200), nullable=True, comment="Why the order failed")

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
        comment="Creation time"
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
        comment="Last update time"
    )
    completed_at = Column(DateTime(timezone=True), nullable=True, comment="Settlement time")
    failed_at = Column(DateTime(timezone=True), nullable=True, comment="Failure time")

    __table_args__ = (
        Index("ix_orders_buyer_product_status", "buyer_id", "product_id", "status"),
    )

    def __repr__(self):
        return f"<OrderModel(id='{self.id}', buyer_id='{self.buyer_id}', status='{self.status}')>"
