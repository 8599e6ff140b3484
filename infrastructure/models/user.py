"""
User database model - SQLAlchemy ORM mapping
Infrastructure detail only; business rules live in domain.user.entity.User
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, UniqueConstraint
from datetime import datetime, timezone

from .base import Base


class UserModel(Base):
    """
    User table

    wallet_balance and total_earnings are only ever changed with
    ``col = col + :delta`` updates.
    """
    __tablename__ = "users"

    # identity-provider subject
    id = Column(String(128), primary_key=True, comment="User ID")

    email = Column(String(255), index=True, nullable=False, comment="Email")
    phone = Column(String(20), nullable=True, comment="Phone number")
    full_name = Column(String(100), nullable=True, comment="Full name")
    role = Column(String(20), nullable=False, default="buyer", comment="buyer/seller/admin")

    wallet_balance = Column(
        Numeric(precision=15, scale=2),
        nullable=False,
        default=0,
        comment="Withdrawable balance"
    )
    total_earnings = Column(
        Numeric(precision=15, scale=2),
        nullable=False,
        default=0,
        comment="Lifetime earnings"
    )

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
        return f"<UserModel(id='{self.id}', email='{self.email}')>"


class UserPurchaseModel(Base):
    """
    A buyer's purchase set

    The unique (user_id, product_id) constraint is what guarantees a product is
    settled at most once per buyer, even for two concurrently pending orders.
    """
    __tablename__ = "user_purchases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        String(128),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Buyer user ID"
    )
    product_id = Column(String(128), nullable=False, comment="Purchased product ID")
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        comment="Purchase time"
    )

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_user_purchases_user_product"),
    )

    def __repr__(self):
        return f"<UserPurchaseModel(user_id='{self.user_id}', product_id='{self.product_id}')>"
