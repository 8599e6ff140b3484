"""
Download token database model - SQLAlchemy ORM mapping
Single-use capability rows; used flips false -> true at most once
"""
from sqlalchemy import Column, String, Boolean, DateTime, Text, Index
from datetime import datetime, timezone

from .base import Base


class DownloadTokenModel(Base):
    __tablename__ = "download_tokens"

    token = Column(String(128), primary_key=True, comment="Token value")
    user_id = Column(String(128), nullable=False, index=True, comment="Owning user ID")
    product_id = Column(String(128), nullable=False, comment="Product ID")

    target_url = Column(Text, nullable=False, comment="Decrypted download location")

    used = Column(Boolean, default=False, nullable=False, comment="Whether redeemed")
    used_at = Column(DateTime(timezone=True), nullable=True, comment="Redemption time")

    expires_at = Column(DateTime(timezone=True), nullable=False, comment="Expiry time")
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        comment="Creation time"
    )

    __table_args__ = (
        Index("ix_download_tokens_user_product", "user_id", "product_id"),
    )

    def __repr__(self):
        # never render the token or target
        return f"<DownloadTokenModel(user_id='{self.user_id}', product_id='{self.product_id}', used={self.used})>"
