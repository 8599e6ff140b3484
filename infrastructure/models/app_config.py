"""
Platform configuration model - a single row keyed ``app_config``
"""
from sqlalchemy import Column, String, Numeric, DateTime
from datetime import datetime, timezone

from .base import Base


class AppConfigModel(Base):
    __tablename__ = "app_config"

    id = Column(String(32), primary_key=True, default="app_config")
    commission_rate = Column(Numeric(precision=5, scale=2), nullable=True, comment="Platform commission percent")
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
        comment="Last update time"
    )
