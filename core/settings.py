"""
Payment-related settings using pydantic-settings v2 with nested env keys.

Kept apart from core.config.Settings; env keys use the PAYMENT__ prefix.
"""
from __future__ import annotations

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field


class PaymentTimeouts(BaseModel):
    connect: float = 1.0
    read: float = 3.0
    write: float = 3.0
    total: float = 5.0


class PaymentRetry(BaseModel):
    max: int = 2
    base_backoff: float = 0.2


CASHFREE_BASE_URLS = {
    "sandbox": "https://sandbox.cashfree.com",
    "production": "https://api.cashfree.com",
}


class CashfreeSettings(BaseModel):
    app_id: Optional[str] = None
    secret_key: Optional[str] = None
    # signs webhooks; falls back to secret_key when unset
    webhook_secret: Optional[str] = None
    environment: str = "sandbox"
    api_version: str = "2023-08-01"
    currency: str = "INR"

    @property
    def base_url(self) -> str:
        return CASHFREE_BASE_URLS.get(self.environment.lower(), CASHFREE_BASE_URLS["sandbox"])

    @property
    def signing_secret(self) -> str:
        return self.webhook_secret or self.secret_key or ""


class PaymentSettings(BaseSettings):
    default_provider: str = "cashfree"
    timeouts: PaymentTimeouts = Field(default_factory=PaymentTimeouts)
    retry: PaymentRetry = Field(default_factory=PaymentRetry)

    cashfree: CashfreeSettings = Field(default_factory=CashfreeSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PAYMENT__",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )


payment_settings = PaymentSettings()
