"""
Payment gateway DTOs (Pydantic v2) used at the gateway port boundary.
"""
from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field, field_validator
from pydantic.types import condecimal

# Currencies the gateway accepts for this marketplace
ISO_4217 = {"INR", "USD"}


class CustomerDetails(BaseModel):
    customer_id: str
    customer_email: Optional[str] = None
    customer_phone: str
    customer_name: Optional[str] = None


class CreatePaymentSession(BaseModel):
    order_id: str
    amount: condecimal(gt=0, decimal_places=2)  # type: ignore[valid-type]
    currency: str = Field(default="INR")
    customer: CustomerDetails
    return_url: Optional[str] = None
    notify_url: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def _upper_and_validate_currency(cls, v: str) -> str:
        u = (v or "").upper()
        if len(u) != 3 or not u.isalpha():
            raise ValueError("currency must be ISO-4217 alpha-3")
        if u not in ISO_4217:
            raise ValueError("unsupported currency")
        return u


class PaymentSession(BaseModel):
    payment_session_id: str
    provider: str
    gateway_order_id: Optional[str] = None
