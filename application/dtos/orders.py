"""
Order and download DTOs (Pydantic v2) returned by the application services.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class PurchaseRequest(BaseModel):
    # Optional so a missing id surfaces as a business error, not a 422
    product_id: Optional[str] = None


class PurchaseSession(BaseModel):
    payment_session_id: str
    order_id: str


class CallbackStatus(str, Enum):
    """Outcome reported back to the gateway for one callback delivery"""
    SIGNATURE_MISSING = "signature_missing"
    INVALID_SIGNATURE = "invalid_signature"
    MISSING_ORDER_ID = "missing_order_id"
    ORDER_NOT_FOUND = "order_not_found"
    ALREADY_COMPLETED = "already_completed"
    ALREADY_PURCHASED = "already_purchased"
    OK = "ok"
    ERROR = "error"


class CallbackAck(BaseModel):
    status: CallbackStatus
    message: str = ""

    model_config = ConfigDict(use_enum_values=True)


class OrderStatusView(BaseModel):
    order_id: str
    status: str
    product_id: str


class PurchaseView(BaseModel):
    order_id: str
    product_id: str
    product_title: str
    product_thumbnail: Optional[str] = None
    amount: Decimal
    currency: str
    completed_at: Optional[datetime] = None


class DownloadTokenView(BaseModel):
    token: str
