"""
Cashfree Payment Gateway adapter (PG orders API over httpx).

Notes on API usage:
- ``POST /pg/orders`` creates an order and returns ``payment_session_id``
  for the hosted checkout.
- Auth headers are ``x-client-id`` / ``x-client-secret``; every call pins
  ``x-api-version``.
- Webhooks are verified by the application layer (HMAC over timestamp + body),
  so this adapter only deals with the synchronous path.
"""
from __future__ import annotations

from typing import Any, Optional

import httpx

from application.dtos.payments import CreatePaymentSession, PaymentSession
from core.logging_config import get_logger
from core.settings import CashfreeSettings, PaymentSettings, payment_settings
from domain.common.exceptions import ConfigurationException
from infrastructure.external.payments.base import BasePaymentClient
from infrastructure.external.payments.exceptions import (
    PaymentProviderError,
    PaymentRecoverableError,
)


logger = get_logger(__name__)


class CashfreeClient(BasePaymentClient):
    provider = "cashfree"

    def __init__(
        self,
        settings: Optional[PaymentSettings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        cfg = settings or payment_settings
        super().__init__(
            timeouts=cfg.timeouts.model_dump(),
            retry={"max": cfg.retry.max, "base": cfg.retry.base_backoff},
            transport=transport,
        )
        self._cf: CashfreeSettings = cfg.cashfree

    def _headers(self) -> dict[str, str]:
        if not self._cf.app_id or not self._cf.secret_key:
            raise ConfigurationException("Cashfree credentials not configured (PAYMENT__CASHFREE__APP_ID / SECRET_KEY)")
        return {
            "x-client-id": self._cf.app_id,
            "x-client-secret": self._cf.secret_key,
            "x-api-version": self._cf.api_version,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @staticmethod
    def _build_order_body(req: CreatePaymentSession) -> dict[str, Any]:
        body: dict[str, Any] = {
            "order_id": req.order_id,
            # Cashfree expects a JSON number in major units
            "order_amount": float(req.amount),
            "order_currency": req.currency,
            "customer_details": req.customer.model_dump(exclude_none=True),
        }
        meta = {k: v for k, v in {"return_url": req.return_url, "notify_url": req.notify_url}.items() if v}
        if meta:
            body["order_meta"] = meta
        return body

    @staticmethod
    def _error_message(resp: httpx.Response) -> tuple[str, Optional[str]]:
        try:
            payload = resp.json()
        except ValueError:
            return (resp.text or f"HTTP {resp.status_code}"), None
        if isinstance(payload, dict):
            return str(payload.get("message") or f"HTTP {resp.status_code}"), payload.get("code")
        return f"HTTP {resp.status_code}", None

    async def create_session(self, req: CreatePaymentSession) -> PaymentSession:  # type: ignore[override]
        headers = self._headers()
        url = f"{self._cf.base_url}/pg/orders"
        body = self._build_order_body(req)
        self._log("cashfree_create_order_request", order_id=req.order_id, amount=str(req.amount), currency=req.currency)

        async def _do() -> httpx.Response:
            return await self.http.post(url, json=body, headers=headers)

        try:
            resp = await self._retry(_do)
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            logger.warning("cashfree_unreachable", order_id=req.order_id, error=str(exc))
            raise PaymentRecoverableError(
                "Payment gateway unreachable",
                provider=self.provider,
                details={"order_id": req.order_id},
            ) from exc

        if resp.status_code >= 400:
            message, provider_code = self._error_message(resp)
            logger.warning(
                "cashfree_create_order_rejected",
                order_id=req.order_id,
                status_code=resp.status_code,
                provider_code=provider_code,
                error=message,
            )
            error_cls = PaymentRecoverableError if resp.status_code == 429 or resp.status_code >= 500 else PaymentProviderError
            raise error_cls(
                message,
                provider=self.provider,
                provider_code=provider_code,
                details={"status_code": resp.status_code},
            )

        data = resp.json()
        session_id = data.get("payment_session_id") if isinstance(data, dict) else None
        if not session_id:
            raise PaymentProviderError(
                "Missing payment_session_id in gateway response",
                provider=self.provider,
                details={"order_id": req.order_id},
            )
        self._log("cashfree_create_order_response", order_id=req.order_id, order_status=data.get("order_status"))
        return PaymentSession(
            payment_session_id=str(session_id),
            provider=self.provider,
            gateway_order_id=str(data.get("order_id") or req.order_id),
        )
