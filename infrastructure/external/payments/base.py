"""
Shared plumbing for gateway adapters: one pooled httpx client per adapter,
bounded retries on transport failures, structured logging.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from application.dtos.payments import CreatePaymentSession, PaymentSession
from application.ports.payment_gateway import PaymentGateway
from core.logging_config import get_logger


logger = get_logger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS = (httpx.TimeoutException, httpx.TransportError)


class BasePaymentClient(PaymentGateway):
    provider: str = "base"

    def __init__(
        self,
        *,
        timeouts: Optional[dict[str, float]] = None,
        retry: Optional[dict[str, Any]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        t = timeouts or {}
        self._timeout = httpx.Timeout(
            t.get("total", 5.0),
            connect=t.get("connect", 1.0),
            read=t.get("read", 3.0),
            write=t.get("write", 3.0),
        )
        r = retry or {}
        self._max_retries = int(r.get("max", 2))
        self._backoff = float(r.get("base", 0.2))
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    @property
    def http(self) -> httpx.AsyncClient:
        """Lazily created client, reused across calls until aclose()."""
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            client, self._http = self._http, None
            await client.aclose()

    async def _retry(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Run fn, retrying transport errors up to the configured count."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_retries + 1),
            wait=wait_exponential(multiplier=self._backoff, min=0.1, max=2.0),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    self._log("payment_request_retry", attempt=attempt.retry_state.attempt_number)
                return await fn()
        raise RuntimeError("unreachable")  # pragma: no cover

    async def create_session(self, req: CreatePaymentSession) -> PaymentSession:  # type: ignore[override]
        raise NotImplementedError

    def _log(self, event: str, **kwargs) -> None:
        logger.info(event, provider=self.provider, **kwargs)
