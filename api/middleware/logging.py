"""
Request/response logging middleware

One ``request_started`` and one completion event per request, with timing.
Download redemption paths are redacted and the webhook body is never read
here, since its signature covers the exact bytes the route receives.
"""
import json
import time
from typing import Any, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from api.utils.redaction import redact_path
from core.config import settings
from core.logging_config import get_logger


logger = get_logger(__name__)

BODY_METHODS = {"POST", "PUT", "PATCH"}


class LoggingMiddleware(BaseHTTPMiddleware):
    SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}
    SKIP_BODY_PATHS = {"/api/v1/payments/webhook"}
    SENSITIVE_FIELDS = {"password", "token", "secret", "api_key", "access_token", "signature", "download_link"}

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.log_body_by_default: bool = settings.LOG_REQUEST_BODY_ENABLE_BY_DEFAULT
        self.max_body_bytes: int = settings.LOG_REQUEST_BODY_MAX_BYTES

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        info = await self._request_info(request)
        logger.info("request_started", **info)

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                duration=round(time.perf_counter() - started, 4),
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
                **info,
            )
            raise

        duration = time.perf_counter() - started
        response.headers["X-Process-Time"] = f"{duration:.3f}"
        self._log_completion(response, duration, info)
        return response

    async def _request_info(self, request: Request) -> dict:
        info: dict = {
            "method": request.method,
            "path": redact_path(request.url.path),
            "query_params": self._sanitize(dict(request.query_params)),
        }
        if request.method in BODY_METHODS and self._should_log_body(request):
            body = await self._body_snippet(request)
            if body is not None:
                info["body"] = body
        user_agent = request.headers.get("User-Agent")
        if user_agent:
            info["user_agent"] = user_agent
        return info

    def _should_log_body(self, request: Request) -> bool:
        if request.url.path in self.SKIP_BODY_PATHS:
            return False
        # X-Log-Body: true/false overrides the default
        override = (request.headers.get("X-Log-Body") or "").lower()
        if override in {"true", "1", "yes"}:
            return True
        if override in {"false", "0", "no"}:
            return False
        return self.log_body_by_default and settings.DEBUG

    async def _body_snippet(self, request: Request) -> Optional[Any]:
        raw = await request.body()
        if not raw:
            return None
        text = raw[: self.max_body_bytes].decode("utf-8", errors="ignore")
        if "application/json" in request.headers.get("content-type", "").lower():
            try:
                return self._sanitize(json.loads(text))
            except ValueError:
                pass
        return text

    def _sanitize(self, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                k: "***" if str(k).lower() in self.SENSITIVE_FIELDS else self._sanitize(v)
                for k, v in data.items()
            }
        if isinstance(data, list):
            return [self._sanitize(v) for v in data]
        return data

    @staticmethod
    def _log_completion(response: Response, duration: float, info: dict) -> None:
        fields = {"status_code": response.status_code, "duration": round(duration, 4), **info}
        if response.status_code >= 500:
            logger.error("request_server_error", **fields)
        elif response.status_code >= 400:
            logger.warning("request_client_error", **fields)
        else:
            logger.info("request_completed", **fields)
