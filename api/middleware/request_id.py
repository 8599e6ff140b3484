"""
Request ID middleware

Reuses an incoming X-Request-ID or mints one, binds it (with client ip and
the redacted path) to structlog contextvars and echoes it on the response.
"""
import uuid

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from api.utils.redaction import redact_path


def client_ip(request: Request) -> str:
    """First hop of X-Forwarded-For, then X-Real-IP, then the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip
    return request.client.host if request.client else "unknown"


class RequestIDMiddleware(BaseHTTPMiddleware):
    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid.uuid4())
        ip = client_ip(request)

        request.state.request_id = request_id
        request.state.client_ip = ip

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            client_ip=ip,
            method=request.method,
            path=redact_path(request.url.path),
        )

        response = await call_next(request)
        response.headers[self.HEADER_NAME] = request_id
        return response
