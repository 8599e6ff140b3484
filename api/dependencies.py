"""
API dependencies - authentication and service lookup
"""
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional

import structlog

from application.ports.credentials import CredentialVerifier
from application.services.download_service import DownloadTokenService
from application.services.order_service import OrderLifecycleService
from core.exceptions import UnauthorizedException

# HTTP Bearer for direct API calls
http_bearer = HTTPBearer(
    scheme_name="Bearer",
    description="JWT Bearer token authentication",
    auto_error=False,
)


async def get_token(
    bearer_token: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer)
) -> str:
    """Extract the bearer token"""
    if bearer_token and bearer_token.credentials:
        return bearer_token.credentials
    raise UnauthorizedException("Authentication credentials were not provided")


def get_credential_verifier(request: Request) -> CredentialVerifier:
    return request.app.state.credential_verifier


async def get_current_user_id(
    token: str = Depends(get_token),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
) -> str:
    """Subject of the verified bearer token"""
    user_id = verifier.verify(token)
    structlog.contextvars.bind_contextvars(user_id=user_id)
    return user_id


def get_order_service(request: Request) -> OrderLifecycleService:
    return request.app.state.order_service


def get_download_service(request: Request) -> DownloadTokenService:
    return request.app.state.download_service
