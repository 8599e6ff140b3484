"""
Bearer token verification with PyJWT.
"""
from __future__ import annotations

from typing import Sequence

import jwt

from core.exceptions import TokenExpiredException, UnauthorizedException
from core.logging_config import get_logger


logger = get_logger(__name__)


class JWTCredentialVerifier:
    def __init__(self, secret_key: str, algorithms: Sequence[str] = ("HS256",)) -> None:
        self._secret_key = secret_key
        self._algorithms = list(algorithms)

    def verify(self, token: str) -> str:
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=self._algorithms)
        except jwt.ExpiredSignatureError:
            raise TokenExpiredException()
        except jwt.PyJWTError as e:
            logger.warning("invalid_access_token", error=str(e))
            raise UnauthorizedException("Invalid authentication credentials")

        # access tokens only; refresh tokens carry type=refresh
        token_type = payload.get("type")
        if token_type not in (None, "access"):
            raise UnauthorizedException("Wrong token type")

        subject = payload.get("sub")
        if not subject:
            raise UnauthorizedException("Token missing subject")
        return str(subject)
