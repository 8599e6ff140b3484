"""
Credential verifier port.

Tokens are issued elsewhere; this service only checks them.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CredentialVerifier(Protocol):
    def verify(self, token: str) -> str:
        """Return the subject (user id) or raise UnauthorizedException/TokenExpiredException."""
        ...
