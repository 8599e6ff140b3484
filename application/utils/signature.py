"""Gateway webhook signature helpers."""
from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Optional, Union


def _to_bytes(value: Union[str, bytes]) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


def sign_webhook_payload(secret: str, timestamp: str, raw_body: Union[str, bytes]) -> str:
    """base64(HMAC-SHA256(secret, timestamp + raw_body))"""
    digest = hmac.new(
        _to_bytes(secret),
        _to_bytes(timestamp) + _to_bytes(raw_body),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_webhook_signature(
    secret: str,
    timestamp: Optional[str],
    raw_body: Union[str, bytes],
    signature: Optional[str],
) -> bool:
    if not secret or not timestamp or not signature:
        return False
    expected = sign_webhook_payload(secret, timestamp, raw_body)
    return hmac.compare_digest(expected.encode("ascii"), _to_bytes(signature.strip()))
