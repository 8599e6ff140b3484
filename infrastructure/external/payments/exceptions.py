"""
Exceptions for payment providers, surfaced to the API as gateway errors.
"""
from __future__ import annotations

from typing import Optional
from domain.common.exceptions import GatewayException
from shared.codes.payment_codes import PaymentCode


class PaymentProviderError(GatewayException):
    """Provider rejected the request (non-2xx) or could not be reached"""

    def __init__(self, message: str, *, provider: str, provider_code: str | None = None, details: Optional[dict] = None):
        full_details = {"provider_code": provider_code} if provider_code else {}
        if details:
            full_details.update(details)
        super().__init__(message, provider=provider, details=full_details or None)
        self.error_type = "PaymentProviderError"


class PaymentRecoverableError(PaymentProviderError):
    """Transient provider failure (timeouts, 5xx, rate limits)"""

    def __init__(self, message: str, *, provider: str, provider_code: str | None = None, details: Optional[dict] = None):
        super().__init__(message, provider=provider, provider_code=provider_code, details=details)
        self.code = PaymentCode.PROVIDER_RECOVERABLE
        self.error_type = "PaymentRecoverableError"
