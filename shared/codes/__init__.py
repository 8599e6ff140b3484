"""
Shared business codes used across layers (Domain/Core/API).

This package exposes BusinessCode at `shared.codes` and keeps
payment-specific codes under `shared.codes.payment_codes`.
"""
from enum import IntEnum


class BusinessCode(IntEnum):
    """Unified business status codes (single source of truth)."""

    # Success
    SUCCESS = 0

    # Parameter errors (1xxxx)
    PARAM_ERROR = 10000
    PARAM_MISSING = 10001
    PARAM_TYPE_ERROR = 10002
    PARAM_VALIDATION_ERROR = 10003

    # Business errors (2xxxx)
    BUSINESS_ERROR = 20000
    USER_NOT_FOUND = 20001
    TOKEN_INVALID = 20004
    TOKEN_EXPIRED = 20005
    NOT_FOUND = 20006  # Generic resource not found
    PRODUCT_NOT_FOUND = 20010
    PRODUCT_NOT_AVAILABLE = 20011
    ORDER_NOT_FOUND = 20020
    ALREADY_PURCHASED = 20021
    DOWNLOAD_TOKEN_NOT_FOUND = 20030
    DOWNLOAD_LINK_GONE = 20031

    # Authorization errors (3xxxx)
    PERMISSION_ERROR = 30000
    UNAUTHORIZED = 30001
    FORBIDDEN = 30002
    PURCHASE_REQUIRED = 30003

    # System errors (4xxxx)
    SYSTEM_ERROR = 40000
    DATABASE_ERROR = 40001
    NETWORK_ERROR = 40002
    SERVICE_UNAVAILABLE = 40003
    CONFIGURATION_ERROR = 40004
    DECRYPTION_ERROR = 40005

    # Upstream gateway errors (6xxxx, see payment_codes)
    GATEWAY_ERROR = 60000


__all__ = ["BusinessCode"]
