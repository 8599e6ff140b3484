"""
Payment specific codes and gateway status mapping.
"""
from __future__ import annotations

from enum import IntEnum


class PaymentCode(IntEnum):
    # Provider/Network errors (6xxxx)
    PROVIDER_RECOVERABLE = 60001


# Gateway payment_status -> callback outcome. Anything unmapped is acknowledged
# without touching the order.
PROVIDER_STATUS_TO_INTERNAL = {
    "cashfree": {
        "SUCCESS": "succeeded",
        "FAILED": "failed",
        "USER_DROPPED": "ignored",
        "PENDING": "ignored",
        "NOT_ATTEMPTED": "ignored",
        "CANCELLED": "ignored",
        "VOID": "ignored",
    },
}
