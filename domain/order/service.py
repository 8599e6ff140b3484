"""
Order domain service - commission and settlement arithmetic
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from domain.common.exceptions import DomainValidationException


CENT = Decimal("0.01")
HUNDRED = Decimal("100")

Number = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class Settlement:
    """Result of splitting an order amount between platform and seller"""
    amount: Decimal
    commission_rate: Decimal
    platform_fee: Decimal
    seller_earning: Decimal


def resolve_commission_rate(configured: Optional[Number], default: Number) -> Decimal:
    """
    Pick the commission rate (percent) applied at settlement.

    A missing or zero configured rate falls back to the default, mirroring how
    the platform config has always been read.
    """
    rate = Decimal(str(configured)) if configured is not None else Decimal("0")
    if rate == 0:
        rate = Decimal(str(default))
    if rate < 0 or rate > HUNDRED:
        raise DomainValidationException(
            f"Commission rate out of range: {rate}",
            field="commission_rate",
        )
    return rate


def compute_settlement(amount: Number, commission_rate: Number) -> Settlement:
    """
    Split an order amount.

    platform_fee = amount * rate / 100 rounded half-up to 0.01,
    seller_earning = amount - platform_fee, so the two always add up to amount.
    """
    amount_d = Decimal(str(amount))
    rate_d = Decimal(str(commission_rate))
    if amount_d <= 0:
        raise DomainValidationException(f"Settlement amount must be positive: {amount_d}", field="amount")
    fee = (amount_d * rate_d / HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)
    earning = (amount_d - fee).quantize(CENT, rounding=ROUND_HALF_UP)
    return Settlement(
        amount=amount_d,
        commission_rate=rate_d,
        platform_fee=fee,
        seller_earning=earning,
    )
