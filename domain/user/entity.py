"""
User domain entity - the marketplace account and its wallet
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from dataclasses import dataclass, field


@dataclass
class User:
    """Marketplace user (buyer and/or seller)"""

    id: str
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: str = "buyer"
    wallet_balance: Decimal = field(default_factory=lambda: Decimal("0"))
    total_earnings: Decimal = field(default_factory=lambda: Decimal("0"))
    created_at: Optional[datetime] = None

    def __post_init__(self):
        self.wallet_balance = Decimal(str(self.wallet_balance or 0))
        self.total_earnings = Decimal(str(self.total_earnings or 0))

    def contact_phone(self, fallback: str) -> str:
        """Gateways insist on a phone number; use the fallback when none is on file."""
        return self.phone or fallback
