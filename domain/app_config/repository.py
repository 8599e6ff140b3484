"""
Platform configuration repository interface
"""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional


APP_CONFIG_ID = "app_config"


class AppConfigRepository(ABC):

    @abstractmethod
    async def get_commission_rate(self) -> Optional[Decimal]:
        """Configured commission percent, or None when unset"""
        pass
