"""
Download token repository interface
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from .entity import DownloadToken


class DownloadTokenRepository(ABC):

    @abstractmethod
    async def create(self, token: DownloadToken) -> DownloadToken:
        pass

    @abstractmethod
    async def get(self, token: str) -> Optional[DownloadToken]:
        pass

    @abstractmethod
    async def mark_used(self, token: str, used_at: datetime) -> bool:
        """Compare-and-set used false -> true. False means someone else consumed it."""
        pass
