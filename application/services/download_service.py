"""
Download token application service - issue and redeem single-use links.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from application.ports.link_cipher import LinkCipher
from core.logging_config import get_logger
from domain.common.exceptions import (
    ConfigurationException,
    DownloadLinkGoneException,
    DownloadTokenNotFoundException,
    ProductNotFoundException,
    PurchaseRequiredException,
)
from domain.common.unit_of_work import AbstractUnitOfWork
from domain.download.entity import DownloadToken


logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DownloadTokenService:
    def __init__(
        self,
        uow_factory: Callable[..., AbstractUnitOfWork],
        cipher: Optional[LinkCipher],
        *,
        ttl: timedelta = timedelta(minutes=10),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._cipher = cipher
        self._ttl = ttl
        self._clock = clock

    async def request_token(self, user_id: str, product_id: str) -> str:
        """Mint a download token for a buyer who completed a purchase of product_id."""
        async with self._uow_factory(readonly=True) as uow:
            purchase = await uow.order_repository.find_completed(user_id, product_id)
            if purchase is None:
                raise PurchaseRequiredException(product_id)
            product = await uow.product_repository.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundException(product_id)
        if not product.has_download_link():
            logger.error("download_link_missing", product_id=product_id)
            raise ConfigurationException("Download link not configured for this product")
        if self._cipher is None:
            logger.error("download_cipher_missing", product_id=product_id)
            raise ConfigurationException("Link encryption key not configured")

        target_url = self._cipher.decrypt(product.download_link)
        token = DownloadToken.issue(
            user_id=user_id,
            product_id=product_id,
            target_url=target_url,
            ttl=self._ttl,
            now=self._clock(),
        )
        async with self._uow_factory() as uow:
            await uow.download_token_repository.create(token)
        return token.token

    async def redeem(self, token: str) -> str:
        """Consume a token and return its redirect target. Works at most once."""
        async with self._uow_factory(readonly=True) as uow:
            record = await uow.download_token_repository.get(token)
        if record is None:
            raise DownloadTokenNotFoundException()
        if record.used:
            logger.info("download_token_reused", user_id=record.user_id, product_id=record.product_id)
            raise DownloadLinkGoneException("This download link has already been used")
        now = self._clock()
        if record.is_expired(now):
            logger.info("download_token_expired", user_id=record.user_id, product_id=record.product_id)
            raise DownloadLinkGoneException("This download link has expired")

        async with self._uow_factory() as uow:
            consumed = await uow.download_token_repository.mark_used(token, now)
        if not consumed:
            raise DownloadLinkGoneException("This download link has already been used")

        logger.info("download_token_redeemed", user_id=record.user_id, product_id=record.product_id)
        return record.target_url
