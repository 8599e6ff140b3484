"""
Order lifecycle application service.

Orchestrates purchase initiation, the gateway payment callback and order
queries. Settlement is idempotent: the order status is the deduplication
point and every status change is a conditional write, so retried, replayed or
concurrent callback deliveries grant money and access at most once.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, List, Optional, Tuple

from application.dtos.orders import (
    CallbackAck,
    CallbackStatus,
    OrderStatusView,
    PurchaseSession,
    PurchaseView,
)
from application.dtos.payments import CreatePaymentSession, CustomerDetails
from application.ports.notifications import Notification
from application.ports.payment_gateway import PaymentGateway
from application.services.notification_dispatcher import NotificationDispatcher
from application.utils.signature import verify_webhook_signature
from core.logging_config import get_logger
from domain.common.exceptions import (
    AlreadyPurchasedException,
    ConfigurationException,
    DomainValidationException,
    ForbiddenException,
    GatewayException,
    OrderNotFoundException,
    ProductNotAvailableException,
    ProductNotFoundException,
    UserNotFoundException,
)
from domain.common.unit_of_work import AbstractUnitOfWork
from domain.order.entity import Order, generate_order_id
from domain.order.events import OrderCompleted, OrderEvent, OrderFailed
from domain.order.service import Settlement, compute_settlement, resolve_commission_rate
from shared.codes import BusinessCode
from shared.codes.payment_codes import PROVIDER_STATUS_TO_INTERNAL


logger = get_logger(__name__)

DEFAULT_CUSTOMER_PHONE = "9999999999"
UNKNOWN_PRODUCT_TITLE = "Unknown Product"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _extract_callback_fields(payload: Any) -> Tuple[Optional[str], Optional[str]]:
    """Pull (order_id, payment_status) out of a gateway callback body."""
    if not isinstance(payload, dict):
        return None, None
    data = payload.get("data") or {}
    if not isinstance(data, dict):
        return None, None
    order = data.get("order") or {}
    payment = data.get("payment") or {}
    order_id = order.get("order_id") if isinstance(order, dict) else None
    status = payment.get("payment_status") if isinstance(payment, dict) else None
    return (str(order_id) if order_id else None), (str(status) if status else None)


class OrderLifecycleService:
    def __init__(
        self,
        uow_factory: Callable[..., AbstractUnitOfWork],
        gateway: PaymentGateway,
        dispatcher: NotificationDispatcher,
        *,
        webhook_secret: str,
        frontend_url: str,
        backend_url: str,
        default_commission_rate: Decimal = Decimal("10"),
        currency: str = "INR",
        callback_provider: str = "cashfree",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._gateway = gateway
        self._dispatcher = dispatcher
        self._webhook_secret = webhook_secret
        self._frontend_url = frontend_url.rstrip("/")
        self._backend_url = backend_url.rstrip("/")
        self._default_commission_rate = Decimal(str(default_commission_rate))
        self._currency = currency
        self._status_map = PROVIDER_STATUS_TO_INTERNAL.get(callback_provider, {})
        self._clock = clock

    # ------------------------------------------------------------------
    # initiation
    # ------------------------------------------------------------------

    def _return_url(self, product_id: str, order_id: str) -> str:
        return f"{self._frontend_url}/user.html?payment=success&product={product_id}&order={order_id}"

    @property
    def notify_url(self) -> str:
        return f"{self._backend_url}/api/v1/payments/webhook"

    async def initiate(self, buyer_id: str, product_id: Optional[str]) -> PurchaseSession:
        if not product_id or not product_id.strip():
            raise DomainValidationException(
                "Product ID is required",
                field="product_id",
                code=BusinessCode.PARAM_MISSING,
            )
        product_id = product_id.strip()

        async with self._uow_factory(readonly=True) as uow:
            product = await uow.product_repository.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundException(product_id)
            buyer = await uow.user_repository.get_by_id(buyer_id)
            if buyer is None:
                raise UserNotFoundException(buyer_id, message="Buyer account not found")
            if not product.is_purchasable():
                raise ProductNotAvailableException(product_id, product.status)
            if await uow.order_repository.find_completed(buyer_id, product_id):
                raise AlreadyPurchasedException(buyer_id, product_id)

        amount = product.charge_amount()
        if amount <= 0:
            raise ProductNotAvailableException(product_id, product.status)
        order_id = generate_order_id()
        request = CreatePaymentSession(
            order_id=order_id,
            amount=amount,
            currency=self._currency,
            customer=CustomerDetails(
                customer_id=buyer.id,
                customer_email=buyer.email,
                customer_phone=buyer.contact_phone(DEFAULT_CUSTOMER_PHONE),
                customer_name=buyer.full_name or buyer.email,
            ),
            return_url=self._return_url(product_id, order_id),
            notify_url=self.notify_url,
        )

        # gateway first: a failed session must not leave an order behind
        try:
            session = await self._gateway.create_session(request)
        except (GatewayException, ConfigurationException) as exc:
            logger.warning(
                "order_gateway_session_failed",
                order_id=order_id,
                product_id=product_id,
                buyer_id=buyer_id,
                error=exc.message,
            )
            raise
        except Exception as exc:
            logger.error(
                "order_gateway_session_error",
                order_id=order_id,
                product_id=product_id,
                buyer_id=buyer_id,
                exc_info=True,
            )
            raise GatewayException(str(exc) or exc.__class__.__name__, provider=self._gateway.provider) from exc

        order = Order.create_pending(
            order_id=order_id,
            buyer_id=buyer_id,
            seller_id=product.seller_id,
            product_id=product_id,
            amount=amount,
            currency=self._currency,
            payment_session_id=session.payment_session_id,
        )
        async with self._uow_factory() as uow:
            await uow.order_repository.create(order)

        logger.info(
            "order_initiated",
            order_id=order_id,
            buyer_id=buyer_id,
            product_id=product_id,
            amount=str(amount),
            provider=session.provider,
        )
        return PurchaseSession(payment_session_id=session.payment_session_id, order_id=order_id)

    # ------------------------------------------------------------------
    # gateway callback
    # ------------------------------------------------------------------

    async def handle_callback(
        self,
        raw_body: bytes,
        signature: Optional[str],
        timestamp: Optional[str],
    ) -> CallbackAck:
        """Process one callback delivery. Never raises; the outcome is in the ack."""
        try:
            return await self._handle_callback(raw_body, signature, timestamp)
        except Exception:
            logger.error("order_callback_error", exc_info=True)
            return CallbackAck(status=CallbackStatus.ERROR, message="Callback processing failed")

    async def _handle_callback(
        self,
        raw_body: bytes,
        signature: Optional[str],
        timestamp: Optional[str],
    ) -> CallbackAck:
        if not signature or not timestamp:
            logger.warning("order_callback_signature_missing")
            return CallbackAck(status=CallbackStatus.SIGNATURE_MISSING, message="Missing signature headers")

        if not verify_webhook_signature(self._webhook_secret, timestamp, raw_body, signature):
            logger.warning("order_callback_invalid_signature", timestamp=timestamp)
            return CallbackAck(status=CallbackStatus.INVALID_SIGNATURE, message="Invalid signature")

        payload = json.loads(raw_body)
        order_id, payment_status = _extract_callback_fields(payload)
        if not order_id:
            logger.warning("order_callback_missing_order_id")
            return CallbackAck(status=CallbackStatus.MISSING_ORDER_ID, message="Missing order id")

        async with self._uow_factory(readonly=True) as uow:
            order = await uow.order_repository.get_by_id(order_id)
        if order is None:
            logger.warning("order_callback_order_not_found", order_id=order_id)
            return CallbackAck(status=CallbackStatus.ORDER_NOT_FOUND, message="Order not found")

        if order.is_completed():
            logger.info("order_callback_duplicate", order_id=order_id, payment_status=payment_status)
            return CallbackAck(status=CallbackStatus.ALREADY_COMPLETED, message="Order already completed")

        outcome = self._status_map.get(payment_status or "", "ignored")
        if outcome == "succeeded":
            return await self._settle(order)
        if outcome == "failed":
            return await self._fail(order, reason="payment_failed")

        logger.info("order_callback_status_ignored", order_id=order_id, payment_status=payment_status)
        return CallbackAck(status=CallbackStatus.OK, message="Status ignored")

    async def _current_commission_rate(self) -> Decimal:
        async with self._uow_factory(readonly=True) as uow:
            configured = await uow.app_config_repository.get_commission_rate()
        return resolve_commission_rate(configured, self._default_commission_rate)

    async def _settle(self, order: Order) -> CallbackAck:
        # amount fixed at initiation, never the live product price
        settlement = compute_settlement(order.amount, await self._current_commission_rate())
        completed_at = self._clock()

        try:
            async with self._uow_factory() as uow:
                won = await uow.order_repository.mark_completed(order.id, settlement, completed_at)
                if not won:
                    await uow.rollback()
                    logger.info("order_settlement_lost_race", order_id=order.id)
                    return CallbackAck(status=CallbackStatus.ALREADY_COMPLETED, message="Order already completed")

                await uow.user_repository.credit_wallet(order.seller_id, settlement.seller_earning)
                await uow.product_repository.increment_sales(order.product_id)
                await uow.user_repository.add_purchase(order.buyer_id, order.product_id)
                await uow.commit()
        except AlreadyPurchasedException:
            # another order for this buyer/product settled first; nothing above was kept
            await self._mark_failed(order, reason="already_purchased")
            logger.error(
                "order_settlement_duplicate_purchase",
                order_id=order.id,
                buyer_id=order.buyer_id,
                product_id=order.product_id,
                amount=str(order.amount),
                action="refund_required",
            )
            return CallbackAck(status=CallbackStatus.ALREADY_PURCHASED, message="Product already purchased")

        logger.info(
            "order_settled",
            order_id=order.id,
            seller_id=order.seller_id,
            amount=str(settlement.amount),
            commission_rate=str(settlement.commission_rate),
            platform_fee=str(settlement.platform_fee),
            seller_earning=str(settlement.seller_earning),
        )
        self._publish(self._completed_event(order, settlement))
        return CallbackAck(status=CallbackStatus.OK, message="Order completed")

    async def _mark_failed(self, order: Order, *, reason: str) -> bool:
        async with self._uow_factory() as uow:
            return await uow.order_repository.mark_failed(order.id, self._clock(), reason)

    async def _fail(self, order: Order, *, reason: str) -> CallbackAck:
        if await self._mark_failed(order, reason=reason):
            logger.info("order_failed", order_id=order.id, reason=reason)
            self._publish(OrderFailed(order_id=order.id, buyer_id=order.buyer_id, product_id=order.product_id, reason=reason))
        else:
            logger.info("order_fail_skipped", order_id=order.id, status=order.status.value)
        return CallbackAck(status=CallbackStatus.OK, message="Payment failure recorded")

    @staticmethod
    def _completed_event(order: Order, settlement: Settlement) -> OrderCompleted:
        return OrderCompleted(
            order_id=order.id,
            buyer_id=order.buyer_id,
            product_id=order.product_id,
            seller_id=order.seller_id,
            seller_earning=settlement.seller_earning,
            platform_fee=settlement.platform_fee,
        )

    def _publish(self, event: OrderEvent) -> None:
        for notification in self._notifications_for(event):
            self._dispatcher.dispatch(notification)

    @staticmethod
    def _notifications_for(event: OrderEvent) -> List[Notification]:
        if isinstance(event, OrderCompleted):
            return [
                Notification(
                    user_id=event.seller_id,
                    title="New Sale!",
                    body=f"₹{event.seller_earning} added to your wallet",
                    data={"type": "payment", "order_id": event.order_id},
                ),
                Notification(
                    user_id=event.buyer_id,
                    title="Purchase Confirmed!",
                    body="Your download is ready. Tap to download!",
                    data={"type": "download", "product_id": event.product_id},
                ),
            ]
        if isinstance(event, OrderFailed):
            return [
                Notification(
                    user_id=event.buyer_id,
                    title="Payment Failed",
                    body="Something went wrong. Please try again.",
                    data={"type": "payment_failed", "order_id": event.order_id},
                ),
            ]
        return []

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    async def query_status(self, order_id: str, requester_id: str) -> OrderStatusView:
        async with self._uow_factory(readonly=True) as uow:
            order = await uow.order_repository.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundException(order_id)
        if not order.is_owned_by(requester_id):
            raise ForbiddenException("You do not have access to this order")
        return OrderStatusView(order_id=order.id, status=order.status.value, product_id=order.product_id)

    async def list_purchases(self, buyer_id: str, skip: int = 0, limit: int = 100) -> List[PurchaseView]:
        async with self._uow_factory(readonly=True) as uow:
            orders = await uow.order_repository.list_completed_by_buyer(buyer_id, skip=skip, limit=limit)
            products = await uow.product_repository.get_many(o.product_id for o in orders)

        views: List[PurchaseView] = []
        for order in orders:
            product = products.get(order.product_id)
            views.append(
                PurchaseView(
                    order_id=order.id,
                    product_id=order.product_id,
                    product_title=product.title if product else UNKNOWN_PRODUCT_TITLE,
                    product_thumbnail=product.thumbnail_url if product else None,
                    amount=order.amount,
                    currency=order.currency,
                    completed_at=order.completed_at,
                )
            )
        return views
