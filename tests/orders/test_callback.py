import pytest
from decimal import Decimal

from sqlalchemy import select

from application.utils.signature import sign_webhook_payload
from domain.common.exceptions import ForbiddenException, OrderNotFoundException
from infrastructure.models import AppConfigModel, OrderModel, ProductModel, UserModel, UserPurchaseModel


async def _purchases(database, user_id="buyer-1"):
    async with database.session_factory() as session:
        rows = await session.execute(select(UserPurchaseModel.product_id).where(UserPurchaseModel.user_id == user_id))
        return list(rows.scalars().all())


@pytest.fixture
async def pending_order(seeded, order_service):
    session = await order_service.initiate("buyer-1", "prod-1")
    return session.order_id


@pytest.mark.asyncio
async def test_success_settles_order(seeded, order_service, pending_order, make_callback, load):
    ack = await order_service.handle_callback(*make_callback(pending_order, "SUCCESS"))
    assert ack.status == "ok"

    order = await load(OrderModel, pending_order)
    assert order.status == "completed"
    assert Decimal(order.platform_fee) == Decimal("100.00")
    assert Decimal(order.seller_earning) == Decimal("900.00")
    assert order.completed_at is not None

    seller = await load(UserModel, "seller-1")
    assert Decimal(seller.wallet_balance) == Decimal("900.00")
    assert Decimal(seller.total_earnings) == Decimal("900.00")

    product = await load(ProductModel, "prod-1")
    assert product.sales == 1

    assert await _purchases(seeded) == ["prod-1"]


@pytest.mark.asyncio
async def test_success_notifies_seller_and_buyer(seeded, order_service, pending_order, make_callback, dispatcher, sink):
    await order_service.handle_callback(*make_callback(pending_order, "SUCCESS"))
    await dispatcher.drain()

    by_user = {n.user_id: n for n in sink.sent}
    assert by_user["seller-1"].title == "New Sale!"
    assert by_user["seller-1"].body == "₹900.00 added to your wallet"
    assert by_user["seller-1"].data == {"type": "payment", "order_id": pending_order}
    assert by_user["buyer-1"].title == "Purchase Confirmed!"
    assert by_user["buyer-1"].data == {"type": "download", "product_id": "prod-1"}


@pytest.mark.asyncio
async def test_duplicate_success_credits_once(seeded, order_service, pending_order, make_callback, load):
    first = await order_service.handle_callback(*make_callback(pending_order, "SUCCESS"))
    second = await order_service.handle_callback(*make_callback(pending_order, "SUCCESS"))

    assert first.status == "ok"
    assert second.status == "already_completed"
    seller = await load(UserModel, "seller-1")
    assert Decimal(seller.wallet_balance) == Decimal("900.00")
    assert (await load(ProductModel, "prod-1")).sales == 1


@pytest.mark.asyncio
async def test_failed_after_completed_does_not_downgrade(seeded, order_service, pending_order, make_callback, load):
    await order_service.handle_callback(*make_callback(pending_order, "SUCCESS"))
    ack = await order_service.handle_callback(*make_callback(pending_order, "FAILED"))

    assert ack.status == "already_completed"
    assert (await load(OrderModel, pending_order)).status == "completed"


@pytest.mark.asyncio
async def test_failed_marks_order_and_notifies_buyer(seeded, order_service, pending_order, make_callback, dispatcher, sink, load):
    ack = await order_service.handle_callback(*make_callback(pending_order, "FAILED"))
    await dispatcher.drain()

    assert ack.status == "ok"
    order = await load(OrderModel, pending_order)
    assert order.status == "failed"
    assert order.failed_at is not None
    assert [n.title for n in sink.sent] == ["Payment Failed"]
    assert Decimal((await load(UserModel, "seller-1")).wallet_balance) == Decimal("0")


@pytest.mark.asyncio
async def test_repeated_failure_notifies_once(seeded, order_service, pending_order, make_callback, dispatcher, sink):
    await order_service.handle_callback(*make_callback(pending_order, "FAILED"))
    ack = await order_service.handle_callback(*make_callback(pending_order, "FAILED"))
    await dispatcher.drain()

    assert ack.status == "ok"
    assert len(sink.sent) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("payment_status", ["USER_DROPPED", "PENDING", "SOMETHING_NEW"])
async def test_other_statuses_are_acknowledged_without_change(seeded, order_service, pending_order, make_callback, load, payment_status):
    ack = await order_service.handle_callback(*make_callback(pending_order, payment_status))

    assert ack.status == "ok"
    assert (await load(OrderModel, pending_order)).status == "pending"


@pytest.mark.asyncio
@pytest.mark.parametrize("payment_status", ["success", "Success", "failed"])
async def test_status_match_is_case_sensitive(seeded, order_service, pending_order, make_callback, load, payment_status):
    ack = await order_service.handle_callback(*make_callback(pending_order, payment_status))

    assert ack.status == "ok"
    assert (await load(OrderModel, pending_order)).status == "pending"
    assert Decimal((await load(UserModel, "seller-1")).wallet_balance) == Decimal("0")


@pytest.mark.asyncio
async def test_success_after_failure_still_settles(seeded, order_service, pending_order, make_callback, load):
    await order_service.handle_callback(*make_callback(pending_order, "FAILED"))
    ack = await order_service.handle_callback(*make_callback(pending_order, "SUCCESS"))

    assert ack.status == "ok"
    assert (await load(OrderModel, pending_order)).status == "completed"
    assert Decimal((await load(UserModel, "seller-1")).wallet_balance) == Decimal("900")


@pytest.mark.asyncio
async def test_missing_signature_headers(seeded, order_service, pending_order, make_callback, load):
    raw, signature, timestamp = make_callback(pending_order, "SUCCESS")

    assert (await order_service.handle_callback(raw, None, timestamp)).status == "signature_missing"
    assert (await order_service.handle_callback(raw, signature, None)).status == "signature_missing"
    assert (await load(OrderModel, pending_order)).status == "pending"


@pytest.mark.asyncio
async def test_invalid_signature_changes_nothing(seeded, order_service, pending_order, make_callback, load):
    raw, forged_signature, timestamp = make_callback(pending_order, "SUCCESS", secret="not-the-secret")
    _, good_signature, _ = make_callback(pending_order, "SUCCESS")

    ack = await order_service.handle_callback(raw, forged_signature, timestamp)
    assert ack.status == "invalid_signature"

    tampered = raw.replace(b"SUCCESS", b"FAILED")
    ack = await order_service.handle_callback(tampered, good_signature, timestamp)
    assert ack.status == "invalid_signature"

    assert (await load(OrderModel, pending_order)).status == "pending"
    assert Decimal((await load(UserModel, "seller-1")).wallet_balance) == Decimal("0")


@pytest.mark.asyncio
async def test_missing_order_id(seeded, order_service, make_callback):
    ack = await order_service.handle_callback(*make_callback(None, "SUCCESS"))
    assert ack.status == "missing_order_id"


@pytest.mark.asyncio
async def test_unknown_order(seeded, order_service, make_callback):
    ack = await order_service.handle_callback(*make_callback("ORD_DOESNOTEXIST0000000", "SUCCESS"))
    assert ack.status == "order_not_found"


@pytest.mark.asyncio
async def test_malformed_body_is_acknowledged_as_error(seeded, order_service):
    raw = b"{not json"
    signature = sign_webhook_payload("cf_test_webhook_secret", "1760860800", raw)
    ack = await order_service.handle_callback(raw, signature, "1760860800")
    assert ack.status == "error"


@pytest.mark.asyncio
async def test_settlement_uses_live_commission_rate(seeded, order_service, pending_order, make_callback, load):
    async with seeded.session_factory() as s:
        config = await s.get(AppConfigModel, "app_config")
        config.commission_rate = Decimal("12.5")
        await s.commit()

    await order_service.handle_callback(*make_callback(pending_order, "SUCCESS"))

    order = await load(OrderModel, pending_order)
    assert Decimal(order.platform_fee) == Decimal("125.00")
    assert Decimal(order.seller_earning) == Decimal("875.00")


@pytest.mark.asyncio
async def test_zero_commission_falls_back_to_default(seeded, order_service, pending_order, make_callback, load):
    async with seeded.session_factory() as s:
        config = await s.get(AppConfigModel, "app_config")
        config.commission_rate = Decimal("0")
        await s.commit()

    await order_service.handle_callback(*make_callback(pending_order, "SUCCESS"))

    assert Decimal((await load(OrderModel, pending_order)).platform_fee) == Decimal("100.00")


@pytest.mark.asyncio
async def test_settlement_uses_amount_fixed_at_initiation(seeded, order_service, pending_order, make_callback, load):
    async with seeded.session_factory() as s:
        product = await s.get(ProductModel, "prod-1")
        product.price = Decimal("5000.00")
        await s.commit()

    await order_service.handle_callback(*make_callback(pending_order, "SUCCESS"))

    seller = await load(UserModel, "seller-1")
    assert Decimal(seller.wallet_balance) == Decimal("900.00")


@pytest.mark.asyncio
async def test_purchase_listing_and_status(seeded, order_service, pending_order, make_callback):
    view = await order_service.query_status(pending_order, "buyer-1")
    assert view.status == "pending" and view.product_id == "prod-1"

    await order_service.handle_callback(*make_callback(pending_order, "SUCCESS"))

    view = await order_service.query_status(pending_order, "buyer-1")
    assert view.status == "completed"

    purchases = await order_service.list_purchases("buyer-1")
    assert [p.order_id for p in purchases] == [pending_order]
    assert purchases[0].product_title == "Lightroom Presets"
    assert purchases[0].product_thumbnail == "https://cdn.example.com/prod-1.png"
    assert await order_service.list_purchases("seller-1") == []

    with pytest.raises(ForbiddenException):
        await order_service.query_status(pending_order, "someone-else")
    with pytest.raises(OrderNotFoundException):
        await order_service.query_status("ORD_MISSING", "buyer-1")
