import pytest
from decimal import Decimal

from domain.common.exceptions import DomainValidationException
from domain.order.entity import Order, OrderStatus, generate_order_id
from domain.order.service import compute_settlement, resolve_commission_rate


def test_standard_split():
    s = compute_settlement(Decimal("1000"), Decimal("10"))
    assert s.platform_fee == Decimal("100.00")
    assert s.seller_earning == Decimal("900.00")


@pytest.mark.parametrize(
    "amount, rate, fee",
    [
        ("499.99", "10", "50.00"),
        ("0.05", "10", "0.01"),
        ("123.45", "12.5", "15.43"),
        ("1000", "0.5", "5.00"),
    ],
)
def test_fee_rounds_half_up_and_parts_add_up(amount, rate, fee):
    s = compute_settlement(Decimal(amount), Decimal(rate))
    assert s.platform_fee == Decimal(fee)
    assert s.platform_fee + s.seller_earning == Decimal(amount)


def test_full_commission_leaves_seller_nothing():
    s = compute_settlement(Decimal("250"), Decimal("100"))
    assert s.seller_earning == Decimal("0.00")


def test_rejects_non_positive_amount():
    with pytest.raises(DomainValidationException):
        compute_settlement(Decimal("0"), Decimal("10"))


@pytest.mark.parametrize("configured", [None, 0, Decimal("0")])
def test_missing_or_zero_rate_uses_default(configured):
    assert resolve_commission_rate(configured, Decimal("10")) == Decimal("10")


def test_configured_rate_wins():
    assert resolve_commission_rate(Decimal("7.5"), Decimal("10")) == Decimal("7.5")


@pytest.mark.parametrize("configured", [Decimal("-1"), Decimal("100.01")])
def test_out_of_range_rate_rejected(configured):
    with pytest.raises(DomainValidationException):
        resolve_commission_rate(configured, Decimal("10"))


def test_order_ids_are_unique_and_well_formed():
    ids = {generate_order_id() for _ in range(200)}
    assert len(ids) == 200
    for order_id in ids:
        assert order_id.startswith("ORD_")
        suffix = order_id[4:]
        assert len(suffix) == 20 and suffix == suffix.upper()
        int(suffix, 16)


def test_order_requires_positive_amount():
    with pytest.raises(DomainValidationException):
        Order(id="ORD_X", buyer_id="b", seller_id="s", product_id="p", amount=Decimal("-1"))


def test_pending_order_defaults():
    order = Order.create_pending(
        order_id="ORD_X",
        buyer_id="b",
        seller_id="s",
        product_id="p",
        amount=Decimal("10"),
        currency="INR",
        payment_session_id=None,
    )
    assert order.status is OrderStatus.PENDING
    assert order.created_at.tzinfo is not None
    assert order.is_owned_by("b") and not order.is_owned_by("s")
