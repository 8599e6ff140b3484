import json
import pytest
from decimal import Decimal

import httpx

from application.dtos.payments import CreatePaymentSession, CustomerDetails
from core.settings import CashfreeSettings, PaymentRetry, PaymentSettings
from domain.common.exceptions import ConfigurationException
from infrastructure.external.payments import get_payment_gateway
from infrastructure.external.payments.cashfree_client import CashfreeClient
from infrastructure.external.payments.exceptions import PaymentProviderError, PaymentRecoverableError


def _settings(**cashfree) -> PaymentSettings:
    cf = {"app_id": "cf_app", "secret_key": "cf_secret"}
    cf.update(cashfree)
    return PaymentSettings(
        cashfree=CashfreeSettings(**cf),
        retry=PaymentRetry(max=1, base_backoff=0.01),
    )


def _request() -> CreatePaymentSession:
    return CreatePaymentSession(
        order_id="ORD_0123456789ABCDEF0123",
        amount=Decimal("1000.00"),
        currency="INR",
        customer=CustomerDetails(
            customer_id="buyer-1",
            customer_email="buyer@example.com",
            customer_phone="9999999999",
            customer_name="Asha Buyer",
        ),
        return_url="https://shop.example.com/user.html?payment=success&product=prod-1&order=ORD_0123456789ABCDEF0123",
        notify_url="https://api.example.com/api/v1/payments/webhook",
    )


@pytest.mark.asyncio
async def test_create_session_posts_order():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"order_id": "ORD_0123456789ABCDEF0123", "payment_session_id": "session_abc", "order_status": "ACTIVE"})

    client = CashfreeClient(_settings(), transport=httpx.MockTransport(handler))
    session = await client.create_session(_request())
    await client.aclose()

    assert session.payment_session_id == "session_abc"
    assert session.provider == "cashfree"

    request = seen[0]
    assert str(request.url) == "https://sandbox.cashfree.com/pg/orders"
    assert request.headers["x-client-id"] == "cf_app"
    assert request.headers["x-client-secret"] == "cf_secret"
    assert request.headers["x-api-version"] == "2023-08-01"
    body = json.loads(request.content)
    assert body["order_id"] == "ORD_0123456789ABCDEF0123"
    assert body["order_amount"] == 1000.0
    assert body["order_currency"] == "INR"
    assert body["customer_details"]["customer_phone"] == "9999999999"
    assert body["order_meta"]["notify_url"] == "https://api.example.com/api/v1/payments/webhook"


@pytest.mark.asyncio
async def test_production_environment_uses_live_host():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"payment_session_id": "s"})

    client = CashfreeClient(_settings(environment="production"), transport=httpx.MockTransport(handler))
    await client.create_session(_request())
    assert seen[0].url.host == "api.cashfree.com"


@pytest.mark.asyncio
async def test_rejection_surfaces_provider_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "order_amount : invalid value", "code": "order_amount_invalid"})

    client = CashfreeClient(_settings(), transport=httpx.MockTransport(handler))
    with pytest.raises(PaymentProviderError) as excinfo:
        await client.create_session(_request())

    assert not isinstance(excinfo.value, PaymentRecoverableError)
    assert excinfo.value.message.endswith("order_amount : invalid value")
    assert excinfo.value.details["provider_code"] == "order_amount_invalid"


@pytest.mark.asyncio
async def test_server_error_is_recoverable():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="upstream unavailable")

    client = CashfreeClient(_settings(), transport=httpx.MockTransport(handler))
    with pytest.raises(PaymentRecoverableError):
        await client.create_session(_request())


@pytest.mark.asyncio
async def test_transport_errors_are_retried_then_raised():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    client = CashfreeClient(_settings(), transport=httpx.MockTransport(handler))
    with pytest.raises(PaymentRecoverableError):
        await client.create_session(_request())
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_missing_session_id():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"order_id": "ORD_0123456789ABCDEF0123"})

    client = CashfreeClient(_settings(), transport=httpx.MockTransport(handler))
    with pytest.raises(PaymentProviderError):
        await client.create_session(_request())


@pytest.mark.asyncio
async def test_missing_credentials():
    client = CashfreeClient(PaymentSettings(cashfree=CashfreeSettings()))
    with pytest.raises(ConfigurationException):
        await client.create_session(_request())


def test_factory_resolves_cashfree():
    assert isinstance(get_payment_gateway("cf", _settings()), CashfreeClient)
    with pytest.raises(ValueError):
        get_payment_gateway("paypal", _settings())


def test_webhook_secret_falls_back_to_api_secret():
    assert CashfreeSettings(secret_key="sk").signing_secret == "sk"
    assert CashfreeSettings(secret_key="sk", webhook_secret="wh").signing_secret == "wh"
