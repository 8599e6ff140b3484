import pytest
from datetime import datetime, timedelta, timezone

import httpx
import jwt
from sqlalchemy import update

from api.dependencies import get_credential_verifier, get_download_service, get_order_service
from domain.common.exceptions import GatewayException
from infrastructure.models import ProductModel
from infrastructure.security.jwt_verifier import JWTCredentialVerifier
from main import app


DOWNLOAD_URL = "https://files.example.com/products/prod-1/presets.zip"


def _auth(user_id: str = "buyer-1") -> dict:
    token = jwt.encode(
        {"sub": user_id, "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        "test-secret-key",
        algorithm="HS256",
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(seeded, order_service, download_service):
    app.dependency_overrides[get_order_service] = lambda: order_service
    app.dependency_overrides[get_download_service] = lambda: download_service
    app.dependency_overrides[get_credential_verifier] = lambda: JWTCredentialVerifier("test-secret-key")
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def _pay(client, make_callback) -> str:
    resp = await client.post("/api/v1/payments/create", json={"product_id": "prod-1"}, headers=_auth())
    assert resp.status_code == 201
    order_id = resp.json()["data"]["order_id"]
    raw, signature, timestamp = make_callback(order_id, "SUCCESS")
    resp = await client.post(
        "/api/v1/payments/webhook",
        content=raw,
        headers={"x-webhook-signature": signature, "x-webhook-timestamp": timestamp, "content-type": "application/json"},
    )
    assert resp.json()["data"]["status"] == "ok"
    return order_id


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["data"] == {"status": "healthy"}
    assert "x-request-id" in resp.headers


@pytest.mark.asyncio
async def test_health_pings_database_once_started(client, seeded):
    app.state.database = seeded
    try:
        resp = await client.get("/health")
    finally:
        del app.state.database
    assert resp.json()["data"] == {"status": "healthy", "database": "up"}


@pytest.mark.asyncio
async def test_create_payment_requires_bearer(client):
    resp = await client.post("/api/v1/payments/create", json={"product_id": "prod-1"})
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_create_payment_returns_session(client):
    resp = await client.post("/api/v1/payments/create", json={"product_id": "prod-1"}, headers=_auth())

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["order_id"].startswith("ORD_")
    assert data["payment_session_id"] == f"session_{data['order_id']}"


@pytest.mark.asyncio
async def test_create_payment_missing_product(client):
    resp = await client.post("/api/v1/payments/create", json={}, headers=_auth())
    assert resp.status_code == 400
    assert resp.json()["code"] == 10001


@pytest.mark.asyncio
async def test_create_payment_unknown_product(client):
    resp = await client.post("/api/v1/payments/create", json={"product_id": "nope"}, headers=_auth())
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_create_payment_free_product_is_bad_request(client, seeded):
    async with seeded.session_factory() as s:
        await s.execute(update(ProductModel).where(ProductModel.id == "prod-1").values(price=0, discount_price=None))
        await s.commit()

    resp = await client.post("/api/v1/payments/create", json={"product_id": "prod-1"}, headers=_auth())
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_create_payment_gateway_down(client, gateway):
    gateway.error = GatewayException("Payment gateway unreachable", provider="stub")
    resp = await client.post("/api/v1/payments/create", json={"product_id": "prod-1"}, headers=_auth())
    assert resp.status_code == 502


@pytest.mark.asyncio
async def test_webhook_always_answers_200(client):
    resp = await client.post("/api/v1/payments/webhook", content=b'{"data":{}}')
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "signature_missing"

    resp = await client.post(
        "/api/v1/payments/webhook",
        content=b'{"data":{}}',
        headers={"x-webhook-signature": "bogus", "x-webhook-timestamp": "1"},
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "invalid_signature"


@pytest.mark.asyncio
async def test_purchase_flow_end_to_end(client, make_callback):
    order_id = await _pay(client, make_callback)

    resp = await client.get(f"/api/v1/payments/status/{order_id}", headers=_auth())
    assert resp.json()["data"] == {"order_id": order_id, "status": "completed", "product_id": "prod-1"}

    resp = await client.get("/api/v1/payments/purchases", headers=_auth())
    purchases = resp.json()["data"]
    assert [p["order_id"] for p in purchases] == [order_id]

    resp = await client.post("/api/v1/payments/create", json={"product_id": "prod-1"}, headers=_auth())
    assert resp.status_code == 409

    resp = await client.get("/api/v1/downloads/request/prod-1", headers=_auth())
    assert resp.status_code == 200
    token = resp.json()["data"]["token"]

    resp = await client.get(f"/api/v1/downloads/{token}")
    assert resp.status_code == 302
    assert resp.headers["location"] == DOWNLOAD_URL

    resp = await client.get(f"/api/v1/downloads/{token}")
    assert resp.status_code == 410


@pytest.mark.asyncio
async def test_order_status_hidden_from_other_users(client, make_callback):
    order_id = await _pay(client, make_callback)

    resp = await client.get(f"/api/v1/payments/status/{order_id}", headers=_auth("seller-1"))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_download_requires_purchase(client):
    resp = await client.get("/api/v1/downloads/request/prod-1", headers=_auth())
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_unknown_download_token(client):
    resp = await client.get("/api/v1/downloads/does-not-exist")
    assert resp.status_code == 404
