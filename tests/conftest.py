"""Pytest bootstrap configuration.

Ensure mandatory environment variables are set before test collection
and module imports that depend on application settings.
"""
import os

# Mandatory secret key for settings validation
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import json
from decimal import Decimal
from functools import partial
from typing import Optional

import pytest

from application.dtos.payments import CreatePaymentSession, PaymentSession
from application.ports.notifications import Notification
from application.services.download_service import DownloadTokenService
from application.services.notification_dispatcher import NotificationDispatcher
from application.services.order_service import OrderLifecycleService
from application.utils.signature import sign_webhook_payload
from infrastructure.database import Database
from infrastructure.models import AppConfigModel, ProductModel, UserModel
from infrastructure.security.link_cipher import AesCbcLinkCipher
from infrastructure.unit_of_work import SQLAlchemyUnitOfWork


WEBHOOK_SECRET = "cf_test_webhook_secret"
LINK_KEY = "test-link-encryption-key"
DOWNLOAD_URL = "https://files.example.com/products/prod-1/presets.zip"

BUYER_ID = "buyer-1"
SELLER_ID = "seller-1"
PRODUCT_ID = "prod-1"


class StubGateway:
    provider = "stub"

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.requests: list[CreatePaymentSession] = []

    async def create_session(self, req: CreatePaymentSession) -> PaymentSession:
        self.requests.append(req)
        if self.error is not None:
            raise self.error
        return PaymentSession(
            payment_session_id=f"session_{req.order_id}",
            provider=self.provider,
            gateway_order_id=req.order_id,
        )

    async def aclose(self) -> None:
        return None


class RecordingSink:
    def __init__(self) -> None:
        self.sent: list[Notification] = []

    async def send(self, notification: Notification) -> None:
        self.sent.append(notification)


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'marketplace.db'}")
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def uow_factory(database):
    return partial(SQLAlchemyUnitOfWork, database.session_factory)


@pytest.fixture
def cipher():
    return AesCbcLinkCipher(LINK_KEY)


@pytest.fixture
async def seeded(database, cipher):
    """Buyer, seller, one approved product priced 1000 and a 10% commission."""
    async with database.session_factory() as session:
        session.add_all([
            UserModel(id=BUYER_ID, email="buyer@example.com", full_name="Asha Buyer", role="buyer"),
            UserModel(id=SELLER_ID, email="seller@example.com", full_name="Ravi Seller", role="seller", phone="9876543210"),
            ProductModel(
                id=PRODUCT_ID,
                seller_id=SELLER_ID,
                title="Lightroom Presets",
                price=Decimal("1000.00"),
                status="approved",
                sales=0,
                thumbnail_url="https://cdn.example.com/prod-1.png",
                download_link=cipher.encrypt(DOWNLOAD_URL),
            ),
            AppConfigModel(id="app_config", commission_rate=Decimal("10")),
        ])
        await session.commit()
    return database


@pytest.fixture
def load(database):
    """Fetch a fresh ORM row by primary key."""
    async def _load(model, pk):
        async with database.session_factory() as session:
            return await session.get(model, pk)
    return _load


@pytest.fixture
def gateway():
    return StubGateway()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def dispatcher(sink):
    return NotificationDispatcher(sink)


@pytest.fixture
def order_service(uow_factory, gateway, dispatcher):
    return OrderLifecycleService(
        uow_factory,
        gateway,
        dispatcher,
        webhook_secret=WEBHOOK_SECRET,
        frontend_url="https://shop.example.com",
        backend_url="https://api.example.com",
        default_commission_rate=Decimal("10"),
    )


@pytest.fixture
def download_service(uow_factory, cipher):
    return DownloadTokenService(uow_factory, cipher)


@pytest.fixture
def make_callback():
    """Build a signed gateway callback: returns (raw_body, signature, timestamp)."""
    def _make(order_id: Optional[str], payment_status: str = "SUCCESS", *, secret: str = WEBHOOK_SECRET, timestamp: str = "1760860800"):
        data: dict = {"payment": {"payment_status": payment_status, "payment_amount": 1000}}
        if order_id is not None:
            data["order"] = {"order_id": order_id, "order_amount": 1000}
        raw = json.dumps({"type": "PAYMENT_SUCCESS_WEBHOOK", "data": data}).encode("utf-8")
        return raw, sign_webhook_payload(secret, timestamp, raw), timestamp
    return _make
