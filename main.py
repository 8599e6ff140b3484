"""
FastAPI application entry point
"""
from contextlib import asynccontextmanager
from datetime import timedelta
from functools import partial
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import LoggingMiddleware, RequestIDMiddleware
from api.routes import downloads as downloads_routes
from api.routes import payments as payments_routes
from application.services.download_service import DownloadTokenService
from application.services.notification_dispatcher import NotificationDispatcher
from application.services.order_service import OrderLifecycleService
from core.config import settings
from core.exceptions import register_exception_handlers
from core.logging_config import configure_logging, get_logger
from core.response import success_response
from core.settings import payment_settings
from infrastructure.database import Database
from infrastructure.external.notifications import LoggingNotificationSink
from infrastructure.external.payments import get_payment_gateway
from infrastructure.security.jwt_verifier import JWTCredentialVerifier
from infrastructure.security.link_cipher import AesCbcLinkCipher
from infrastructure.unit_of_work import SQLAlchemyUnitOfWork


configure_logging()
logger = get_logger(__name__)


def _link_cipher() -> Optional[AesCbcLinkCipher]:
    if not settings.LINK_ENCRYPTION_KEY:
        logger.warning("link_cipher_not_configured", message="LINK_ENCRYPTION_KEY not set, downloads disabled")
        return None
    return AesCbcLinkCipher(settings.LINK_ENCRYPTION_KEY)


def wire_services(app: FastAPI, database: Database) -> None:
    """Build every long-lived collaborator once and park it on app.state."""
    uow_factory = partial(SQLAlchemyUnitOfWork, database.session_factory)
    gateway = get_payment_gateway()
    dispatcher = NotificationDispatcher(LoggingNotificationSink())

    webhook_secret = payment_settings.cashfree.signing_secret
    if not webhook_secret:
        logger.warning("payment_webhook_secret_missing", message="Every webhook will be rejected")

    app.state.database = database
    app.state.payment_gateway = gateway
    app.state.notification_dispatcher = dispatcher
    app.state.credential_verifier = JWTCredentialVerifier(settings.SECRET_KEY, [settings.ALGORITHM])
    app.state.order_service = OrderLifecycleService(
        uow_factory,
        gateway,
        dispatcher,
        webhook_secret=webhook_secret,
        frontend_url=settings.FRONTEND_URL,
        backend_url=settings.BACKEND_URL,
        default_commission_rate=settings.COMMISSION_RATE_DEFAULT,
        currency=payment_settings.cashfree.currency,
    )
    app.state.download_service = DownloadTokenService(
        uow_factory,
        _link_cipher(),
        ttl=timedelta(minutes=settings.DOWNLOAD_TOKEN_TTL_MINUTES),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = Database(settings.database.url, echo=settings.database.echo)
    if settings.DEBUG:
        # development convenience; deployed environments run `alembic upgrade head`
        await database.create_tables()

    wire_services(app, database)
    logger.info(
        "application_started",
        environment=settings.ENVIRONMENT,
        provider=app.state.payment_gateway.provider,
    )

    yield

    await app.state.notification_dispatcher.drain()
    await app.state.payment_gateway.aclose()
    await database.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    description="Digital goods marketplace: order settlement and single-use downloads",
)

# last added runs first: RequestID -> Logging -> CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestIDMiddleware)

register_exception_handlers(app)

app.include_router(payments_routes.router, prefix="/api/v1")
app.include_router(downloads_routes.router, prefix="/api/v1")


@app.get("/", tags=["Root"])
async def root():
    return success_response(
        data={"name": settings.PROJECT_NAME, "version": settings.VERSION, "docs": "/docs"},
        message="Welcome",
    )


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """Liveness, plus a database ping once the app has started."""
    data = {"status": "healthy"}
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is not None:
        data["database"] = "up" if await database.ping() else "down"
    return success_response(data=data, message="OK")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
