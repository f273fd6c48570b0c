"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from inboxrelay.application.ports.mail_provider import MailProvider
from inboxrelay.application.ports.message_store import MessageStore
from inboxrelay.application.use_cases import HistoryReconciler, IngestNotificationUseCase
from inboxrelay.infrastructure import RedisClientWrapper, Settings, configure_logging, get_settings
from inboxrelay.infrastructure.gmail import GmailProvider
from inboxrelay.infrastructure.stores import build_message_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Store backend: {settings.store_backend}")

    if not settings.gmail_configured:
        logger.warning("Gmail credentials not configured; notifications will store nothing")

    yield

    # Cleanup on shutdown
    logger.info("Shutting down...")
    redis_client: RedisClientWrapper | None = app.state.redis
    if redis_client is not None:
        redis_client.disconnect()
    logger.info("Shutdown complete")


def create_app(
    settings: Settings | None = None,
    store: MessageStore | None = None,
    provider: MailProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``store`` and ``provider`` default to the backends named by settings;
    tests pass an in-memory store and a fake provider.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    redis_client = None
    if store is None:
        if settings.store_backend == "redis":
            redis_client = RedisClientWrapper(settings)
        store = build_message_store(settings, redis_client=redis_client)

    provider = provider or GmailProvider(settings)
    reconciler = HistoryReconciler(
        provider,
        fallback_query=settings.gmail_fallback_query,
        fallback_label_ids=settings.gmail_fallback_label_ids,
    )
    pipeline = IngestNotificationUseCase(
        store,
        reconciler,
        test_marker_prefix=settings.test_marker_prefix,
        alert_keywords=settings.alert_keywords,
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Gmail push notification relay with a bounded message store",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.redis = redis_client
    app.state.store = store
    app.state.pipeline = pipeline

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    from inboxrelay.api.routes import router
    from inboxrelay.infrastructure.http import (
        diagnostics_router,
        emails_router,
        webhook_router,
    )

    app.include_router(router)
    app.include_router(webhook_router)
    app.include_router(emails_router)
    app.include_router(diagnostics_router)

    return app


# Create app instance
app = create_app()
