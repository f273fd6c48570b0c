"""Gmail Pub/Sub push endpoint."""

from __future__ import annotations

import secrets
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from loguru import logger

from inboxrelay.api.dependencies import get_app_settings, get_pipeline
from inboxrelay.application.use_cases.ingest_notification import IngestNotificationUseCase
from inboxrelay.infrastructure.settings import Settings

router = APIRouter(prefix="/api/gmail", tags=["gmail"])

WEBHOOK_PATH = "/api/gmail/webhook"


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/webhook")
async def receive_notification(
    request: Request,
    token: str | None = Query(default=None),
    settings: Settings = Depends(get_app_settings),
    pipeline: IngestNotificationUseCase = Depends(get_pipeline),
) -> dict:
    """
    Receive a Gmail change notification pushed by Pub/Sub.

    The notification is processed before responding, and the response is
    always 200 so Pub/Sub does not redeliver: malformed bodies and processing
    errors are logged and dropped. The only rejection is a wrong ``token``
    when ``WEBHOOK_TOKEN`` is configured.
    """
    expected = settings.webhook_token.get_secret_value() if settings.webhook_token else ""
    if expected:
        if not token or not secrets.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
            logger.warning("Gmail webhook unauthorized attempt")
            raise HTTPException(status_code=401, detail="Unauthorized")

    try:
        body = await request.json()
    except ValueError as e:
        logger.warning(f"Gmail webhook received a non-JSON body: {e}")
        return {"status": "ok"}

    if not isinstance(body, dict):
        logger.warning(f"Gmail webhook expected a JSON object, got {type(body).__name__}")
        return {"status": "ok"}

    result = await run_in_threadpool(pipeline.handle, body)
    logger.info(
        f"Notification handled: status={result.status} stored={result.stored} "
        f"failed={result.failed}"
    )
    return {"status": "ok"}


@router.get("/webhook")
async def webhook_health(settings: Settings = Depends(get_app_settings)) -> dict:
    """Liveness probe for the push endpoint."""
    return {
        "status": "healthy",
        "endpoint": WEBHOOK_PATH,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.app_version,
    }
