"""Read API over the bounded message store."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from loguru import logger

from inboxrelay.api.dependencies import get_app_settings, get_store
from inboxrelay.application.ports.message_store import MessageStore
from inboxrelay.domain.models import StoreStats
from inboxrelay.infrastructure.settings import Settings

router = APIRouter(prefix="/api/emails", tags=["emails"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================================================
# Endpoints
# ============================================================================


@router.get("")
def list_emails(
    limit: int | None = Query(default=None, ge=1, description="Maximum records to return"),
    settings: Settings = Depends(get_app_settings),
    store: MessageStore = Depends(get_store),
):
    """Most recent records, newest first, with store stats."""
    effective = min(limit or settings.read_default_limit, settings.read_max_limit)

    records = store.list_recent(effective)
    stats = store.stats()
    error = records.error or stats.error
    if error:
        logger.error(f"Error fetching emails: {error}")
        return JSONResponse(
            status_code=500,
            content={
                "records": [],
                "stats": StoreStats().to_api(),
                "timestamp": _now(),
                "error": "Failed to fetch emails",
            },
        )

    return {
        "records": [r.to_api() for r in records.value],
        "stats": stats.value.to_api(),
        "timestamp": _now(),
    }


@router.get("/{message_id}")
def get_email(message_id: str, store: MessageStore = Depends(get_store)):
    """A single record by message id, while its index entry is live."""
    result = store.get_by_id(message_id)
    if not result.success:
        logger.error(f"Error fetching email {message_id}: {result.error}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Failed to fetch email", "error": result.error},
        )
    if result.value is None:
        return JSONResponse(status_code=404, content={"detail": "Email not found"})
    return result.value.to_api()


@router.delete("")
def clear_emails(store: MessageStore = Depends(get_store)):
    """Remove every stored record."""
    result = store.clear()
    if not result.success:
        logger.error(f"Error clearing emails: {result.error}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Failed to clear emails",
                "timestamp": _now(),
                "error": result.error,
            },
        )
    return {
        "success": True,
        "message": "All emails cleared",
        "timestamp": _now(),
    }
