"""Store self-test and cleanup endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from loguru import logger

from inboxrelay.api.dependencies import get_app_settings, get_store
from inboxrelay.application.ports.message_store import MessageStore
from inboxrelay.domain.models import MessageRecord
from inboxrelay.infrastructure.settings import Settings

router = APIRouter(prefix="/api", tags=["diagnostics"])

RECENT_SAMPLE_SIZE = 5


def is_test_record(record: MessageRecord) -> bool:
    """Whether a record looks like webhook test traffic rather than real mail."""
    return (
        record.id.startswith("test-")
        or "test@" in record.sender
        or "[Test]" in record.subject
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/diagnostics/store")
def store_diagnostics(
    settings: Settings = Depends(get_app_settings),
    store: MessageStore = Depends(get_store),
):
    """Round-trip a throwaway key, then report stats and the newest records."""
    ping = store.ping()
    stats = store.stats()
    recent = store.list_recent(RECENT_SAMPLE_SIZE)

    error = ping.error or stats.error or recent.error
    body = {
        "success": error is None,
        "store": {
            "backend": settings.store_backend,
            "connected": bool(ping.value),
        },
        "stats": stats.value.to_api(),
        "recentCount": len(recent.value),
        "recentRecords": [r.to_api() for r in recent.value],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if error:
        logger.error(f"Store diagnostics failed: {error}")
        body["error"] = error
        return JSONResponse(status_code=500, content=body)
    return body


@router.post("/cleanup")
def cleanup_report(store: MessageStore = Depends(get_store)):
    """Count stored records that look like test traffic. Nothing is deleted."""
    result = store.list_recent(store.max_records)
    if not result.success:
        logger.error(f"Cleanup report failed: {result.error}")
        return JSONResponse(status_code=500, content={"success": False, "error": result.error})

    total = len(result.value)
    tests = sum(1 for r in result.value if is_test_record(r))
    return {
        "success": True,
        "totalEmails": total,
        "testEmails": tests,
        "realEmails": total - tests,
        "message": f"Found {tests} test emails out of {total} total",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.delete("/cleanup")
def cleanup_all(store: MessageStore = Depends(get_store)):
    """Clear every stored record and start fresh."""
    result = store.clear()
    if not result.success:
        logger.error(f"Cleanup failed: {result.error}")
        return JSONResponse(status_code=500, content={"success": False, "error": result.error})
    return {
        "success": True,
        "message": "All emails cleared from store",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
