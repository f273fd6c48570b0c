"""Health endpoints for the Inbox Relay service."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from loguru import logger
from pydantic import BaseModel

from inboxrelay.api.dependencies import get_app_settings, get_redis_client, get_store
from inboxrelay.application.ports.message_store import MessageStore
from inboxrelay.infrastructure.redis_client import RedisClientWrapper
from inboxrelay.infrastructure.settings import Settings

router = APIRouter()


# ============================================================================
# Response Models
# ============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response with service status."""

    status: str
    timestamp: str
    services: dict[str, str]


# ============================================================================
# Health Endpoints
# ============================================================================


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app_version,
    )


@router.get("/health/ready", response_model=ReadinessResponse, tags=["health"])
async def readiness_check(
    settings: Settings = Depends(get_app_settings),
    store: MessageStore = Depends(get_store),
    redis_client: RedisClientWrapper | None = Depends(get_redis_client),
) -> ReadinessResponse:
    """Readiness check with store connectivity and Gmail configuration."""
    services: dict[str, str] = {}

    result = await run_in_threadpool(store.ping)
    if result.success:
        services["store"] = "healthy"
    else:
        logger.warning(f"Store readiness check failed: {result.error}")
        services["store"] = f"error: {(result.error or '')[:50]}"

    if redis_client is not None:
        health = await run_in_threadpool(redis_client.health_check)
        services["redis"] = health.get("status", "unknown")

    services["gmail"] = "configured" if settings.gmail_configured else "not_configured"

    critical_services = ["store", "redis"]
    critical_healthy = all(services.get(s) == "healthy" for s in critical_services if s in services)
    status = "ready" if critical_healthy else "degraded"
    return ReadinessResponse(
        status=status,
        timestamp=datetime.now(timezone.utc).isoformat(),
        services=services,
    )


@router.get("/health/live", tags=["health"])
async def liveness_check() -> dict[str, str]:
    """Kubernetes liveness probe endpoint."""
    return {"status": "alive"}
