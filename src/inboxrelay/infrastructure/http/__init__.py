"""HTTP routers."""

from inboxrelay.infrastructure.http.diagnostics import router as diagnostics_router
from inboxrelay.infrastructure.http.emails import router as emails_router
from inboxrelay.infrastructure.http.webhook import router as webhook_router

__all__ = [
    "diagnostics_router",
    "emails_router",
    "webhook_router",
]
