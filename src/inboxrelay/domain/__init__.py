"""Domain models and entities."""

from inboxrelay.domain.models import (
    BODY_MAX_CHARS,
    ChangeEvent,
    MessageDetails,
    MessageRecord,
    StoreStats,
)

__all__ = [
    "BODY_MAX_CHARS",
    "ChangeEvent",
    "MessageDetails",
    "MessageRecord",
    "StoreStats",
]
