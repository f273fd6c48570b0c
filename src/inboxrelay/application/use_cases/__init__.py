"""Application use cases."""

from inboxrelay.application.use_cases.ingest_notification import (
    IngestNotificationUseCase,
    IngestResult,
)
from inboxrelay.application.use_cases.reconcile_history import HistoryReconciler

__all__ = [
    "HistoryReconciler",
    "IngestNotificationUseCase",
    "IngestResult",
]
