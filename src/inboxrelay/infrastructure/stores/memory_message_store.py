"""In-process MessageStore for development and tests.

Contents are lost on restart; use the Redis store anywhere that matters.
"""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from typing import Callable

from loguru import logger

from inboxrelay.application.ports.message_store import MessageStore, StoreResult
from inboxrelay.domain.models import MessageRecord, StoreStats

DEFAULT_MAX_RECORDS = 100
DEFAULT_RECORD_TTL_SECONDS = 60 * 60 * 24 * 30


class InMemoryMessageStore(MessageStore):
    """Newest-first list capped at ``max_records`` plus a TTL-expiring by-id index."""

    def __init__(
        self,
        max_records: int = DEFAULT_MAX_RECORDS,
        record_ttl_seconds: int = DEFAULT_RECORD_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_records <= 0:
            raise ValueError("max_records must be positive")
        self.max_records = max_records
        self.record_ttl_seconds = record_ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._records: list[MessageRecord] = []
        self._by_id: dict[str, tuple[float, MessageRecord]] = {}
        self._last_received: tuple[float, str] | None = None

    def insert(self, record: MessageRecord) -> StoreResult[bool]:
        now = self._clock()
        expires_at = now + self.record_ttl_seconds
        with self._lock:
            self._records.insert(0, record)
            del self._records[self.max_records:]
            self._by_id[record.id] = (expires_at, record)
            self._last_received = (expires_at, _utc_iso(now))

        logger.debug(f"Stored email in memory: {record.subject} from {record.sender}")
        return StoreResult.ok(True)

    def list_recent(self, limit: int) -> StoreResult[list[MessageRecord]]:
        if limit <= 0:
            return StoreResult.ok([])
        with self._lock:
            return StoreResult.ok(self._records[:limit])

    def get_by_id(self, message_id: str) -> StoreResult[MessageRecord | None]:
        now = self._clock()
        with self._lock:
            entry = self._by_id.get(message_id)
            if entry is None:
                return StoreResult.ok(None)
            expires_at, record = entry
            if expires_at <= now:
                del self._by_id[message_id]
                return StoreResult.ok(None)
            return StoreResult.ok(record)

    def stats(self) -> StoreResult[StoreStats]:
        now = self._clock()
        with self._lock:
            last_received = None
            if self._last_received is not None and self._last_received[0] > now:
                last_received = self._last_received[1]
            return StoreResult.ok(
                StoreStats(
                    total_count=len(self._records),
                    newest_date=self._records[0].date if self._records else None,
                    oldest_date=self._records[-1].date if self._records else None,
                    last_received_at=last_received,
                )
            )

    def clear(self) -> StoreResult[bool]:
        with self._lock:
            self._records = []
            self._by_id = {}
            self._last_received = None
        logger.info("Cleared all emails from memory store")
        return StoreResult.ok(True)

    def ping(self) -> StoreResult[bool]:
        return StoreResult.ok(True)


def _utc_iso(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()
