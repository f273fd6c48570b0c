"""Redis implementation of MessageStore.

Key layout (prefix defaults to ``gmail``)::

    {prefix}:emails               LIST of JSON records, newest at index 0
    {prefix}:email:{id}           STRING JSON record, expires after the record TTL
    {prefix}:stats:lastReceived   STRING ISO timestamp of the last insert

``insert`` issues independent commands (LPUSH, LTRIM, SET, SET). A concurrent
reader can observe the list already trimmed while the by-id key is not yet
written, or the reverse. Each command only touches its own key, so the
structure itself stays consistent.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Callable, TypeVar

import redis
from loguru import logger
from pydantic import ValidationError

from inboxrelay.application.ports.message_store import MessageStore, StoreResult
from inboxrelay.domain.models import MessageRecord, StoreStats
from inboxrelay.exceptions import StorageError
from inboxrelay.infrastructure.stores.memory_message_store import (
    DEFAULT_MAX_RECORDS,
    DEFAULT_RECORD_TTL_SECONDS,
)

T = TypeVar("T")

PING_TTL_SECONDS = 10


class RedisMessageStore(MessageStore):
    """Bounded message list and by-id index kept in Redis."""

    def __init__(
        self,
        client: redis.Redis,
        key_prefix: str = "gmail",
        max_records: int = DEFAULT_MAX_RECORDS,
        record_ttl_seconds: int = DEFAULT_RECORD_TTL_SECONDS,
    ) -> None:
        if max_records <= 0:
            raise ValueError("max_records must be positive")
        self.client = client
        self.key_prefix = key_prefix
        self.max_records = max_records
        self.record_ttl_seconds = record_ttl_seconds

    @property
    def list_key(self) -> str:
        return f"{self.key_prefix}:emails"

    @property
    def last_received_key(self) -> str:
        return f"{self.key_prefix}:stats:lastReceived"

    def record_key(self, message_id: str) -> str:
        return f"{self.key_prefix}:email:{message_id}"

    # ------------------------------------------------------------------
    # MessageStore
    # ------------------------------------------------------------------

    def insert(self, record: MessageRecord) -> StoreResult[bool]:
        def _insert() -> bool:
            payload = _serialize(record)
            self.client.lpush(self.list_key, payload)
            self.client.ltrim(self.list_key, 0, self.max_records - 1)
            self.client.set(self.record_key(record.id), payload, ex=self.record_ttl_seconds)
            self.client.set(
                self.last_received_key,
                datetime.now(timezone.utc).isoformat(),
                ex=self.record_ttl_seconds,
            )
            return True

        result = self._run("insert", _insert, default=False)
        if result.success:
            logger.info(f"Stored email in Redis: {record.subject} from {record.sender}")
        return result

    def list_recent(self, limit: int) -> StoreResult[list[MessageRecord]]:
        if limit <= 0:
            return StoreResult.ok([])

        def _list() -> list[MessageRecord]:
            records: list[MessageRecord] = []
            for raw in self.client.lrange(self.list_key, 0, limit - 1):
                try:
                    records.append(_deserialize(raw))
                except StorageError as e:
                    logger.warning(f"Skipping unreadable list entry in {self.list_key}: {e}")
            return records

        return self._run("list", _list, default=[])

    def get_by_id(self, message_id: str) -> StoreResult[MessageRecord | None]:
        def _get() -> MessageRecord | None:
            raw = self.client.get(self.record_key(message_id))
            return _deserialize(raw) if raw is not None else None

        return self._run("get_by_id", _get, default=None)

    def stats(self) -> StoreResult[StoreStats]:
        def _stats() -> StoreStats:
            total = self.client.llen(self.list_key) or 0
            last_received = self.client.get(self.last_received_key)
            newest = self.client.lindex(self.list_key, 0)
            oldest = self.client.lindex(self.list_key, -1)
            return StoreStats(
                total_count=total,
                newest_date=_date_of(newest),
                oldest_date=_date_of(oldest),
                last_received_at=last_received,
            )

        return self._run("stats", _stats, default=StoreStats())

    def clear(self) -> StoreResult[bool]:
        def _clear() -> bool:
            ids = set()
            for raw in self.client.lrange(self.list_key, 0, -1):
                try:
                    ids.add(_deserialize(raw).id)
                except StorageError as e:
                    logger.warning(f"Unreadable entry while clearing: {e}")

            # One MULTI/EXEC so readers never see a half-cleared store
            pipe = self.client.pipeline(transaction=True)
            for message_id in ids:
                pipe.delete(self.record_key(message_id))
            pipe.delete(self.list_key)
            pipe.delete(self.last_received_key)
            pipe.execute()
            return True

        result = self._run("clear", _clear, default=False)
        if result.success:
            logger.info("Cleared all emails from Redis store")
        return result

    def ping(self) -> StoreResult[bool]:
        """Write, read back and expire a throwaway key."""

        def _ping() -> bool:
            key = f"{self.key_prefix}:test:connection"
            token = uuid.uuid4().hex
            self.client.set(key, token, ex=PING_TTL_SECONDS)
            return self.client.get(key) == token

        result = self._run("ping", _ping, default=False)
        if result.success and not result.value:
            return StoreResult.failed("Read-back value did not match", default=False)
        return result

    # ------------------------------------------------------------------

    def _run(self, operation: str, fn: Callable[[], T], default: T) -> StoreResult[T]:
        try:
            return StoreResult.ok(fn())
        except redis.RedisError as e:
            error = StorageError(f"Redis {operation} failed: {e}")
        except StorageError as e:
            error = e
        logger.error(str(error))
        return StoreResult.failed(str(error), default=default)


def _serialize(record: MessageRecord) -> str:
    return json.dumps(record.to_api())


def _deserialize(raw: str | bytes) -> MessageRecord:
    try:
        data = json.loads(raw)
        return MessageRecord.model_validate(data)
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        raise StorageError(f"Unreadable record: {e}") from e


def _date_of(raw: str | bytes | None) -> str | None:
    if raw is None:
        return None
    try:
        return _deserialize(raw).date
    except StorageError as e:
        logger.warning(f"Stats could not read record date: {e}")
        return None
