from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from inboxrelay.domain.models import MessageRecord, StoreStats

T = TypeVar("T")


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Outcome of a store operation.

    On failure ``value`` holds a safe default (empty list, None, zero stats)
    so callers can keep going, and ``error`` describes what went wrong.
    """

    value: T
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, value: T) -> StoreResult[T]:
        return cls(value=value)

    @classmethod
    def failed(cls, error: str, default: T) -> StoreResult[T]:
        return cls(value=default, error=error)


class MessageStore(Protocol):
    """Bounded newest-first message list with a time-limited by-id index."""

    max_records: int
    record_ttl_seconds: int

    def insert(self, record: MessageRecord) -> StoreResult[bool]: ...

    def list_recent(self, limit: int) -> StoreResult[list[MessageRecord]]: ...

    def get_by_id(self, message_id: str) -> StoreResult[MessageRecord | None]: ...

    def stats(self) -> StoreResult[StoreStats]: ...

    def clear(self) -> StoreResult[bool]: ...

    def ping(self) -> StoreResult[bool]: ...
