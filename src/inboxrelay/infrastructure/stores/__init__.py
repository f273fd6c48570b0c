"""Store implementations."""

from inboxrelay.infrastructure.stores.factory import build_message_store
from inboxrelay.infrastructure.stores.memory_message_store import InMemoryMessageStore
from inboxrelay.infrastructure.stores.redis_message_store import RedisMessageStore

__all__ = [
    "InMemoryMessageStore",
    "RedisMessageStore",
    "build_message_store",
]
