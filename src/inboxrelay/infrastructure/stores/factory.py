"""Select and construct the configured MessageStore."""

from __future__ import annotations

from loguru import logger

from inboxrelay.application.ports.message_store import MessageStore
from inboxrelay.infrastructure.redis_client import RedisClientWrapper
from inboxrelay.infrastructure.settings import Settings
from inboxrelay.infrastructure.stores.memory_message_store import InMemoryMessageStore
from inboxrelay.infrastructure.stores.redis_message_store import RedisMessageStore


def build_message_store(
    settings: Settings,
    redis_client: RedisClientWrapper | None = None,
) -> MessageStore:
    """Build the store named by ``settings.store_backend``.

    For the Redis backend the wrapper is created from settings unless one is
    passed in, so the caller can close it on shutdown.
    """
    if settings.store_backend == "memory":
        logger.warning("Using in-memory message store; records are lost on restart")
        return InMemoryMessageStore(
            max_records=settings.store_max_records,
            record_ttl_seconds=settings.store_record_ttl_seconds,
        )

    wrapper = redis_client or RedisClientWrapper(settings)
    logger.info(
        f"Using Redis message store (prefix={settings.store_key_prefix}, "
        f"max_records={settings.store_max_records})"
    )
    return RedisMessageStore(
        wrapper.client,
        key_prefix=settings.store_key_prefix,
        max_records=settings.store_max_records,
        record_ttl_seconds=settings.store_record_ttl_seconds,
    )
