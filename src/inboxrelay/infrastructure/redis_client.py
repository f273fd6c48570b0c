"""Redis client wrapper backing the message store."""

from typing import Any

import redis
from loguru import logger

from inboxrelay.infrastructure.settings import Settings, get_settings


class RedisClientWrapper:
    """Lazily connected Redis client with health reporting."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._client: redis.Redis | None = None

    def connect(self) -> redis.Redis:
        """Create the Redis client (connections are opened on first command)."""
        if self._client is None:
            logger.info("Connecting to Redis")
            self._client = redis.from_url(
                self.settings.redis_url.get_secret_value(),
                decode_responses=True,
                socket_timeout=self.settings.redis_socket_timeout,
                socket_connect_timeout=self.settings.redis_socket_timeout,
            )
        return self._client

    def disconnect(self) -> None:
        """Close the connection pool."""
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("Redis connection closed")

    @property
    def client(self) -> redis.Redis:
        """Get or create the Redis client."""
        if self._client is None:
            return self.connect()
        return self._client

    def health_check(self) -> dict[str, Any]:
        """Check Redis connection health."""
        try:
            self.client.ping()
            info = self.client.info("server")
            return {
                "status": "healthy",
                "server_version": info.get("redis_version"),
            }
        except redis.RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return {
                "status": "unhealthy",
                "error": str(e),
            }
