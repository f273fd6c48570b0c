"""Infrastructure layer - external services, storage, and configuration."""

from inboxrelay.infrastructure.log_config import configure_logging
from inboxrelay.infrastructure.redis_client import RedisClientWrapper
from inboxrelay.infrastructure.settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    # Redis
    "RedisClientWrapper",
]
