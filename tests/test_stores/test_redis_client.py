"""Tests for the Redis client wrapper."""

from unittest.mock import MagicMock, patch

import redis

from inboxrelay.infrastructure.redis_client import RedisClientWrapper
from inboxrelay.infrastructure.settings import Settings


def _wrapper(client):
    wrapper = RedisClientWrapper(Settings(_env_file=None))
    wrapper._client = client
    return wrapper


def test_health_check_healthy():
    client = MagicMock()
    client.info.return_value = {"redis_version": "7.2.4"}

    assert _wrapper(client).health_check() == {"status": "healthy", "server_version": "7.2.4"}
    client.ping.assert_called_once()


def test_health_check_unhealthy():
    client = MagicMock()
    client.ping.side_effect = redis.ConnectionError("connection refused")

    health = _wrapper(client).health_check()

    assert health["status"] == "unhealthy"
    assert "connection refused" in health["error"]


def test_connect_uses_settings_url_and_timeout():
    settings = Settings(_env_file=None, redis_url="redis://cache:6380/2", redis_socket_timeout=2.5)
    with patch("inboxrelay.infrastructure.redis_client.redis.from_url") as from_url:
        client = RedisClientWrapper(settings).client

    assert client is from_url.return_value
    from_url.assert_called_once_with(
        "redis://cache:6380/2",
        decode_responses=True,
        socket_timeout=2.5,
        socket_connect_timeout=2.5,
    )


def test_disconnect_closes_client():
    client = MagicMock()
    wrapper = _wrapper(client)

    wrapper.disconnect()

    client.close.assert_called_once()
    assert wrapper._client is None
