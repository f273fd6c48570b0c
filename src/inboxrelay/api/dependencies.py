"""FastAPI dependencies resolving the services held on ``app.state``."""

from fastapi import Request

from inboxrelay.application.ports.message_store import MessageStore
from inboxrelay.application.use_cases.ingest_notification import IngestNotificationUseCase
from inboxrelay.infrastructure.redis_client import RedisClientWrapper
from inboxrelay.infrastructure.settings import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> MessageStore:
    return request.app.state.store


def get_pipeline(request: Request) -> IngestNotificationUseCase:
    return request.app.state.pipeline


def get_redis_client(request: Request) -> RedisClientWrapper | None:
    return request.app.state.redis
