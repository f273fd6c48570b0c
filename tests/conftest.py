"""Shared fixtures: Gmail message builders, settings, stores and the API client."""

import base64
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from inboxrelay.api.main import create_app
from inboxrelay.domain.models import ChangeEvent, MessageRecord
from inboxrelay.infrastructure.pubsub import build_envelope
from inboxrelay.infrastructure.settings import Settings
from inboxrelay.infrastructure.stores import InMemoryMessageStore

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def b64url(text: str) -> str:
    """Gmail body encoding: urlsafe base64 without padding."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def make_part():
    def _make(mime_type="text/plain", text=None, parts=None):
        part = {"mimeType": mime_type, "body": {"size": 0}}
        if text is not None:
            part["body"] = {"data": b64url(text), "size": len(text)}
        if parts is not None:
            part["parts"] = parts
        return part

    return _make


@pytest.fixture
def make_gmail_message():
    """Build a ``users.messages.get`` (format=full) response."""

    def _make(
        message_id="msg-1",
        subject="Hello",
        sender="Alice <alice@example.com>",
        to="me@example.com",
        date="Tue, 2 Jan 2024 10:00:00 +0000",
        body="Hi there",
        snippet="Hi there",
        parts=None,
        extra_headers=None,
    ):
        headers = [
            {"name": "Subject", "value": subject},
            {"name": "From", "value": sender},
            {"name": "To", "value": to},
            {"name": "Date", "value": date},
        ]
        headers.extend(extra_headers or [])
        payload = {"mimeType": "text/plain", "headers": headers, "body": {"size": 0}}
        if parts is not None:
            payload["mimeType"] = "multipart/alternative"
            payload["parts"] = parts
        elif body is not None:
            payload["body"] = {"data": b64url(body), "size": len(body)}
        return {
            "id": message_id,
            "threadId": f"thread-{message_id}",
            "labelIds": ["INBOX", "UNREAD"],
            "snippet": snippet,
            "payload": payload,
        }

    return _make


@pytest.fixture
def make_record():
    def _make(
        message_id="msg-1",
        subject="Hello",
        sender="alice@example.com",
        date="Tue, 2 Jan 2024 10:00:00 +0000",
    ):
        return MessageRecord(
            id=message_id,
            thread_id=f"thread-{message_id}",
            subject=subject,
            sender=sender,
            to="me@example.com",
            date=date,
            snippet="",
            body=None,
            received_at=FIXED_NOW.isoformat(),
            history_id="100",
        )

    return _make


@pytest.fixture
def make_envelope():
    def _make(history_id="12345", email="me@example.com"):
        return build_envelope(ChangeEvent(account_id=email, cursor=history_id))

    return _make


@pytest.fixture
def settings():
    return Settings(_env_file=None, store_backend="memory", log_level="WARNING")


@pytest.fixture
def memory_store():
    return InMemoryMessageStore(max_records=100)


@pytest.fixture
def provider():
    """Mail provider with an empty mailbox; tests override return values."""
    fake = MagicMock()
    fake.list_history.return_value = []
    fake.list_messages.return_value = []
    return fake


@pytest.fixture
def client(settings, memory_store, provider):
    app = create_app(settings=settings, store=memory_store, provider=provider)
    with TestClient(app) as test_client:
        yield test_client
