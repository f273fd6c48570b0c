"""Tests for Pub/Sub push envelope decoding."""

import base64
import json

import pytest

from inboxrelay.domain.models import ChangeEvent
from inboxrelay.exceptions import DecodeError
from inboxrelay.infrastructure.pubsub import (
    PubSubEnvelope,
    build_envelope,
    decode_notification,
    encode_notification,
)


def _envelope(data):
    return {"message": {"data": data, "messageId": "1"}, "subscription": "projects/p/subscriptions/s"}


def _encode(payload) -> str:
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


def test_decode_string_history_id():
    event = decode_notification(_envelope(_encode({"emailAddress": "me@example.com", "historyId": "12345"})))
    assert event.account_id == "me@example.com"
    assert event.cursor == "12345"


def test_decode_numeric_history_id():
    event = decode_notification(_envelope(_encode({"emailAddress": "me@example.com", "historyId": 987})))
    assert event.cursor == 987
    assert event.cursor_str == "987"


def test_decode_accepts_model_envelope():
    envelope = PubSubEnvelope.model_validate(_envelope(_encode({"emailAddress": "a@b.c", "historyId": "1"})))
    assert decode_notification(envelope).account_id == "a@b.c"


def test_decode_urlsafe_unpadded_data():
    raw = json.dumps({"emailAddress": "me@example.com", "historyId": "7"}).encode()
    data = base64.urlsafe_b64encode(raw).decode().rstrip("=")
    assert decode_notification(_envelope(data)).cursor == "7"


def test_extra_fields_are_ignored():
    payload = {"emailAddress": "me@example.com", "historyId": "5", "extra": True}
    assert decode_notification(_envelope(_encode(payload))).cursor == "5"


def test_encode_then_decode_returns_same_event():
    event = ChangeEvent(account_id="me@example.com", cursor="424242")
    assert decode_notification(build_envelope(event)) == event


def test_encode_uses_wire_field_names():
    event = ChangeEvent(account_id="me@example.com", cursor=1)
    decoded = json.loads(base64.b64decode(encode_notification(event)))
    assert decoded == {"emailAddress": "me@example.com", "historyId": 1}


@pytest.mark.parametrize(
    "envelope",
    [
        {},
        {"message": None},
        {"message": {}},
        {"message": {"data": ""}},
        {"message": "not-an-object"},
    ],
)
def test_missing_data_raises(envelope):
    with pytest.raises(DecodeError):
        decode_notification(envelope)


def test_invalid_base64_raises():
    with pytest.raises(DecodeError):
        decode_notification(_envelope("***not base64***"))


def test_non_utf8_raises():
    data = base64.b64encode(b"\xff\xfe\xfd").decode()
    with pytest.raises(DecodeError):
        decode_notification(_envelope(data))


def test_non_json_raises():
    data = base64.b64encode(b"hello world").decode()
    with pytest.raises(DecodeError):
        decode_notification(_envelope(data))


def test_json_array_raises():
    with pytest.raises(DecodeError):
        decode_notification(_envelope(_encode(["emailAddress", "historyId"])))


@pytest.mark.parametrize(
    "payload",
    [
        {"historyId": "1"},
        {"emailAddress": "me@example.com"},
        {"emailAddress": 42, "historyId": "1"},
        {"emailAddress": "me@example.com", "historyId": 1.5},
        {"emailAddress": "me@example.com", "historyId": None},
        {"emailAddress": "me@example.com", "historyId": True},
    ],
)
def test_missing_or_mistyped_fields_raise(payload):
    with pytest.raises(DecodeError):
        decode_notification(_envelope(_encode(payload)))
