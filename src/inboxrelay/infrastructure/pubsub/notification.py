"""Decode Pub/Sub push envelopes into Gmail change events.

A push request body looks like::

    {
        "message": {
            "data": "<base64 JSON>",
            "messageId": "...",
            "publishTime": "...",
            "attributes": {...}
        },
        "subscription": "projects/<p>/subscriptions/<s>"
    }

and ``data`` decodes to ``{"emailAddress": "...", "historyId": "12345"}``.
Everything here is pure: no network, no storage.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError

from inboxrelay.domain.models import ChangeEvent
from inboxrelay.exceptions import DecodeError


class PubSubMessage(BaseModel):
    """The ``message`` object of a push envelope."""

    data: str | None = None
    message_id: str | None = Field(default=None, alias="messageId")
    publish_time: str | None = Field(default=None, alias="publishTime")
    attributes: dict[str, Any] | None = None


class PubSubEnvelope(BaseModel):
    """A Pub/Sub push request body."""

    message: PubSubMessage | None = None
    subscription: str | None = None


def decode_notification(envelope: PubSubEnvelope | Mapping[str, Any]) -> ChangeEvent:
    """Extract the ChangeEvent carried by a push envelope.

    Raises:
        DecodeError: the envelope has no data, the data is not base64 encoded
            UTF-8 JSON, or emailAddress/historyId are missing or mistyped.
    """
    if not isinstance(envelope, PubSubEnvelope):
        try:
            envelope = PubSubEnvelope.model_validate(envelope)
        except ValidationError as e:
            raise DecodeError(f"Malformed push envelope: {e}") from e

    if envelope.message is None or not envelope.message.data:
        raise DecodeError("Push envelope has no message data")

    try:
        raw = _b64decode(envelope.message.data)
        text = raw.decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Message data is not base64 encoded UTF-8: {e}") from e

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Message data is not JSON: {text[:100]!r}") from e

    if not isinstance(payload, dict):
        raise DecodeError(f"Expected a JSON object, got {type(payload).__name__}")

    try:
        return ChangeEvent.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(f"Notification is missing emailAddress/historyId: {e}") from e


def encode_notification(event: ChangeEvent) -> str:
    """Return the base64 ``data`` string that decodes back to ``event``."""
    payload = json.dumps(event.model_dump(by_alias=True))
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def build_envelope(
    event: ChangeEvent,
    message_id: str = "local-test",
    publish_time: str | None = None,
    subscription: str = "projects/local/subscriptions/inbox-relay",
) -> dict[str, Any]:
    """Wrap an event in a push envelope, as Pub/Sub would deliver it."""
    message: dict[str, Any] = {
        "data": encode_notification(event),
        "messageId": message_id,
    }
    if publish_time:
        message["publishTime"] = publish_time
    return {"message": message, "subscription": subscription}


def _b64decode(data: str) -> bytes:
    # Pub/Sub uses the standard alphabet; accept urlsafe and unpadded input too
    cleaned = data.strip().replace("-", "+").replace("_", "/")
    cleaned += "=" * (-len(cleaned) % 4)
    return base64.b64decode(cleaned, validate=True)
