"""Google Cloud Pub/Sub push envelope handling."""

from inboxrelay.infrastructure.pubsub.notification import (
    PubSubEnvelope,
    PubSubMessage,
    build_envelope,
    decode_notification,
    encode_notification,
)

__all__ = [
    "PubSubEnvelope",
    "PubSubMessage",
    "build_envelope",
    "decode_notification",
    "encode_notification",
]
