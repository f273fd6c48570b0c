"""Ports implemented by the infrastructure layer."""

from inboxrelay.application.ports.mail_provider import MailProvider, RawMessage
from inboxrelay.application.ports.message_store import MessageStore, StoreResult

__all__ = [
    "MailProvider",
    "MessageStore",
    "RawMessage",
    "StoreResult",
]
