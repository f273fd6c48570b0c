"""Gmail provider: API client, credentials and message extraction."""

from inboxrelay.infrastructure.gmail.client import GmailProvider
from inboxrelay.infrastructure.gmail.extractor import extract_message

__all__ = [
    "GmailProvider",
    "extract_message",
]
