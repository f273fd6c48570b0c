"""Inbox Relay: Gmail push notifications to a bounded recent-message store."""

__version__ = "0.1.0"
