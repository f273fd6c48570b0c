"""Exception hierarchy for inbox-relay."""


class InboxRelayError(Exception):
    """Base exception for all inbox-relay errors."""


# Notifications
class DecodeError(InboxRelayError):
    """Push envelope is not valid base64 JSON or lacks required fields."""


# Mail provider
class ReconciliationError(InboxRelayError):
    """A mail provider call failed while resolving a change cursor."""


class ProviderAuthError(ReconciliationError):
    """Mail provider credentials are missing or were rejected."""


# Storage
class StorageError(InboxRelayError):
    """A key-value backend call failed or returned unreadable data."""
