from __future__ import annotations

from typing import Any, Protocol

RawMessage = dict[str, Any]


class MailProvider(Protocol):
    """Capabilities the reconciler needs from the mail provider.

    Implementations raise ReconciliationError when a call fails.
    """

    def get_profile(self) -> dict[str, Any]: ...

    def list_history(self, start_cursor: str) -> list[dict[str, Any]]:
        """Return every history entry with messageAdded events since start_cursor."""
        ...

    def get_message(self, message_id: str) -> RawMessage: ...

    def list_messages(
        self,
        query: str = "",
        label_ids: list[str] | None = None,
        max_results: int = 1,
    ) -> list[str]:
        """Return message ids matching the filter, newest first."""
        ...
