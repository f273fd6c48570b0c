"""Resolve a change cursor into the messages added since it."""

from __future__ import annotations

import re

from loguru import logger

from inboxrelay.application.ports.mail_provider import MailProvider, RawMessage
from inboxrelay.exceptions import ReconciliationError

_CURSOR_RE = re.compile(r"[0-9]+")


class HistoryReconciler:
    """Turn a push notification's history cursor into concrete messages.

    Flow:
    1. Reject cursors that are not plain decimal digits (no provider call)
    2. List messageAdded history since the cursor and fetch each message
    3. If the history is empty, fetch the most recent unread inbox message

    Push notifications can arrive before the history they point at is
    queryable, or after it has rolled over. Step 3 keeps the feed live at the
    cost of sometimes returning a message that was already seen. Provider
    failures are logged and yield whatever could be fetched; nothing raises.
    """

    def __init__(
        self,
        provider: MailProvider,
        fallback_query: str = "is:unread",
        fallback_label_ids: list[str] | None = None,
    ) -> None:
        self.provider = provider
        self.fallback_query = fallback_query
        self.fallback_label_ids = (
            ["INBOX"] if fallback_label_ids is None else list(fallback_label_ids)
        )

    @staticmethod
    def is_valid_cursor(cursor: str | int) -> bool:
        return _CURSOR_RE.fullmatch(str(cursor)) is not None

    def reconcile(self, cursor: str | int) -> list[RawMessage]:
        cursor_str = str(cursor)
        if not self.is_valid_cursor(cursor_str):
            logger.warning(f"Invalid history ID format: {cursor_str!r}, skipping reconciliation")
            return []

        try:
            history = self.provider.list_history(cursor_str)
        except ReconciliationError as e:
            logger.error(f"History lookup failed for cursor {cursor_str}: {e}")
            return []

        if not history:
            logger.info("No new messages in history, fetching latest unread message instead")
            return self._fetch_latest_unread()

        logger.info(f"Found {len(history)} history records since {cursor_str}")
        messages: list[RawMessage] = []
        for record in history:
            for added in record.get("messagesAdded") or []:
                message_id = (added.get("message") or {}).get("id")
                if not message_id:
                    continue
                message = self._fetch(message_id)
                if message is not None:
                    messages.append(message)

        return messages

    def _fetch_latest_unread(self) -> list[RawMessage]:
        try:
            ids = self.provider.list_messages(
                query=self.fallback_query,
                label_ids=self.fallback_label_ids,
                max_results=1,
            )
        except ReconciliationError as e:
            logger.error(f"Latest unread lookup failed: {e}")
            return []

        if not ids:
            logger.info("No unread messages found in inbox")
            return []

        logger.info(f"Fetching latest unread message: {ids[0]}")
        message = self._fetch(ids[0])
        return [message] if message is not None else []

    def _fetch(self, message_id: str) -> RawMessage | None:
        try:
            return self.provider.get_message(message_id)
        except ReconciliationError as e:
            logger.warning(f"Failed to fetch message {message_id}: {e}")
            return None
