"""Ingest a Gmail push notification into the bounded message store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Literal, Mapping

from loguru import logger

from inboxrelay.application.ports.message_store import MessageStore
from inboxrelay.application.use_cases.reconcile_history import HistoryReconciler
from inboxrelay.domain.models import ChangeEvent, MessageRecord
from inboxrelay.exceptions import DecodeError
from inboxrelay.infrastructure.gmail.extractor import extract_message
from inboxrelay.infrastructure.pubsub.notification import PubSubEnvelope, decode_notification

PLACEHOLDER_SUBJECT = "[Test] Pub/Sub Notification Test"
PLACEHOLDER_SENDER = "pubsub@test.com"
PLACEHOLDER_BODY = (
    "This is a test notification from Pub/Sub. Real emails will show full content."
)

IngestStatus = Literal["decode_failed", "test_placeholder", "processed", "error"]


@dataclass
class IngestResult:
    """Result of handling one push notification."""

    status: IngestStatus
    stored: int = 0
    failed: int = 0
    cursor: str | None = None
    error: str | None = None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IngestNotificationUseCase:
    """Decode, reconcile, extract and store the messages behind a notification.

    Flow:
    1. Decode the envelope into a ChangeEvent (malformed → dropped)
    2. Cursors starting with the test marker store one placeholder record
    3. Otherwise reconcile the cursor into raw messages
    4. Extract each message, stamp receivedAt/historyId and insert it

    ``handle`` never raises. Push deliveries are always acknowledged, so a
    failure here loses the notification rather than triggering a redelivery.
    """

    def __init__(
        self,
        store: MessageStore,
        reconciler: HistoryReconciler,
        test_marker_prefix: str = "test",
        alert_keywords: list[str] | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.store = store
        self.reconciler = reconciler
        self.test_marker_prefix = test_marker_prefix
        self.alert_keywords = [
            k.lower() for k in (["urgent"] if alert_keywords is None else alert_keywords) if k
        ]
        self._clock = clock

    def handle(self, envelope: PubSubEnvelope | Mapping[str, Any]) -> IngestResult:
        try:
            event = decode_notification(envelope)
        except DecodeError as e:
            logger.warning(f"Dropping undecodable push notification: {e}")
            return IngestResult(status="decode_failed", error=str(e))

        cursor = event.cursor_str
        logger.info(f"Gmail notification for {event.account_id}, historyId={cursor}")

        try:
            if self.test_marker_prefix and cursor.startswith(self.test_marker_prefix):
                return self._store_placeholder(event)
            return self._process(event)
        except Exception as e:
            logger.exception(f"Error processing notification for historyId {cursor}: {e}")
            return IngestResult(status="error", cursor=cursor, error=str(e))

    def _process(self, event: ChangeEvent) -> IngestResult:
        cursor = event.cursor_str
        messages = self.reconciler.reconcile(event.cursor)
        logger.info(f"Processing {len(messages)} new messages for historyId {cursor}")

        stored = 0
        failed = 0
        for raw in messages:
            try:
                details = extract_message(raw)
                record = MessageRecord.from_details(
                    details,
                    received_at=self._clock().isoformat(),
                    history_id=event.cursor,
                )
                result = self.store.insert(record)
            except Exception as e:
                failed += 1
                message_id = raw.get("id") if isinstance(raw, dict) else None
                logger.exception(f"Error processing message {message_id}: {e}")
                continue

            if not result.success:
                failed += 1
                logger.error(f"Failed to store message {record.id}: {result.error}")
                continue

            stored += 1
            logger.info(f"Stored email: {record.subject!r} from {record.sender}")
            self._check_alerts(record)

        return IngestResult(status="processed", stored=stored, failed=failed, cursor=cursor)

    def _store_placeholder(self, event: ChangeEvent) -> IngestResult:
        cursor = event.cursor_str
        now = self._clock()
        record = MessageRecord(
            id=f"test-{int(now.timestamp() * 1000)}",
            thread_id="test",
            subject=PLACEHOLDER_SUBJECT,
            sender=PLACEHOLDER_SENDER,
            to=event.account_id,
            date=now.isoformat(),
            snippet=f"Test notification with history ID: {cursor}",
            body=PLACEHOLDER_BODY,
            received_at=now.isoformat(),
            history_id=event.cursor,
        )

        logger.info(f"Test notification detected (historyId={cursor}), storing placeholder")
        result = self.store.insert(record)
        if not result.success:
            logger.error(f"Failed to store test placeholder: {result.error}")
            return IngestResult(status="test_placeholder", failed=1, cursor=cursor)
        return IngestResult(status="test_placeholder", stored=1, cursor=cursor)

    def _check_alerts(self, record: MessageRecord) -> None:
        subject = record.subject.lower()
        matched = [k for k in self.alert_keywords if k in subject]
        if matched:
            logger.warning(
                f"Alert keyword {matched[0]!r} in email subject: {record.subject!r} "
                f"from {record.sender}"
            )
