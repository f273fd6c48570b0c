"""Send a synthetic Gmail push notification to the webhook, or run it locally."""

from __future__ import annotations

import argparse
import json
import time

import httpx
from loguru import logger

from inboxrelay.application.use_cases import HistoryReconciler, IngestNotificationUseCase
from inboxrelay.domain.models import ChangeEvent
from inboxrelay.infrastructure import configure_logging, get_settings
from inboxrelay.infrastructure.gmail import GmailProvider
from inboxrelay.infrastructure.pubsub import build_envelope
from inboxrelay.infrastructure.stores import build_message_store

DEFAULT_URL = "http://localhost:8080/api/gmail/webhook"


def _post(url: str, envelope: dict, token: str | None, timeout: float) -> int:
    params = {"token": token} if token else None
    try:
        response = httpx.post(url, json=envelope, params=params, timeout=timeout)
    except httpx.HTTPError as e:
        logger.error(f"Request to {url} failed: {e}")
        return 1

    print(f"HTTP {response.status_code}: {response.text}")
    return 0 if response.is_success else 1


def _run_local(envelope: dict) -> int:
    settings = get_settings()
    store = build_message_store(settings)
    reconciler = HistoryReconciler(
        GmailProvider(settings),
        fallback_query=settings.gmail_fallback_query,
        fallback_label_ids=settings.gmail_fallback_label_ids,
    )
    pipeline = IngestNotificationUseCase(
        store,
        reconciler,
        test_marker_prefix=settings.test_marker_prefix,
        alert_keywords=settings.alert_keywords,
    )

    result = pipeline.handle(envelope)
    print(f"Status: {result.status}")
    print(f"Stored: {result.stored}, failed: {result.failed}")
    if result.error:
        print(f"Error: {result.error}")
    return 0 if result.status in ("processed", "test_placeholder") else 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Send a Gmail Pub/Sub test notification")
    parser.add_argument("--url", default=DEFAULT_URL, help=f"Webhook URL (default: {DEFAULT_URL})")
    parser.add_argument("--email", required=True, help="Mailbox address for the notification")
    parser.add_argument(
        "--history-id",
        default=None,
        help="History ID to send (default: test-<epoch>, stores a placeholder)",
    )
    parser.add_argument("--token", default=None, help="Webhook token, if the server requires one")
    parser.add_argument("--timeout", type=float, default=30.0, help="HTTP timeout in seconds")
    parser.add_argument("--local", action="store_true", help="Process in-process instead of POSTing")
    parser.add_argument("--print", dest="print_only", action="store_true", help="Print the envelope and exit")
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)

    history_id = args.history_id or f"test-{int(time.time())}"
    event = ChangeEvent(account_id=args.email, cursor=history_id)
    envelope = build_envelope(event)

    if args.print_only:
        print(json.dumps(envelope, indent=2))
        return 0

    print(f"Notification for {args.email}, historyId={history_id}")
    if args.local:
        return _run_local(envelope)
    return _post(args.url, envelope, args.token, args.timeout)


if __name__ == "__main__":
    raise SystemExit(main())
