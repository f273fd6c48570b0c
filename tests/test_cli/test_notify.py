"""Tests for the notification sender CLI."""

import json
from unittest.mock import MagicMock, patch

import httpx

from inboxrelay.cli import notify
from inboxrelay.infrastructure.pubsub import decode_notification


def test_print_envelope(capsys):
    assert notify.main(["--email", "me@example.com", "--history-id", "42", "--print"]) == 0

    envelope = json.loads(capsys.readouterr().out)
    event = decode_notification(envelope)
    assert event.account_id == "me@example.com"
    assert event.cursor == "42"


def test_default_history_id_is_a_test_marker(capsys):
    notify.main(["--email", "me@example.com", "--print"])
    event = decode_notification(json.loads(capsys.readouterr().out))
    assert event.cursor.startswith("test-")


def test_posts_to_webhook():
    response = MagicMock(status_code=200, text='{"status":"ok"}', is_success=True)
    with patch("inboxrelay.cli.notify.httpx.post", return_value=response) as post:
        code = notify.main(
            ["--email", "me@example.com", "--url", "http://relay/api/gmail/webhook", "--token", "t"]
        )

    assert code == 0
    args, kwargs = post.call_args
    assert args == ("http://relay/api/gmail/webhook",)
    assert kwargs["params"] == {"token": "t"}
    assert decode_notification(kwargs["json"]).account_id == "me@example.com"


def test_post_failure_returns_non_zero():
    with patch("inboxrelay.cli.notify.httpx.post", side_effect=httpx.ConnectError("refused")):
        assert notify.main(["--email", "me@example.com"]) == 1


def test_local_run_uses_pipeline(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "memory")
    notify.get_settings.cache_clear()
    try:
        assert notify.main(["--email", "me@example.com", "--local"]) == 0
    finally:
        notify.get_settings.cache_clear()
