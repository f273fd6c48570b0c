"""Tests for Gmail message extraction."""

from inboxrelay.domain.models import BODY_MAX_CHARS
from inboxrelay.infrastructure.gmail import extract_message


def test_basic_fields(make_gmail_message):
    details = extract_message(make_gmail_message(message_id="abc", subject="Invoice"))
    assert details.id == "abc"
    assert details.thread_id == "thread-abc"
    assert details.subject == "Invoice"
    assert details.sender == "Alice <alice@example.com>"
    assert details.to == "me@example.com"
    assert details.date == "Tue, 2 Jan 2024 10:00:00 +0000"
    assert details.snippet == "Hi there"
    assert details.body == "Hi there"


def test_header_names_are_case_insensitive(make_gmail_message):
    raw = make_gmail_message()
    raw["payload"]["headers"] = [
        {"name": "SUBJECT", "value": "Loud"},
        {"name": "from", "value": "quiet@example.com"},
    ]
    details = extract_message(raw)
    assert details.subject == "Loud"
    assert details.sender == "quiet@example.com"
    assert details.to == ""


def test_first_repeated_header_wins(make_gmail_message):
    raw = make_gmail_message(
        subject="First",
        extra_headers=[{"name": "Subject", "value": "Second"}],
    )
    assert extract_message(raw).subject == "First"


def test_plain_part_preferred_over_html(make_gmail_message, make_part):
    raw = make_gmail_message(
        parts=[
            make_part("text/html", "<p>html</p>"),
            make_part("text/plain", "plain text"),
        ]
    )
    assert extract_message(raw).body == "plain text"


def test_nested_plain_part(make_gmail_message, make_part):
    alternative = make_part(
        "multipart/alternative",
        parts=[make_part("text/html", "<b>x</b>"), make_part("text/plain", "nested plain")],
    )
    raw = make_gmail_message(parts=[alternative, make_part("application/pdf")])
    assert extract_message(raw).body == "nested plain"


def test_top_level_plain_part_wins_over_nested(make_gmail_message, make_part):
    nested = make_part("multipart/alternative", parts=[make_part("text/plain", "deep")])
    raw = make_gmail_message(parts=[nested, make_part("text/plain", "shallow")])
    assert extract_message(raw).body == "shallow"


def test_no_plain_part_gives_no_body(make_gmail_message, make_part):
    raw = make_gmail_message(parts=[make_part("text/html", "<p>only html</p>")])
    assert extract_message(raw).body is None


def test_plain_part_without_data_gives_no_body(make_gmail_message, make_part):
    raw = make_gmail_message(parts=[make_part("text/plain")])
    assert extract_message(raw).body is None


def test_long_body_is_truncated(make_gmail_message):
    details = extract_message(make_gmail_message(body="x" * 5000))
    assert len(details.body) == BODY_MAX_CHARS
    assert details.body == "x" * 1000


def test_unicode_body(make_gmail_message):
    assert extract_message(make_gmail_message(body="Grüße ✓")).body == "Grüße ✓"


def test_missing_payload_gives_empty_fields():
    details = extract_message({"id": "bare"})
    assert details.id == "bare"
    assert details.subject == ""
    assert details.sender == ""
    assert details.snippet == ""
    assert details.body is None


def test_malformed_headers_are_skipped(make_gmail_message):
    raw = make_gmail_message()
    raw["payload"]["headers"] = ["junk", {"value": "no name"}, {"name": "Subject", "value": "ok"}]
    assert extract_message(raw).subject == "ok"


def test_non_string_fields_degrade_to_empty(make_gmail_message):
    raw = make_gmail_message()
    raw["id"] = 42
    raw["threadId"] = None
    raw["snippet"] = 7
    raw["payload"]["headers"] = [
        {"name": "Subject", "value": 12345},
        {"name": 9, "value": "nameless"},
        {"name": "From", "value": ["a@example.com"]},
        {"name": "To", "value": "me@example.com"},
    ]

    details = extract_message(raw)

    assert details.id == ""
    assert details.thread_id == ""
    assert details.snippet == ""
    assert details.subject == ""
    assert details.sender == ""
    assert details.to == "me@example.com"


def test_non_dict_parts_are_skipped(make_part):
    raw = {"id": "x", "payload": {"parts": ["junk", None, 3, make_part("text/plain", "survivor")]}}
    assert extract_message(raw).body == "survivor"


def test_parts_only_junk():
    assert extract_message({"id": "x", "payload": {"parts": ["junk"]}}).body is None


def test_non_dict_payload_and_body():
    assert extract_message({"id": "x", "payload": "oops"}).subject == ""
    assert extract_message({"id": "x", "payload": {"body": "oops"}}).body is None
    assert extract_message({"id": "x", "payload": {"headers": "oops", "parts": {"a": 1}}}).body is None


def test_nested_parts_with_wrong_types(make_part):
    raw = {
        "id": "x",
        "payload": {
            "parts": [
                {"mimeType": "multipart/mixed", "parts": "not-a-list"},
                {"mimeType": "multipart/alternative", "parts": [None, "x"]},
                make_part("multipart/related", parts=[make_part("text/plain", "deep")]),
            ]
        },
    }
    assert extract_message(raw).body == "deep"


def test_non_string_body_data(make_gmail_message):
    raw = make_gmail_message()
    raw["payload"]["body"] = {"data": 123}
    assert extract_message(raw).body is None
