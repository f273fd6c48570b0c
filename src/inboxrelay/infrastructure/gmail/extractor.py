"""Map Gmail API message resources onto MessageDetails.

Pure parsing, no network calls. Works with the dicts returned by
``users.messages.get`` (format=full). Extraction never fails: every field
falls back to an empty value when the resource is partial or malformed.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any

from inboxrelay.domain.models import BODY_MAX_CHARS, MessageDetails


def extract_message(raw_message: dict[str, Any]) -> MessageDetails:
    if not isinstance(raw_message, dict):
        raw_message = {}
    payload = _as_dict(raw_message.get("payload"))
    headers = _extract_headers(payload)

    body = _extract_body(payload)
    if body is not None:
        body = body[:BODY_MAX_CHARS]

    return MessageDetails(
        id=_as_str(raw_message.get("id")),
        thread_id=_as_str(raw_message.get("threadId")),
        subject=headers.get("subject", ""),
        sender=headers.get("from", ""),
        to=headers.get("to", ""),
        date=headers.get("date", ""),
        snippet=_as_str(raw_message.get("snippet")),
        body=body,
    )


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _extract_headers(payload: dict[str, Any]) -> dict[str, str]:
    # First occurrence wins when a header is repeated
    headers: dict[str, str] = {}
    for header in _as_list(payload.get("headers")):
        if not isinstance(header, dict):
            continue
        name = header.get("name")
        if not isinstance(name, str) or not name:
            continue
        headers.setdefault(name.lower(), _as_str(header.get("value")))
    return headers


def _extract_body(payload: dict[str, Any]) -> str | None:
    """Flat body first, then the first text/plain part."""
    text = _decode_body_data(payload)
    if text:
        return text

    part = _find_plain_text_part(_as_list(payload.get("parts")))
    if part is None:
        return None
    return _decode_body_data(part) or None


def _find_plain_text_part(parts: list[Any]) -> dict[str, Any] | None:
    parts = [p for p in parts if isinstance(p, dict)]
    for part in parts:
        if part.get("mimeType") == "text/plain":
            return part
    for part in parts:
        nested = _find_plain_text_part(_as_list(part.get("parts")))
        if nested is not None:
            return nested
    return None


def _decode_body_data(part: dict[str, Any]) -> str | None:
    data = _as_dict(part.get("body")).get("data")
    if not data or not isinstance(data, str):
        return None
    padded = data + "=" * (-len(data) % 4)
    try:
        return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")
    except (binascii.Error, ValueError):
        return None
