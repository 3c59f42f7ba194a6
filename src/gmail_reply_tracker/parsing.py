"""Turn Gmail API thread/message payloads (format=full) into models."""

from __future__ import annotations

import base64
import re
from datetime import datetime, timezone

from bs4 import BeautifulSoup

from .models import Message, Thread


def parse_thread(raw_thread: dict) -> Thread:
    """Build a Thread from a users.threads.get response."""
    thread_id = raw_thread["id"]
    return Thread(
        thread_id=thread_id,
        messages=[parse_message(m, thread_id) for m in raw_thread.get("messages", [])],
    )


def parse_message(raw_message: dict, thread_id: str | None = None) -> Message:
    """Build a Message from a users.messages.get style payload.

    This is a pure parsing function: no network calls.
    """
    payload = raw_message.get("payload", {})
    headers = _extract_headers(payload)
    label_ids = raw_message.get("labelIds", [])

    return Message(
        message_id=raw_message["id"],
        thread_id=thread_id or raw_message.get("threadId", ""),
        subject=headers.get("subject", ""),
        sender=headers.get("from", ""),
        to=headers.get("to", ""),
        cc=headers.get("cc", ""),
        date=_parse_internal_date(raw_message.get("internalDate")),
        body=extract_plain_body(payload),
        unread="UNREAD" in label_ids,
        headers=headers,
    )


def _extract_headers(payload: dict) -> dict[str, str]:
    return {h["name"].lower(): h.get("value", "") for h in payload.get("headers", [])}


def _parse_internal_date(value: str | int | None) -> datetime | None:
    if value in (None, ""):
        return None
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)


def extract_plain_body(payload: dict) -> str:
    """Return the text/plain body, falling back to tag-stripped HTML."""
    mime_type = payload.get("mimeType", "")

    if mime_type == "text/plain":
        return _decode_body_data(payload)

    if mime_type.startswith("multipart/"):
        parts = payload.get("parts", [])
        for part in parts:
            if part.get("mimeType") == "text/plain":
                text = _decode_body_data(part)
                if text:
                    return text
        for part in parts:
            text = extract_plain_body(part)
            if text:
                return text

    if mime_type == "text/html":
        html = _decode_body_data(payload)
        return _strip_html(html) if html else ""

    return ""


def _decode_body_data(payload: dict) -> str:
    data = payload.get("body", {}).get("data", "")
    if not data:
        return ""
    # Gmail strips base64 padding on some payloads.
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")


def _strip_html(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "head"]):
        tag.decompose()
    for br in soup.find_all("br"):
        br.replace_with("\n")
    text = soup.get_text()
    return re.sub(r"[ \t]+", " ", text).strip()
