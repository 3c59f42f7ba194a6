"""Reply detection for single messages and whole threads."""

from __future__ import annotations

import re

from .models import Message, Thread

# "Re:" / "RE:" / "返信:" at the start of the subject, ASCII or full-width colon.
_REPLY_PREFIX_RE = re.compile(r"^\s*(?:re|返信)\s*[:：]", re.IGNORECASE)

_THREADING_HEADERS = ("In-Reply-To", "References")


def has_reply_prefix(subject: str | None) -> bool:
    """Return True when the subject starts with a reply marker."""
    return bool(_REPLY_PREFIX_RE.match(subject or ""))


def is_reply(message: Message) -> bool:
    """Decide whether a message is a reply, by subject prefix or threading headers.

    Subjects get rewritten often enough that the In-Reply-To and References
    headers are checked too. Any non-empty value counts, even whitespace;
    a missing header counts as empty.
    """
    if has_reply_prefix(message.subject):
        return True
    return any(message.header(name) for name in _THREADING_HEADERS)


def reply_count(thread: Thread) -> int:
    """Count the messages in a thread that are replies, wherever they sit in it."""
    return sum(1 for m in thread.messages if is_reply(m))
