"""Reply type classification and keyword tagging."""

from __future__ import annotations

import re

from .constants import ACKNOWLEDGMENT_PHRASES, FOLLOWUP_PHRASES, KEYWORDS, URGENT_PHRASES
from .models import ReplyType


def _phrase_pattern(phrases: list[str]) -> re.Pattern[str]:
    return re.compile("|".join(re.escape(p) for p in phrases), re.IGNORECASE)


# Checked top to bottom; the first match wins.
_REPLY_TYPE_PATTERNS = [
    (ReplyType.ACKNOWLEDGMENT, _phrase_pattern(ACKNOWLEDGMENT_PHRASES)),
    (ReplyType.FOLLOWUP_QUESTION, _phrase_pattern(FOLLOWUP_PHRASES)),
    (ReplyType.URGENT, _phrase_pattern(URGENT_PHRASES)),
]


def reply_type(subject: str, body: str) -> ReplyType:
    """Classify a reply from its subject and body.

    Acknowledgments win over follow-up questions, which win over urgent
    requests.  Anything else is a normal reply.
    """
    text = f"{subject}\n{body}"
    for kind, pattern in _REPLY_TYPE_PATTERNS:
        if pattern.search(text):
            return kind
    return ReplyType.NORMAL


def extract_keywords(subject: str, body: str, keywords: list[str] | None = None) -> list[str]:
    """Return the dictionary terms found in subject or body, in dictionary order.

    Plain case-sensitive substring matching, so "Invoice" does not match "invoice".
    """
    text = f"{subject} {body}"
    return [k for k in (keywords or KEYWORDS) if k in text]
