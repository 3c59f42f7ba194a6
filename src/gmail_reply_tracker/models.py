"""Data models for Gmail Reply Tracker."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ActionKind(Enum):
    """What a rule does to the thread of each newly tracked reply."""

    TRACK_REPLY = "TRACK_REPLY"
    NONE = "NONE"


class ReplyType(Enum):
    """Coarse category of a reply, decided by fixed phrase lists."""

    ACKNOWLEDGMENT = "Acknowledgment"
    FOLLOWUP_QUESTION = "Follow-up Question"
    URGENT = "Urgent"
    NORMAL = "Normal"


@dataclass(frozen=True)
class Rule:
    """A Gmail search plus the action applied to what it finds."""

    name: str
    query: str
    priority: str = "MEDIUM"
    action: ActionKind = ActionKind.TRACK_REPLY
    label_color: str = "#FFAA00"


@dataclass
class Message:
    """Read-only view of a single Gmail message."""

    message_id: str
    thread_id: str
    subject: str = ""
    sender: str = ""  # Full From header value
    to: str = ""
    cc: str = ""
    date: datetime | None = None
    body: str = ""  # Plain-text body
    unread: bool = False
    headers: dict[str, str] = field(default_factory=dict)  # lower-cased names

    def header(self, name: str) -> str:
        """Return a header value, or "" when the message does not carry it."""
        return self.headers.get(name.lower(), "")


@dataclass
class Thread:
    """A Gmail conversation and its messages, oldest first."""

    thread_id: str
    messages: list[Message] = field(default_factory=list)


@dataclass(frozen=True)
class ProcessedRecord:
    """One tracked reply, as written to the spreadsheet."""

    received_at: datetime | None
    sender: str
    to: str
    cc: str
    subject: str
    body: str  # trimmed snippet
    rule_name: str
    priority: str
    reply_type: ReplyType
    reply_count: int
    keywords: str  # comma-joined
    processed_at: datetime
    message_id: str
    thread_id: str


@dataclass
class RunResult:
    """Result of one tracker run."""

    records: list[ProcessedRecord] = field(default_factory=list)
    threads_scanned: dict[str, int] = field(default_factory=dict)
    failed_rules: list[str] = field(default_factory=list)
    first_row: int | None = None
