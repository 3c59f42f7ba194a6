"""Projection of tracked replies onto sheet rows and highlight colors."""

from __future__ import annotations

from datetime import datetime, tzinfo

from .config import ReplyCountThresholds
from .constants import COLOR_HARD, COLOR_MID, COLOR_SOFT, DATETIME_FORMAT, HEADERS
from .models import ProcessedRecord, ReplyType

REPLY_COUNT_COLORS = {"soft": COLOR_SOFT, "mid": COLOR_MID, "hard": COLOR_HARD}

# Sheet column -> ProcessedRecord attribute
COLUMN_FIELDS = {
    "Received": "received_at",
    "From": "sender",
    "To": "to",
    "CC": "cc",
    "Subject": "subject",
    "Body (excerpt)": "body",
    "Filter Rule": "rule_name",
    "Priority": "priority",
    "Reply Type": "reply_type",
    "Reply Count": "reply_count",
    "Keywords": "keywords",
    "Processed At": "processed_at",
    "MessageID": "message_id",
    "ThreadID": "thread_id",
}


def _literal(text: str) -> str:
    # Rows are appended as USER_ENTERED; a leading apostrophe keeps Sheets
    # from reading "=..." as a formula or "123e4567" as a number.
    return f"'{text}" if text else ""


def _cell(value: object, tz: tzinfo | None) -> str | int:
    if value is None:
        return ""
    if isinstance(value, datetime):
        if tz is not None:
            value = value.astimezone(tz)
        return value.strftime(DATETIME_FORMAT)
    if isinstance(value, ReplyType):
        return _literal(value.value)
    if isinstance(value, int):
        return value
    return _literal(str(value))


def to_row(
    record: ProcessedRecord,
    columns: list[str] | None = None,
    tz: tzinfo | None = None,
) -> list[str | int]:
    """Flatten a record into sheet cells, in column order.

    Datetimes are rendered in ``tz`` so the sheet shows local times and
    stay parseable as dates. Text cells are stored as literal strings.
    """
    return [_cell(getattr(record, COLUMN_FIELDS[name]), tz) for name in (columns or HEADERS)]


def color_for(
    count: int,
    thresholds: ReplyCountThresholds,
    colors: dict[str, str] | None = None,
) -> str | None:
    """Return the highlight color for a reply count, or None below every tier."""
    colors = colors or REPLY_COUNT_COLORS
    if count >= thresholds.hard:
        return colors["hard"]
    if count >= thresholds.mid:
        return colors["mid"]
    if count >= thresholds.soft:
        return colors["soft"]
    return None
