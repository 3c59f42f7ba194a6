"""Run orchestration - search, filter, record, label, mark read, persist."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from .actions import execute_action
from .classifier import extract_keywords, reply_type
from .config import TrackerConfig
from .constants import HEADERS, PROCESSED_IDS_KEY, REPLY_COUNT_COLUMN
from .content import snippet, trim_reply_junk
from .dedup import ProcessedIds
from .detector import is_reply, reply_count
from .gmail_client import GmailMailbox
from .models import Message, ProcessedRecord, Rule, RunResult, Thread
from .presenter import color_for, to_row
from .sheets import SheetWriter
from .state import StateStore

logger = logging.getLogger(__name__)


def build_record(message: Message, thread: Thread, rule: Rule, config: TrackerConfig) -> ProcessedRecord:
    """Assemble the sheet record for a reply that has not been seen before."""
    body = snippet(trim_reply_junk(message.body), config.snippet_length)
    return ProcessedRecord(
        received_at=message.date,
        sender=message.sender,
        to=message.to,
        cc=message.cc,
        subject=message.subject,
        body=body,
        rule_name=rule.name,
        priority=rule.priority,
        reply_type=reply_type(message.subject, body),
        reply_count=reply_count(thread),
        keywords=", ".join(extract_keywords(message.subject, body)),
        processed_at=datetime.now(timezone.utc),
        message_id=message.message_id,
        thread_id=thread.thread_id,
    )


def process_rule(
    rule: Rule,
    mailbox: GmailMailbox,
    config: TrackerConfig,
    processed: ProcessedIds,
    pending: list[ProcessedRecord],
) -> int:
    """Walk the search pages of one rule and track every new unread reply.

    New records are appended to ``pending`` as they are built, so whatever
    was collected before an error survives it.  Returns the number of
    threads scanned.
    """
    start = 0
    threads_scanned = 0

    for _ in range(config.max_pages):
        threads = mailbox.search_threads(rule.query, start, config.page_size)
        if not threads:
            break
        threads_scanned += len(threads)

        for thread in threads:
            for message in thread.messages:
                # The query asks for unread mail already; check again anyway.
                if not message.unread:
                    continue
                if not is_reply(message):
                    continue
                if processed.has(message.message_id):
                    continue

                record = build_record(message, thread, rule, config)
                pending.append(record)
                execute_action(rule.action, mailbox, thread, record.reply_count, config)
                processed.add(message.message_id)
                mailbox.mark_read(message.message_id)
                logger.debug(
                    "Tracked %s (%s, %d replies)",
                    message.message_id, record.reply_type.value, record.reply_count,
                )

        start += config.page_size

    logger.info("%s: scanned %d threads", rule.name, threads_scanned)
    return threads_scanned


def flush_records(sheet: SheetWriter, records: list[ProcessedRecord], config: TrackerConfig) -> int:
    """Append records to the sheet and highlight their reply counts.

    Returns the sheet row of the first appended record.
    """
    tz = config.tz
    first_row = sheet.append_rows([to_row(r, HEADERS, tz) for r in records])

    column = HEADERS.index(REPLY_COUNT_COLUMN) + 1
    cell_colors = []
    for offset, record in enumerate(records):
        color = color_for(record.reply_count, config.thresholds)
        if color:
            cell_colors.append((first_row + offset, column, color))

    sheet.apply_formatting(cell_colors)
    logger.info("Appended %d rows to %s starting at row %d", len(records), config.sheet_name, first_row)
    return first_row


def run_filter(
    mailbox: GmailMailbox,
    sheet: SheetWriter,
    store: StateStore,
    config: TrackerConfig,
) -> RunResult:
    """Run every rule once, write the new records, and persist the dedup state.

    A failing rule is logged and skipped; the other rules still run and the
    records gathered so far are still written.
    """
    sheet.ensure_sheet()
    processed = ProcessedIds.load(store.get(PROCESSED_IDS_KEY))
    logger.debug("Loaded %d processed message IDs", len(processed))

    result = RunResult()
    for rule in config.rules:
        try:
            result.threads_scanned[rule.name] = process_rule(
                rule, mailbox, config, processed, result.records
            )
        except Exception:  # noqa: BLE001
            logger.exception("Filter rule %r failed", rule.name)
            result.failed_rules.append(rule.name)

    if result.records:
        result.first_row = flush_records(sheet, result.records, config)

    store.set(PROCESSED_IDS_KEY, processed.serialize(config.processed_ids_cap))
    return result
