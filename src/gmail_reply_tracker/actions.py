"""Rule actions applied to the thread of each newly tracked reply."""

from __future__ import annotations

import logging
from typing import Callable

from .config import TrackerConfig
from .gmail_client import GmailMailbox
from .models import ActionKind, Thread

logger = logging.getLogger(__name__)


def ensure_label(mailbox: GmailMailbox, name: str) -> str:
    """Return the ID of the label called name, creating it if missing."""
    return mailbox.get_label_id(name) or mailbox.create_label(name)


def _track_reply(mailbox: GmailMailbox, thread: Thread, reply_count: int, config: TrackerConfig) -> None:
    mailbox.add_thread_label(thread.thread_id, ensure_label(mailbox, config.base_label))

    if reply_count >= config.frequent_reply_threshold:
        mailbox.add_thread_label(thread.thread_id, ensure_label(mailbox, config.frequent_label))
        logger.debug("Thread %s has %d replies, labelled %s", thread.thread_id, reply_count, config.frequent_label)


ActionHandler = Callable[[GmailMailbox, Thread, int, TrackerConfig], None]

ACTION_HANDLERS: dict[ActionKind, ActionHandler] = {
    ActionKind.TRACK_REPLY: _track_reply,
}


def execute_action(
    action: ActionKind,
    mailbox: GmailMailbox,
    thread: Thread,
    reply_count: int,
    config: TrackerConfig,
) -> None:
    """Run the handler registered for action; kinds without one do nothing."""
    handler = ACTION_HANDLERS.get(action)
    if handler is None:
        return
    handler(mailbox, thread, reply_count, config)
