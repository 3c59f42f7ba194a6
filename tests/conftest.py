"""Shared fixtures for tests."""

from __future__ import annotations

import pytest

from gmail_reply_tracker.config import TrackerConfig
from gmail_reply_tracker.models import ActionKind, Rule, Thread
from gmail_reply_tracker.state import StateStore
from tests.helpers import make_message


@pytest.fixture
def rule() -> Rule:
    return Rule(
        name="Replies",
        query="is:unread subject:(Re: OR 返信:)",
        priority="MEDIUM",
        action=ActionKind.TRACK_REPLY,
        label_color="#FFAA00",
    )


@pytest.fixture
def config(rule: Rule) -> TrackerConfig:
    return TrackerConfig(
        spreadsheet_id="sheet-123",
        sheet_name="Reply Tracking",
        page_size=2,
        max_pages=20,
        timezone="Asia/Tokyo",
        rules=(rule,),
    )


@pytest.fixture
def store(tmp_path):
    with StateStore(db_path=tmp_path / "state.db") as s:
        yield s


@pytest.fixture
def quote_thread() -> Thread:
    """A single-reply thread asking urgently for a quote."""
    return Thread(
        thread_id="t_quote",
        messages=[
            make_message(
                "m_quote",
                thread_id="t_quote",
                subject="Re: 見積のご相談",
                body="至急 見積 お願いします\n\n> 先日の件について",
            )
        ],
    )


@pytest.fixture
def long_thread() -> Thread:
    """Five messages; the 2nd, 3rd and 4th carry reply markers."""
    return Thread(
        thread_id="t_long",
        messages=[
            make_message("l1", "t_long", subject="Project kickoff", unread=False),
            make_message("l2", "t_long", subject="Re: Project kickoff", unread=False),
            make_message("l3", "t_long", subject="RE: Project kickoff", unread=False),
            make_message("l4", "t_long", subject="返信: Project kickoff", unread=True),
            make_message("l5", "t_long", subject="Project kickoff notes", unread=False),
        ],
    )
