"""Fakes and builders shared by the tests."""

from __future__ import annotations

from datetime import datetime, timezone

from gmail_reply_tracker.models import Message, Thread


class FakeMailbox:
    """In-memory stand-in for GmailMailbox."""

    def __init__(self, threads: list[Thread], fail_queries: dict[str, int] | None = None) -> None:
        self.threads = threads
        # query -> offset at which search raises
        self.fail_queries = fail_queries or {}
        self.search_calls: list[tuple[str, int, int]] = []
        self.labels: dict[str, str] = {}
        self.created_labels: list[str] = []
        self.thread_labels: list[tuple[str, str]] = []
        self.marked_read: list[str] = []

    def search_threads(self, query: str, start: int, max_results: int) -> list[Thread]:
        self.search_calls.append((query, start, max_results))
        if query in self.fail_queries and start >= self.fail_queries[query]:
            raise RuntimeError(f"search failed for {query!r}")
        return self.threads[start:start + max_results]

    def get_label_id(self, name: str) -> str | None:
        return self.labels.get(name)

    def create_label(self, name: str) -> str:
        self.created_labels.append(name)
        self.labels[name] = f"Label_{len(self.labels) + 1}"
        return self.labels[name]

    def add_thread_label(self, thread_id: str, label_id: str) -> None:
        name = next(n for n, i in self.labels.items() if i == label_id)
        self.thread_labels.append((thread_id, name))

    def mark_read(self, message_id: str) -> None:
        self.marked_read.append(message_id)
        for thread in self.threads:
            for message in thread.messages:
                if message.message_id == message_id:
                    message.unread = False


class FakeSheet:
    """In-memory stand-in for SheetWriter."""

    def __init__(self, last_row: int = 1) -> None:
        self.last_row = last_row
        self.ensure_calls = 0
        self.rows: list[list] = []
        self.cell_colors: list[tuple[int, int, str]] = []

    def ensure_sheet(self) -> None:
        self.ensure_calls += 1

    def append_rows(self, rows: list[list]) -> int:
        first_row = self.last_row + 1
        self.rows.extend(rows)
        self.last_row += len(rows)
        return first_row

    def apply_formatting(self, cell_colors=None) -> None:
        self.cell_colors.extend(cell_colors or [])


def make_message(
    message_id: str,
    thread_id: str = "t1",
    subject: str = "Re: Hello",
    body: str = "Sounds fine to me.",
    unread: bool = True,
    headers: dict[str, str] | None = None,
) -> Message:
    return Message(
        message_id=message_id,
        thread_id=thread_id,
        subject=subject,
        sender="Taro Yamada <taro@example.jp>",
        to="support@example.com",
        cc="",
        date=datetime(2024, 1, 15, 0, 30, tzinfo=timezone.utc),
        body=body,
        unread=unread,
        headers=headers or {},
    )


