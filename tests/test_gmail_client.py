"""Tests for the Gmail API client."""

from unittest.mock import MagicMock

import pytest

from gmail_reply_tracker.gmail_client import GmailMailbox


class FakeBatch:
    """Runs each queued request through the batch callback on execute()."""

    def __init__(self, callback, fail_ids=()):
        self.callback = callback
        self.fail_ids = set(fail_ids)
        self.requests: list[str] = []

    def add(self, request):
        self.requests.append(request)

    def execute(self):
        for thread_id in self.requests:
            if thread_id in self.fail_ids:
                self.callback(thread_id, None, RuntimeError(f"cannot fetch {thread_id}"))
            else:
                self.callback(thread_id, {"id": thread_id, "messages": []}, None)


def _service(list_pages: list[dict], fail_ids=()) -> MagicMock:
    service = MagicMock()
    threads = service.users.return_value.threads.return_value
    threads.list.return_value.execute.side_effect = list_pages
    # threads().get(...) returns the thread id so FakeBatch can answer for it.
    threads.get.side_effect = lambda **kwargs: kwargs["id"]
    service.new_batch_http_request.side_effect = lambda callback: FakeBatch(callback, fail_ids)
    return service


def _list_kwargs(service) -> list[dict]:
    threads = service.users.return_value.threads.return_value
    return [c.kwargs for c in threads.list.call_args_list]


def test_search_pages_reuse_tokens():
    service = _service(
        [
            {"threads": [{"id": "t1"}, {"id": "t2"}], "nextPageToken": "tok2"},
            {"threads": [{"id": "t3"}]},
        ]
    )
    mailbox = GmailMailbox(service)

    first = mailbox.search_threads("is:unread", 0, 2)
    second = mailbox.search_threads("is:unread", 2, 2)

    assert [t.thread_id for t in first] == ["t1", "t2"]
    assert [t.thread_id for t in second] == ["t3"]
    calls = _list_kwargs(service)
    assert len(calls) == 2
    assert "pageToken" not in calls[0]
    assert calls[1]["pageToken"] == "tok2"
    assert calls[1]["q"] == "is:unread"


def test_search_past_last_page_is_empty():
    service = _service([{"threads": [{"id": "t1"}]}])
    mailbox = GmailMailbox(service)

    assert len(mailbox.search_threads("q", 0, 2)) == 1
    # No token was handed out for offset 2, so walking there finds nothing more.
    service.users.return_value.threads.return_value.list.return_value.execute.side_effect = [
        {"threads": [{"id": "t1"}]}
    ]
    assert mailbox.search_threads("q", 2, 2) == []


def test_search_from_unknown_offset_walks_pages():
    service = _service(
        [
            {"threads": [{"id": "t1"}, {"id": "t2"}], "nextPageToken": "tok2"},
            {"threads": [{"id": "t3"}, {"id": "t4"}]},
        ]
    )
    mailbox = GmailMailbox(service)

    threads = mailbox.search_threads("q", 2, 2)

    assert [t.thread_id for t in threads] == ["t3", "t4"]
    calls = _list_kwargs(service)
    assert calls[0]["maxResults"] == 2
    assert calls[1]["pageToken"] == "tok2"


def test_search_empty_result_skips_fetch():
    service = _service([{}])
    mailbox = GmailMailbox(service)

    assert mailbox.search_threads("q", 0, 100) == []
    service.new_batch_http_request.assert_not_called()


def test_fetch_failure_raises():
    service = _service([{"threads": [{"id": "t1"}, {"id": "t2"}]}], fail_ids=["t2"])
    mailbox = GmailMailbox(service)

    with pytest.raises(RuntimeError, match="t2"):
        mailbox.search_threads("q", 0, 2)


def test_labels_are_cached():
    service = MagicMock()
    labels = service.users.return_value.labels.return_value
    labels.list.return_value.execute.return_value = {
        "labels": [{"id": "INBOX", "name": "INBOX"}, {"id": "Label_9", "name": "Reply Tracking"}]
    }
    mailbox = GmailMailbox(service)

    assert mailbox.get_label_id("Reply Tracking") == "Label_9"
    assert mailbox.get_label_id("Reply Tracking") == "Label_9"
    assert labels.list.call_count == 1


def test_create_label():
    service = MagicMock()
    labels = service.users.return_value.labels.return_value
    labels.create.return_value.execute.return_value = {"id": "Label_10", "name": "Frequent Replies"}
    mailbox = GmailMailbox(service)

    assert mailbox.create_label("Frequent Replies") == "Label_10"
    assert labels.create.call_args.kwargs["body"]["name"] == "Frequent Replies"
    assert mailbox.get_label_id("Frequent Replies") == "Label_10"


def test_add_label_and_mark_read():
    service = MagicMock()
    mailbox = GmailMailbox(service)

    mailbox.add_thread_label("t1", "Label_9")
    mailbox.mark_read("m1")

    users = service.users.return_value
    assert users.threads.return_value.modify.call_args.kwargs == {
        "userId": "me",
        "id": "t1",
        "body": {"addLabelIds": ["Label_9"]},
    }
    assert users.messages.return_value.modify.call_args.kwargs == {
        "userId": "me",
        "id": "m1",
        "body": {"removeLabelIds": ["UNREAD"]},
    }
