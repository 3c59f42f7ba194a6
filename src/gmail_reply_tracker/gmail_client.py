"""Gmail API client: thread search, labels, and read state."""

from __future__ import annotations

import logging

from googleapiclient.errors import HttpError
from googleapiclient.http import BatchHttpRequest
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from gmail_reply_tracker.constants import BATCH_SIZE, LIST_PAGE_MAX
from gmail_reply_tracker.models import Thread
from gmail_reply_tracker.parsing import parse_thread

logger = logging.getLogger(__name__)


def is_retryable_http_error(exc: BaseException) -> bool:
    return isinstance(exc, HttpError) and exc.resp.status in (429, 500, 503)


api_retry = retry(
    retry=retry_if_exception(is_retryable_http_error),
    wait=wait_exponential(multiplier=1, min=1, max=60),
    stop=stop_after_attempt(5),
    reraise=True,
)


@api_retry
def execute_request(request):
    return request.execute()


@api_retry
def _execute_batch(batch: BatchHttpRequest) -> None:
    batch.execute()


class GmailMailbox:
    """The slice of Gmail the tracker needs, on top of an API service object.

    Gmail pages search results with opaque tokens, while the tracker walks
    them by offset.  Tokens are remembered per (query, offset) so walking
    pages in order costs one list call per page.
    """

    def __init__(self, service, user_id: str = "me") -> None:
        self.service = service
        self.user_id = user_id
        self._page_tokens: dict[tuple[str, int], str] = {}
        self._label_ids: dict[str, str] = {}

    # --- search ---

    def search_threads(self, query: str, start: int, max_results: int) -> list[Thread]:
        """Return up to max_results threads matching query, skipping the first start."""
        thread_ids = self._list_thread_ids(query, start, max_results)
        if not thread_ids:
            return []
        return self._fetch_threads(thread_ids)

    def _list_page(self, query: str, page_token: str | None, max_results: int) -> tuple[list[str], str | None]:
        kwargs: dict = {
            "userId": self.user_id,
            "q": query,
            "maxResults": max_results,
            "fields": "threads/id,nextPageToken",
        }
        if page_token:
            kwargs["pageToken"] = page_token
        resp = execute_request(self.service.users().threads().list(**kwargs))
        ids = [t["id"] for t in resp.get("threads", [])]
        return ids, resp.get("nextPageToken")

    def _list_thread_ids(self, query: str, start: int, max_results: int) -> list[str]:
        # Resume from the furthest remembered offset not past start.
        offset, token = 0, None
        for (q, o), t in self._page_tokens.items():
            if q == query and offset < o <= start:
                offset, token = o, t

        while offset < start:
            ids, token = self._list_page(query, token, min(LIST_PAGE_MAX, start - offset))
            offset += len(ids)
            if not token:
                return []
            self._page_tokens[(query, offset)] = token

        ids, next_token = self._list_page(query, token, min(LIST_PAGE_MAX, max_results))
        if next_token:
            self._page_tokens[(query, offset + len(ids))] = next_token
        return ids

    def _fetch_threads(self, thread_ids: list[str]) -> list[Thread]:
        """Fetch full threads with batch requests, keeping the search order."""
        results: dict[str, Thread] = {}
        errors: list[Exception] = []

        def _cb(request_id, response, exception):
            if exception is not None:
                errors.append(exception)
                return
            thread = parse_thread(response)
            results[thread.thread_id] = thread

        for start in range(0, len(thread_ids), BATCH_SIZE):
            batch = self.service.new_batch_http_request(callback=_cb)
            for thread_id in thread_ids[start:start + BATCH_SIZE]:
                batch.add(
                    self.service.users().threads().get(userId=self.user_id, id=thread_id, format="full")
                )
            _execute_batch(batch)

            if errors:
                raise errors[0]
        return [results[t] for t in thread_ids if t in results]

    # --- labels ---

    def get_label_id(self, name: str) -> str | None:
        """Return the ID of the user label called name, or None."""
        if name in self._label_ids:
            return self._label_ids[name]
        resp = execute_request(self.service.users().labels().list(userId=self.user_id))
        for label in resp.get("labels", []):
            self._label_ids[label["name"]] = label["id"]
        return self._label_ids.get(name)

    def create_label(self, name: str) -> str:
        """Create a user label and return its ID."""
        label = execute_request(
            self.service.users().labels().create(
                userId=self.user_id,
                body={
                    "name": name,
                    "labelListVisibility": "labelShow",
                    "messageListVisibility": "show",
                },
            )
        )
        logger.info("Created label %s", name)
        self._label_ids[name] = label["id"]
        return label["id"]

    def add_thread_label(self, thread_id: str, label_id: str) -> None:
        execute_request(
            self.service.users().threads().modify(
                userId=self.user_id, id=thread_id, body={"addLabelIds": [label_id]}
            )
        )

    # --- read state ---

    def mark_read(self, message_id: str) -> None:
        execute_request(
            self.service.users().messages().modify(
                userId=self.user_id, id=message_id, body={"removeLabelIds": ["UNREAD"]}
            )
        )
