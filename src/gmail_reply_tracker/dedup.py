"""Capacity-bounded set of already processed message IDs."""

from __future__ import annotations

import json
import logging
from typing import Iterable, Iterator

from .constants import PROCESSED_IDS_CAP

logger = logging.getLogger(__name__)


class ProcessedIds:
    """Insertion-ordered set of message IDs that have already been tracked.

    IDs are only ever appended, never removed one by one, so insertion order
    doubles as recency order.  ``to_list`` relies on this when it evicts the
    oldest half on overflow: anything that reorders the stored IDs breaks
    eviction.
    """

    def __init__(self, ids: Iterable[str] = ()) -> None:
        self._ids: dict[str, None] = dict.fromkeys(ids)

    @classmethod
    def load(cls, raw: str | None) -> ProcessedIds:
        """Parse a persisted JSON array. Bad or missing input gives an empty set."""
        if not raw:
            return cls()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Processed message IDs are not valid JSON, starting empty")
            return cls()
        if not isinstance(data, list):
            logger.warning("Processed message IDs are not a JSON array, starting empty")
            return cls()
        return cls(str(item) for item in data)

    def has(self, message_id: str) -> bool:
        return message_id in self._ids

    def add(self, message_id: str) -> None:
        self._ids[message_id] = None

    def to_list(self, cap: int = PROCESSED_IDS_CAP) -> list[str]:
        """Return the IDs to persist, keeping the newest cap // 2 when over cap."""
        ids = list(self._ids)
        if len(ids) > cap:
            ids = ids[len(ids) - cap // 2:]
        return ids

    def serialize(self, cap: int = PROCESSED_IDS_CAP) -> str:
        return json.dumps(self.to_list(cap))

    # --- container protocol ---

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)
