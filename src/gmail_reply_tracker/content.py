"""Body clean-up: drop quoted history and signatures, then cut a snippet."""

from __future__ import annotations

import re

# A line matching any of these starts the quoted/trailer part of a reply.
_QUOTE_BOUNDARY_PATTERNS = [
    re.compile(r"^>"),
    re.compile(r"^On .+wrote:"),
    re.compile(r"^-----Original Message-----"),
    re.compile(r"^From: "),
    re.compile(r"^差出人: "),
    re.compile(r"^--\s*$"),  # signature separator
]


def _is_quote_boundary(line: str) -> bool:
    return any(p.search(line) for p in _QUOTE_BOUNDARY_PATTERNS)


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def trim_reply_junk(body: str | None) -> str:
    """Return the body up to the first quote or signature boundary, stripped.

    Everything from the boundary line onwards is discarded.  Bodies without
    a boundary are kept whole.
    """
    lines = normalize_newlines(body or "").split("\n")
    for idx, line in enumerate(lines):
        if _is_quote_boundary(line):
            lines = lines[:idx]
            break
    return "\n".join(lines).strip()


def snippet(text: str, max_len: int) -> str:
    """Hard-truncate text to at most max_len characters."""
    return text[:max_len]
