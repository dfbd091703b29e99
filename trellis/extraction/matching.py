"""Field boundary search over a partially arrived buffer.

:func:`match_content` tells the streaming step not only *where* a marker
is, but, when it is not there yet, whether waiting for more text could still
produce it. Non-negative results are buffer offsets; negative results are
:class:`MatchResult` members.
"""

from __future__ import annotations

import re
from enum import IntEnum
from functools import lru_cache

_FENCE_ONLY = re.compile(r"\s*```[A-Za-z0-9_+-]*\s*")
_WHITESPACE_ONLY = re.compile(r"[\s`]*")
_JSON_START = re.compile(r"\s*(?:```[A-Za-z]*\s*)?\{")


class MatchResult(IntEnum):
    """Reasons a marker search produced no offset."""

    NOT_FOUND = -1
    PARTIAL_AT_END = -2
    WHITESPACE_ONLY = -3
    FENCE_ONLY = -4


@lru_cache(maxsize=512)
def _proper_prefixes(marker: str) -> tuple[str, ...]:
    # A lone newline is too common at a chunk boundary to mean anything
    return tuple(
        marker[:i] for i in range(1, len(marker)) if marker[:i] != "\n"
    )


def match_content(content: str, marker: str, start: int = 0) -> int:
    """Find *marker* in *content* at or after *start*.

    Returns:
        The offset of the match, or one of:

        - ``FENCE_ONLY``: the rest of the buffer is only an opening code fence.
        - ``WHITESPACE_ONLY``: the rest of the buffer is whitespace (or stray
          backticks).
        - ``PARTIAL_AT_END``: the buffer ends with a truncated *marker*.
        - ``NOT_FOUND``: none of the above.
    """
    start = max(start, 0)
    tail = content[start:]

    if _FENCE_ONLY.fullmatch(tail):
        return MatchResult.FENCE_ONLY
    if _WHITESPACE_ONLY.fullmatch(tail):
        return MatchResult.WHITESPACE_ONLY

    index = content.find(marker, start)
    if index != -1:
        return index

    content_end = content[max(start, len(content) - len(marker)):]
    for partial in _proper_prefixes(marker):
        if content_end.endswith(partial):
            return MatchResult.PARTIAL_AT_END

    return MatchResult.NOT_FOUND


def is_json_mode(content: str) -> bool:
    """True when the buffer is (the start of) a single JSON object.

    An opening code fence directly followed by ``{`` counts as JSON too.
    """
    return _JSON_START.match(content) is not None


def opening_marker(field_name: str, is_first: bool) -> str:
    """Opening tag searched for a field; only the first tag may lack a newline."""
    return ("" if is_first else "\n") + f"<{field_name}>"


def closing_tag(field_name: str) -> str:
    return f"</{field_name}>"
