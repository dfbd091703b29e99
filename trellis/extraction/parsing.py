"""Lenient text helpers for model output: fenced blocks and markdown lists."""

from __future__ import annotations

import re

_MARKDOWN_BLOCK = re.compile(r"```([A-Za-z0-9_+-]*)\n([\s\S]*?)\n?```")
_CLOSING_FENCE = re.compile(r"\s*```\s*$")
_LIST_BULLET = re.compile(r"^([*\-+]|\d+\.)\s*")


def extract_block(text: str) -> str:
    """Return the body of the first fenced code block, or *text* unchanged."""
    match = _MARKDOWN_BLOCK.search(text)
    if match is None:
        return text
    return match.group(2)


def strip_closing_fence(text: str) -> str:
    """Drop a trailing ``` fence (and the whitespace before it) from *text*."""
    return _CLOSING_FENCE.sub("", text)


def parse_markdown_list(text: str) -> list[str]:
    """Parse a bullet (``-``, ``*``, ``+``) or numbered (``1.``) list.

    Blank lines are skipped.

    Raises:
        ValueError: A non-blank line is not a list item.
    """
    items: list[str] = []
    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        if not _LIST_BULLET.match(stripped):
            raise ValueError(
                "Could not parse markdown list: no valid list items found"
            )
        items.append(_LIST_BULLET.sub("", stripped, count=1).strip())
    return items
