"""Tests for fenced block extraction and markdown list parsing."""

from __future__ import annotations

import pytest

from trellis.extraction.parsing import extract_block, parse_markdown_list


class TestExtractBlock:
    def test_fenced_with_language(self):
        assert extract_block("```python\nprint(1)\n```") == "print(1)"

    def test_fenced_without_language(self):
        assert extract_block("```\na\nb\n```") == "a\nb"

    def test_closing_fence_on_last_line(self):
        assert extract_block("```\ncode```") == "code"

    def test_prose_around_block(self):
        text = "Here you go:\n```json\n{\"a\": 1}\n```\nThanks"
        assert extract_block(text) == '{"a": 1}'

    def test_no_block_returns_input(self):
        assert extract_block("plain text") == "plain text"


class TestParseMarkdownList:
    def test_dash_bullets(self):
        assert parse_markdown_list("- one\n- two") == ["one", "two"]

    def test_numbered(self):
        assert parse_markdown_list("1. first\n2. second") == ["first", "second"]

    def test_mixed_bullets_and_blank_lines(self):
        assert parse_markdown_list("* x\n\n+ y\n") == ["x", "y"]

    def test_indented_items(self):
        assert parse_markdown_list("  - a\n  - b") == ["a", "b"]

    def test_non_list_line_rejected(self):
        with pytest.raises(ValueError, match="Could not parse markdown list"):
            parse_markdown_list("- one\nnot an item")
