"""Tests for partial-value delta emission."""

from __future__ import annotations

from collections import defaultdict

import pytest

from trellis.extraction import (
    ExtractionState,
    drain_deltas,
    extract_final_values,
    streaming_extract_values,
)
from trellis.extraction.deltas import streams_text
from trellis.schemas import CodeField, NumberField, Signature, StringField


class _Driver:
    """Feeds successive buffers through the streaming step and drains deltas."""

    def __init__(self, sig: Signature):
        self.sig = sig
        self.values: dict = {}
        self.state = ExtractionState()

    def feed(self, content: str) -> list[dict]:
        streaming_extract_values(self.sig, self.values, self.state, content)
        return drain_deltas(self.sig, content, self.values, self.state)

    def finish(self, content: str) -> list[dict]:
        streaming_extract_values(self.sig, self.values, self.state, content)
        extract_final_values(self.sig, self.values, self.state, content)
        return drain_deltas(self.sig, content, self.values, self.state)


@pytest.fixture
def summary_sig():
    return Signature(
        output_fields=[
            StringField(name="summary"),
            NumberField(name="score", is_optional=True),
        ]
    )


# -- Text fields ---------------------------------------------------------------


class TestTextDeltas:
    def test_increments(self, summary_sig):
        d = _Driver(summary_sig)
        assert d.feed("<summary>Hel") == [{"summary": "Hel"}]
        assert d.feed("<summary>Hello wor") == [{"summary": "lo wor"}]
        assert d.feed("<summary>Hello world</summ") == [{"summary": "ld"}]
        assert d.finish("<summary>Hello world</summary>") == []
        assert d.values == {"summary": "Hello world"}

    def test_trailing_whitespace_held_back(self, summary_sig):
        d = _Driver(summary_sig)
        assert d.feed("<summary>Hello ") == [{"summary": "Hello"}]
        assert d.feed("<summary>Hello world") == [{"summary": " world"}]

    def test_leading_whitespace_dropped(self, summary_sig):
        d = _Driver(summary_sig)
        assert d.feed("<summary>\n  ") == []
        assert d.feed("<summary>\n  Hi") == [{"summary": "Hi"}]
        assert d.feed("<summary>\n  Hi there") == [{"summary": " there"}]

    def test_nothing_new_yields_nothing(self, summary_sig):
        d = _Driver(summary_sig)
        d.feed("<summary>Hi")
        assert d.feed("<summary>Hi") == []

    def test_internal_field_not_streamed(self):
        sig = Signature(
            output_fields=[
                StringField(name="reasoning", is_internal=True),
                StringField(name="answer"),
            ]
        )
        d = _Driver(sig)
        assert d.feed("<reasoning>think</reasoning>\n<answer>4") == [{"answer": "4"}]

    def test_streams_text(self):
        assert streams_text(StringField(name="summary"))
        assert streams_text(CodeField(name="snippet"))
        assert not streams_text(StringField(name="tags", is_array=True))
        assert not streams_text(NumberField(name="score"))


# -- Whole values ---------------------------------------------------------------


class TestWholeValueDeltas:
    def test_number_emitted_once_complete(self, summary_sig):
        d = _Driver(summary_sig)
        assert d.feed("<summary>A</summary>\n<score>4") == [{"summary": "A"}]
        assert d.finish("<summary>A</summary>\n<score>42</score>") == [{"score": 42}]

    def test_whole_value_not_repeated(self, summary_sig):
        d = _Driver(summary_sig)
        d.finish("<summary>A</summary>\n<score>42</score>")
        assert drain_deltas(d.sig, "<summary>A</summary>\n<score>42</score>", d.values, d.state) == []

    def test_array_emits_new_elements(self):
        sig = Signature(output_fields=[StringField(name="tags", is_array=True)])
        d = _Driver(sig)
        content = "<tags>\n- a\n- b\n</tags>"
        assert d.finish(content) == [{"tags": ["a", "b"]}]

        d.values["tags"] = ["a", "b", "c"]
        assert drain_deltas(sig, content, d.values, d.state) == [{"tags": ["c"]}]


# -- JSON mode ----------------------------------------------------------------


class TestJsonDeltas:
    def test_whole_map_once(self, summary_sig):
        d = _Driver(summary_sig)
        assert d.feed('{"summary": "x"') == []
        content = '{"summary": "x", "score": 3}'
        assert d.finish(content) == [{"summary": "x", "score": 3}]
        assert drain_deltas(summary_sig, content, d.values, d.state) == []


# -- Code fields ----------------------------------------------------------------


class TestCodeDeltas:
    def test_fences_withheld(self):
        sig = Signature(output_fields=[CodeField(name="snippet")])
        d = _Driver(sig)
        assert d.feed("<snippet>```py") == []
        assert d.feed("<snippet>```py\nx = 1\n``") == [{"snippet": "x = 1"}]
        assert d.finish("<snippet>```py\nx = 1\n```</snippet>") == []
        assert d.values == {"snippet": "x = 1"}


# -- Non-duplication ------------------------------------------------------------


class TestNonDuplication:
    FULL = (
        "<summary>The quick brown fox jumps over the lazy dog.</summary>\n"
        "<detail>  Second   field text\nwith newline </detail>"
    )

    def test_increments_concatenate_to_final_values(self):
        sig = Signature(
            output_fields=[StringField(name="summary"), StringField(name="detail")]
        )
        d = _Driver(sig)
        streamed: dict[str, str] = defaultdict(str)

        for end in range(1, len(self.FULL) + 1):
            for delta in d.feed(self.FULL[:end]):
                for key, text in delta.items():
                    streamed[key] += text
        for delta in d.finish(self.FULL):
            for key, text in delta.items():
                streamed[key] += text

        assert dict(streamed) == d.values
        assert d.values == {
            "summary": "The quick brown fox jumps over the lazy dog.",
            "detail": "Second   field text\nwith newline",
        }

    def test_fenced_output_concatenates_to_final_values(self):
        sig = Signature(
            output_fields=[StringField(name="summary"), StringField(name="notes")]
        )
        streamed, values = _replay(sig, "```\n<summary>Hi\n<notes>done</notes>\n```")
        assert streamed == values == {"summary": "Hi", "notes": "done"}

    def test_code_fence_on_last_line_matches_final_value(self):
        sig = Signature(output_fields=[CodeField(name="snippet")])
        streamed, values = _replay(sig, "<snippet>```\ncode```</snippet>")
        assert streamed == values == {"snippet": "code"}


def _replay(sig: Signature, full: str) -> tuple[dict, dict]:
    """Feed *full* one character at a time; return (streamed text, final values)."""
    d = _Driver(sig)
    streamed: dict[str, str] = defaultdict(str)
    for end in range(1, len(full) + 1):
        for delta in d.feed(full[:end]):
            for key, text in delta.items():
                streamed[key] += text
    for delta in d.finish(full):
        for key, text in delta.items():
            streamed[key] += text
    return dict(streamed), d.values
