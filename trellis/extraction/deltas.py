"""Delta emission: partial values for a live consumer.

Drain :func:`stream_values` once after every streaming step (and once more
after the final step). Each item is a partial values dict, e.g.
``{"summary": "Hel"}`` followed later by ``{"summary": "lo world"}``.

Only string and code fields stream character by character. Every other
field is emitted whole the first time it appears in the values map; arrays
are emitted as newly appended elements. JSON-mode output is emitted as one
dict once it has been reconciled.

Trailing whitespace, closing tags and (for code) closing fences are held
back until more text shows whether they belong to the value, so
concatenating a field's increments reproduces its final value.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, Mapping

from ..schemas.field import Field
from ..schemas.signature import Signature
from .matching import closing_tag, is_json_mode
from .state import ExtractionState

Delta = dict[str, Any]

_STREAMING_TYPES = ("string", "code")

# A tag that has started to arrive but has not closed yet
_PARTIAL_TAG = re.compile(r"<[^<>\s]*$")
_OPEN_FENCE = re.compile(r"^[ ]*```[A-Za-z0-9_+-]*\n\s*")
_PARTIAL_OPEN_FENCE = re.compile(r"[ ]*`{1,3}[A-Za-z0-9_+-]*")
_CLOSE_FENCE = re.compile(r"\s*```\s*$")
_PARTIAL_CLOSE_FENCE = re.compile(r"\s*`{1,3}$")


def streams_text(field: Field) -> bool:
    """Whether *field* is emitted incrementally as text arrives."""
    return (
        field.type in _STREAMING_TYPES
        and not field.is_array
        and not field.is_internal
    )


def stream_values(
    sig: Signature,
    content: str,
    values: Mapping[str, Any],
    state: ExtractionState,
) -> Iterator[Delta]:
    """Yield the partial values that became available since the last drain.

    Finite and not restartable; state offsets advance as items are consumed.
    """
    if is_json_mode(content):
        if values and not state.json_emitted:
            state.json_emitted = True
            yield dict(values)
        return

    pending = state.finalized_spans[state.spans_drained:]
    for span in pending:
        yield from _yield_delta(content, span.field, span.start, span.end, state, in_progress=False)
    state.spans_drained += len(pending)

    current = state.current_field
    if current is not None:
        yield from _yield_delta(
            content,
            current,
            state.scan_cursor,
            len(content),
            state,
            in_progress=not state.stream_complete,
        )

    offsets = state.streamed_offset_by_field_name
    for key, value in list(values.items()):
        field = sig.get_output_field(key)
        if field is None or field.is_internal or streams_text(field):
            continue

        if isinstance(value, list):
            sent = offsets.get(key, 0)
            fresh = value[sent:]
            if fresh:
                offsets[key] = sent + len(fresh)
                yield {key: fresh}
            continue

        if key not in state.emitted_fields:
            state.emitted_fields.add(key)
            yield {key: value}


def drain_deltas(
    sig: Signature,
    content: str,
    values: Mapping[str, Any],
    state: ExtractionState,
) -> list[Delta]:
    """Collect :func:`stream_values` into a list."""
    return list(stream_values(sig, content, values, state))


def _yield_delta(
    content: str,
    field: Field,
    start: int,
    end: int,
    state: ExtractionState,
    in_progress: bool,
) -> Iterator[Delta]:
    if not streams_text(field):
        return

    offsets = state.streamed_offset_by_field_name
    pos = offsets.get(field.name, 0)
    is_first = pos == 0

    raw = content[start + pos:end]
    if not raw:
        return

    held = _hold_back_tail(raw, field, in_progress, state.in_fenced_block)
    text = held.lstrip() if is_first else held

    if field.type == "code" and is_first:
        if in_progress and _PARTIAL_OPEN_FENCE.fullmatch(text):
            return
        text = _OPEN_FENCE.sub("", text, count=1)

    if text:
        offsets[field.name] = pos + len(held)
        yield {field.name: text}


def _hold_back_tail(text: str, field: Field, in_progress: bool, fenced: bool = False) -> str:
    """Drop the trailing part of *text* that may not belong to the value."""
    if in_progress:
        text = _PARTIAL_TAG.sub("", text)
    text = text.rstrip()

    if fenced:
        pattern = _PARTIAL_CLOSE_FENCE if in_progress else _CLOSE_FENCE
        text = pattern.sub("", text).rstrip()

    tag = closing_tag(field.name)
    if text.endswith(tag):
        text = text[: -len(tag)].rstrip()

    if field.type == "code":
        pattern = _PARTIAL_CLOSE_FENCE if in_progress else _CLOSE_FENCE
        text = pattern.sub("", text).rstrip()

    return text
