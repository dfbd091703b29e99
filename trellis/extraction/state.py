"""Per-generation extraction state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..schemas.field import Field


@dataclass(frozen=True)
class FinalizedSpan:
    """Content range ``[start, end)`` a finalized field was read from."""

    field: Field
    start: int
    end: int


@dataclass
class ExtractionState:
    """Mutable cursor and bookkeeping for one in-flight generation attempt.

    Owned by exactly one attempt. A retry must start from a new instance
    (and a new values map): offsets assume a single, monotonically growing
    buffer.

    Attributes:
        current_field: Field whose opening tag was seen last and whose value
            is still arriving.
        current_field_index: Declared position of ``current_field``.
        scan_cursor: Buffer offset just past the current field's opening tag.
        finalized_spans: Fields completed during streaming, in order.
        streamed_offset_by_field_name: Characters (or, for arrays, elements)
            already emitted as deltas per field.
        extracted_field_order: Fields in the order their tags were matched.
        in_fenced_block: The output opened with a bare code fence.
        spans_drained: How many ``finalized_spans`` the delta emitter has
            already visited.
        json_emitted: The whole-map JSON delta has been emitted.
        emitted_fields: Non-streaming fields already emitted whole.
        stream_complete: Final extraction ran; no more content will arrive.
    """

    current_field: Optional[Field] = None
    current_field_index: Optional[int] = None
    scan_cursor: int = 0
    finalized_spans: list[FinalizedSpan] = field(default_factory=list)
    streamed_offset_by_field_name: dict[str, int] = field(default_factory=dict)
    extracted_field_order: list[Field] = field(default_factory=list)
    in_fenced_block: bool = False

    spans_drained: int = 0
    json_emitted: bool = False
    emitted_fields: set[str] = field(default_factory=set)
    stream_complete: bool = False
