"""Streaming extraction step: advance through fields as the buffer grows.

Text-mode output marks each field with an opening ``<name>`` tag (and
usually a closing ``</name>`` tag), fields in declared order. Each call scans
forward from the state's cursor, finalizing the current field whenever the
next field's opening tag appears. JSON-mode output is left alone until the
stream ends (see :mod:`trellis.extraction.final`).
"""

from __future__ import annotations

from typing import Any, MutableMapping

from ..core.exceptions import MissingFieldsError
from ..schemas.field import Field
from ..schemas.signature import Signature
from ..utils.logger import get_logger
from .convert import validate_and_parse_field_value
from .matching import MatchResult, closing_tag, is_json_mode, match_content, opening_marker
from .parsing import strip_closing_fence
from .state import ExtractionState, FinalizedSpan

logger = get_logger(__name__)


def streaming_extract_values(
    sig: Signature,
    values: MutableMapping[str, Any],
    state: ExtractionState,
    content: str,
    streaming_validation: bool = False,
) -> None:
    """Advance *state* over *content*, finalizing fields whose end has arrived.

    Safe to call after every buffer extension; *content* must extend the
    content of the previous call. Ordinary partial input never raises.

    Raises:
        MissingFieldsError: A required field declared before a field that has
            now opened is still absent, or (with *streaming_validation*) the
            first required field is skipped by a later field's tag.
        InvalidValueError: A finalized field's text failed conversion.
    """
    if is_json_mode(content):
        return

    for index, field in enumerate(sig.output_fields):
        if field.name in values or field in state.extracted_field_order:
            continue

        is_first = not state.extracted_field_order
        marker = opening_marker(field.name, is_first)
        found = match_content(content, marker, state.scan_cursor)

        if found == MatchResult.NOT_FOUND:
            if (
                streaming_validation
                and not values
                and state.current_field is None
                and field.is_required
                and _later_field_opened(sig, index, content, state.scan_cursor)
            ):
                raise MissingFieldsError("Required field not found", fields=[field])
            continue
        if found in (MatchResult.PARTIAL_AT_END, MatchResult.WHITESPACE_ONLY):
            return
        if found == MatchResult.FENCE_ONLY:
            state.in_fenced_block = True
            return

        if is_first and "```" in content[:found]:
            state.in_fenced_block = True

        if state.current_field is not None:
            _finalize_current(values, state, content, end=found)

        _check_missing_required_fields(sig, values, index)

        state.scan_cursor = found + len(marker)
        state.current_field = field
        state.current_field_index = index
        if field not in state.extracted_field_order:
            state.extracted_field_order.append(field)
        state.streamed_offset_by_field_name.setdefault(field.name, 0)
        logger.debug("Field '%s' opened at offset %d", field.name, found)


def finalize_field_text(field: Field, raw: str, fenced: bool = False) -> Any:
    """Strip a trailing closing tag, trim, then convert *raw*.

    With *fenced*, the whole output sits in a code block and a closing
    fence after the field is dropped first.
    """
    text = raw.rstrip()
    if fenced:
        text = strip_closing_fence(text)
    tag = closing_tag(field.name)
    if text.endswith(tag):
        text = text[: -len(tag)]
    return validate_and_parse_field_value(field, text.strip())


def _finalize_current(
    values: MutableMapping[str, Any],
    state: ExtractionState,
    content: str,
    end: int,
) -> None:
    field = state.current_field
    if field is None:
        return
    value = finalize_field_text(field, content[state.scan_cursor:end])
    if value is not None:
        values[field.name] = value
    state.finalized_spans.append(FinalizedSpan(field, state.scan_cursor, end))
    logger.debug("Field '%s' finalized from span [%d, %d)", field.name, state.scan_cursor, end)


def _later_field_opened(sig: Signature, index: int, content: str, start: int) -> bool:
    """True if a field declared after *index* already has its opening tag."""
    return any(
        match_content(content, opening_marker(f.name, True), start) >= 0
        for f in sig.output_fields[index + 1:]
    )


def _check_missing_required_fields(
    sig: Signature,
    values: MutableMapping[str, Any],
    index: int,
) -> None:
    """Fail on required fields declared before *index* that are still absent."""
    missing = [
        f for f in sig.output_fields[:index]
        if f.is_required and values.get(f.name) is None
    ]
    if missing:
        raise MissingFieldsError(
            f"Required {'field' if len(missing) == 1 else 'fields'} not found",
            fields=missing,
        )
