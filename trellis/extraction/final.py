"""End-of-stream reconciliation.

JSON-mode output is parsed in one go and wins over anything streamed. Text
mode finalizes whichever field was still open. Either way every required
output field must end up in the values map.
"""

from __future__ import annotations

import json
from typing import Any, MutableMapping, Optional

from ..core.exceptions import MissingFieldsError
from ..schemas.signature import Signature
from ..utils.logger import get_logger
from .convert import convert_decoded_value
from .parsing import extract_block
from .state import ExtractionState
from .streaming import finalize_field_text, streaming_extract_values

logger = get_logger(__name__)


def extract_final_values(
    sig: Signature,
    values: MutableMapping[str, Any],
    state: ExtractionState,
    content: str,
) -> None:
    """Finish extraction once the stream has ended. Call exactly once.

    Raises:
        MissingFieldsError: Required output fields are absent, all listed.
        InvalidValueError: A JSON value or the last open field's text failed
            conversion.
    """
    state.stream_complete = True

    parsed = _parse_json_object(content)
    if parsed is not None:
        # Complete values replace partially streamed ones
        for key, value in parsed.items():
            field = sig.get_output_field(key)
            values[key] = convert_decoded_value(field, value) if field is not None else value
        logger.debug("Reconciled %d keys from JSON output", len(parsed))
        check_all_required_fields(sig, values)
        return

    if state.current_field is not None:
        field = state.current_field
        value = finalize_field_text(
            field, content[state.scan_cursor:], fenced=state.in_fenced_block
        )
        if value is not None:
            values[field.name] = value
        logger.debug("Field '%s' finalized at end of stream", field.name)

    check_all_required_fields(sig, values)


def extract_values(
    sig: Signature,
    values: MutableMapping[str, Any],
    content: str,
) -> None:
    """Extract from a complete buffer in one shot, using a fresh state."""
    state = ExtractionState()
    streaming_extract_values(sig, values, state, content)
    extract_final_values(sig, values, state, content)


def check_all_required_fields(sig: Signature, values: MutableMapping[str, Any]) -> None:
    """Fail with every required output field that is absent (or ``None``)."""
    missing = [
        f for f in sig.output_fields
        if f.is_required and values.get(f.name) is None
    ]
    if missing:
        raise MissingFieldsError(
            f"Required {'field' if len(missing) == 1 else 'fields'} not found in final output",
            fields=missing,
        )


def _parse_json_object(content: str) -> Optional[dict[str, Any]]:
    """Parse the whole buffer as one JSON object, or return ``None``.

    An enclosing fenced code block is unwrapped first. Arrays and scalars
    are not objects and fall back to text mode.
    """
    text = content.strip()
    if text.startswith("```"):
        text = extract_block(text).strip()
    if not (text.startswith("{") and text.endswith("}")):
        return None
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None
