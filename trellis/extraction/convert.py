"""Per-type conversion and validation of a field's raw text.

:func:`validate_and_parse_field_value` is the single entry point used when a
field is finalized. It returns ``None`` for "no value" (the caller then
leaves the field out of the values map) and raises
:class:`~trellis.core.exceptions.ExtractionError` subclasses otherwise.
"""

from __future__ import annotations

import json
import math
import re
from datetime import date, datetime
from typing import Any, Callable, cast

from ..core.exceptions import InvalidValueError, MissingFieldsError
from ..schemas.field import EnumField, Field, LiteralEnumSet
from .dates import parse_llm_friendly_date, parse_llm_friendly_datetime
from .parsing import extract_block, parse_markdown_list

_ABSENT_TEXT = re.compile(r"(null|undefined)\s*", re.IGNORECASE)
_INTEGER = re.compile(r"[+-]?\d+")
_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def validate_and_parse_field_value(field: Field, text: str | None) -> Any:
    """Convert a field's trimmed raw text into its typed value.

    Empty, ``null`` and ``undefined`` text means "absent".

    Returns:
        The converted value, or ``None`` when the field has no value.

    Raises:
        MissingFieldsError: Absent text for a non-optional field.
        InvalidValueError: The text cannot be converted to the field's type.
    """
    if not text or _ABSENT_TEXT.fullmatch(text):
        if field.is_optional:
            return None
        raise MissingFieldsError(
            "Required field is missing", fields=[field], value=text
        )

    if field.type == "json":
        try:
            return json.loads(extract_block(text))
        except json.JSONDecodeError as exc:
            raise InvalidValueError(field, text, f"Invalid JSON: {exc}") from exc

    if field.is_array:
        items = _parse_array(field, text)
        return [
            convert_value_to_type(
                field, item.strip() if isinstance(item, str) else item, required=True
            )
            if item is not None
            else None
            for item in items
        ]

    value = convert_value_to_type(field, text)
    if value == "":
        return None
    return value


def convert_decoded_value(field: Field, value: Any) -> Any:
    """Convert a value that arrived already decoded from a JSON object.

    ``None`` and ``json`` fields pass through. Arrays must already be lists.

    Raises:
        InvalidValueError: The value cannot be converted to the field's type.
    """
    if value is None or field.type == "json":
        return value

    if field.is_array:
        if not isinstance(value, list):
            raise InvalidValueError(field, value, "Invalid Array: Expected an array")
        return [
            convert_value_to_type(field, item, required=True) if item is not None else None
            for item in value
        ]

    return convert_value_to_type(field, value)


def _parse_array(field: Field, text: str) -> list[Any]:
    """JSON array first, markdown list as the fallback."""
    try:
        try:
            value = json.loads(text)
        except json.JSONDecodeError:
            value = parse_markdown_list(text)
    except ValueError as exc:
        raise InvalidValueError(field, text, f"Invalid Array: {exc}") from exc

    if not isinstance(value, list):
        raise InvalidValueError(field, text, "Invalid Array: Expected an array")
    return value


def convert_value_to_type(field: Field, value: Any, required: bool = False) -> Any:
    """Convert one value (a whole field, or one array element) to *field*'s type.

    ``required`` forces failures even for optional fields; it is set for
    array elements, which are never individually optional.
    """
    converter = _CONVERTERS.get(field.type)
    if converter is None:
        # string, media types and anything unrecognized pass through
        return value
    return converter(field, value, required)


# ---------------------------------------------------------------------------
# Converters
# ---------------------------------------------------------------------------


def _lenient(field: Field, required: bool) -> bool:
    return field.is_optional and not required


def _to_number(field: Field, value: Any, required: bool) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if not (isinstance(value, float) and math.isnan(value)):
            return value
    elif isinstance(value, str):
        text = value.strip()
        if _INTEGER.fullmatch(text):
            return int(text)
        if _NUMBER.fullmatch(text):
            return float(text)

    if _lenient(field, required):
        return None
    raise InvalidValueError(field, value, "Invalid number")


def _to_boolean(field: Field, value: Any, required: bool) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False

    if _lenient(field, required):
        return None
    raise InvalidValueError(field, value, "Invalid boolean")


def _to_date(field: Field, value: Any, required: bool) -> Any:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return parse_llm_friendly_date(field, str(value), required)


def _to_datetime(field: Field, value: Any, required: bool) -> Any:
    if isinstance(value, datetime):
        return value
    return parse_llm_friendly_datetime(field, str(value), required)


def _to_enum(field: Field, value: Any, required: bool) -> Any:
    value_set = cast(EnumField, field).enum_value_set
    if isinstance(value_set, LiteralEnumSet) and value not in value_set.values:
        if _lenient(field, required):
            return None
        raise InvalidValueError(
            field,
            value,
            f"Invalid class '{value}', expected one of the following: "
            + ", ".join(value_set.values),
        )
    return value


def _to_code(field: Field, value: Any, required: bool) -> Any:
    if isinstance(value, str):
        return extract_block(value)
    return value


_CONVERTERS: dict[str, Callable[[Field, Any, bool], Any]] = {
    "number": _to_number,
    "boolean": _to_boolean,
    "date": _to_date,
    "datetime": _to_datetime,
    "enum": _to_enum,
    "code": _to_code,
}
