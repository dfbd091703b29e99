"""Streaming and final extraction of signature outputs from model text."""

from .convert import convert_decoded_value, convert_value_to_type, validate_and_parse_field_value
from .dates import parse_llm_friendly_date, parse_llm_friendly_datetime
from .deltas import Delta, drain_deltas, stream_values
from .final import check_all_required_fields, extract_final_values, extract_values
from .matching import MatchResult, match_content
from .parsing import extract_block, parse_markdown_list, strip_closing_fence
from .session import ExtractionOutcome, ExtractionSession
from .state import ExtractionState, FinalizedSpan
from .streaming import streaming_extract_values

__all__ = [
    "Delta",
    "ExtractionOutcome",
    "ExtractionSession",
    "ExtractionState",
    "FinalizedSpan",
    "MatchResult",
    "check_all_required_fields",
    "convert_decoded_value",
    "convert_value_to_type",
    "drain_deltas",
    "extract_block",
    "extract_final_values",
    "extract_values",
    "match_content",
    "parse_llm_friendly_date",
    "parse_llm_friendly_datetime",
    "parse_markdown_list",
    "stream_values",
    "streaming_extract_values",
    "strip_closing_fence",
    "validate_and_parse_field_value",
]
