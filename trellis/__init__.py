"""
Trellis - Streaming Structured Extraction

Declare a typed Signature of input and output fields, then rebuild typed,
validated output values from the text a language model streams back, field
by field, while the stream is still arriving.
"""

from .core import (
    ExtractionConfig,
    ExtractionError,
    GenerationError,
    GenerationHooks,
    InvalidValueError,
    MissingFieldsError,
    SignatureError,
    TrellisError,
)
from .extraction import (
    ExtractionOutcome,
    ExtractionSession,
    ExtractionState,
    extract_final_values,
    extract_values,
    stream_values,
    streaming_extract_values,
)
from .schemas import Field, Signature, parse_field
from .steps import GenerateStep, GenerationResult, StreamingClient

__version__ = "0.1.0"
__author__ = "Trellis Team"

__all__ = [
    'Signature',
    'Field',
    'parse_field',
    'ExtractionSession',
    'ExtractionOutcome',
    'ExtractionState',
    'streaming_extract_values',
    'extract_final_values',
    'extract_values',
    'stream_values',
    'GenerateStep',
    'GenerationResult',
    'StreamingClient',
    'GenerationHooks',
    'ExtractionConfig',
    'TrellisError',
    'SignatureError',
    'ExtractionError',
    'MissingFieldsError',
    'InvalidValueError',
    'GenerationError',
]
