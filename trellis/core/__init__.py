"""
Core functionality for the Trellis extraction engine.
"""

from .config import ExtractionConfig
from .exceptions import (
    ConfigurationError,
    ExtractionError,
    GenerationError,
    InvalidValueError,
    MissingFieldsError,
    SignatureError,
    TrellisError,
)
from .hooks import AttemptFailedEvent, DeltaEvent, GenerationEndEvent, GenerationHooks

__all__ = [
    'ExtractionConfig',
    'TrellisError',
    'SignatureError',
    'ConfigurationError',
    'ExtractionError',
    'MissingFieldsError',
    'InvalidValueError',
    'GenerationError',
    'GenerationHooks',
    'DeltaEvent',
    'AttemptFailedEvent',
    'GenerationEndEvent',
]
