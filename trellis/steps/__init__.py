"""Generation steps that drive extraction from a streaming model."""

from .base import GenerationResult, StreamingClient
from .generate import GenerateStep

__all__ = [
    "GenerateStep",
    "GenerationResult",
    "StreamingClient",
]
