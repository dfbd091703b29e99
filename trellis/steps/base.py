"""Streaming client protocol and result dataclass for generation steps."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Protocol, runtime_checkable


@runtime_checkable
class StreamingClient(Protocol):
    """Protocol all streaming model adapters must satisfy.

    ``stream`` returns an async iterator of text chunks; the concatenation of
    all chunks is the model's complete output for *messages*. Provider
    specifics (transport, request translation) live behind this protocol.
    """

    def stream(
        self,
        messages: list[dict[str, Any]],
        **options: Any,
    ) -> AsyncIterator[str]: ...


@dataclass
class GenerationResult:
    """Output from a successful generation.

    Attributes:
        values: Output field name -> extracted value.
        content: Raw model output of the successful attempt.
        attempts: Number of attempts made (1 = first try succeeded).
        metadata: Arbitrary metadata for logging/debugging.
    """

    values: dict[str, Any]
    content: str = ""
    attempts: int = 1
    metadata: dict[str, Any] = field(default_factory=dict)
