"""ExtractionSession — one generation attempt with an explicit result channel.

The low-level step functions raise typed exceptions. A session wraps them
for callers that prefer to inspect outcomes::

    session = ExtractionSession(sig)
    for chunk in chunks:
        buffer += chunk
        outcome = session.feed(buffer)
        if not outcome.ok:
            break
        for delta in session.drain():
            render(delta)
    outcome = session.finish()
    values = outcome.raise_for_error()

A session is single-use: retries must create a new one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.config import ExtractionConfig
from ..core.exceptions import ExtractionError
from ..schemas.signature import Signature
from ..utils.logger import get_logger
from .deltas import Delta, drain_deltas
from .final import extract_final_values
from .state import ExtractionState
from .streaming import streaming_extract_values

logger = get_logger(__name__)


@dataclass
class ExtractionOutcome:
    """Result of one session call.

    Attributes:
        error: The extraction failure, or ``None`` on success.
        values: Snapshot of the values map after the call.
    """

    error: Optional[ExtractionError] = None
    values: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> dict[str, Any]:
        """Raise the stored error, or return the values."""
        if self.error is not None:
            raise self.error
        return self.values


class ExtractionSession:
    """Owns the state and values map of a single generation attempt.

    Args:
        signature: Read-only contract describing the output fields.
        config: Optional ExtractionConfig (``streaming_validation``).
    """

    def __init__(
        self,
        signature: Signature,
        config: ExtractionConfig | None = None,
    ) -> None:
        self.signature = signature
        self.config = config or ExtractionConfig()
        self._state = ExtractionState()
        self._values: dict[str, Any] = {}
        self._content = ""
        self._error: Optional[ExtractionError] = None
        self._finished = False

    # -- properties --------------------------------------------------------

    @property
    def values(self) -> dict[str, Any]:
        return self._values

    @property
    def state(self) -> ExtractionState:
        return self._state

    @property
    def content(self) -> str:
        return self._content

    @property
    def failed(self) -> bool:
        return self._error is not None

    @property
    def done(self) -> bool:
        return self._finished or self.failed

    # -- steps -------------------------------------------------------------

    def feed(self, content: str) -> ExtractionOutcome:
        """Run the streaming step over the grown buffer.

        Raises:
            ValueError: *content* is shorter than a previously fed buffer.
            RuntimeError: The session has already finished.
        """
        if self._finished:
            raise RuntimeError("Cannot feed a finished extraction session")
        if self._error is not None:
            return self._outcome()
        self._accept(content)

        try:
            streaming_extract_values(
                self.signature,
                self._values,
                self._state,
                self._content,
                streaming_validation=self.config.streaming_validation,
            )
        except ExtractionError as exc:
            self._fail(exc)
        return self._outcome()

    def drain(self) -> list[Delta]:
        """Partial values that became available since the last drain."""
        if self._error is not None:
            return []
        return drain_deltas(self.signature, self._content, self._values, self._state)

    def finish(self, content: Optional[str] = None) -> ExtractionOutcome:
        """Run the final step. Must be called at most once.

        Args:
            content: Final buffer; defaults to the last fed content.
        """
        if self._finished:
            raise RuntimeError("Extraction session already finished")
        if self._error is not None:
            return self._outcome()
        if content is not None:
            self._accept(content)

        self._finished = True
        try:
            # Catch up on anything that arrived with the last chunk
            streaming_extract_values(
                self.signature, self._values, self._state, self._content
            )
            extract_final_values(self.signature, self._values, self._state, self._content)
        except ExtractionError as exc:
            self._fail(exc)
        return self._outcome()

    # -- internals ---------------------------------------------------------

    def _accept(self, content: str) -> None:
        if len(content) < len(self._content):
            raise ValueError(
                "Extraction buffer shrank; start a new session for a new attempt"
            )
        self._content = content

    def _fail(self, exc: ExtractionError) -> None:
        logger.debug("Extraction failed: %s", exc)
        self._error = exc

    def _outcome(self) -> ExtractionOutcome:
        return ExtractionOutcome(error=self._error, values=dict(self._values))
