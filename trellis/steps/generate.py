"""GenerateStep — drives extraction over a streaming model response."""

from __future__ import annotations

import time
from typing import Any, Optional

from ..core.config import ExtractionConfig
from ..core.exceptions import ExtractionError, GenerationError
from ..core.hooks import (
    AttemptFailedEvent,
    DeltaEvent,
    GenerationEndEvent,
    GenerationHooks,
    _fire_hook,
)
from ..extraction.session import ExtractionSession
from ..schemas.signature import Signature
from ..utils.logger import get_logger
from .base import GenerationResult, StreamingClient

logger = get_logger(__name__)


class GenerateStep:
    """Streams a model response through an :class:`ExtractionSession`.

    Features:
      - Provider-agnostic via the ``StreamingClient`` protocol.
      - Feeds the growing buffer to a session after every chunk and fires
        ``on_delta`` for each partial value as soon as it is available.
      - Stops reading the stream as soon as extraction fails.
      - On extraction failure: appends the output and a correction message
        to the conversation and retries with a fresh session.
    """

    def __init__(
        self,
        name: str,
        signature: Signature,
        client: StreamingClient,
        config: ExtractionConfig | None = None,
        hooks: GenerationHooks | None = None,
        max_retries: int | None = None,
        options: dict[str, Any] | None = None,
    ):
        self.name = name
        self.signature = signature
        self.client = client
        self.config = config or ExtractionConfig()
        self.hooks = hooks or GenerationHooks()
        self.max_retries = self.config.max_retries if max_retries is None else max_retries
        self.options = options or {}

    @property
    def fields(self) -> list[str]:
        return [f.name for f in self.signature.output_fields]

    # -- run -------------------------------------------------------------

    async def run(self, messages: list[dict[str, Any]]) -> GenerationResult:
        """Generate until the output satisfies the signature.

        Raises:
            GenerationError: Every attempt failed extraction.
        """
        started = time.monotonic()
        conversation = list(messages)
        last_error: Optional[ExtractionError] = None
        total_attempts = self.max_retries + 1

        for attempt in range(1, total_attempts + 1):
            # Offsets assume one buffer lineage, so every attempt starts fresh
            session = ExtractionSession(self.signature, self.config)
            content = await self._consume_stream(session, conversation, attempt)

            outcome = session.finish(content)
            if outcome.ok:
                await self._emit_deltas(session, attempt)
                await _fire_hook(
                    self.hooks.on_generation_end,
                    GenerationEndEvent(
                        step_name=self.name,
                        attempts=attempt,
                        values=outcome.values,
                        error=None,
                        elapsed_seconds=time.monotonic() - started,
                    ),
                )
                return GenerationResult(
                    values=outcome.values,
                    content=content,
                    attempts=attempt,
                    metadata={"signature_hash": self.signature.content_hash},
                )

            last_error = outcome.error
            will_retry = attempt < total_attempts
            logger.warning(
                "GenerateStep '%s' extraction attempt %d/%d failed: %s",
                self.name, attempt, total_attempts, last_error,
            )
            await _fire_hook(
                self.hooks.on_attempt_failed,
                AttemptFailedEvent(
                    step_name=self.name,
                    attempt=attempt,
                    error=last_error,
                    content=content,
                    will_retry=will_retry,
                ),
            )

            # Feed the error back so the model can self-correct
            conversation.append({"role": "assistant", "content": content})
            conversation.append({"role": "user", "content": last_error.to_feedback()})

        await _fire_hook(
            self.hooks.on_generation_end,
            GenerationEndEvent(
                step_name=self.name,
                attempts=total_attempts,
                values={},
                error=last_error,
                elapsed_seconds=time.monotonic() - started,
            ),
        )
        raise GenerationError(
            f"GenerateStep '{self.name}' failed after {total_attempts} "
            f"attempts: {last_error}",
            step_name=self.name,
            last_error=last_error,
        )

    # -- helpers ---------------------------------------------------------

    async def _consume_stream(
        self,
        session: ExtractionSession,
        conversation: list[dict[str, Any]],
        attempt: int,
    ) -> str:
        content = ""
        stream = self.client.stream(conversation, **self.options)
        try:
            async for chunk in stream:
                if not chunk:
                    continue
                content += chunk
                if not session.feed(content).ok:
                    break
                await self._emit_deltas(session, attempt)
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
        return content

    async def _emit_deltas(self, session: ExtractionSession, attempt: int) -> None:
        for delta in session.drain():
            await _fire_hook(
                self.hooks.on_delta,
                DeltaEvent(step_name=self.name, attempt=attempt, delta=delta),
            )
