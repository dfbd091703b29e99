"""Lifecycle hooks for generation observability.

Typed event dataclasses + ``GenerationHooks`` container. Hook callables
are optional; ``_fire_hook`` silently catches errors so a failing observer
never breaks a generation.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..utils.logger import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Event dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DeltaEvent:
    """Fired for every partial value drained during a generation attempt."""

    step_name: str
    attempt: int
    delta: dict[str, Any]


@dataclass(frozen=True)
class AttemptFailedEvent:
    """Fired when an attempt's output fails extraction (before any retry)."""

    step_name: str
    attempt: int
    error: BaseException
    content: str
    will_retry: bool


@dataclass(frozen=True)
class GenerationEndEvent:
    """Fired once when ``GenerateStep.run()`` returns or gives up."""

    step_name: str
    attempts: int
    values: dict[str, Any]
    error: BaseException | None
    elapsed_seconds: float


# ---------------------------------------------------------------------------
# GenerationHooks container
# ---------------------------------------------------------------------------


@dataclass
class GenerationHooks:
    """User-facing hook container — pass to ``GenerateStep(hooks=...)``.

    All fields are optional callables. Sync and async callables both work.
    Hook errors are caught and logged; they never crash the generation.
    """

    on_delta: Optional[Callable[[DeltaEvent], Any]] = None
    on_attempt_failed: Optional[Callable[[AttemptFailedEvent], Any]] = None
    on_generation_end: Optional[Callable[[GenerationEndEvent], Any]] = None


# ---------------------------------------------------------------------------
# Fire helper
# ---------------------------------------------------------------------------


async def _fire_hook(hook: Optional[Callable], event: Any) -> None:
    """Call *hook* with *event*, awaiting if async.  Silently catches errors."""
    if hook is None:
        return
    try:
        result = hook(event)
        if inspect.isawaitable(result):
            await result
    except Exception:
        logger.warning("Hook %s raised an exception", hook, exc_info=True)
