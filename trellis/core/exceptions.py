"""
Custom exceptions for the Trellis extraction engine.

Provides specific exception types for different failure modes
with helpful error messages and context.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from ..schemas.field import Field


class TrellisError(Exception):
    """Base exception for all Trellis errors.

    Attributes:
        message: Human-readable error description.
        field: Field name involved (``None`` if not field-specific).
    """

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field

        # Build descriptive error message
        error_parts = [message]
        if field is not None:
            error_parts.append(f"Field: {field}")

        super().__init__(" | ".join(error_parts))


class SignatureError(TrellisError):
    """Raised when a signature is composed of fields it cannot hold.

    Common causes:
        - An ``image`` field declared as an output.
        - ``from_json`` given data that is not a serialized signature.
    """

    pass


class ConfigurationError(TrellisError):
    """Raised when configuration is invalid."""

    pass


class ExtractionError(TrellisError):
    """Base class for failures while extracting values from model output.

    Attributes:
        fields: The output fields the failure is about.
        value: The raw text (or decoded value) that triggered the failure.
    """

    def __init__(
        self,
        message: str,
        fields: Sequence[Field] = (),
        value: Any = None,
    ):
        self.fields = list(fields)
        self.value = value
        names = ", ".join(f.name for f in self.fields) or None
        super().__init__(message, field=names)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def to_feedback(self) -> str:
        """Render a correction message suitable for re-prompting a model."""
        lines = [f"Your response was invalid: {self.message}."]
        for f in self.fields:
            label = f"`{f.name}`"
            if f.field_description:
                label += f" ({f.field_description})"
            lines.append(f"- {label}")
        if self.value is not None:
            lines.append(f"Offending value: {str(self.value)[:200]}")
        lines.append(
            "Please respond again, wrapping each output field in "
            "<fieldName>...</fieldName> tags in the declared order."
        )
        return "\n".join(lines)


class MissingFieldsError(ExtractionError):
    """Raised when one or more required output fields are absent.

    All missing fields are reported together, never one at a time.
    """

    pass


class InvalidValueError(ExtractionError):
    """Raised when a field's raw text cannot be converted to its type.

    Covers bad numbers, booleans, dates, enum members, arrays and JSON.

    Attributes:
        reason: Short description of what was wrong with the value.
    """

    def __init__(self, field: Field, value: Any, reason: str):
        self.reason = reason
        super().__init__(reason, fields=[field], value=value)


class GenerationError(TrellisError):
    """Raised when a generation step fails after exhausting retries.

    Attributes:
        step_name: Name of the step that failed (``None`` if unknown).
        last_error: The extraction error from the final attempt.
    """

    def __init__(
        self,
        message: str,
        step_name: str | None = None,
        last_error: BaseException | None = None,
        **kwargs: Any,
    ):
        self.step_name = step_name
        self.last_error = last_error
        super().__init__(message, **kwargs)
