"""Signature — ordered input/output field contract with a content hash.

A Signature is built up by appending fields, then treated as read-only while
extraction runs. Every mutation re-validates the fields and recomputes both
the content hash and the canonical string form::

    "Summarize a review" review:string -> summary:string, score?:number

The hash is a stable SHA-256 over the description and both field lists, so
two signatures with the same final fields share an identity no matter in
which order they were mutated.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from ..core.exceptions import SignatureError
from ..utils.hashing import canonical_json, sha256_digest
from .field import BaseField, Field, parse_field

FieldLike = Union[BaseField, Mapping[str, Any]]


class Signature:
    """Declarative schema of ordered typed input/output fields.

    Args:
        description: Optional task description.
        input_fields: Fields (or field spec dicts) supplied by the caller.
        output_fields: Fields (or field spec dicts) the model must produce.

    Raises:
        SignatureError: An output field has a type outputs cannot hold.
        pydantic.ValidationError: A field spec dict is invalid.
    """

    def __init__(
        self,
        description: Optional[str] = None,
        input_fields: Iterable[FieldLike] = (),
        output_fields: Iterable[FieldLike] = (),
    ) -> None:
        self._description = description
        self._input_fields: list[Field] = [parse_field(f) for f in input_fields]
        self._output_fields: list[Field] = [parse_field(f) for f in output_fields]
        self._sig_hash = ""
        self._sig_string = ""
        self._update_hash()

    @classmethod
    def from_signature(cls, other: Signature) -> Signature:
        """Copy constructor. Fields are immutable, so the lists are shallow-copied."""
        if not isinstance(other, Signature):
            raise SignatureError(f"invalid signature argument: {other!r}")
        return cls(
            description=other.description,
            input_fields=other.input_fields,
            output_fields=other.output_fields,
        )

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Signature:
        """Rebuild a signature from :meth:`to_json` output."""
        try:
            return cls(
                description=data.get("description"),
                input_fields=data.get("input_fields", ()),
                output_fields=data.get("output_fields", ()),
            )
        except AttributeError as exc:
            raise SignatureError(f"invalid signature data: {exc}") from exc

    # -- mutation ----------------------------------------------------------

    def set_description(self, description: Optional[str]) -> None:
        self._description = description
        self._update_hash()

    def add_input_field(self, field: FieldLike) -> None:
        self._apply(inputs=[*self._input_fields, parse_field(field)])

    def add_output_field(self, field: FieldLike) -> None:
        self._apply(outputs=[*self._output_fields, parse_field(field)])

    def set_input_fields(self, fields: Iterable[FieldLike]) -> None:
        self._apply(inputs=[parse_field(f) for f in fields])

    def set_output_fields(self, fields: Iterable[FieldLike]) -> None:
        self._apply(outputs=[parse_field(f) for f in fields])

    def _apply(
        self,
        inputs: Optional[list[Field]] = None,
        outputs: Optional[list[Field]] = None,
    ) -> None:
        # Validate before committing so a rejected field leaves us unchanged
        _validate_output_fields(outputs if outputs is not None else self._output_fields)
        if inputs is not None:
            self._input_fields = inputs
        if outputs is not None:
            self._output_fields = outputs
        self._update_hash()

    def _update_hash(self) -> None:
        _validate_output_fields(self._output_fields)

        self._sig_hash = sha256_digest(
            self._description or "",
            canonical_json([_dump_field(f) for f in self._input_fields]),
            canonical_json([_dump_field(f) for f in self._output_fields]),
        )
        self._sig_string = render_signature(
            self._description, self._input_fields, self._output_fields
        )

    # -- access ------------------------------------------------------------

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def input_fields(self) -> tuple[Field, ...]:
        return tuple(self._input_fields)

    @property
    def output_fields(self) -> tuple[Field, ...]:
        return tuple(self._output_fields)

    @property
    def content_hash(self) -> str:
        """SHA-256 identity of this signature, for caching and memoization."""
        return self._sig_hash

    def get_output_field(self, name: str) -> Optional[Field]:
        for f in self._output_fields:
            if f.name == name:
                return f
        return None

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self._sig_hash,
            "description": self._description,
            "input_fields": [_dump_field(f) for f in self._input_fields],
            "output_fields": [_dump_field(f) for f in self._output_fields],
        }

    def __str__(self) -> str:
        return self._sig_string

    def __repr__(self) -> str:
        return f"Signature({self._sig_string!r})"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _dump_field(field: Field) -> dict[str, Any]:
    return field.model_dump(mode="json", exclude_none=True)


def _validate_output_fields(fields: Sequence[Field]) -> None:
    for f in fields:
        if f.type == "image":
            raise SignatureError(
                "Image type is not supported in output fields.", field=f.name
            )


def render_field(field: Field) -> str:
    """Render ``name[?][:type[[]]] ["description"]``."""
    result = field.name
    if field.is_optional:
        result += "?"
    result += ":" + field.type
    if field.is_array:
        result += "[]"
    if field.field_description:
        result += f' "{field.field_description}"'
    return result


def render_signature(
    description: Optional[str],
    input_fields: Sequence[Field],
    output_fields: Sequence[Field],
) -> str:
    """Render the canonical ``"description" in1, in2 -> out1, out2`` form."""
    description_part = f'"{description}"' if description else ""
    inputs = ", ".join(render_field(f) for f in input_fields)
    outputs = ", ".join(render_field(f) for f in output_fields)
    return f"{description_part} {inputs} -> {outputs}"
