"""Pydantic models for signatures and their fields.

- Field kinds: StringField, NumberField, ... (discriminated on ``type``)
- EnumValueSet: LiteralEnumSet or AlgebraicEnumSet
- Signature: ordered input/output fields with a content hash

Example:
    from trellis.schemas import Signature, StringField, NumberField

    sig = Signature(
        description="Summarize a review",
        input_fields=[StringField(name="review")],
        output_fields=[
            StringField(name="summary"),
            NumberField(name="score", is_optional=True),
        ],
    )
    str(sig)          # '"Summarize a review" review:string -> summary:string, score?:number'
    sig.content_hash  # stable SHA-256 identity
"""

from .field import (
    AlgebraicEnumSet,
    AudioField,
    BaseField,
    BooleanField,
    CodeField,
    DateField,
    DateTimeField,
    EnumField,
    EnumValueSet,
    Field,
    ImageField,
    JsonField,
    LiteralEnumSet,
    NumberField,
    Primitive,
    StringField,
    VideoField,
    parse_field,
)
from .signature import Signature, render_field, render_signature

__all__ = [
    "AlgebraicEnumSet",
    "AudioField",
    "BaseField",
    "BooleanField",
    "CodeField",
    "DateField",
    "DateTimeField",
    "EnumField",
    "EnumValueSet",
    "Field",
    "ImageField",
    "JsonField",
    "LiteralEnumSet",
    "NumberField",
    "Primitive",
    "Signature",
    "StringField",
    "VideoField",
    "parse_field",
    "render_field",
    "render_signature",
]
