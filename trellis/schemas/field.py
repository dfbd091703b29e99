"""Field models: one named, typed slot in a Signature.

Each field kind is its own frozen Pydantic model discriminated on ``type``.
Only :class:`EnumField` carries an ``enum_value_set`` and only
:class:`JsonField` carries nested ``schema_fields``, so conversion code can
dispatch on the kind without probing for optional attributes.

Example::

    from trellis.schemas import StringField, EnumField, parse_field

    summary = StringField(name="summary", field_description="One paragraph")
    tone = EnumField(name="tone", enum_value_set=["positive", "negative"])
    score = parse_field({"name": "score", "type": "number", "is_optional": True})
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator
from pydantic import Field as PydanticField

Primitive = Literal[
    "string",
    "number",
    "boolean",
    "json",
    "image",
    "audio",
    "video",
    "date",
    "datetime",
    "enum",
    "code",
]

# Type primitive names and other words too vague to be a field name
RESERVED_FIELD_NAMES = frozenset(
    {
        "text",
        "object",
        "image",
        "string",
        "number",
        "boolean",
        "json",
        "array",
        "datetime",
        "date",
        "time",
        "type",
        "class",
        "video",
        "audio",
        "enum",
        "code",
    }
)

_CAMEL_CASE = re.compile(r"^[a-z][a-zA-Z0-9]*$")
_SNAKE_CASE = re.compile(r"^[a-z]+(_[a-z0-9]+)*$")


def is_valid_field_name_case(name: str) -> bool:
    """True if *name* is camelCase or snake_case."""
    return bool(_CAMEL_CASE.match(name) or _SNAKE_CASE.match(name))


# ---------------------------------------------------------------------------
# Enum value sets
# ---------------------------------------------------------------------------


class LiteralEnumSet(BaseModel):
    """Closed set of allowed string values."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["literal"] = "literal"
    values: tuple[str, ...]

    @field_validator("values")
    @classmethod
    def validate_values(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("literal enum value set cannot be empty")
        return v


class AlgebraicEnumSet(BaseModel):
    """Set of primitive type tags a polymorphic slot may hold.

    Not validated against text; media-aware callers consume the tags.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["algebraic"] = "algebraic"
    values: tuple[Primitive, ...]


EnumValueSet = Annotated[
    Union[LiteralEnumSet, AlgebraicEnumSet],
    PydanticField(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Field kinds
# ---------------------------------------------------------------------------


class BaseField(BaseModel):
    """Attributes shared by every field kind.

    Attributes:
        name: camelCase or snake_case identifier, also the wire tag name.
        field_description: Optional human description, rendered in the
            canonical signature string.
        is_array: The value is a list of the field's type.
        is_optional: The value may be absent.
        is_internal: Working field (e.g. reasoning) hidden from consumers;
            never streamed and never required.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    field_description: Optional[str] = None
    is_array: bool = False
    is_optional: bool = False
    is_internal: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v:
            raise ValueError("Field name cannot be blank")
        if not is_valid_field_name_case(v):
            raise ValueError(
                f"Invalid field name '{v}', it must be camel case or snake case"
            )
        if v in RESERVED_FIELD_NAMES:
            raise ValueError(
                f"Invalid field name '{v}', please make it more descriptive "
                "(eg. companyDescription)"
            )
        return v

    @property
    def is_required(self) -> bool:
        """Whether extraction must produce a value for this field."""
        return not (self.is_optional or self.is_internal)


class StringField(BaseField):
    type: Literal["string"] = "string"


class NumberField(BaseField):
    type: Literal["number"] = "number"


class BooleanField(BaseField):
    type: Literal["boolean"] = "boolean"


class DateField(BaseField):
    type: Literal["date"] = "date"


class DateTimeField(BaseField):
    type: Literal["datetime"] = "datetime"


class CodeField(BaseField):
    type: Literal["code"] = "code"


class ImageField(BaseField):
    type: Literal["image"] = "image"


class AudioField(BaseField):
    type: Literal["audio"] = "audio"


class VideoField(BaseField):
    type: Literal["video"] = "video"


class EnumField(BaseField):
    """Field restricted to an :data:`EnumValueSet`.

    A plain list is accepted as shorthand for a literal set::

        EnumField(name="tone", enum_value_set=["positive", "negative"])
    """

    type: Literal["enum"] = "enum"
    enum_value_set: EnumValueSet

    @field_validator("enum_value_set", mode="before")
    @classmethod
    def expand_shorthand(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return {"type": "literal", "values": tuple(v)}
        return v


class JsonField(BaseField):
    """Free-form JSON value with an optional nested schema of child fields."""

    type: Literal["json"] = "json"
    schema_fields: Optional[tuple[Field, ...]] = None


Field = Annotated[
    Union[
        StringField,
        NumberField,
        BooleanField,
        JsonField,
        ImageField,
        AudioField,
        VideoField,
        DateField,
        DateTimeField,
        EnumField,
        CodeField,
    ],
    PydanticField(discriminator="type"),
]

JsonField.model_rebuild()

_FIELD_ADAPTER: TypeAdapter[Any] = TypeAdapter(Field)


def parse_field(spec: BaseField | Mapping[str, Any]) -> Field:
    """Build a Field from a spec dict, or return a Field unchanged.

    ``type`` defaults to ``"string"`` when the dict omits it.

    Raises:
        pydantic.ValidationError: The dict does not describe a valid field.
        TypeError: *spec* is neither a field nor a mapping.
    """
    if isinstance(spec, BaseField):
        return spec  # type: ignore[return-value]
    if not isinstance(spec, Mapping):
        raise TypeError(f"Expected a Field or a field spec dict, got {type(spec).__name__}")
    data = dict(spec)
    data.setdefault("type", "string")
    return _FIELD_ADAPTER.validate_python(data)
