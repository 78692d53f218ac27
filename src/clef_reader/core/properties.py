"""Convert JSON property values into typed property values."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .fields import json_text
from .models import (
    LogEventProperty,
    PropertyValue,
    RenderableScalarValue,
    Rendering,
    ScalarValue,
    SequenceValue,
    StructureValue,
)

TYPE_TAG_PROPERTY_NAME = "$type"
INVALID_PROPERTY_NAME_SUBSTITUTE = "(unnamed)"


def is_valid_name(name: object) -> bool:
    return isinstance(name, str) and bool(name.strip())


def create_property(
    name: object, value: object, renderings: Sequence[Rendering] = ()
) -> LogEventProperty:
    """Build a top-level property, substituting a placeholder for unusable names."""
    # The format does not forbid empty names, but they cannot be looked up or rendered.
    if not is_valid_name(name):
        name = INVALID_PROPERTY_NAME_SUBSTITUTE
    return LogEventProperty(name, create_property_value(value, renderings))


def create_property_value(value: object, renderings: Sequence[Rendering] = ()) -> PropertyValue:
    if value is None:
        return ScalarValue(None)

    if isinstance(value, Mapping):
        type_tag = value.get(TYPE_TAG_PROPERTY_NAME)
        return StructureValue(
            properties=tuple(
                LogEventProperty(k, create_property_value(v))
                for k, v in value.items()
                if k != TYPE_TAG_PROPERTY_NAME
            ),
            type_tag=None if type_tag is None else json_text(type_tag),
        )

    if isinstance(value, (list, tuple)):
        return SequenceValue(tuple(create_property_value(v) for v in value))

    if renderings:
        return RenderableScalarValue(value, tuple(renderings))
    return ScalarValue(value)
