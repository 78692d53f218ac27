"""Core data models for decoded log events."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from types import MappingProxyType
from typing import ClassVar, Union

from .templates import MessageTemplate


class InvalidDataError(ValueError):
    """Raised when a document or line cannot be decoded into a log event."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number


class LogEventLevel(IntEnum):
    """Event severities, least to most severe."""

    VERBOSE = 0
    DEBUG = 1
    INFORMATION = 2
    WARNING = 3
    ERROR = 4
    FATAL = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()


_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


def _parse_hex_id(text: str, width: int, kind: str) -> str:
    if len(text) != width or not _HEX_RE.match(text):
        raise ValueError(f"{kind} must be {width} hexadecimal characters, got {text!r}")
    return text.lower()


@dataclass(frozen=True, slots=True)
class TraceId:
    """W3C trace identifier (16 bytes, hex encoded). The default instance is empty."""

    WIDTH: ClassVar[int] = 32

    hex: str = "0" * 32

    @classmethod
    def from_string(cls, text: str) -> TraceId:
        return cls(_parse_hex_id(text, cls.WIDTH, "trace id"))

    @property
    def is_empty(self) -> bool:
        return self.hex == "0" * self.WIDTH

    def __str__(self) -> str:
        return self.hex


@dataclass(frozen=True, slots=True)
class SpanId:
    """W3C span identifier (8 bytes, hex encoded). The default instance is empty."""

    WIDTH: ClassVar[int] = 16

    hex: str = "0" * 16

    @classmethod
    def from_string(cls, text: str) -> SpanId:
        return cls(_parse_hex_id(text, cls.WIDTH, "span id"))

    @property
    def is_empty(self) -> bool:
        return self.hex == "0" * self.WIDTH

    def __str__(self) -> str:
        return self.hex


@dataclass(frozen=True, slots=True)
class Rendering:
    """A pre-rendered placeholder value cached alongside the raw property."""

    name: str
    format: str
    rendered: str


@dataclass(frozen=True, slots=True)
class ScalarValue:
    """A single primitive: None, bool, number or string."""

    value: object

    def render(self, fmt: str | None = None) -> str:
        """Render the primitive, honoring `fmt` where the value supports it."""
        v = self.value
        if v is None:
            return "null"
        if isinstance(v, str):
            if fmt == "l":
                return v
            return '"' + v.replace('"', '\\"') + '"'
        if isinstance(v, bool):
            return str(v)
        if fmt:
            try:
                return format(v, fmt)
            except (TypeError, ValueError):
                return str(v)
        return str(v)


@dataclass(frozen=True, slots=True)
class RenderableScalarValue(ScalarValue):
    """Scalar that replays cached renderings for matching formats."""

    renderings: tuple[Rendering, ...] = ()

    def render(self, fmt: str | None = None) -> str:
        if fmt is not None:
            # Later renderings for the same format win.
            for rendering in reversed(self.renderings):
                if rendering.format == fmt:
                    return rendering.rendered
        return ScalarValue.render(self, fmt)


@dataclass(frozen=True, slots=True)
class StructureValue:
    """Named members plus an optional type tag. Member names may repeat."""

    properties: tuple[LogEventProperty, ...] = ()
    type_tag: str | None = None

    def render(self, fmt: str | None = None) -> str:
        members = ", ".join(f"{p.name}: {p.value.render()}" for p in self.properties)
        body = f"{{ {members} }}" if members else "{ }"
        return f"{self.type_tag} {body}" if self.type_tag is not None else body


@dataclass(frozen=True, slots=True)
class SequenceValue:
    """An ordered list of property values."""

    elements: tuple[PropertyValue, ...] = ()

    def render(self, fmt: str | None = None) -> str:
        return "[" + ", ".join(e.render() for e in self.elements) + "]"


PropertyValue = Union[ScalarValue, StructureValue, SequenceValue]


@dataclass(frozen=True, slots=True)
class LogEventProperty:
    name: str
    value: PropertyValue


@dataclass(frozen=True, slots=True)
class LogEvent:
    """A decoded log event. Properties keep bag order and have unique names."""

    timestamp: datetime
    level: LogEventLevel
    exception: str | None
    message_template: MessageTemplate
    properties: tuple[LogEventProperty, ...] = ()
    trace_id: TraceId = field(default_factory=TraceId)
    span_id: SpanId = field(default_factory=SpanId)

    @property
    def property_map(self) -> Mapping[str, PropertyValue]:
        return MappingProxyType({p.name: p.value for p in self.properties})

    def get_property(self, name: str) -> PropertyValue | None:
        for p in self.properties:
            if p.name == name:
                return p.value
        return None

    def render_message(self) -> str:
        """Render the message template against this event's properties."""
        return self.message_template.render(self.property_map)
