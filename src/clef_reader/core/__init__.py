"""CLEF decoding: models, field helpers, property builder and readers."""

from __future__ import annotations

from .decoder import read_from_dict, read_from_string
from .models import (
    InvalidDataError,
    LogEvent,
    LogEventLevel,
    LogEventProperty,
    RenderableScalarValue,
    Rendering,
    ScalarValue,
    SequenceValue,
    SpanId,
    StructureValue,
    TraceId,
)
from .reader import (
    AsyncLogEventReader,
    LogEventReader,
    aiter_events,
    get_events,
    iter_events,
    open_async_reader,
    open_reader,
)
from .templates import MessageTemplate, PropertyToken, TextToken, parse_template

__all__ = [
    "AsyncLogEventReader",
    "InvalidDataError",
    "LogEvent",
    "LogEventLevel",
    "LogEventProperty",
    "LogEventReader",
    "MessageTemplate",
    "PropertyToken",
    "RenderableScalarValue",
    "Rendering",
    "ScalarValue",
    "SequenceValue",
    "SpanId",
    "StructureValue",
    "TextToken",
    "TraceId",
    "aiter_events",
    "get_events",
    "iter_events",
    "open_async_reader",
    "open_reader",
    "parse_template",
    "read_from_dict",
    "read_from_string",
]
