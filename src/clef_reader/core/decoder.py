"""Assemble log events from decoded CLEF JSON objects.

This module is the main integration point: it validates the reserved fields, builds the
message template and property list, and returns a complete `LogEvent` or raises
`InvalidDataError`. Nothing is returned for a partially valid document.
"""

from __future__ import annotations

import json
from collections.abc import Mapping

from . import fields
from .models import (
    InvalidDataError,
    LogEvent,
    LogEventLevel,
    LogEventProperty,
    ScalarValue,
    SpanId,
    TraceId,
)
from .properties import create_property
from .renderings import collect_renderings, group_renderings
from .templates import EMPTY_TEMPLATE, escape, parse_template


def load_object(text: str, line_number: int | None = None) -> Mapping[str, object]:
    """Parse one JSON document and require a top-level object."""
    subject = "The document" if line_number is None else f"The data on line {line_number}"
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise InvalidDataError(f"{subject} could not be deserialized.", line_number) from exc

    if not isinstance(data, dict):
        raise InvalidDataError(f"{subject} is not a complete JSON object.", line_number)
    return data


def read_from_string(document: str) -> LogEvent:
    """Read a single log event from a JSON-encoded document."""
    if document is None:
        raise TypeError("document must not be None")
    return read_from_dict(load_object(document))


def read_from_dict(data: Mapping[str, object], line_number: int = 1) -> LogEvent:
    """Read a single log event from an already-deserialized JSON object."""
    if data is None:
        raise TypeError("data must not be None")
    if not isinstance(data, Mapping):
        raise InvalidDataError(f"The data on line {line_number} is not a complete JSON object.", line_number)

    timestamp = fields.get_required_timestamp(line_number, data)

    message_template = fields.get_optional_string(line_number, data, fields.MESSAGE_TEMPLATE)
    if message_template is None:
        message = fields.get_optional_string(line_number, data, fields.MESSAGE)
        if message is not None:
            message_template = escape(message)

    level = LogEventLevel.INFORMATION
    level_text = fields.get_optional_string(line_number, data, fields.LEVEL)
    if level_text is not None:
        level = fields.parse_level(line_number, level_text)

    exception = fields.get_optional_string(line_number, data, fields.EXCEPTION)

    trace_id = TraceId()
    tr = fields.get_optional_string(line_number, data, fields.TRACE_ID)
    if tr is not None:
        try:
            trace_id = TraceId.from_string(tr)
        except ValueError as exc:
            raise InvalidDataError(
                f"The value of `{fields.TRACE_ID}` on line {line_number} is not a valid trace id.",
                line_number,
            ) from exc

    span_id = SpanId()
    sp = fields.get_optional_string(line_number, data, fields.SPAN_ID)
    if sp is not None:
        try:
            span_id = SpanId.from_string(sp)
        except ValueError as exc:
            raise InvalidDataError(
                f"The value of `{fields.SPAN_ID}` on line {line_number} is not a valid span id.",
                line_number,
            ) from exc

    template = EMPTY_TEMPLATE if message_template is None else parse_template(message_template)

    # Names are unique; a later property replaces an earlier one of the same name.
    properties: dict[str, LogEventProperty] = {}

    def add(prop: LogEventProperty) -> None:
        properties.pop(prop.name, None)
        properties[prop.name] = prop

    if fields.PROPERTIES in data:
        bag = data[fields.PROPERTIES]
        if not isinstance(bag, Mapping):
            raise InvalidDataError(
                f"The `{fields.PROPERTIES}` value on line {line_number} is not an object as expected.",
                line_number,
            )

        by_name = group_renderings(collect_renderings(line_number, template, bag))
        for name, value in bag.items():
            add(create_property(name, value, by_name.get(name, ())))

    event_id = fields.get_optional_event_id(line_number, data)
    if event_id is not None:
        add(LogEventProperty(fields.EVENT_ID, ScalarValue(event_id)))

    return LogEvent(
        timestamp=timestamp,
        level=level,
        exception=exception,
        message_template=template,
        properties=tuple(properties.values()),
        trace_id=trace_id,
        span_id=span_id,
    )
