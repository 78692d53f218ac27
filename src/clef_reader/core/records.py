"""JSON-friendly export models for decoded events."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .models import LogEvent, PropertyValue, SequenceValue, StructureValue
from .properties import TYPE_TAG_PROPERTY_NAME


def to_plain(value: PropertyValue) -> Any:
    """Convert a property value into plain JSON-compatible data."""
    if isinstance(value, StructureValue):
        out: dict[str, Any] = {}
        if value.type_tag is not None:
            out[TYPE_TAG_PROPERTY_NAME] = value.type_tag
        for p in value.properties:
            out[p.name] = to_plain(p.value)
        return out
    if isinstance(value, SequenceValue):
        return [to_plain(e) for e in value.elements]
    return value.value


class EventRecord(BaseModel):
    timestamp: datetime
    level: str
    message: str = Field(description="Message template rendered against the properties.")
    message_template: str
    exception: str | None = None
    trace_id: str | None = None
    span_id: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_event(cls, event: LogEvent) -> EventRecord:
        return cls(
            timestamp=event.timestamp,
            level=event.level.label,
            message=event.render_message(),
            message_template=event.message_template.text,
            exception=event.exception,
            trace_id=None if event.trace_id.is_empty else str(event.trace_id),
            span_id=None if event.span_id.is_empty else str(event.span_id),
            properties={p.name: to_plain(p.value) for p in event.properties},
        )
