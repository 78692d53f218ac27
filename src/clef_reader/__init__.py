"""Read newline-delimited compact log event (CLEF) JSON into typed log events."""

from __future__ import annotations

from .core import (
    AsyncLogEventReader,
    InvalidDataError,
    LogEvent,
    LogEventLevel,
    LogEventReader,
    aiter_events,
    iter_events,
    open_async_reader,
    open_reader,
    read_from_dict,
    read_from_string,
)

__all__ = [
    "AsyncLogEventReader",
    "InvalidDataError",
    "LogEvent",
    "LogEventLevel",
    "LogEventReader",
    "aiter_events",
    "iter_events",
    "open_async_reader",
    "open_reader",
    "read_from_dict",
    "read_from_string",
]
