"""Reserved CLEF field names and typed field extraction helpers."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from datetime import UTC, datetime

from .models import InvalidDataError, LogEventLevel

TIMESTAMP = "Timestamp"
MESSAGE_TEMPLATE = "MessageTemplate"
LEVEL = "Level"
EXCEPTION = "Exception"
PROPERTIES = "Properties"
EVENT_ID = "@i"
MESSAGE = "@m"
TRACE_ID = "@tr"
SPAN_ID = "@sp"

_MAX_EVENT_ID = 0xFFFFFFFF
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")

_LEVELS_BY_NAME = {level.name: level for level in LogEventLevel}


def json_text(value: object) -> str:
    """Return strings as-is and any other JSON value as its JSON text."""
    if isinstance(value, str):
        return value
    if isinstance(value, datetime):
        return value.isoformat()
    return json.dumps(value, ensure_ascii=False)


def get_optional_string(line_number: int, data: Mapping[str, object], field: str) -> str | None:
    """Return a string field, None when absent or null, or raise if it has another type."""
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidDataError(
            f"The value of `{field}` on line {line_number} is not in a supported format.",
            line_number,
        )
    return value


def get_optional_event_id(
    line_number: int, data: Mapping[str, object], field: str = EVENT_ID
) -> str | int | None:
    """Event ids are strings or unsigned 32-bit integers."""
    value = data.get(field)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= _MAX_EVENT_ID:
        return value
    raise InvalidDataError(
        f"The value of `{field}` on line {line_number} is not in a supported format.",
        line_number,
    )


def parse_timestamp(text: str) -> datetime | None:
    """Parse an ISO8601 timestamp. If the offset is missing, assume UTC."""
    s = text.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    # datetime only keeps microseconds; writers commonly emit 100ns precision.
    s = _FRACTION_RE.sub(r"\1", s, count=1)
    try:
        ts = datetime.fromisoformat(s)
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts


def get_required_timestamp(
    line_number: int, data: Mapping[str, object], field: str = TIMESTAMP
) -> datetime:
    """Return the event timestamp; datetime literals are used as-is."""
    value = data.get(field)
    if value is None:
        raise InvalidDataError(
            f"The data on line {line_number} does not include the required `{field}` field.",
            line_number,
        )

    if isinstance(value, datetime):
        return value

    if not isinstance(value, str):
        raise InvalidDataError(
            f"The value of `{field}` on line {line_number} is not in a supported format.",
            line_number,
        )

    ts = parse_timestamp(value)
    if ts is None:
        raise InvalidDataError(
            f"The value of `{field}` on line {line_number} is not in a supported timestamp format.",
            line_number,
        )
    return ts


def parse_level(line_number: int, text: str) -> LogEventLevel:
    """Match a level name case-insensitively; numeric values are accepted too."""
    name = text.strip().upper()
    level = _LEVELS_BY_NAME.get(name)
    if level is not None:
        return level
    if name.isdigit():
        try:
            return LogEventLevel(int(name))
        except ValueError:
            pass
    raise InvalidDataError(
        f"The `{LEVEL}` value on line {line_number} is not a valid `LogEventLevel`.",
        line_number,
    )
