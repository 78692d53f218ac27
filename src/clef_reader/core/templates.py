"""Message template parsing and rendering.

Templates use the structured-logging placeholder syntax: `{name}`, `{name:format}`,
`{name,alignment}`, `{@name}` (destructure) and `{$name}` (stringify). Doubled braces
(`{{`, `}}`) are literal braces.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union

_NAME_RE = re.compile(r"^\w+$")
_ALIGNMENT_RE = re.compile(r"^-?\d+$")


class Destructuring(str, Enum):
    """Placeholder prefix hints."""

    DEFAULT = ""
    STRINGIFY = "$"
    DESTRUCTURE = "@"


class Renderable(Protocol):
    def render(self, fmt: str | None = None) -> str: ...


@dataclass(frozen=True, slots=True)
class TextToken:
    """Literal text, already unescaped."""

    text: str

    def render(self, properties: Mapping[str, Renderable]) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class PropertyToken:
    """A named placeholder; `raw_text` is the placeholder exactly as written."""

    property_name: str
    raw_text: str
    format: str | None = None
    alignment: int | None = None
    destructuring: Destructuring = Destructuring.DEFAULT

    def render(self, properties: Mapping[str, Renderable]) -> str:
        value = properties.get(self.property_name)
        if value is None:
            return self.raw_text
        out = value.render(self.format)
        if self.alignment is not None:
            width = abs(self.alignment)
            out = out.ljust(width) if self.alignment < 0 else out.rjust(width)
        return out

    def __str__(self) -> str:
        return self.raw_text


MessageTemplateToken = Union[TextToken, PropertyToken]


@dataclass(frozen=True, slots=True)
class MessageTemplate:
    text: str
    tokens: tuple[MessageTemplateToken, ...] = ()

    @property
    def property_tokens(self) -> tuple[PropertyToken, ...]:
        return tuple(t for t in self.tokens if isinstance(t, PropertyToken))

    def render(self, properties: Mapping[str, Renderable]) -> str:
        """Render tokens in order; unknown placeholders render as written."""
        return "".join(t.render(properties) for t in self.tokens)


EMPTY_TEMPLATE = MessageTemplate("", ())


def escape(text: str) -> str:
    """Escape braces so that `text` parses as a single literal."""
    return text.replace("{", "{{").replace("}", "}}")


def _parse_property(raw: str) -> PropertyToken | None:
    """Parse `{...}` into a property token, or None when it is not a valid placeholder."""
    content = raw[1:-1]
    if not content:
        return None

    destructuring = Destructuring.DEFAULT
    if content[0] in ("@", "$"):
        destructuring = Destructuring(content[0])
        content = content[1:]

    fmt: str | None = None
    if ":" in content:
        content, fmt = content.split(":", 1)
        if not fmt:
            return None

    alignment: int | None = None
    if "," in content:
        content, align_text = content.split(",", 1)
        align_text = align_text.strip()
        if not _ALIGNMENT_RE.match(align_text):
            return None
        alignment = int(align_text)

    if not _NAME_RE.match(content):
        return None

    return PropertyToken(
        property_name=content,
        raw_text=raw,
        format=fmt,
        alignment=alignment,
        destructuring=destructuring,
    )


def parse_template(text: str) -> MessageTemplate:
    """Split a template into literal text and placeholder tokens.

    Malformed placeholders are kept as literal text rather than rejected.
    """
    tokens: list[MessageTemplateToken] = []
    buf: list[str] = []

    def flush() -> None:
        if buf:
            tokens.append(TextToken("".join(buf)))
            buf.clear()

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "{":
            if i + 1 < n and text[i + 1] == "{":
                buf.append("{")
                i += 2
                continue
            end = text.find("}", i + 1)
            if end == -1:
                buf.append(text[i:])
                break
            inner_open = text.find("{", i + 1, end)
            if inner_open != -1:
                buf.append(text[i:inner_open])
                i = inner_open
                continue
            raw = text[i : end + 1]
            token = _parse_property(raw)
            if token is None:
                buf.append(raw)
            else:
                flush()
                tokens.append(token)
            i = end + 1
        elif ch == "}":
            buf.append("}")
            i += 2 if i + 1 < n and text[i + 1] == "}" else 1
        else:
            buf.append(ch)
            i += 1

    flush()
    return MessageTemplate(text, tuple(tokens))
