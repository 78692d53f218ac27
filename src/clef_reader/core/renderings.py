"""Recover cached placeholder renderings from the property bag."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence

from .fields import PROPERTIES, json_text
from .models import InvalidDataError, Rendering
from .templates import MessageTemplate


def iter_references(text: str) -> Iterator[str]:
    """Yield the contents of each non-empty `{...}` span in `text`.

    Spans do not nest: a span ends at the first `}` after its `{`.
    """
    start = text.find("{")
    while start != -1:
        end = text.find("}", start + 1)
        if end == -1:
            return
        if end > start + 1:
            yield text[start + 1 : end]
            start = text.find("{", end + 1)
        else:
            start = text.find("{", start + 1)


def reference_property_name(reference: str) -> str:
    """`@name,5:000` -> `name`."""
    name = reference
    if name[:1] in ("@", "$"):
        name = name[1:]
    for sep in (",", ":"):
        idx = name.find(sep)
        if idx != -1:
            name = name[:idx]
    return name


def collect_renderings(
    line_number: int, template: MessageTemplate, properties: Mapping[str, object]
) -> tuple[Rendering, ...]:
    """Build one rendering per placeholder reference found in the template."""
    out: list[Rendering] = []
    for token in template.property_tokens:
        for reference in iter_references(str(token)):
            name = reference_property_name(reference)
            if name not in properties:
                raise InvalidDataError(
                    f"The `{PROPERTIES}` value on line {line_number} does not include "
                    f"the `{name}` property referenced by the message template.",
                    line_number,
                )
            out.append(Rendering(reference, "", json_text(properties[name])))
    return tuple(out)


def group_renderings(renderings: Sequence[Rendering]) -> dict[str, tuple[Rendering, ...]]:
    """Partition renderings by the property name they refer to."""
    grouped: dict[str, list[Rendering]] = {}
    for rendering in renderings:
        grouped.setdefault(reference_property_name(rendering.name), []).append(rendering)
    return {name: tuple(items) for name, items in grouped.items()}
