"""Reader configuration."""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass, replace

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")
_DECODE_ERRORS = ("strict", "replace", "ignore", "backslashreplace", "surrogateescape")


@dataclass(frozen=True, slots=True)
class ReaderConfig:
    encoding: str = "utf-8-sig"
    decode_errors: str = "replace"

    # Log and skip lines that fail to decode instead of raising.
    skip_invalid: bool = False


def _env_bool(name: str) -> bool | None:
    env = os.getenv(name)
    if env is None or env == "":
        return None
    value = env.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean (true/false)")


def resolve_reader_config(cfg: ReaderConfig | None) -> ReaderConfig:
    """Return config with optional env overrides applied."""
    if cfg is None:
        cfg = ReaderConfig()

    changes: dict[str, object] = {}

    encoding = os.getenv("CLEF_READER_ENCODING")
    if encoding:
        try:
            codecs.lookup(encoding)
        except LookupError as exc:
            raise ValueError(f"CLEF_READER_ENCODING is not a known encoding: {encoding}") from exc
        changes["encoding"] = encoding

    decode_errors = os.getenv("CLEF_READER_DECODE_ERRORS")
    if decode_errors:
        if decode_errors not in _DECODE_ERRORS:
            raise ValueError(
                "CLEF_READER_DECODE_ERRORS must be one of: " + ", ".join(_DECODE_ERRORS)
            )
        changes["decode_errors"] = decode_errors

    skip_invalid = _env_bool("CLEF_READER_SKIP_INVALID")
    if skip_invalid is not None:
        changes["skip_invalid"] = skip_invalid

    if not changes:
        return cfg
    return replace(cfg, **changes)
