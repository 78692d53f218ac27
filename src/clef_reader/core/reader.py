"""Line-oriented readers for newline-delimited CLEF streams.

Each non-blank line holds exactly one JSON object. Blank and whitespace-only lines are
skipped, but still counted so that errors point at the physical line in the source.
"""

from __future__ import annotations

import gzip
import inspect
import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Protocol, TextIO

import aiofiles
from aiofiles.threadpool import wrap

from .config import ReaderConfig, resolve_reader_config
from .decoder import load_object, read_from_dict
from .models import InvalidDataError, LogEvent

logger = logging.getLogger(__name__)


class AsyncTextSource(Protocol):
    async def readline(self) -> str: ...

    def close(self) -> Any: ...


def _parse_line(line: str, line_number: int) -> LogEvent:
    return read_from_dict(load_object(line, line_number), line_number)


class LogEventReader:
    """Read events from a text source, one JSON document per line.

    Not safe for concurrent use; create one reader per source.
    """

    def __init__(self, text: TextIO) -> None:
        if text is None:
            raise TypeError("text must not be None")
        self._text = text
        self._line_number = 0
        self._closed = False

    @property
    def line_number(self) -> int:
        """Number of lines consumed so far, blank lines included."""
        return self._line_number

    def try_read(self) -> LogEvent | None:
        """Return the next event, or None at end of input.

        Raises InvalidDataError if the next non-blank line cannot be decoded.
        """
        while True:
            line = self._text.readline()
            if not line:
                logger.debug("End of input after %s lines", self._line_number)
                return None
            self._line_number += 1
            if line.strip():
                return _parse_line(line, self._line_number)

    def __iter__(self) -> Iterator[LogEvent]:
        while True:
            evt = self.try_read()
            if evt is None:
                return
            yield evt

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._text.close()

    def __enter__(self) -> LogEventReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class AsyncLogEventReader:
    """Async counterpart of LogEventReader; `readline` is the only suspension point.

    The line counter only advances once a line has been read, so a cancelled
    `try_read` leaves it consistent.
    """

    def __init__(self, text: AsyncTextSource) -> None:
        if text is None:
            raise TypeError("text must not be None")
        self._text = text
        self._line_number = 0
        self._closed = False

    @property
    def line_number(self) -> int:
        return self._line_number

    async def try_read(self) -> LogEvent | None:
        while True:
            line = await self._text.readline()
            if not line:
                logger.debug("End of input after %s lines", self._line_number)
                return None
            self._line_number += 1
            if line.strip():
                return _parse_line(line, self._line_number)

    async def __aiter__(self) -> AsyncIterator[LogEvent]:
        while True:
            evt = await self.try_read()
            if evt is None:
                return
            yield evt

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        result = self._text.close()
        if inspect.isawaitable(result):
            await result

    async def __aenter__(self) -> AsyncLogEventReader:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def _check_path(log_path: str | Path) -> Path:
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")
    return path


def open_reader(log_path: str | Path, config: ReaderConfig | None = None) -> LogEventReader:
    """Open a plain or gzip-compressed CLEF file for reading."""
    path = _check_path(log_path)
    cfg = resolve_reader_config(config)
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=cfg.encoding, errors=cfg.decode_errors)
    else:
        f = path.open(encoding=cfg.encoding, errors=cfg.decode_errors)
    return LogEventReader(f)


@asynccontextmanager
async def open_async_reader(
    log_path: str | Path, config: ReaderConfig | None = None
) -> AsyncIterator[AsyncLogEventReader]:
    """Open a plain or gzip-compressed CLEF file for async reading."""
    path = _check_path(log_path)
    cfg = resolve_reader_config(config)
    if path.suffix.lower() == ".gz":
        f = wrap(gzip.open(path, mode="rt", encoding=cfg.encoding, errors=cfg.decode_errors))
    else:
        f = await aiofiles.open(path, encoding=cfg.encoding, errors=cfg.decode_errors)
    reader = AsyncLogEventReader(f)
    try:
        yield reader
    finally:
        await reader.aclose()


def iter_events(
    log_path: str | Path,
    *,
    config: ReaderConfig | None = None,
    skip_invalid: bool | None = None,
) -> Iterator[LogEvent]:
    """Yield every event in a file.

    By default the first malformed line raises; with `skip_invalid` it is logged and skipped.
    """
    cfg = resolve_reader_config(config)
    skip = cfg.skip_invalid if skip_invalid is None else skip_invalid
    with open_reader(log_path, cfg) as reader:
        while True:
            try:
                evt = reader.try_read()
            except InvalidDataError as exc:
                if not skip:
                    raise
                logger.warning("Skipping line %s: %s", exc.line_number, exc)
                continue
            if evt is None:
                return
            yield evt


async def aiter_events(
    log_path: str | Path,
    *,
    config: ReaderConfig | None = None,
    skip_invalid: bool | None = None,
) -> AsyncIterator[LogEvent]:
    """Async variant of iter_events."""
    cfg = resolve_reader_config(config)
    skip = cfg.skip_invalid if skip_invalid is None else skip_invalid
    async with open_async_reader(log_path, cfg) as reader:
        while True:
            try:
                evt = await reader.try_read()
            except InvalidDataError as exc:
                if not skip:
                    raise
                logger.warning("Skipping line %s: %s", exc.line_number, exc)
                continue
            if evt is None:
                return
            yield evt


async def get_events(log_path: str | Path, **iter_kwargs) -> list[LogEvent]:
    """Collect aiter_events into a list."""
    return [evt async for evt in aiter_events(log_path, **iter_kwargs)]
