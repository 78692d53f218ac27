from __future__ import annotations

import asyncio
import io
import logging
from pathlib import Path

import pytest

from clef_reader.core.config import ReaderConfig
from clef_reader.core.models import InvalidDataError, LogEventLevel
from clef_reader.core.reader import (
    AsyncLogEventReader,
    LogEventReader,
    aiter_events,
    get_events,
    iter_events,
    open_async_reader,
    open_reader,
)

EVENT = '{"Timestamp":"2020-01-01T00:00:00Z"}'


class CountingStringIO(io.StringIO):
    def __init__(self, text: str) -> None:
        super().__init__(text)
        self.close_calls = 0

    def close(self) -> None:
        self.close_calls += 1
        super().close()


class AsyncLines:
    """Minimal async text source."""

    def __init__(self, text: str) -> None:
        self._inner = io.StringIO(text)
        self.closed = 0

    async def readline(self) -> str:
        await asyncio.sleep(0)
        return self._inner.readline()

    async def close(self) -> None:
        self.closed += 1


def test_blank_lines_are_skipped_but_counted() -> None:
    reader = LogEventReader(io.StringIO("\n  \n" + EVENT))
    evt = reader.try_read()
    assert evt is not None
    assert reader.line_number == 3
    assert reader.try_read() is None


def test_error_reports_physical_line_number() -> None:
    reader = LogEventReader(io.StringIO('\n  \n{"Level":"Error"}\n'))
    with pytest.raises(InvalidDataError, match="line 3") as exc:
        reader.try_read()
    assert exc.value.line_number == 3


def test_malformed_line_is_fatal_for_that_call_only() -> None:
    reader = LogEventReader(io.StringIO(EVENT + "\n{not json\n" + EVENT + "\n"))
    assert reader.try_read() is not None
    with pytest.raises(InvalidDataError, match="line 2 could not be deserialized"):
        reader.try_read()
    assert reader.try_read() is not None
    assert reader.line_number == 3
    assert reader.try_read() is None


def test_non_object_line() -> None:
    reader = LogEventReader(io.StringIO('"just a string"\n'))
    with pytest.raises(InvalidDataError, match="line 1 is not a complete JSON object"):
        reader.try_read()


def test_multi_line_object_is_not_supported() -> None:
    reader = LogEventReader(io.StringIO('{"Timestamp":\n"2020-01-01T00:00:00Z"}\n'))
    with pytest.raises(InvalidDataError, match="line 1"):
        reader.try_read()


def test_iteration_and_close_once() -> None:
    text = CountingStringIO(EVENT + "\n\n" + EVENT.replace("}", ',"Level":"Debug"}'))
    with LogEventReader(text) as reader:
        levels = [e.level for e in reader]
        reader.close()
    assert levels == [LogEventLevel.INFORMATION, LogEventLevel.DEBUG]
    assert text.close_calls == 1


@pytest.mark.asyncio
async def test_async_reader_matches_sync() -> None:
    text = "\n" + EVENT + "\n   \n" + EVENT.replace("}", ',"Level":"Fatal"}')
    sync_events = list(LogEventReader(io.StringIO(text)))

    source = AsyncLines(text)
    async with AsyncLogEventReader(source) as reader:
        async_events = [e async for e in reader]
        assert reader.line_number == 4
    assert async_events == sync_events
    assert source.closed == 1


@pytest.mark.asyncio
async def test_async_reader_error_line_number() -> None:
    reader = AsyncLogEventReader(AsyncLines("\n\n[1]\n"))
    with pytest.raises(InvalidDataError) as exc:
        await reader.try_read()
    assert exc.value.line_number == 3


@pytest.mark.asyncio
async def test_cancelled_read_keeps_line_counter() -> None:
    class GatedLines(AsyncLines):
        def __init__(self, text: str) -> None:
            super().__init__(text)
            self.gate = asyncio.Event()

        async def readline(self) -> str:
            await self.gate.wait()
            return await super().readline()

    source = GatedLines(EVENT + "\n")
    reader = AsyncLogEventReader(source)
    task = asyncio.create_task(reader.try_read())
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert reader.line_number == 0

    source.gate.set()
    assert await reader.try_read() is not None
    assert reader.line_number == 1


def test_open_reader_plain_and_gzip(tmp_path: Path, write_clef_log, write_gz_log) -> None:
    plain = tmp_path / "app.clef"
    gz = tmp_path / "app.clef.gz"
    write_clef_log(plain)
    write_gz_log(gz)

    with open_reader(plain) as reader:
        plain_events = list(reader)
    with open_reader(gz) as reader:
        gz_events = list(reader)

    assert len(plain_events) == 3
    assert plain_events == gz_events
    assert [e.level for e in plain_events] == [
        LogEventLevel.INFORMATION,
        LogEventLevel.WARNING,
        LogEventLevel.ERROR,
    ]
    assert plain_events[2].exception == "System.TimeoutException: boom"


def test_open_reader_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        open_reader(tmp_path / "missing.clef")


@pytest.mark.asyncio
async def test_open_async_reader(tmp_path: Path, write_clef_log, write_gz_log) -> None:
    plain = tmp_path / "app.clef"
    gz = tmp_path / "app.clef.gz"
    write_clef_log(plain)
    write_gz_log(gz)

    async with open_async_reader(plain) as reader:
        plain_events = [e async for e in reader]
    async with open_async_reader(gz) as reader:
        gz_events = [e async for e in reader]

    assert plain_events == list(iter_events(plain))
    assert gz_events == plain_events


def test_iter_events_raises_by_default(tmp_path: Path, write_lines) -> None:
    path = tmp_path / "bad.clef"
    write_lines(path, [EVENT, "{oops", EVENT])
    with pytest.raises(InvalidDataError) as exc:
        list(iter_events(path))
    assert exc.value.line_number == 2


def test_iter_events_skip_invalid(
    tmp_path: Path, write_lines, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "bad.clef"
    write_lines(path, [EVENT, "{oops", "", EVENT])
    with caplog.at_level(logging.WARNING, logger="clef_reader.core.reader"):
        events = list(iter_events(path, skip_invalid=True))
    assert len(events) == 2
    assert "Skipping line 2" in caplog.text


@pytest.mark.asyncio
async def test_aiter_events_skip_invalid_from_config(tmp_path: Path, write_lines) -> None:
    path = tmp_path / "bad.clef"
    write_lines(path, ['{"Level":"Error"}', EVENT])
    events = [e async for e in aiter_events(path, config=ReaderConfig(skip_invalid=True))]
    assert len(events) == 1

    with pytest.raises(InvalidDataError):
        await get_events(path)


def test_open_reader_strips_byte_order_mark(tmp_path: Path) -> None:
    path = tmp_path / "bom.clef"
    path.write_bytes(b"\xef\xbb\xbf" + EVENT.encode("utf-8") + b"\n")

    with open_reader(path) as reader:
        events = list(reader)
    assert len(events) == 1


@pytest.mark.asyncio
async def test_open_async_reader_strips_byte_order_mark(tmp_path: Path) -> None:
    path = tmp_path / "bom.clef"
    path.write_bytes(b"\xef\xbb\xbf" + EVENT.encode("utf-8") + b"\n")

    async with open_async_reader(path) as reader:
        events = [e async for e in reader]
    assert len(events) == 1
