from __future__ import annotations

import gzip
from collections.abc import Callable
from pathlib import Path

import pytest

CLEF_LINES = [
    '{"Timestamp":"2025-12-30T08:12:01.1234567Z","MessageTemplate":"Service {Name} started","Properties":{"Name":"api"}}',
    "",
    '{"Timestamp":"2025-12-30T08:12:03Z","Level":"Warning","MessageTemplate":"Retrying {Attempt}","Properties":{"Attempt":2}}',
    '{"Timestamp":"2025-12-30T08:12:04Z","Level":"Error","@m":"Upstream {timeout}","Exception":"System.TimeoutException: boom"}',
]


@pytest.fixture
def write_clef_log() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        path.write_text("\n".join(CLEF_LINES) + "\n", encoding="utf-8")

    return _write


@pytest.fixture
def write_gz_log() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write("\n".join(CLEF_LINES) + "\n")

    return _write


@pytest.fixture
def write_lines() -> Callable[[Path, list[str]], None]:
    def _write(path: Path, lines: list[str]) -> None:
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")

    return _write
