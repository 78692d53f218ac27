from __future__ import annotations

import json
from pathlib import Path

import pytest

from clef_reader.cli import main


def test_cli_prints_events(tmp_path: Path, write_clef_log, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "app.clef"
    write_clef_log(path)

    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert '[Information] Service "api" started' in out
    assert "[Warning] Retrying 2" in out
    assert "[Error] Upstream {timeout}" in out
    assert "System.TimeoutException: boom" in out
    assert "Read 3 events." in out


def test_cli_json_and_levels(
    tmp_path: Path, write_clef_log, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "app.clef"
    write_clef_log(path)

    assert main([str(path), "--json", "--levels", "warning,error", "--async"]) == 0
    records = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line]
    assert [r["level"] for r in records] == ["Warning", "Error"]
    assert records[0]["properties"] == {"Attempt": 2}


def test_cli_invalid_line(tmp_path: Path, write_lines, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "bad.clef"
    write_lines(path, ['{"Timestamp":"2020-01-01T00:00:00Z"}', "not json"])

    assert main([str(path)]) == 2
    assert "line 2" in capsys.readouterr().err

    assert main([str(path), "--skip-invalid"]) == 0
    assert "Read 1 events." in capsys.readouterr().out


def test_cli_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(tmp_path / "missing.clef")]) == 2
    assert "Log file not found" in capsys.readouterr().err
