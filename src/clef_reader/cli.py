from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path

from clef_reader.core.config import ReaderConfig, resolve_reader_config
from clef_reader.core.models import InvalidDataError, LogEvent, LogEventLevel
from clef_reader.core.reader import get_events, iter_events
from clef_reader.core.records import EventRecord


def _configure_logging() -> None:
    level_name = os.getenv("CLEF_READER_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_levels(s: str) -> set[LogEventLevel]:
    out: set[LogEventLevel] = set()
    for part in s.split(","):
        name = part.strip().upper()
        if not name:
            continue
        try:
            out.add(LogEventLevel[name])
        except KeyError as e:
            allowed = ", ".join(level.label for level in LogEventLevel)
            raise argparse.ArgumentTypeError(f"Invalid level. Allowed: {allowed}") from e
    if not out:
        raise argparse.ArgumentTypeError("At least one level must be provided")
    return out


def _format_event(e: LogEvent) -> str:
    line = f"{e.timestamp.isoformat()} [{e.level.label}] {e.render_message()}"
    if e.exception:
        line += "\n" + e.exception
    return line


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Read compact log event (CLEF) files.")
    p.add_argument("log_path")
    p.add_argument("--json", dest="as_json", action="store_true", help="Print one JSON record per event")
    p.add_argument(
        "--levels",
        type=_parse_levels,
        default=None,
        help="Comma-separated (e.g., Warning,Error). Default: all levels",
    )
    p.add_argument("--skip-invalid", action="store_true", default=None, help="Skip lines that fail to decode")
    p.add_argument("--encoding", default=None, help="Text encoding (default: utf-8-sig)")
    p.add_argument("--async", dest="use_async", action="store_true", help="Read the file with aiofiles")
    return p


def _read(path: Path, args: argparse.Namespace, cfg: ReaderConfig) -> Iterable[LogEvent]:
    if args.use_async:
        return asyncio.run(get_events(path, config=cfg, skip_invalid=args.skip_invalid))
    return iter_events(path, config=cfg, skip_invalid=args.skip_invalid)


def main(argv: list[str] | None = None) -> int:
    _configure_logging()
    args = build_parser().parse_args(argv)
    path = Path(args.log_path)

    count = 0
    try:
        cfg = resolve_reader_config(None)
        if args.encoding:
            cfg = replace(cfg, encoding=args.encoding)
        for e in _read(path, args, cfg):
            if args.levels is not None and e.level not in args.levels:
                continue
            if args.as_json:
                print(EventRecord.from_event(e).model_dump_json())
            else:
                print(_format_event(e))
            count += 1
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 2
    except InvalidDataError as e:
        print(f"Invalid data: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if not args.as_json:
        print(f"\nRead {count} events.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
