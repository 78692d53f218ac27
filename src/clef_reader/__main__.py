"""Module entrypoint.

Allows:
    python -m clef_reader
"""

from __future__ import annotations

from clef_reader.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
