"""Module entrypoint for `python -m term_input`."""

from __future__ import annotations

import sys

from term_input.cli import main


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
