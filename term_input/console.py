"""Console output helpers (color + consistent formatting).

`ConsoleLogger` exposes these helpers through the `info` / `warn` / `error`
channels that `InputManager` reports diagnostics on.
"""

from __future__ import annotations

import os
import sys

from colorama import just_fix_windows_console


_RESET = "\x1b[0m"
_BOLD = "\x1b[1m"
_FG_RED = "\x1b[31m"
_FG_GREEN = "\x1b[32m"
_FG_YELLOW = "\x1b[33m"
_FG_CYAN = "\x1b[36m"
_FG_GRAY = "\x1b[90m"

_INITIALIZED = False


def init_console() -> None:
    """Initializes console for ANSI color support (especially on Windows)."""
    global _INITIALIZED
    if _INITIALIZED:
        return
    _INITIALIZED = True
    try:
        just_fix_windows_console()
    except Exception:
        # ! Coloring must never break functionality.
        return


def _supports_color(stream) -> bool:
    if os.environ.get("NO_COLOR", "").strip():
        return False
    return stream is not None and hasattr(stream, "isatty") and stream.isatty()


def style(text: str, *, fg: str | None = None, bold: bool = False, stream=None) -> str:
    """Formats text with ANSI colors when supported."""
    init_console()
    if not _supports_color(stream if stream is not None else sys.stdout):
        return text
    parts: list[str] = []
    if bold:
        parts.append(_BOLD)
    if fg:
        parts.append(fg)
    parts.append(text)
    parts.append(_RESET)
    return "".join(parts)


def dim(text: str) -> str:
    return style(text, fg=_FG_GRAY, stream=sys.stdout)


def info(text: str) -> None:
    print(style(text, fg=_FG_CYAN, bold=True, stream=sys.stdout), flush=True)


def success(text: str) -> None:
    print(style(text, fg=_FG_GREEN, bold=True, stream=sys.stdout), flush=True)


def warn(text: str) -> None:
    print(style(text, fg=_FG_YELLOW, bold=True, stream=sys.stderr), file=sys.stderr, flush=True)


def error(text: str) -> None:
    print(style(text, fg=_FG_RED, bold=True, stream=sys.stderr), file=sys.stderr, flush=True)


class ConsoleLogger:
    """Logger with `info` / `warn` / `error` channels printing to the console.

    Positional arguments are converted with `str()` and joined by spaces.
    """

    def info(self, *args: object) -> None:
        info(_join(args))

    def warn(self, *args: object) -> None:
        warn(_join(args))

    def error(self, *args: object) -> None:
        error(_join(args))


def _join(args: tuple[object, ...]) -> str:
    return " ".join(str(arg) for arg in args)
