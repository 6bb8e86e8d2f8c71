"""Raw keystroke delivery from a terminal file descriptor.

Bytes are read as they arrive (no line buffering) and passed to listeners from
an asyncio event loop via `loop.add_reader`.
"""

from __future__ import annotations

import asyncio
import os
import sys
from typing import Callable, TextIO


KeyListener = Callable[[bytes], None]

# * Indices into the list returned by termios.tcgetattr().
_IFLAG = 0
_OFLAG = 1
_CFLAG = 2
_LFLAG = 3
_CC = 6


class KeystrokeReader:
    """Emits raw input chunks from `stream` to registered listeners."""

    def __init__(self, stream: TextIO, *, chunk_size: int = 1024) -> None:
        self._stream = stream
        self._chunk_size = chunk_size
        self._listeners: list[KeyListener] = []
        self._saved_attrs: list | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._fd: int | None = None

    def isatty(self) -> bool:
        return self._stream is not None and self._stream.isatty()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    @property
    def resumed(self) -> bool:
        return self._loop is not None

    def add_listener(self, listener: KeyListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: KeyListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            return

    def set_raw_mode(self, enabled: bool) -> None:
        """Switches the terminal between raw and its previous (saved) mode.

        Raw mode disables echo, canonical line buffering and signal keys, so
        Ctrl+C arrives as b"\\x03". Output newline translation is kept so
        prints still start at column 0.
        """
        if sys.platform.startswith("win"):
            return

        import termios  # pylint: disable=import-outside-toplevel

        fd = self._stream.fileno()
        if enabled:
            if self._saved_attrs is None:
                self._saved_attrs = termios.tcgetattr(fd)
            termios.tcsetattr(fd, termios.TCSANOW, _raw_attributes(termios.tcgetattr(fd)))
            return

        if self._saved_attrs is None:
            return
        termios.tcsetattr(fd, termios.TCSANOW, self._saved_attrs)
        self._saved_attrs = None

    def resume(self, loop: asyncio.AbstractEventLoop) -> None:
        """Starts delivering input chunks on `loop`."""
        if self._loop is not None:
            return
        fd = self._stream.fileno()
        loop.add_reader(fd, self._on_readable)
        self._loop = loop
        self._fd = fd

    def pause(self) -> None:
        """Stops delivering input chunks."""
        if self._loop is None:
            return
        loop, fd = self._loop, self._fd
        self._loop = None
        self._fd = None
        loop.remove_reader(fd)

    def _on_readable(self) -> None:
        try:
            data = os.read(self._fd, self._chunk_size)
        except BlockingIOError:
            return
        except OSError:
            # ! EIO when the terminal goes away: stop polling a dead fd.
            self.pause()
            return
        if not data:
            self.pause()
            return
        for listener in list(self._listeners):
            listener(data)


def _raw_attributes(attrs: list) -> list:
    import termios  # pylint: disable=import-outside-toplevel

    attrs[_IFLAG] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    attrs[_OFLAG] |= termios.OPOST | termios.ONLCR
    attrs[_CFLAG] |= termios.CS8
    attrs[_LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    attrs[_CC][termios.VMIN] = 1
    attrs[_CC][termios.VTIME] = 0
    return attrs
