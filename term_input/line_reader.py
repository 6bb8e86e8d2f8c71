"""Line-oriented reading from a text input stream."""

from __future__ import annotations

import sys
from typing import TextIO


class LineReader:
    """Displays a prompt and reads one line of input.

    Opened once per prompt call and used as a context manager so it is
    released on every return path:

        with LineReader(stdin, stdout) as reader:
            answer = reader.ask("Name: ")

    When bound to the process's own stdin/stdout the builtin `input()` is used,
    which gives line editing where the `readline` module is available.
    """

    def __init__(self, stdin: TextIO, stdout: TextIO) -> None:
        self._stdin = stdin
        self._stdout = stdout
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def ask(self, prompt: str) -> str:
        """Writes `prompt` and returns the next line without its line ending.

        Raises:
            EOFError: If the input stream is exhausted.
            ValueError: If the reader has been closed.
        """
        if self._closed:
            raise ValueError("LineReader is closed.")

        if self._stdin is sys.stdin and self._stdout is sys.stdout:
            return input(prompt)

        self._stdout.write(prompt)
        self._stdout.flush()
        line = self._stdin.readline()
        if not line:
            raise EOFError("End of input stream.")
        return line.rstrip("\r\n")

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> LineReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
