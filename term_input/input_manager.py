"""Terminal prompts and raw keystroke subscription.

`InputManager` wraps a pair of text streams (stdin/stdout by default) and
offers:

- yes/no and free-text prompts that fall back to a default value when no
  interactive terminal is attached;
- a raw-mode subscription delivering individual keystrokes to a handler from
  an asyncio event loop.

Invalid or empty answers are re-prompted with a warning. By default there is
no retry cap: the loop runs until a valid answer arrives. Pass `max_attempts`
to bound it.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Any, Callable, TextIO

from term_input.keystrokes import KeyListener, KeystrokeReader
from term_input.line_reader import LineReader


KeyHandler = Callable[[str], None]


class InputError(RuntimeError):
    """Base class for prompt failures."""


class NoInteractiveInputError(InputError):
    """Raised when a prompt needs a TTY, none is attached and no default is given."""


class PromptAttemptsExceededError(InputError):
    """Raised when `max_attempts` invalid answers were entered."""


class InputManager:
    """Prompts and raw keystroke handling over a pair of text streams.

    Args:
        stdin: Input stream. Defaults to `sys.stdin` at construction time.
        stdout: Output stream for prompts. Defaults to `sys.stdout` at
            construction time.
        logger: Optional object with `info` / `warn` / `error` methods (a
            `logging.Logger` works too; its `warning` is used for `warn`).
            Missing channels are skipped.
        keys: Raw keystroke source. Defaults to a `KeystrokeReader` over
            `stdin`.
        loop: Event loop that delivers keystrokes. Defaults to the loop
            running when `enable_raw_mode` is called.
    """

    def __init__(
        self,
        *,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        logger: Any = None,
        keys: KeystrokeReader | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._logger = logger
        if keys is None and self._stdin is not None:
            keys = KeystrokeReader(self._stdin)
        self._keys = keys
        self._loop = loop
        self._raw_listener: KeyListener | None = None
        self._raw_mode_enabled = False

    @property
    def logger(self) -> Any:
        return self._logger

    @property
    def raw_mode_enabled(self) -> bool:
        return self._raw_mode_enabled

    def is_interactive(self) -> bool:
        """Returns True when stdin is a terminal and an output stream exists."""
        return self._stdin_is_tty() and self._stdout is not None

    def prompt_yes_no(
        self,
        question: str,
        *,
        default: bool | None = None,
        max_attempts: int | None = None,
    ) -> bool:
        """Asks a yes/no question.

        Args:
            question: Question text; " (y/n): " is appended.
            default: Returned when no TTY is attached, on an empty answer, or
                when the input stream ends.
            max_attempts: Maximum number of invalid answers before giving up.
                None re-prompts forever.

        Returns:
            True for "y"/"yes", False for "n"/"no" (case-insensitive).

        Raises:
            NoInteractiveInputError: No TTY (or input ended) and no default.
            PromptAttemptsExceededError: `max_attempts` invalid answers.
        """
        _validate_max_attempts(max_attempts)
        if not self.is_interactive():
            if default is not None:
                return default
            raise NoInteractiveInputError("TTY input is not available for yes/no prompt.")

        prompt = f"{question.strip()} (y/n): "
        invalid = 0
        with LineReader(self._stdin, self._stdout) as reader:
            while True:
                try:
                    answer = reader.ask(prompt)
                except EOFError:
                    if default is not None:
                        return default
                    raise NoInteractiveInputError(
                        "Input ended before a yes/no answer was given."
                    ) from None

                normalized = answer.strip().lower()
                if not normalized and default is not None:
                    return default
                if normalized in ("y", "yes"):
                    return True
                if normalized in ("n", "no"):
                    return False

                self._log("warn", "Please answer with y or n.")
                invalid += 1
                if max_attempts is not None and invalid >= max_attempts:
                    raise PromptAttemptsExceededError(
                        f"No valid yes/no answer after {invalid} attempt(s)."
                    )

    def prompt_text(
        self,
        question: str,
        *,
        default: str | None = None,
        allow_empty: bool = False,
        max_attempts: int | None = None,
    ) -> str:
        """Asks for free-form text; the answer is returned stripped.

        An empty answer returns `default` when given, else "" when
        `allow_empty` is set, else warns and asks again.

        Raises:
            NoInteractiveInputError: No TTY (or input ended) and no default.
            PromptAttemptsExceededError: `max_attempts` empty answers.
        """
        _validate_max_attempts(max_attempts)
        if not self.is_interactive():
            if default is not None:
                return default
            raise NoInteractiveInputError("TTY input is not available for text prompt.")

        prompt = f"{question.strip()}: "
        invalid = 0
        with LineReader(self._stdin, self._stdout) as reader:
            while True:
                try:
                    answer = reader.ask(prompt)
                except EOFError:
                    if default is not None:
                        return default
                    raise NoInteractiveInputError(
                        "Input ended before a text answer was given."
                    ) from None

                trimmed = answer.strip()
                if trimmed:
                    return trimmed
                if default is not None:
                    return default
                if allow_empty:
                    return ""

                self._log("warn", "Input cannot be empty.")
                invalid += 1
                if max_attempts is not None and invalid >= max_attempts:
                    raise PromptAttemptsExceededError(
                        f"No non-empty answer after {invalid} attempt(s)."
                    )

    def enable_raw_mode(self, handler: KeyHandler) -> bool:
        """Delivers every keystroke chunk (decoded as UTF-8) to `handler`.

        Only one handler is active at a time: a handler attached earlier is
        detached first.

        Returns:
            True if raw mode is active, False if stdin is not a terminal or the
            terminal could not be switched (the error is logged).
        """
        keys = self._keys
        if keys is None or not self._stdin_is_tty():
            return False

        if self._raw_listener is not None:
            keys.remove_listener(self._raw_listener)
            self._raw_listener = None

        try:
            loop = self._loop if self._loop is not None else asyncio.get_running_loop()
            keys.set_raw_mode(True)
            keys.resume(loop)
        except Exception as exc:  # noqa: BLE001 - any failure means "no raw mode"
            self._log("error", f"Failed to enable raw mode input: {exc}")
            self._rollback_raw_mode(keys)
            return False

        self._raw_mode_enabled = True

        def listener(data: bytes) -> None:
            handler(data.decode("utf-8", errors="replace"))

        self._raw_listener = listener
        keys.add_listener(listener)
        return True

    def disable_raw_mode(self) -> None:
        """Detaches the raw key handler and restores line-buffered input."""
        if self._stdin is None or self._keys is None:
            return

        if self._raw_listener is not None:
            self._keys.remove_listener(self._raw_listener)
            self._raw_listener = None

        if self._raw_mode_enabled:
            try:
                self._keys.pause()
                self._keys.set_raw_mode(False)
            except Exception as exc:  # noqa: BLE001 - disabling must not fail
                self._log("warn", f"Failed to disable raw mode cleanly: {exc}")
            self._raw_mode_enabled = False

    def _rollback_raw_mode(self, keys: KeystrokeReader) -> None:
        try:
            keys.pause()
            keys.set_raw_mode(False)
        except Exception as exc:  # noqa: BLE001
            self._log("warn", f"Failed to disable raw mode cleanly: {exc}")
        self._raw_mode_enabled = False

    def _stdin_is_tty(self) -> bool:
        if self._stdin is None:
            return False
        try:
            return bool(self._stdin.isatty())
        except ValueError:
            # * isatty() on a closed stream.
            return False

    def _log(self, channel: str, message: str) -> None:
        if self._logger is None:
            return
        names = ("warning", "warn") if channel == "warn" else (channel,)
        for name in names:
            emit = getattr(self._logger, name, None)
            if callable(emit):
                emit(message)
                return


def _validate_max_attempts(max_attempts: int | None) -> None:
    if max_attempts is not None and max_attempts < 1:
        raise ValueError("max_attempts must be a positive integer or None.")
