"""Manual "advance / exit" key bindings on top of `InputManager` raw mode."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable

from term_input.input_manager import InputManager


EXIT_KEY = "\x1b"
ADVANCE_KEYS = ("\r", "\n")


class ManualControlBinder:
    """Maps Esc to `on_exit` and Enter to `on_advance`.

    `on_advance` may be a coroutine function. Its result is scheduled as a
    detached task and not awaited, so key presses arriving faster than the
    callback completes can overlap. Callers that need serialization must use
    their own lock.
    """

    def __init__(self, input_manager: InputManager | None = None) -> None:
        self._input_manager = input_manager if input_manager is not None else InputManager()
        self._pending: set[asyncio.Future[Any]] = set()

    @property
    def input_manager(self) -> InputManager:
        return self._input_manager

    def attach_manual_controls(
        self,
        *,
        on_exit: Callable[[], None],
        on_advance: Callable[[], Awaitable[Any] | None],
    ) -> bool:
        """Enables raw mode with the fixed key mapping.

        Returns:
            The result of `InputManager.enable_raw_mode`.
        """

        def on_key(key: str) -> None:
            if key == EXIT_KEY:
                on_exit()
                return
            if key in ADVANCE_KEYS:
                self._dispatch(on_advance)

        return self._input_manager.enable_raw_mode(on_key)

    def detach_manual_controls(self) -> None:
        self._input_manager.disable_raw_mode()

    def _dispatch(self, callback: Callable[[], Awaitable[Any] | None]) -> None:
        result = callback()
        if not inspect.isawaitable(result):
            return
        # * Keep a reference until done; the loop only holds weak refs to tasks.
        future = asyncio.ensure_future(result)
        self._pending.add(future)
        future.add_done_callback(self._on_dispatch_done)

    def _on_dispatch_done(self, future: asyncio.Future[Any]) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is None:
            return
        emit = getattr(self._input_manager.logger, "error", None)
        if callable(emit):
            emit(f"Advance handler failed: {exc!r}")
            return
        future.get_loop().call_exception_handler(
            {"message": "Advance handler failed", "exception": exc, "future": future}
        )
