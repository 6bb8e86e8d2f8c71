"""Tests for InputManager yes/no and text prompts."""

from __future__ import annotations

import io
import logging
import unittest
from unittest import mock

from term_input.input_manager import (
    InputManager,
    NoInteractiveInputError,
    PromptAttemptsExceededError,
)
from term_input.line_reader import LineReader


class _TtyInput(io.StringIO):
    def isatty(self) -> bool:
        if self.closed:
            raise ValueError("I/O operation on closed file.")
        return True


class _RecordingLogger:
    def __init__(self) -> None:
        self.infos: list[str] = []
        self.warnings: list[str] = []
        self.errors: list[str] = []

    def info(self, *args: object) -> None:
        self.infos.append(" ".join(str(a) for a in args))

    def warn(self, *args: object) -> None:
        self.warnings.append(" ".join(str(a) for a in args))

    def error(self, *args: object) -> None:
        self.errors.append(" ".join(str(a) for a in args))


def _interactive(lines: str, logger: object | None = None) -> tuple[InputManager, io.StringIO]:
    stdout = io.StringIO()
    return InputManager(stdin=_TtyInput(lines), stdout=stdout, logger=logger), stdout


class NonInteractivePromptTest(unittest.TestCase):
    def setUp(self) -> None:
        self.stdin = io.StringIO("y\nsomething\n")
        self.stdout = io.StringIO()
        self.manager = InputManager(stdin=self.stdin, stdout=self.stdout)

    def test_is_interactive_false_without_tty(self) -> None:
        self.assertFalse(self.manager.is_interactive())

    def test_yes_no_returns_default_without_touching_streams(self) -> None:
        self.assertFalse(self.manager.prompt_yes_no("Continue?", default=False))
        self.assertTrue(self.manager.prompt_yes_no("Continue?", default=True))
        self.assertEqual(self.stdout.getvalue(), "")
        self.assertEqual(self.stdin.tell(), 0)

    def test_text_returns_default_without_touching_streams(self) -> None:
        self.assertEqual(self.manager.prompt_text("Name", default="Alice"), "Alice")
        self.assertEqual(self.manager.prompt_text("Name", default=""), "")
        self.assertEqual(self.stdout.getvalue(), "")
        self.assertEqual(self.stdin.tell(), 0)

    def test_yes_no_without_default_raises(self) -> None:
        with self.assertRaises(NoInteractiveInputError) as ctx:
            self.manager.prompt_yes_no("Continue?")
        self.assertIn("TTY input is not available for yes/no prompt", str(ctx.exception))

    def test_text_without_default_raises(self) -> None:
        with self.assertRaises(NoInteractiveInputError) as ctx:
            self.manager.prompt_text("Name", allow_empty=True)
        self.assertIn("TTY input is not available for text prompt", str(ctx.exception))

    def test_closed_stdin_is_not_interactive(self) -> None:
        stdin = _TtyInput("")
        stdin.close()
        manager = InputManager(stdin=stdin, stdout=io.StringIO())
        self.assertFalse(manager.is_interactive())


class YesNoPromptTest(unittest.TestCase):
    def test_warns_until_valid_answer(self) -> None:
        logger = _RecordingLogger()
        manager, stdout = _interactive("\nmaybe\ny\n", logger)

        self.assertTrue(manager.is_interactive())
        self.assertTrue(manager.prompt_yes_no("Continue?"))
        self.assertEqual(logger.warnings, ["Please answer with y or n."] * 2)
        self.assertEqual(stdout.getvalue(), "Continue? (y/n): " * 3)

    def test_answers_are_normalized(self) -> None:
        manager, _ = _interactive(" YES \nN\nno\nY\n")
        self.assertTrue(manager.prompt_yes_no("A?"))
        self.assertFalse(manager.prompt_yes_no("B?"))
        self.assertFalse(manager.prompt_yes_no("C?"))
        self.assertTrue(manager.prompt_yes_no("D?"))

    def test_empty_answer_uses_default(self) -> None:
        logger = _RecordingLogger()
        manager, _ = _interactive("   \n", logger)
        self.assertFalse(manager.prompt_yes_no("Overwrite?", default=False))
        self.assertEqual(logger.warnings, [])

    def test_question_whitespace_is_trimmed(self) -> None:
        manager, stdout = _interactive("y\n")
        manager.prompt_yes_no("  Proceed?  \n")
        self.assertEqual(stdout.getvalue(), "Proceed? (y/n): ")

    def test_max_attempts_bounds_retry_loop(self) -> None:
        logger = _RecordingLogger()
        manager, _ = _interactive("a\nb\ny\n", logger)
        with self.assertRaises(PromptAttemptsExceededError):
            manager.prompt_yes_no("Continue?", max_attempts=2)
        self.assertEqual(len(logger.warnings), 2)

    def test_invalid_max_attempts(self) -> None:
        manager, _ = _interactive("y\n")
        with self.assertRaises(ValueError):
            manager.prompt_yes_no("Continue?", max_attempts=0)

    def test_end_of_input_without_default_raises(self) -> None:
        manager, _ = _interactive("maybe\n")
        with self.assertRaises(NoInteractiveInputError):
            manager.prompt_yes_no("Continue?")

    def test_end_of_input_with_default_returns_default(self) -> None:
        manager, _ = _interactive("")
        self.assertTrue(manager.prompt_yes_no("Continue?", default=True))

    def test_stdlib_logger_receives_warnings(self) -> None:
        logger = logging.getLogger("term_input.tests.prompts")
        manager, _ = _interactive("x\nn\n", logger)
        with self.assertLogs(logger, level="WARNING") as logs:
            self.assertFalse(manager.prompt_yes_no("Continue?"))
        self.assertEqual(logs.records[0].getMessage(), "Please answer with y or n.")

    def test_missing_logger_channel_is_skipped(self) -> None:
        class _InfoOnly:
            def info(self, *args: object) -> None:
                raise AssertionError("info should not be used")

        manager, _ = _interactive("x\ny\n", _InfoOnly())
        self.assertTrue(manager.prompt_yes_no("Continue?"))


class TextPromptTest(unittest.TestCase):
    def test_surrounding_whitespace_is_stripped(self) -> None:
        manager, stdout = _interactive(" Bob \n")
        self.assertEqual(manager.prompt_text("Name"), "Bob")
        self.assertEqual(stdout.getvalue(), "Name: ")

    def test_allow_empty_returns_empty_string_without_warning(self) -> None:
        logger = _RecordingLogger()
        manager, _ = _interactive("\n", logger)
        self.assertEqual(manager.prompt_text("Name", allow_empty=True), "")
        self.assertEqual(logger.warnings, [])

    def test_default_wins_over_allow_empty(self) -> None:
        manager, _ = _interactive("  \n")
        self.assertEqual(manager.prompt_text("Name", default="Anon", allow_empty=True), "Anon")

    def test_empty_answer_warns_and_reprompts(self) -> None:
        logger = _RecordingLogger()
        manager, stdout = _interactive("\n   \nCarol\n", logger)
        self.assertEqual(manager.prompt_text("Name  "), "Carol")
        self.assertEqual(logger.warnings, ["Input cannot be empty."] * 2)
        self.assertEqual(stdout.getvalue(), "Name: " * 3)

    def test_max_attempts_bounds_retry_loop(self) -> None:
        manager, _ = _interactive("\n\n\n")
        with self.assertRaises(PromptAttemptsExceededError):
            manager.prompt_text("Name", max_attempts=3)

    def test_end_of_input(self) -> None:
        manager, _ = _interactive("")
        with self.assertRaises(NoInteractiveInputError):
            manager.prompt_text("Name")
        manager, _ = _interactive("")
        self.assertEqual(manager.prompt_text("Name", default="x"), "x")


class LineReaderReleaseTest(unittest.TestCase):
    def _patched_readers(self) -> tuple[mock._patch, list[LineReader]]:
        readers: list[LineReader] = []

        def factory(stdin, stdout):
            reader = LineReader(stdin, stdout)
            readers.append(reader)
            return reader

        return mock.patch("term_input.input_manager.LineReader", side_effect=factory), readers

    def test_reader_closed_after_answer(self) -> None:
        patcher, readers = self._patched_readers()
        manager, _ = _interactive("y\nBob\n")
        with patcher:
            manager.prompt_yes_no("Continue?")
            manager.prompt_text("Name")
        self.assertEqual(len(readers), 2)
        self.assertTrue(all(r.closed for r in readers))

    def test_reader_closed_after_default_return(self) -> None:
        patcher, readers = self._patched_readers()
        manager, _ = _interactive("\n")
        with patcher:
            self.assertTrue(manager.prompt_yes_no("Continue?", default=True))
        self.assertTrue(readers[0].closed)

    def test_reader_closed_on_failure(self) -> None:
        patcher, readers = self._patched_readers()
        manager, _ = _interactive("bad\n")
        with patcher:
            with self.assertRaises(NoInteractiveInputError):
                manager.prompt_yes_no("Continue?")
        self.assertTrue(readers[0].closed)

    def test_reader_closed_when_logger_fails(self) -> None:
        class _BrokenLogger:
            def warn(self, *args: object) -> None:
                raise RuntimeError("logger down")

        patcher, readers = self._patched_readers()
        manager, _ = _interactive("\n", _BrokenLogger())
        with patcher:
            with self.assertRaises(RuntimeError):
                manager.prompt_text("Name")
        self.assertTrue(readers[0].closed)

    def test_no_reader_when_not_interactive(self) -> None:
        patcher, readers = self._patched_readers()
        manager = InputManager(stdin=io.StringIO(), stdout=io.StringIO())
        with patcher:
            manager.prompt_text("Name", default="x")
        self.assertEqual(readers, [])
