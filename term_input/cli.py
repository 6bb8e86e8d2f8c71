"""CLI for term-input."""

from __future__ import annotations

import argparse
import asyncio
import sys

from term_input.console import ConsoleLogger, dim, error, info, success, warn
from term_input.input_manager import InputError, InputManager
from term_input.manual_controls import ManualControlBinder


def main(argv: list[str] | None = None, *, manager: InputManager | None = None) -> int:
    try:
        if argv is None:
            argv = sys.argv[1:]

        parser = argparse.ArgumentParser(prog="term-input")
        sub = parser.add_subparsers(dest="cmd", required=True)

        yes_no = sub.add_parser(
            "yes-no",
            help="Ask a yes/no question. Exit code 0 means yes, 1 means no.",
        )
        yes_no.add_argument("question", help="Question text.")
        yes_no.add_argument(
            "--default",
            choices=("yes", "no"),
            default=None,
            help="Answer used on empty input or when stdin is not a terminal.",
        )
        yes_no.add_argument(
            "--max-attempts",
            type=int,
            default=None,
            help="Give up after this many invalid answers (default: ask forever).",
        )

        text = sub.add_parser("text", help="Ask for a line of text and print it.")
        text.add_argument("question", help="Question text.")
        text.add_argument(
            "--default",
            default=None,
            help="Answer used on empty input or when stdin is not a terminal.",
        )
        text.add_argument(
            "--allow-empty",
            action="store_true",
            help="Accept an empty answer.",
        )
        text.add_argument(
            "--max-attempts",
            type=int,
            default=None,
            help="Give up after this many empty answers (default: ask forever).",
        )

        sub.add_parser(
            "controls",
            help="Run a manual-control loop: Enter advances a step, Esc exits.",
        )

        args = parser.parse_args(argv)
        if manager is None:
            manager = InputManager(logger=ConsoleLogger())

        try:
            if args.cmd == "yes-no":
                default = None if args.default is None else args.default == "yes"
                answer = manager.prompt_yes_no(
                    args.question,
                    default=default,
                    max_attempts=args.max_attempts,
                )
                print("yes" if answer else "no", flush=True)
                return 0 if answer else 1
            if args.cmd == "text":
                answer = manager.prompt_text(
                    args.question,
                    default=args.default,
                    allow_empty=args.allow_empty,
                    max_attempts=args.max_attempts,
                )
                print(answer, flush=True)
                return 0
            if args.cmd == "controls":
                return asyncio.run(_run_controls(manager))
        except (InputError, ValueError) as exc:
            error(str(exc))
            return 2

        raise RuntimeError(f"Unhandled command: {args.cmd}")
    except KeyboardInterrupt:
        # * Ctrl+C while a line prompt is waiting.
        print(file=sys.stderr, flush=True)
        warn("Interrupted by user (Ctrl+C).")
        return 130


async def _run_controls(manager: InputManager) -> int:
    binder = ManualControlBinder(manager)
    stop = asyncio.Event()
    steps = 0

    def on_advance() -> None:
        nonlocal steps
        steps += 1
        info(f"Step {steps}")

    if not binder.attach_manual_controls(on_exit=stop.set, on_advance=on_advance):
        error("Raw keyboard input is not available (is stdin a terminal?).")
        return 2

    print(dim("Press Enter to advance, Esc to exit."), flush=True)
    try:
        await stop.wait()
    finally:
        binder.detach_manual_controls()

    success(f"Stopped after {steps} step(s).")
    return 0
