"""Command line entry point: run a file and an interactive read-eval loop."""

from __future__ import annotations

import sys
from typing import Callable, Optional

from .evaluator import Interpreter, paren_count
from .predefined import HELP_MESSAGE, predefined_lexicon
from .values import ParusError

PROMPT = "Parus> "
CONTINUATION_PROMPT = "... "

TITLE_MESSAGE = (
    "Parus version 1.1\n"
    "Type ?help for help, or in the command line enter 'parus -help'.\n\n"
)

LineReader = Callable[[str], Optional[str]]


def _read_line(prompt: str) -> str | None:
    """Read one line from standard input, or None at end of input."""
    try:
        return input(prompt)
    except EOFError:
        return None


def read_command(read_line: LineReader) -> str | None:
    """Read lines until the command is complete.

    A command is complete when its parentheses are balanced and no quote is
    left hanging. Returns None when input ends before that.
    """
    command = read_line(PROMPT)
    if command is None:
        return None
    while paren_count(command) > 0:
        addition = read_line(CONTINUATION_PROMPT)
        if addition is None:
            return None
        command = f"{command}\n{addition}"
    return command


def _enable_line_editing() -> None:
    if not sys.stdin.isatty():
        return
    try:
        import readline  # noqa: F401  (enables history and editing for input())
    except ImportError:
        pass


def _run(interp: Interpreter, text: str) -> None:
    try:
        interp.evaluate(text)
    except ParusError as error:
        interp.stderr.write(f"{error}\n")


def main(argv: list[str] | None = None) -> int:
    """Run the interpreter with command line arguments."""
    args = sys.argv[1:] if argv is None else argv
    norepl = "-norepl" in args
    show_help = "-help" in args
    notitle = "-notitle" in args
    file_name = next(
        (arg for arg in args if arg not in ("-norepl", "-help", "-notitle")), None
    )

    if show_help:
        sys.stdout.write(TITLE_MESSAGE)
        sys.stdout.write(HELP_MESSAGE)
        return 0

    interp = Interpreter(predefined_lexicon(), sys.stdin, sys.stdout, sys.stderr)

    try:
        if file_name is not None:
            try:
                with open(file_name, encoding="utf-8") as source:
                    text = source.read()
            except OSError:
                sys.stderr.write(
                    f"CANNOT OPEN FILE {file_name}\nMAKE SURE THAT THE FILE EXISTS\n"
                )
            else:
                _run(interp, text)

        if norepl:
            return 0

        if not notitle:
            sys.stdout.write(TITLE_MESSAGE)

        _enable_line_editing()
        while (command := read_command(_read_line)) is not None:
            _run(interp, command)
    except SystemExit as exit_request:
        code = exit_request.code
        return code if isinstance(code, int) else 0
    finally:
        sys.stdout.flush()

    return 0


if __name__ == "__main__":
    sys.exit(main())