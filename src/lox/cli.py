"""Command-line entry point: run a .lox file or start the prompt."""

from __future__ import annotations

import sys

from . import run
from .diagnostics import Diagnostics
from .runtime import Interpreter


USAGE: str = """\
lox [OPTIONS] [FILE]

Run a Lox program, or start an interactive prompt when FILE is omitted.

Options:
  --debug     Dump tokens and statements to stderr before running
  --help      Show this help message
"""

PROMPT: str = "lox> "

EXIT_WORDS: set[str] = {"exit", "quit"}


def _report(diagnostics: Diagnostics) -> None:
    for d in diagnostics.static:
        print(str(d), file=sys.stderr)
    for d in diagnostics.runtime:
        print(str(d), file=sys.stderr)


def run_file(filepath: str, *, debug: bool = False) -> int:
    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        print("lox: " + filepath + ": No such file or directory", file=sys.stderr)
        return 1
    except OSError as e:
        print("lox: " + filepath + ": " + str(e), file=sys.stderr)
        return 1
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("lox: " + filepath + ": invalid utf-8", file=sys.stderr)
        return 1

    diagnostics = Diagnostics()
    interpreter = Interpreter(diagnostics)
    ok = run(source, interpreter, trace=sys.stderr if debug else None)
    _report(diagnostics)
    return 0 if ok else 1


def run_prompt(*, debug: bool = False) -> int:
    """Read-eval-print loop. Globals persist across lines; diagnostics don't."""
    diagnostics = Diagnostics()
    interpreter = Interpreter(diagnostics)
    print("Enter quit or exit to exit the prompt")
    while True:
        print(PROMPT, end="", flush=True)
        line = sys.stdin.readline()
        if line == "":
            print()
            return 0
        line = line.rstrip("\n")
        if line.strip() in EXIT_WORDS:
            return 0
        run(line, interpreter, trace=sys.stderr if debug else None)
        _report(diagnostics)
        diagnostics.clear()


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    debug = False
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg == "--debug":
            debug = True
            i += 1
        elif arg.startswith("-"):
            print("lox: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif filepath == "":
            filepath = arg
            i += 1
        else:
            print("lox: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2

    if filepath == "":
        return run_prompt(debug=debug)
    return run_file(filepath, debug=debug)


if __name__ == "__main__":
    sys.exit(main())
