"""The interactive read-run loop."""

from __future__ import annotations

import sys
from typing import Sequence

from .builtins import ShellExit
from .executor import execute
from .parser import parse
from .state import FatalError, ShellState
from .tokens import ShellSyntaxError, tokenize

PROMPT = "minishell$ "


def run_line(line: str, state: ShellState) -> int:
    """Parse and run one command line; return the last exit status.

    Syntax errors are reported and leave the status unchanged. ShellExit
    and FatalError are passed on to the caller.
    """
    if not line:
        state.errors.write("minishell: no command found\n")
    try:
        tokens = tokenize(line)
        tree = parse(tokens)
    except ShellSyntaxError as exc:
        state.errors.write(f"minishell: {exc}\n")
        state.reset()
        return state.last_status
    state.tokens = tokens
    state.root = tree
    try:
        if tree is not None:
            execute(tree, state)
    finally:
        state.reset()
        state.output.flush()
    return state.last_status


def _enable_history() -> None:
    try:
        import readline  # noqa: F401
    except ImportError:
        pass


def main(argv: Sequence[str] | None = None) -> int:
    """Run the shell interactively; it takes no arguments."""
    args = sys.argv[1:] if argv is None else list(argv)
    if args:
        return 0
    _enable_history()
    state = ShellState.from_environ()
    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            print("exit")
            return state.last_status
        except KeyboardInterrupt:
            print()
            continue
        try:
            run_line(line, state)
        except ShellExit as exc:
            return exc.status
        except FatalError as exc:
            state.errors.write(f"minishell: {exc}\n")
            state.reset()
            return exc.status