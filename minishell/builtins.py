"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
import string
from typing import Callable, Sequence

from .state import ShellState

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

_NAME_START = frozenset(string.ascii_letters + "_")
_NAME_REST = frozenset(string.ascii_letters + string.digits + "_")
_DIGITS = frozenset(string.digits)


class ShellExit(Exception):
    """Raised by the exit builtin; the shell should stop with ``status``."""

    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"exit {status}")


def _error(state: ShellState, message: str) -> None:
    state.errors.write(f"minishell: {message}\n")


def echo(args: Sequence[str], state: ShellState) -> int:
    """Print the arguments separated by spaces; ``-n`` drops the newline."""
    words = list(args[1:])
    newline = True
    if words and words[0] == "-n":
        newline = False
        words = words[1:]
    state.output.write(" ".join(words) + ("\n" if newline else ""))
    return EXIT_SUCCESS


def cd(args: Sequence[str], state: ShellState) -> int:
    """Change directory to the argument, HOME, or OLDPWD for ``-``."""
    if len(args) > 2:
        _error(state, "cd: too many arguments")
        return EXIT_FAILURE
    if len(args) < 2:
        target = state.env.get("HOME")
        if target is None:
            _error(state, "cd: HOME not set")
            return EXIT_FAILURE
    elif args[1] == "-":
        target = state.env.get("OLDPWD")
        if target is None:
            _error(state, "cd: OLDPWD not set")
            return EXIT_FAILURE
    else:
        target = args[1]
    try:
        os.chdir(target)
    except OSError as exc:
        _error(state, f"cd: {exc.strerror or exc}")
        return EXIT_FAILURE
    previous = state.env.get("PWD")
    if previous is not None:
        state.env.set("OLDPWD", previous)
    state.env.set("PWD", os.getcwd())
    return EXIT_SUCCESS


def pwd(args: Sequence[str], state: ShellState) -> int:
    """Print the current directory."""
    if len(args) > 1:
        _error(state, "pwd: too many arguments")
        return EXIT_FAILURE
    try:
        cwd = os.getcwd()
    except OSError as exc:
        _error(state, f"pwd: {exc.strerror or exc}")
        return EXIT_FAILURE
    state.output.write(cwd + "\n")
    return EXIT_SUCCESS


def _valid_name(name: str) -> bool:
    return bool(name) and name[0] in _NAME_START and all(c in _NAME_REST for c in name[1:])


def export(args: Sequence[str], state: ShellState) -> int:
    """Set each NAME=value argument; stop at the first invalid name."""
    for arg in args[1:]:
        if "=" not in arg:
            continue
        name, _, value = arg.partition("=")
        if not _valid_name(name):
            _error(state, f"export: '{arg}': not a valid identifier")
            return EXIT_FAILURE
        state.env.set(name, value)
    return EXIT_SUCCESS


def unset(args: Sequence[str], state: ShellState) -> int:
    """Remove each named variable."""
    for name in args[1:]:
        state.env.unset(name)
    return EXIT_SUCCESS


def env(args: Sequence[str], state: ShellState) -> int:
    """Print every environment entry."""
    if len(args) > 1:
        _error(state, "env: too many arguments")
        return EXIT_FAILURE
    state.output.write("".join(f"{entry}\n" for entry in state.env.as_list()))
    return EXIT_SUCCESS


def exit_shell(args: Sequence[str], state: ShellState) -> int:
    """Leave the shell by raising ShellExit.

    A status outside 0..255 becomes 0, as does a non-numeric argument,
    which is also reported. With too many arguments nothing happens.
    """
    if len(args) > 2:
        _error(state, "exit: too many arguments")
        return EXIT_FAILURE
    status = EXIT_SUCCESS
    if len(args) == 2:
        arg = args[1]
        if not all(char in _DIGITS for char in arg):
            _error(state, f"exit: {arg}: numeric argument required")
        else:
            number = int(arg) if arg else 0
            if 0 <= number <= 255:
                status = number
    state.output.write("exit\n")
    state.output.flush()
    state.reset()
    raise ShellExit(status)


_BUILTINS: dict[str, Callable[[Sequence[str], ShellState], int]] = {
    "echo": echo,
    "cd": cd,
    "pwd": pwd,
    "export": export,
    "unset": unset,
    "env": env,
    "exit": exit_shell,
}


def is_builtin(name: str) -> bool:
    """Whether the shell runs this command itself."""
    return name in _BUILTINS


def run_builtin(args: Sequence[str], state: ShellState) -> int:
    """Run a builtin, record its status in the state and return it."""
    if not args or args[0] not in _BUILTINS:
        raise ValueError(f"not a builtin: {args[0] if args else ''!r}")
    result = _BUILTINS[args[0]](args, state)
    state.last_status = result
    return result