"""Mutable state shared by the parts of a running shell."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import IO, Iterable, Mapping, Union

from .ast import Node
from .environment import Environment
from .tokens import Token

EXIT_FAILURE = 1


class FatalError(Exception):
    """An error after which the shell, or the child running a command, must stop."""

    def __init__(
        self, context: str, error: OSError | None = None, status: int = EXIT_FAILURE
    ) -> None:
        self.context = context
        self.error = error
        self.status = status
        super().__init__(self.message)

    @property
    def message(self) -> str:
        if self.error is None:
            return self.context
        reason = self.error.strerror or str(self.error)
        return f"{self.context}: {reason}"

    def __str__(self) -> str:
        return self.message


Environ = Union[Mapping[str, str], Iterable[str]]


@dataclass
class ShellState:
    """Environment, redirections and the line currently being run.

    ``input_redirect`` and ``output_redirect`` hold the streams a redirection
    has opened; when they are None the standard streams are used.
    """

    env: Environment = field(default_factory=Environment)
    input_redirect: IO | None = None
    output_redirect: IO | None = None
    pipe: bool = False
    cmd_count: int = 0
    last_status: int = 0
    root: Node | None = None
    tokens: list[Token] = field(default_factory=list)
    stdin: IO | None = None
    stdout: IO | None = None
    stderr: IO | None = None

    @classmethod
    def from_environ(cls, environ: Environ | None = None) -> ShellState:
        """A fresh state holding a copy of the given environment."""
        if environ is None:
            environ = os.environ
        if isinstance(environ, Mapping):
            entries = [f"{name}={value}" for name, value in environ.items()]
        else:
            entries = list(environ)
        return cls(env=Environment(entries))

    @property
    def input(self) -> IO:
        """The stream commands read from."""
        if self.input_redirect is not None:
            return self.input_redirect
        return self.stdin if self.stdin is not None else sys.stdin

    @property
    def output(self) -> IO:
        """The stream commands write to."""
        if self.output_redirect is not None:
            return self.output_redirect
        return self.stdout if self.stdout is not None else sys.stdout

    @property
    def errors(self) -> IO:
        """The stream error messages go to."""
        return self.stderr if self.stderr is not None else sys.stderr

    def redirect_input(self, stream: IO) -> None:
        """Read from ``stream``, closing any earlier input redirection."""
        if self.input_redirect is not None and self.input_redirect is not stream:
            self.input_redirect.close()
        self.input_redirect = stream

    def redirect_output(self, stream: IO) -> None:
        """Write to ``stream``, closing any earlier output redirection."""
        if self.output_redirect is not None and self.output_redirect is not stream:
            self.output_redirect.close()
        self.output_redirect = stream

    def reset(self) -> None:
        """Forget the current line and close its redirections."""
        self.root = None
        self.tokens = []
        if self.input_redirect is not None:
            self.input_redirect.close()
            self.input_redirect = None
        if self.output_redirect is not None:
            self.output_redirect.close()
            self.output_redirect = None