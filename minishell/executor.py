"""Running syntax trees: commands, pipelines, redirections and operators."""

from __future__ import annotations

import contextlib
import os
import subprocess
import sys
import tempfile
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from typing import IO, Mapping, Sequence, Union

from .ast import Node, NodeType
from .builtins import ShellExit, is_builtin, run_builtin
from .environment import Environment
from .expansion import expand_node
from .state import FatalError, ShellState

EXIT_SUCCESS = 0
COMMAND_NOT_FOUND = 127
CANNOT_EXECUTE = 126

Variables = Union[Environment, Mapping[str, str]]


def execute(node: Node | None, state: ShellState) -> int:
    """Run a syntax tree and return its exit status.

    Words are expanded just before each node runs. ``&&`` runs its right
    side only after success, ``||`` only after failure.
    """
    if node is None:
        return state.last_status
    expand_node(node, state.env, state.last_status)
    if node.type is NodeType.COMMAND:
        return _run_command(node.value, state)
    if node.type is NodeType.PIPE:
        return execute_pipeline(node, state)
    if node.type.is_redirection:
        return _run_redirection(node, state)
    if node.type is NodeType.AND:
        if execute(node.left, state) == 0:
            return execute(node.right, state)
    elif node.type is NodeType.OR:
        if execute(node.left, state) != 0:
            return execute(node.right, state)
    return state.last_status


def count_commands(node: Node | None) -> int:
    """The number of commands in a pipeline rooted at ``node``."""
    count = 1
    while node is not None and node.type is NodeType.PIPE:
        count += 1
        node = node.left
    return count


def _pipeline_stages(node: Node) -> list[Node | None]:
    stages: deque[Node | None] = deque()
    current: Node | None = node
    while current is not None and current.type is NodeType.PIPE:
        stages.appendleft(current.right)
        current = current.left
    stages.appendleft(current)
    return list(stages)


def _run_stage(stage: Node | None, child: ShellState) -> int:
    try:
        return execute(stage, child)
    except ShellExit as exc:
        return exc.status
    except FatalError as exc:
        child.errors.write(f"minishell: {exc}\n")
        return exc.status
    except BrokenPipeError:
        return 1
    finally:
        with contextlib.suppress(BrokenPipeError):
            child.reset()


def execute_pipeline(node: Node, state: ShellState) -> int:
    """Run the commands of a pipeline together, each feeding the next.

    Every command runs with its own copy of the environment, so builtins
    in a pipeline do not change the shell. The status is that of the
    last command.
    """
    state.cmd_count = count_commands(node)
    stages = _pipeline_stages(node)
    children: list[ShellState] = []
    previous_read: IO | None = None
    for position, _stage in enumerate(stages):
        child = ShellState(
            env=Environment(state.env.as_list()),
            pipe=True,
            cmd_count=state.cmd_count,
            last_status=state.last_status,
            stdin=state.input,
            stdout=state.output,
            stderr=state.errors,
        )
        if previous_read is not None:
            child.input_redirect = previous_read
            previous_read = None
        if position < len(stages) - 1:
            read_fd, write_fd = os.pipe()
            child.output_redirect = os.fdopen(write_fd, "w")
            previous_read = os.fdopen(read_fd, "r")
        children.append(child)
    _flush(state.output)
    with ThreadPoolExecutor(max_workers=len(stages)) as pool:
        futures = [
            pool.submit(_run_stage, stage, child) for stage, child in zip(stages, children)
        ]
        statuses = [future.result() for future in futures]
    state.last_status = statuses[-1]
    return state.last_status


def find_in_path(command: str, env: Variables) -> str | None:
    """The first executable ``dir/command`` along PATH, or None."""
    search = env.get("PATH")
    if search is None:
        return None
    for directory in filter(None, search.split(":")):
        candidate = f"{directory}/{command}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def open_infile(path: str) -> IO:
    """Open a file for an input redirection; FatalError if it cannot be read."""
    try:
        return open(path, "r")
    except OSError as exc:
        raise FatalError(path, exc) from exc


def open_outfile(path: str, append: bool = False) -> IO:
    """Open a file for an output redirection, creating it with mode 0644.

    An existing file is written from its start (or its end when appending)
    without being truncated first.
    """
    flags = os.O_CREAT | os.O_RDWR | (os.O_APPEND if append else 0)
    try:
        descriptor = os.open(path, flags, 0o644)
    except OSError as exc:
        raise FatalError(path, exc) from exc
    return os.fdopen(descriptor, "a" if append else "w")


def read_heredoc(delimiter: str, stream: IO) -> str:
    """Read lines from ``stream`` until a line that is exactly the delimiter."""
    end = delimiter + "\n"
    lines = []
    for line in iter(stream.readline, ""):
        if line == end:
            break
        lines.append(line)
    return "".join(lines)


def _heredoc_stream(delimiter: str, state: ShellState) -> IO:
    source = state.stdin if state.stdin is not None else sys.stdin
    buffer = tempfile.TemporaryFile("w+")
    buffer.write(read_heredoc(delimiter, source))
    buffer.seek(0)
    return buffer


def _run_redirection(node: Node, state: ShellState) -> int:
    target = node.file or ""
    if node.type is NodeType.HEREDOC:
        state.redirect_input(_heredoc_stream(target, state))
    elif node.type is NodeType.REDIR_IN:
        state.redirect_input(open_infile(target))
    elif node.type is NodeType.REDIR_OUT:
        state.redirect_output(open_outfile(target, append=False))
    elif node.type is NodeType.APPEND:
        state.redirect_output(open_outfile(target, append=True))
    if node.left is not None:
        return execute(node.left, state)
    if node.right is not None:
        return execute(node.right, state)
    return EXIT_SUCCESS


def _run_command(args: Sequence[str], state: ShellState) -> int:
    if not args:
        state.last_status = EXIT_SUCCESS
        return EXIT_SUCCESS
    name = args[0]
    if is_builtin(name):
        return run_builtin(args, state)
    path = name if os.access(name, os.X_OK) else find_in_path(name, state.env)
    if path is None:
        state.errors.write(f"command not found: {name}\n")
        state.last_status = COMMAND_NOT_FOUND
        return COMMAND_NOT_FOUND
    state.last_status = _spawn(path, args, state)
    return state.last_status


def _fileno(stream: IO) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _flush(stream: IO) -> None:
    with contextlib.suppress(AttributeError, OSError, ValueError):
        stream.flush()


def _spawn(path: str, args: Sequence[str], state: ShellState) -> int:
    source = state.input
    stdin_arg: IO | None = None
    data: str | None = None
    if _fileno(source) is not None:
        stdin_arg = source
    else:
        try:
            data = source.read()
        except (OSError, ValueError):
            data = ""
    out, err = state.output, state.errors
    _flush(out)
    _flush(err)
    stdout_arg = out if _fileno(out) is not None else subprocess.PIPE
    stderr_arg = err if _fileno(err) is not None else subprocess.PIPE
    try:
        completed = subprocess.run(
            list(args),
            executable=path,
            env=state.env.as_dict(),
            stdin=stdin_arg,
            input=data,
            stdout=stdout_arg,
            stderr=stderr_arg,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as exc:
        err.write(f"minishell: {args[0]}: {exc.strerror or exc}\n")
        return CANNOT_EXECUTE
    if stdout_arg is subprocess.PIPE and completed.stdout:
        out.write(completed.stdout)
    if stderr_arg is subprocess.PIPE and completed.stderr:
        err.write(completed.stderr)
    code = completed.returncode
    return 128 - code if code < 0 else code