"""Syntax tree nodes for parsed command lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable


class NodeType(IntEnum):
    COMMAND = 0
    PIPE = 1
    REDIR_OUT = 2
    REDIR_IN = 3
    APPEND = 4
    HEREDOC = 5
    AND = 6
    OR = 7

    @property
    def is_redirection(self) -> bool:
        return NodeType.REDIR_OUT <= self <= NodeType.HEREDOC


_SYMBOLS = {
    NodeType.PIPE: "|",
    NodeType.REDIR_IN: "<",
    NodeType.REDIR_OUT: ">",
    NodeType.APPEND: ">>",
    NodeType.HEREDOC: "<<",
    NodeType.AND: "&&",
    NodeType.OR: "||",
}

_REDIR_LABELS = {
    NodeType.REDIR_OUT: "REDIRECTION_OUT",
    NodeType.REDIR_IN: "REDIRECTION_IN",
    NodeType.APPEND: "REDIRECTION_APPEND",
    NodeType.HEREDOC: "HEREDOC",
}


@dataclass
class Node:
    """A node of the syntax tree.

    Commands keep their words in ``value``; redirections keep their target
    in ``file``; operators use ``left`` and ``right``.
    """

    type: NodeType = NodeType.COMMAND
    value: list[str] = field(default_factory=list)
    file: str | None = None
    args: list[str] = field(default_factory=list)
    left: Node | None = None
    right: Node | None = None

    def add_argument(self, arg: str) -> Node:
        """Append an extra argument and return the node."""
        self.args.append(arg)
        return self


def command_node(args: Iterable[str]) -> Node:
    """A command node holding the given words."""
    return Node(NodeType.COMMAND, value=list(args))


def operator_node(node_type: NodeType, left: Node | None, right: Node | None) -> Node:
    """An operator or redirection node with the given children."""
    return Node(node_type, left=left, right=right)


def node_type_symbol(node_type: NodeType) -> str:
    """The operator symbol of a node type, or "unknown" for commands."""
    return _SYMBOLS.get(node_type, "unknown")


def _describe(node: Node) -> str:
    if node.type is NodeType.COMMAND:
        return "Commande: " + "".join(f"{word} " for word in node.value)
    if node.type is NodeType.PIPE:
        return "PIPE"
    if node.type.is_redirection:
        target = node.file if node.file is not None else "No file"
        return f"{_REDIR_LABELS[node.type]} -> {target}"
    if node.type is NodeType.AND:
        return "LOGICAL AND (&&)"
    return "LOGICAL OR (||)"


def format_ast(node: Node | None, level: int = 0) -> str:
    """Render a tree, one node per line, children indented by two spaces."""
    if node is None:
        return ""
    return (
        "  " * level
        + _describe(node)
        + "\n"
        + format_ast(node.left, level + 1)
        + format_ast(node.right, level + 1)
    )