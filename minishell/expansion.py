"""Expansion of $NAME and $? in words of a syntax tree."""

from __future__ import annotations

import re
from typing import Mapping, Protocol, Union

from .ast import Node, NodeType

_VARIABLE = re.compile(r"\$(\?|[A-Za-z_][A-Za-z0-9_]*)")


class _Lookup(Protocol):
    def get(self, name: str) -> str | None: ...


Variables = Union[_Lookup, Mapping[str, str]]


def expand_word(word: str, env: Variables, last_status: int) -> str:
    """Replace $? with the last status and $NAME with its value.

    Unset variables expand to nothing; a $ not followed by a name or ?
    stays as it is.
    """

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name == "?":
            return str(last_status)
        value = env.get(name)
        return value if value is not None else ""

    return _VARIABLE.sub(replace, word)


def expand_node(node: Node, env: Variables, last_status: int) -> None:
    """Expand the words of a command node or the target of a redirection, in place."""
    if node.type is NodeType.COMMAND:
        node.value = [
            expand_word(word, env, last_status) if "$" in word else word
            for word in node.value
        ]
    elif node.type.is_redirection and node.file is not None and "$" in node.file:
        node.file = expand_word(node.file, env, last_status)