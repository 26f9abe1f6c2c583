"""Turn a token list into a syntax tree."""

from __future__ import annotations

from typing import Sequence

from .ast import Node, NodeType, command_node, operator_node
from .tokens import ShellSyntaxError, Token, TokenType, tokenize

_REDIR_NODES = {
    TokenType.REDIR_OUT: NodeType.REDIR_OUT,
    TokenType.REDIR_APPEND: NodeType.APPEND,
    TokenType.REDIR_IN: NodeType.REDIR_IN,
    TokenType.HEREDOC: NodeType.HEREDOC,
}

_LOGICAL_NODES = {
    TokenType.AND: NodeType.AND,
    TokenType.OR: NodeType.OR,
}

_CANNOT_START = frozenset({TokenType.PIPE, TokenType.AND, TokenType.OR})


def _unexpected(symbol: str) -> ShellSyntaxError:
    return ShellSyntaxError(f"syntax error near unexpected token '{symbol}'")


class _Parser:
    """Recursive parser over a fixed list of tokens."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens = list(tokens)
        self._pos = 0

    def _peek(self, offset: int = 0) -> Token | None:
        index = self._pos + offset
        return self._tokens[index] if index < len(self._tokens) else None

    def _advance(self) -> None:
        self._pos += 1

    def parse(self) -> Node | None:
        if not self._tokens:
            return None
        first = self._tokens[0]
        if first.type in _CANNOT_START:
            raise _unexpected(first.value)
        tree: Node | None = None
        while (token := self._peek()) is not None:
            if token.type.is_redirection:
                tree = self._redirections(tree)
            elif token.type is TokenType.WORD:
                tree = self._word()
            elif token.type is TokenType.PIPE:
                tree = self._pipe(tree)
            else:
                tree = self._logical(tree)
        return tree

    def _command(self) -> Node:
        words = []
        while (token := self._peek()) is not None and token.type is TokenType.WORD:
            words.append(token.value)
            self._advance()
        return command_node(words)

    def _word(self) -> Node:
        token = self._peek()
        if token is None or token.type is not TokenType.WORD:
            raise ShellSyntaxError("syntax error near unexpected token")
        return self._redirections(self._command())

    def _redirections(self, node: Node | None) -> Node | None:
        while (token := self._peek()) is not None and token.type.is_redirection:
            following = self._peek(1)
            if following is not None and (
                following.type.is_redirection or following.type is TokenType.PIPE
            ):
                raise _unexpected(following.value)
            node_type = _REDIR_NODES[token.type]
            self._advance()
            target = self._peek()
            if target is None:
                raise _unexpected("newline")
            if target.type is not TokenType.WORD:
                raise _unexpected(target.value)
            node = operator_node(node_type, node, None)
            node.file = target.value
            self._advance()
            following = self._peek()
            if following is not None and following.type is TokenType.WORD:
                node.left = self._word()
        return node

    def _pipe(self, left: Node | None) -> Node:
        following = self._peek(1)
        if following is None or following.type in _CANNOT_START:
            raise _unexpected("|")
        self._advance()
        right: Node | None = self._command()
        redir: Node | None = None
        while (token := self._peek()) is not None and token.type.is_redirection:
            redir = self._redirections(redir)
            if redir.left is None:
                redir.left = right
            right = redir
        return operator_node(NodeType.PIPE, left, right)

    def _logical(self, left: Node | None) -> Node:
        node_type = _LOGICAL_NODES[self._peek().type]
        self._advance()
        token = self._peek()
        if token is None or token.type is not TokenType.WORD:
            raise ShellSyntaxError("missing command after logical operator")
        right = self._word()
        return operator_node(node_type, left, right)


def parse(tokens: Sequence[Token]) -> Node | None:
    """Build a syntax tree from tokens; None when there are no tokens.

    Raises ShellSyntaxError when the tokens do not form a valid line.
    """
    return _Parser(tokens).parse()


def parse_line(text: str) -> Node | None:
    """Tokenize and parse one command line."""
    return parse(tokenize(text))