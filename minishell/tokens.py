"""Lexical analysis of a command line into a flat list of tokens."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Sequence

VALID_COMMANDS = frozenset(
    {"echo", "ls", "cat", "grep", "pwd", "cd", "touch", "mkdir", "-l", "env", "-n", "wc"}
)
VALID_OPERATORS = frozenset({"<", "<<", ">", ">>", "|", "||", "&&"})

_WORD = re.compile(r"[^ |<>]+")


class ShellSyntaxError(Exception):
    """A command line that cannot be tokenized or parsed."""


class TokenType(IntEnum):
    WORD = 0
    PIPE = 1
    REDIR_IN = 2
    REDIR_OUT = 3
    REDIR_APPEND = 4
    HEREDOC = 5
    AND = 6
    OR = 7

    @property
    def is_redirection(self) -> bool:
        return self in _REDIRECTIONS


_REDIRECTIONS = frozenset(
    {TokenType.REDIR_IN, TokenType.REDIR_OUT, TokenType.REDIR_APPEND, TokenType.HEREDOC}
)

_TYPE_STRINGS = {
    TokenType.WORD: "WORD",
    TokenType.PIPE: "|",
    TokenType.REDIR_IN: "<",
    TokenType.REDIR_OUT: ">",
    TokenType.REDIR_APPEND: ">>",
    TokenType.HEREDOC: "<<",
    TokenType.AND: "&&",
    TokenType.OR: "||",
}


@dataclass(frozen=True)
class Token:
    """One token of a command line."""

    type: TokenType
    value: str


def _unexpected(symbol: str) -> ShellSyntaxError:
    return ShellSyntaxError(f"syntax error near unexpected token '{symbol}'")


def tokenize(text: str) -> list[Token]:
    """Split a command line into tokens.

    Quotes are only recognised at the start of a token and are stripped;
    the quoted text becomes a single word.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(text)
    while pos < length:
        char = text[pos]
        following = text[pos + 1 : pos + 2]
        if char == " ":
            pos += 1
        elif char == "|":
            if following == "|":
                tokens.append(Token(TokenType.OR, "||"))
                pos += 2
            else:
                tokens.append(Token(TokenType.PIPE, "|"))
                pos += 1
        elif char == ">":
            if following == ">":
                if text[pos + 2 : pos + 3] != " ":
                    raise _unexpected(">")
                tokens.append(Token(TokenType.REDIR_APPEND, ">>"))
                pos += 2
            elif not following:
                raise _unexpected(">")
            else:
                tokens.append(Token(TokenType.REDIR_OUT, ">"))
                pos += 1
        elif char == "<":
            if following == "<":
                if text[pos + 2 : pos + 3] != " ":
                    raise _unexpected("newline")
                tokens.append(Token(TokenType.HEREDOC, "<<"))
                pos += 2
            else:
                tokens.append(Token(TokenType.REDIR_IN, "<"))
                pos += 1
        elif char in "\"'":
            end = text.find(char, pos + 1)
            if end == -1:
                kind = "double" if char == '"' else "single"
                raise ShellSyntaxError(f"{kind} quote not closed")
            tokens.append(Token(TokenType.WORD, text[pos + 1 : end]))
            pos = end + 1
        elif text.startswith("&&", pos):
            tokens.append(Token(TokenType.AND, "&&"))
            pos += 2
        else:
            match = _WORD.match(text, pos)
            tokens.append(Token(TokenType.WORD, match.group()))
            pos = match.end()
    return tokens


def is_operator(word: str) -> bool:
    """Whether the text is one of the shell's operators."""
    return word in VALID_OPERATORS


def is_command(word: str) -> bool:
    """Whether the text is one of the known command words."""
    return word in VALID_COMMANDS


def count_args(tokens: Iterable[Token]) -> int:
    """Count the words before the first token whose text is an operator."""
    count = 0
    for token in tokens:
        if is_operator(token.value):
            break
        if token.type is TokenType.WORD:
            count += 1
    return count


def is_redirection(token: Token | None) -> bool:
    """Whether the token is one of the four redirection operators."""
    return token is not None and token.type.is_redirection


def token_type_str(token_type: TokenType) -> str:
    """The symbol of a token type, or "WORD" for words."""
    return _TYPE_STRINGS.get(token_type, "unknown")


def format_tokens(tokens: Sequence[Token]) -> str:
    """Render tokens one per line, as a debugging listing."""
    return "".join(
        f"Token: {token.value:<10} | Type: {int(token.type)}\n" for token in tokens
    )