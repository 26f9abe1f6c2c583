import pytest

from minishell.tokens import (
    ShellSyntaxError,
    Token,
    TokenType,
    count_args,
    format_tokens,
    is_command,
    is_operator,
    is_redirection,
    token_type_str,
    tokenize,
)


def types(text):
    return [token.type for token in tokenize(text)]


def test_single_quoted_word_is_one_token():
    assert tokenize("echo 'Hello World'") == [
        Token(TokenType.WORD, "echo"),
        Token(TokenType.WORD, "Hello World"),
    ]


def test_double_quoted_word_is_one_token():
    assert tokenize('echo "a | b"') == [
        Token(TokenType.WORD, "echo"),
        Token(TokenType.WORD, "a | b"),
    ]


def test_output_redirection():
    tokens = tokenize("echo Hello > file.txt")
    assert [t.type for t in tokens] == [
        TokenType.WORD,
        TokenType.WORD,
        TokenType.REDIR_OUT,
        TokenType.WORD,
    ]
    assert tokens[-1].value == "file.txt"


def test_append_redirection():
    assert types("echo Hello >> file.txt") == [
        TokenType.WORD,
        TokenType.WORD,
        TokenType.REDIR_APPEND,
        TokenType.WORD,
    ]


def test_pipe():
    assert types("echo Hello | grep Hello") == [
        TokenType.WORD,
        TokenType.WORD,
        TokenType.PIPE,
        TokenType.WORD,
        TokenType.WORD,
    ]


def test_logical_and_and_or():
    assert types("echo Hello && echo World")[2] is TokenType.AND
    assert types("echo Hello || echo World")[2] is TokenType.OR


def test_operators_need_no_spaces():
    assert types("a|b") == [TokenType.WORD, TokenType.PIPE, TokenType.WORD]
    assert tokenize("a>b")[1] == Token(TokenType.REDIR_OUT, ">")


def test_redirection_at_end_is_error():
    with pytest.raises(ShellSyntaxError, match="unexpected token '>'"):
        tokenize("echo Hello >")


def test_triple_greater_is_error():
    with pytest.raises(ShellSyntaxError, match="unexpected token '>'"):
        tokenize("echo Hello >>> file.txt")


def test_append_without_space_is_error():
    with pytest.raises(ShellSyntaxError):
        tokenize("echo Hello >>file.txt")


def test_heredoc():
    assert tokenize("cat << EOF")[1] == Token(TokenType.HEREDOC, "<<")


def test_heredoc_without_space_is_error():
    with pytest.raises(ShellSyntaxError, match="'newline'"):
        tokenize("cat <<EOF")


def test_input_redirection_at_end_is_tokenized():
    assert types("cat <") == [TokenType.WORD, TokenType.REDIR_IN]


def test_empty_line_gives_no_tokens():
    assert tokenize("") == []
    assert tokenize("   ") == []


def test_redirection_followed_by_pipe():
    assert types("echo Hello > |")[2:] == [TokenType.REDIR_OUT, TokenType.PIPE]


def test_leading_pipe():
    assert types("| echo Hello")[0] is TokenType.PIPE


@pytest.mark.parametrize("text", ["echo 'Hello", 'echo "Hello'])
def test_unclosed_quote_is_error(text):
    with pytest.raises(ShellSyntaxError, match="quote not closed"):
        tokenize(text)


def test_single_ampersand_stays_in_word():
    assert tokenize("a&b") == [Token(TokenType.WORD, "a&b")]


def test_quotes_inside_word_are_kept():
    assert tokenize('a"b') == [Token(TokenType.WORD, 'a"b')]


def test_is_operator():
    assert is_operator("||")
    assert is_operator("<<")
    assert not is_operator("echo")


def test_is_command():
    assert is_command("ls")
    assert is_command("wc")
    assert not is_command("rm")


def test_count_args_stops_at_operator():
    assert count_args(tokenize("echo a b | wc")) == 3
    assert count_args(tokenize("ls")) == 1
    assert count_args([]) == 0


def test_is_redirection():
    assert is_redirection(Token(TokenType.HEREDOC, "<<"))
    assert is_redirection(Token(TokenType.REDIR_APPEND, ">>"))
    assert not is_redirection(Token(TokenType.PIPE, "|"))
    assert not is_redirection(None)


def test_token_type_str():
    assert token_type_str(TokenType.WORD) == "WORD"
    assert token_type_str(TokenType.REDIR_APPEND) == ">>"
    assert token_type_str(TokenType.OR) == "||"


def test_format_tokens():
    listing = format_tokens(tokenize("echo | x"))
    lines = listing.splitlines()
    assert len(lines) == 3
    assert lines[0] == "Token: echo       | Type: 0"
    assert lines[1].endswith("| Type: 1")
    assert listing.endswith("\n")