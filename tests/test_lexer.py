import pytest

from minishell.lexer import (
    Token,
    TokenType,
    UnclosedQuoteError,
    count_tokens,
    is_space,
    tokenize,
)


def _words(tokens):
    return [t.content for t in tokens if t.type is TokenType.WORD]


@pytest.mark.parametrize("char", [" ", "\t", "\n", "\r"])
def test_is_space_accepts_blanks(char):
    assert is_space(char) is True


@pytest.mark.parametrize("char", ["a", "\v", "|", ""])
def test_is_space_rejects_others(char):
    assert is_space(char) is False


def test_tokenize_simple_pipeline():
    assert tokenize("ls -l | wc") == [
        Token(TokenType.WORD, "ls"),
        Token(TokenType.WORD, "-l"),
        Token(TokenType.PIPE),
        Token(TokenType.WORD, "wc"),
        Token(TokenType.END),
    ]


def test_tokenize_redirections():
    types = [t.type for t in tokenize("a < b > c >> d << e")]
    assert types == [
        TokenType.WORD,
        TokenType.IN,
        TokenType.WORD,
        TokenType.OUT,
        TokenType.WORD,
        TokenType.APPEND,
        TokenType.WORD,
        TokenType.HEREDOC,
        TokenType.WORD,
        TokenType.END,
    ]


def test_operators_need_no_spaces():
    assert tokenize("a|b>c<<d") == tokenize("a | b > c << d")


def test_quoted_word_keeps_quotes_and_spaces():
    assert _words(tokenize('echo "hello world"')) == ["echo", '"hello world"']


def test_quoted_part_joins_following_text():
    line = '"a b"c'
    assert _words(tokenize(line)) == [line]


def test_mixed_quotes_form_one_word():
    line = "'a'\"b\""
    assert _words(tokenize(line)) == [line]


def test_empty_quotes_form_a_word():
    assert _words(tokenize('echo ""')) == ["echo", '""']


@pytest.mark.parametrize("line", ["echo 'oops", 'echo "oops', "'"])
def test_unclosed_quote_raises(line):
    with pytest.raises(UnclosedQuoteError):
        tokenize(line)
    with pytest.raises(ValueError):
        count_tokens(line)


@pytest.mark.parametrize(
    "line",
    ["ls -l | wc", "cat < in > out", "  echo   a  ", "a|b|c", "x 'y z' w"],
)
def test_count_matches_token_number(line):
    assert count_tokens(line) == len(tokenize(line)) - 1


def test_double_operator_counts_twice():
    assert count_tokens(">>") == count_tokens("> >")
    assert len(tokenize(">>")) == len(tokenize(">"))


def test_tab_inside_word_is_kept():
    line = "a\tb"
    assert _words(tokenize(line)) == [line]
    assert count_tokens(line) == len(line.split())


def test_blank_line_has_only_end():
    assert tokenize("   ") == [Token(TokenType.END)]
    assert count_tokens("   ") == 0


@pytest.mark.parametrize("line", ["", "a", "a | b", "'q' > f"])
def test_last_token_is_end(line):
    tokens = tokenize(line)
    assert tokens[-1] == Token(TokenType.END)
    assert all(t.type is not TokenType.END for t in tokens[:-1])


def test_unclosed_error_message():
    with pytest.raises(UnclosedQuoteError, match="il manque une quote"):
        tokenize('"')