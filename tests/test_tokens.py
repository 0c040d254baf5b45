"""Lexer tests."""

import pytest

from cppjava.frontend.tokens import Lexer, tokenize


def kinds(source: str) -> list[str]:
    return [t.type for t in tokenize(source)]


def values(source: str) -> list[str]:
    return [t.value for t in tokenize(source)[:-1]]


def test_declaration_tokens():
    assert kinds("int x = 5;") == ["int", "IDENT", "OP", "INT", "OP", "EOF"]
    assert values("int x = 5;") == ["int", "x", "=", "5", ";"]


def test_stream_ends_with_single_eof():
    for source in ["", "   \n", "int x;", "// only a comment"]:
        toks = tokenize(source)
        assert toks[-1].type == "EOF"
        assert [t.type for t in toks].count("EOF") == 1


def test_positions_are_one_indexed():
    toks = tokenize("int a;\n  b = 1;")
    assert (toks[0].line, toks[0].col) == (1, 1)
    b = toks[3]
    assert b.value == "b"
    assert (b.line, b.col) == (2, 3)


def test_comments_skipped():
    assert values("a /* block\ncomment */ b // line\nc") == ["a", "b", "c"]


def test_longest_operator_match():
    assert values("a <<= b >> c :: d -> e") == ["a", "<<=", "b", ">>", "c", "::", "d", "->", "e"]


def test_directive_is_one_token():
    toks = tokenize("#include <iostream>\nint x;")
    assert toks[0].type == "DIRECTIVE"
    assert toks[0].value == "#include <iostream>"
    assert toks[1].value == "int"


def test_directive_continuation_lines_joined():
    toks = tokenize("#define SQUARE(x) \\\n    ((x) * (x))\nint y;")
    assert toks[0].type == "DIRECTIVE"
    assert toks[0].value == "#define SQUARE(x) ((x) * (x))"
    assert toks[1].value == "int"
    assert toks[1].line == 3


def test_literals_keep_spelling():
    toks = tokenize(r'"a\n" ' + "'c' 10UL 3.5f 0x1F 1'000")
    assert [(t.type, t.value) for t in toks[:-1]] == [
        ("STRING", r'"a\n"'),
        ("CHAR", "'c'"),
        ("INT", "10UL"),
        ("FLOAT", "3.5f"),
        ("INT", "0x1F"),
        ("INT", "1000"),
    ]


def test_keywords_use_their_own_kind():
    assert kinds("class Foo")[:2] == ["class", "IDENT"]
    assert kinds("nullptr true")[:2] == ["nullptr", "true"]


@pytest.mark.parametrize(
    "source,message",
    [
        ('"abc', "unterminated string literal"),
        ("'a", "unterminated character literal"),
        ("/* never closed", "unterminated block comment"),
        ("int x = 5 @ 3;", "unexpected character '@'"),
        ("''", "empty character literal"),
        ("12abc", "invalid number '12abc'"),
    ],
)
def test_lexical_errors_become_error_tokens(source: str, message: str):
    lexer = Lexer(source)
    toks = lexer.tokenize()
    errors = [t for t in toks if t.type == "ERROR"]
    assert errors, "expected an ERROR token"
    assert errors[0].value == message
    assert lexer.error == message
    assert toks[-1].type == "EOF"


def test_error_position_recorded():
    lexer = Lexer("int a;\nint b = $;")
    lexer.tokenize()
    assert (lexer.error_line, lexer.error_col) == (2, 9)


def test_lexing_continues_after_error():
    toks = tokenize("a $ b")
    assert [t.type for t in toks] == ["IDENT", "ERROR", "IDENT", "EOF"]
