"""C++ tokenizer: lexes source into a flat token list.

Lexical problems never raise here: they become TK_ERROR tokens and the
first one is remembered on the lexer, so dumps still show everything that
was recognised. The parser refuses to run on a stream containing errors.
"""

from __future__ import annotations


# Token type constants
TK_INT = "INT"
TK_FLOAT = "FLOAT"
TK_STRING = "STRING"
TK_CHAR = "CHAR"
TK_IDENT = "IDENT"
TK_OP = "OP"
TK_DIRECTIVE = "DIRECTIVE"
TK_ERROR = "ERROR"
TK_EOF = "EOF"

KEYWORDS: set[str] = {
    "auto",
    "bool",
    "break",
    "case",
    "catch",
    "char",
    "class",
    "const",
    "const_cast",
    "constexpr",
    "continue",
    "default",
    "delete",
    "do",
    "double",
    "dynamic_cast",
    "else",
    "enum",
    "explicit",
    "extern",
    "false",
    "final",
    "float",
    "for",
    "friend",
    "goto",
    "if",
    "inline",
    "int",
    "long",
    "mutable",
    "namespace",
    "new",
    "noexcept",
    "nullptr",
    "operator",
    "override",
    "private",
    "protected",
    "public",
    "register",
    "reinterpret_cast",
    "return",
    "short",
    "signed",
    "sizeof",
    "static",
    "static_cast",
    "struct",
    "switch",
    "template",
    "this",
    "throw",
    "true",
    "try",
    "typedef",
    "typename",
    "union",
    "unsigned",
    "using",
    "virtual",
    "void",
    "volatile",
    "wchar_t",
    "while",
}

# Multi-character operators, sorted by length descending for greedy matching
MULTI_OPS: list[str] = [
    "<<=",
    ">>=",
    "...",
    "::",
    "->",
    "++",
    "--",
    "&&",
    "||",
    "<=",
    ">=",
    "==",
    "!=",
    "<<",
    ">>",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "&=",
    "|=",
    "^=",
]

SINGLE_OPS: set[str] = {
    "+",
    "-",
    "*",
    "/",
    "%",
    "&",
    "|",
    "^",
    "~",
    "!",
    "<",
    ">",
    "=",
    "(",
    ")",
    "[",
    "]",
    "{",
    "}",
    ",",
    ":",
    ";",
    ".",
    "?",
}

# Encoding prefixes accepted (and dropped) in front of string and char literals
LITERAL_PREFIXES: set[str] = {"L", "u", "U", "u8"}

INT_SUFFIXES: set[str] = {"", "u", "l", "ul", "lu", "ll", "ull", "llu"}
FLOAT_SUFFIXES: set[str] = {"", "f", "l"}


class Token:
    """A token with type, value, and position."""

    def __init__(self, type_: str, value: str, line: int, col: int):
        self.type: str = type_
        self.value: str = value
        self.line: int = line
        self.col: int = col

    def __repr__(self) -> str:
        return (
            "Token("
            + self.type
            + ", "
            + repr(self.value)
            + ", "
            + str(self.line)
            + ", "
            + str(self.col)
            + ")"
        )


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_hex(c: str) -> bool:
    return (c >= "0" and c <= "9") or (c >= "a" and c <= "f") or (c >= "A" and c <= "F")


def _is_alpha(c: str) -> bool:
    return (c >= "a" and c <= "z") or (c >= "A" and c <= "Z") or c == "_"


def _is_alnum(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


class Lexer:
    """Single-pass scanner over one source string."""

    def __init__(self, source: str):
        self.source: str = source
        self.pos: int = 0
        self.line: int = 1
        self.col: int = 1
        self.tokens: list[Token] = []
        self.error: str | None = None
        self.error_line: int = 0
        self.error_col: int = 0

    # ── Helpers ──────────────────────────────────────────────

    def _char(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx >= len(self.source):
            return ""
        return self.source[idx]

    def _bump(self, n: int = 1) -> None:
        for _ in range(n):
            if self.pos >= len(self.source):
                return
            if self.source[self.pos] == "\n":
                self.line += 1
                self.col = 1
            else:
                self.col += 1
            self.pos += 1

    def _emit(self, type_: str, value: str, line: int, col: int) -> None:
        self.tokens.append(Token(type_, value, line, col))

    def _fail(self, msg: str, line: int, col: int) -> None:
        if self.error is None:
            self.error = msg
            self.error_line = line
            self.error_col = col
        self._emit(TK_ERROR, msg, line, col)

    def _at_line_start(self) -> bool:
        i = self.pos - 1
        while i >= 0 and self.source[i] in " \t\r":
            i -= 1
        return i < 0 or self.source[i] == "\n"

    # ── Scanning ─────────────────────────────────────────────

    def tokenize(self) -> list[Token]:
        while self.pos < len(self.source):
            c = self._char()
            if c in " \t\r\n\f\v":
                self._bump()
                continue
            if c == "/" and self._char(1) == "/":
                while self.pos < len(self.source) and self._char() != "\n":
                    self._bump()
                continue
            if c == "/" and self._char(1) == "*":
                self._block_comment()
                continue
            if c == "#" and self._at_line_start():
                self._directive()
                continue
            if _is_digit(c) or (c == "." and _is_digit(self._char(1))):
                self._number()
                continue
            if c == '"' or c == "'":
                self._quoted(c, self.line, self.col)
                continue
            if _is_alpha(c):
                self._word()
                continue
            self._operator()
        self._emit(TK_EOF, "", self.line, self.col)
        return self.tokens

    def _block_comment(self) -> None:
        line = self.line
        col = self.col
        self._bump(2)
        while self.pos < len(self.source):
            if self._char() == "*" and self._char(1) == "/":
                self._bump(2)
                return
            self._bump()
        self._fail("unterminated block comment", line, col)

    def _directive(self) -> None:
        line = self.line
        col = self.col
        parts: list[str] = []
        start = self.pos
        while self.pos < len(self.source) and self._char() != "\n":
            if self._char() == "\\" and self._char(1) == "\n":
                parts.append(self.source[start : self.pos].rstrip())
                self._bump(2)
                start = self.pos
                continue
            if self._char() == "/" and self._char(1) == "/":
                break
            self._bump()
        parts.append(self.source[start : self.pos].rstrip())
        text = " ".join(p.strip() for p in parts if p.strip())
        self._emit(TK_DIRECTIVE, text, line, col)

    def _number(self) -> None:
        line = self.line
        col = self.col
        start = self.pos
        is_float = False
        if self._char() == "0" and self._char(1) in ("x", "X", "b", "B"):
            radix_char = self._char(1).lower()
            self._bump(2)
            digits_start = self.pos
            while _is_hex(self._char()) or self._char() == "'":
                if radix_char == "b" and self._char() not in ("0", "1", "'"):
                    break
                self._bump()
            if self.pos == digits_start:
                self._consume_alnum()
                self._fail(
                    "invalid number '" + self.source[start : self.pos] + "'", line, col
                )
                return
        else:
            while _is_digit(self._char()) or (
                self._char() == "'" and _is_digit(self._char(1))
            ):
                self._bump()
            if self._char() == "." and self._char(1) != ".":
                is_float = True
                self._bump()
                while _is_digit(self._char()):
                    self._bump()
            if self._char() in ("e", "E"):
                is_float = True
                self._bump()
                if self._char() in ("+", "-"):
                    self._bump()
                if not _is_digit(self._char()):
                    self._consume_alnum()
                    self._fail(
                        "invalid number '" + self.source[start : self.pos] + "'",
                        line,
                        col,
                    )
                    return
                while _is_digit(self._char()):
                    self._bump()
        body_end = self.pos
        self._consume_alnum()
        suffix = self.source[body_end : self.pos].lower()
        allowed = FLOAT_SUFFIXES if is_float else INT_SUFFIXES
        if suffix not in allowed:
            self._fail(
                "invalid number '" + self.source[start : self.pos] + "'", line, col
            )
            return
        raw = self.source[start : self.pos].replace("'", "")
        self._emit(TK_FLOAT if is_float else TK_INT, raw, line, col)

    def _consume_alnum(self) -> None:
        while _is_alnum(self._char()):
            self._bump()

    def _quoted(self, quote: str, line: int, col: int) -> None:
        """Scan a string or char literal; the token keeps its quotes and escapes."""
        start = self.pos
        self._bump()
        while True:
            c = self._char()
            if c == "" or c == "\n":
                kind = "string" if quote == '"' else "character"
                self._fail("unterminated " + kind + " literal", line, col)
                return
            if c == "\\":
                self._bump(2)
                continue
            self._bump()
            if c == quote:
                break
        raw = self.source[start : self.pos]
        if quote == "'" and raw == "''":
            self._fail("empty character literal", line, col)
            return
        self._emit(TK_STRING if quote == '"' else TK_CHAR, raw, line, col)

    def _word(self) -> None:
        line = self.line
        col = self.col
        start = self.pos
        self._consume_alnum()
        word = self.source[start : self.pos]
        if word in LITERAL_PREFIXES and self._char() in ('"', "'"):
            self._quoted(self._char(), line, col)
            return
        if word in KEYWORDS:
            self._emit(word, word, line, col)
        else:
            self._emit(TK_IDENT, word, line, col)

    def _operator(self) -> None:
        line = self.line
        col = self.col
        for op in MULTI_OPS:
            if self.source.startswith(op, self.pos):
                self._bump(len(op))
                self._emit(TK_OP, op, line, col)
                return
        c = self._char()
        self._bump()
        if c in SINGLE_OPS:
            self._emit(TK_OP, c, line, col)
            return
        self._fail("unexpected character '" + c + "'", line, col)


def tokenize(source: str) -> list[Token]:
    """Tokenize C++ source into a flat list ending with TK_EOF."""
    return Lexer(source).tokenize()
