"""cppjava public API: translate a C++ compilation unit into one Java class."""

from __future__ import annotations

from .backend.java import JavaBackend
from .frontend.ast import Program
from .frontend.parse import ParseError as ParseError, Parser
from .frontend.tokens import Token, tokenize as tokenize


def parse(source: str) -> Program:
    """Tokenize and parse C++ source. Raises ParseError on lexical or syntax errors."""
    return Parser(tokenize(source)).parse_program()


def translate(source: str, class_name: str = "Main") -> str:
    """Translate C++ source into the text of a Java compilation unit."""
    return JavaBackend().emit(parse(source), class_name)


__all__ = [
    "JavaBackend",
    "ParseError",
    "Program",
    "Token",
    "parse",
    "tokenize",
    "translate",
]
