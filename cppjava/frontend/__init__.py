"""Frontend package - converts C++ source to an AST."""

from .parse import ParseError, Parser, parse
from .tokens import Lexer, Token, tokenize

__all__ = [
    "Lexer",
    "ParseError",
    "Parser",
    "Token",
    "parse",
    "tokenize",
]
