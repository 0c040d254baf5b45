"""Shared utilities for the Java emitter: names and literal spellings."""

from __future__ import annotations

import re

# Java reserved words that need escaping
JAVA_RESERVED = frozenset(
    {
        "abstract",
        "assert",
        "boolean",
        "byte",
        "extends",
        "final",
        "finally",
        "implements",
        "import",
        "instanceof",
        "interface",
        "native",
        "package",
        "strictfp",
        "super",
        "synchronized",
        "throws",
        "transient",
        "var",
        "record",
        "yield",
        "_",
    }
)

_CPP_ESCAPES = {
    "a": "\\u0007",
    "v": "\\u000b",
    "?": "?",
    "e": "\\u001b",
}


def _upper_first(s: str) -> str:
    """Uppercase the first character of a string."""
    return (s[0].upper() + s[1:]) if s else ""


def to_pascal(name: str) -> str:
    """Convert a file stem such as fib_series or my-prog to PascalCase."""
    parts = [p for p in re.split(r"[^A-Za-z0-9]+", name) if p]
    result = "".join(_upper_first(p) for p in parts)
    if not result:
        return "Main"
    if result[0].isdigit():
        return "Main" + result
    return result


def java_safe_name(name: str) -> str:
    """Escape Java reserved words by appending underscore."""
    if name in JAVA_RESERVED:
        return name + "_"
    return name


def java_string_literal(raw: str) -> str:
    """Rewrite a quoted C++ string or char literal for Java.

    Escapes Java lacks (\\a, \\v, \\?, \\xNN) are rewritten; the rest
    pass through unchanged.
    """
    out: list[str] = []
    i = 0
    while i < len(raw):
        c = raw[i]
        if c != "\\" or i + 1 >= len(raw):
            out.append(c)
            i += 1
            continue
        nxt = raw[i + 1]
        if nxt in _CPP_ESCAPES:
            out.append(_CPP_ESCAPES[nxt])
            i += 2
            continue
        if nxt == "x":
            j = i + 2
            while j < len(raw) and j < i + 4 and raw[j] in "0123456789abcdefABCDEF":
                j += 1
            digits = raw[i + 2 : j] or "0"
            out.append("\\u" + digits.rjust(4, "0"))
            i = j
            continue
        out.append(raw[i : i + 2])
        i += 2
    return "".join(out)


def int_literal(raw: str) -> str:
    """Drop unsigned suffixes; l and ll become L."""
    body = raw.rstrip("uUlL")
    suffix = raw[len(body) :]
    if "l" in suffix.lower():
        return body + "L"
    return body


def float_literal(raw: str) -> str:
    """Keep an f suffix, drop an l suffix."""
    if raw[-1] in "lL":
        return raw[:-1]
    return raw


def parse_int_literal(raw: str) -> int | None:
    """Integer value of a C++ integer literal, or None when it is malformed."""
    body = raw.rstrip("uUlL").lower()
    try:
        if body.startswith(("0x", "0b")):
            return int(body, 0)
        if len(body) > 1 and body.startswith("0"):
            return int(body, 8)
        return int(body)
    except ValueError:
        return None
