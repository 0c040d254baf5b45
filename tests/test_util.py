"""Tests for naming and literal helpers and diagnostics."""

from cppjava.backend.diagnostics import Diagnostic, DiagnosticLog
from cppjava.backend.util import (
    float_literal,
    int_literal,
    java_safe_name,
    java_string_literal,
    parse_int_literal,
    to_pascal,
)


def test_to_pascal():
    assert to_pascal("fib_series") == "FibSeries"
    assert to_pascal("my-prog") == "MyProg"
    assert to_pascal("hello") == "Hello"
    assert to_pascal("2sum") == "Main2sum"
    assert to_pascal("__") == "Main"


def test_java_safe_name():
    assert java_safe_name("final") == "final_"
    assert java_safe_name("count") == "count"


def test_string_literal_escapes():
    assert java_string_literal('"tab\\there"') == '"tab\\there"'
    assert java_string_literal('"\\x41"') == '"\\u0041"'
    assert java_string_literal("'\\a'") == "'\\u0007'"
    assert java_string_literal('"why\\?"') == '"why?"'


def test_int_literal_suffixes():
    assert int_literal("10") == "10"
    assert int_literal("10u") == "10"
    assert int_literal("10ll") == "10L"
    assert int_literal("10ULL") == "10L"


def test_float_literal_suffixes():
    assert float_literal("1.5f") == "1.5f"
    assert float_literal("1.5L") == "1.5"


def test_parse_int_literal():
    assert parse_int_literal("0x1F") == 31
    assert parse_int_literal("017") == 15
    assert parse_int_literal("0b101") == 5
    assert parse_int_literal("42ul") == 42
    assert parse_int_literal("09") is None


def test_diagnostic_repr():
    diag = Diagnostic(3, 7, "unsupported", "goto done")
    assert repr(diag) == "warning:3:7: [unsupported] goto done"


def test_diagnostic_log_filters_by_category():
    log = DiagnosticLog()
    log.add(1, 1, "template", "a")
    log.add(2, 1, "unsupported", "b")
    log.add(3, 1, "template", "c")
    assert len(log) == 3
    assert [d.message for d in log.by_category("template")] == ["a", "c"]
