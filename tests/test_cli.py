"""Tests for the cppjava command-line driver."""

import json

from cppjava.cli import USAGE, main

HELLO = """\
#include <iostream>
using namespace std;
int main() {
    cout << "hi" << endl;
    return 0;
}
"""


def write_source(tmp_path, name: str, text: str) -> str:
    path = tmp_path / name
    path.write_text(text)
    return str(path)


def test_translates_to_stdout(tmp_path, capsys):
    src = write_source(tmp_path, "hello.cpp", HELLO)
    assert main([src]) == 0
    out = capsys.readouterr().out
    assert "public class Hello {" in out
    assert 'System.out.println("hi");' in out


def test_class_name_from_stem(tmp_path, capsys):
    src = write_source(tmp_path, "fib_series.cpp", HELLO)
    assert main([src]) == 0
    assert "public class FibSeries {" in capsys.readouterr().out


def test_class_name_flag(tmp_path, capsys):
    src = write_source(tmp_path, "hello.cpp", HELLO)
    assert main([src, "--class-name", "Greeter"]) == 0
    assert "public class Greeter {" in capsys.readouterr().out


def test_invalid_class_name(tmp_path, capsys):
    src = write_source(tmp_path, "hello.cpp", HELLO)
    assert main([src, "--class-name", "9lives"]) == 2
    assert "invalid class name '9lives'" in capsys.readouterr().err


def test_output_file(tmp_path, capsys):
    src = write_source(tmp_path, "hello.cpp", HELLO)
    dest = tmp_path / "Hello.java"
    assert main([src, "-o", str(dest)]) == 0
    assert capsys.readouterr().out == ""
    assert dest.read_text().startswith("// #include <iostream>")


def test_stop_at_tokens(tmp_path, capsys):
    src = write_source(tmp_path, "hello.cpp", "int x;")
    assert main([src, "--stop-at", "tokens"]) == 0
    tokens = json.loads(capsys.readouterr().out)
    assert tokens[0] == {"type": "int", "value": "int", "line": 1, "col": 1}
    assert tokens[1] == {"type": "IDENT", "value": "x", "line": 1, "col": 5}
    assert tokens[-1]["type"] == "EOF"


def test_stop_at_tokens_reports_lexical_error(tmp_path, capsys):
    src = write_source(tmp_path, "bad.cpp", "int b = @;")
    assert main([src, "--stop-at", "tokens"]) == 1
    assert capsys.readouterr().err.startswith("error:1:9: lexical error:")


def test_stop_at_parse(tmp_path, capsys):
    src = write_source(tmp_path, "hello.cpp", "int x = 1;")
    assert main([src, "--stop-at", "parse"]) == 0
    tree = json.loads(capsys.readouterr().out)
    assert tree["_type"] == "Program"
    assert tree["decls"][0]["_type"] == "VarDecl"


def test_dump_dir(tmp_path, capsys):
    src = write_source(tmp_path, "odd.cpp", "void f() { w.push_back(1); }")
    dump = tmp_path / "dump"
    assert main([src, "--dump-dir", str(dump)]) == 0
    assert (dump / "tokens.json").exists()
    assert (dump / "ast.json").exists()
    diagnostics = (dump / "diagnostics.txt").read_text()
    assert diagnostics.startswith("warning:1:12: [unknown-receiver]")


def test_parse_error_exit_code(tmp_path, capsys):
    src = write_source(tmp_path, "broken.cpp", "int main() {\n  x = 1\n}")
    assert main([src]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "error:3:1: expected ';' after expression\n"


def test_missing_input_file(tmp_path, capsys):
    missing = str(tmp_path / "nope.cpp")
    assert main([missing]) == 1
    assert capsys.readouterr().err == "error: cannot open '" + missing + "'\n"


def test_unknown_flag(capsys):
    assert main(["--frobnicate"]) == 2
    err = capsys.readouterr().err
    assert err.startswith("error: unknown flag '--frobnicate'")
    assert USAGE in err


def test_unknown_phase(capsys):
    assert main(["--stop-at", "emit"]) == 2
    assert "unknown phase 'emit'" in capsys.readouterr().err


def test_flag_missing_value(capsys):
    assert main(["-o"]) == 2
    assert "-o requires an argument" in capsys.readouterr().err


def test_help(capsys):
    assert main(["-h"]) == 0
    assert capsys.readouterr().out == USAGE
