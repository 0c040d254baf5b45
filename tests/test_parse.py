"""Pytest-based parser tests."""

from pathlib import Path

import pytest

from cppjava import parse
from cppjava.frontend.ast import (
    AssignExpr,
    BinaryExpr,
    Block,
    CallExpr,
    ClassDecl,
    ContainerMethodCall,
    DeclStmt,
    ExprStmt,
    FunctionDecl,
    Identifier,
    Literal,
    MathCall,
    NamedType,
    NamespaceDecl,
    PreprocessorDirective,
    RangeForStmt,
    TemplateClassDecl,
    TemplateType,
    UsingDirective,
    VarDecl,
)
from cppjava.frontend.parse import ParseError, Parser
from cppjava.frontend.tokens import tokenize

PARSE_DIR = Path(__file__).parent / "parse"


def parse_test_file(path: Path) -> list[tuple[str, str, str]]:
    """Parse .tests file into (name, input, expected) tuples.

    Expected is one of: 'ok', 'error: <message>'
    """
    lines = path.read_text().split("\n")
    result: list[tuple[str, str, str]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            test_input = "\n".join(input_lines)
            expected = "\n".join(expected_lines).strip()
            result.append((test_name, test_input, expected))
        else:
            i += 1
    return result


def discover_parse_tests() -> list[tuple[str, str, str]]:
    """Find all parse tests, returns (test_id, input, expected)."""
    results = []
    for test_file in sorted(PARSE_DIR.glob("*.tests")):
        for name, input_code, expected in parse_test_file(test_file):
            results.append((f"{test_file.stem}/{name}", input_code, expected))
    return results


def pytest_generate_tests(metafunc):
    """Parametrize tests over parse test files."""
    if "parse_input" in metafunc.fixturenames:
        params = [
            pytest.param(input_code, expected, id=test_id)
            for test_id, input_code, expected in discover_parse_tests()
        ]
        metafunc.parametrize("parse_input,parse_expected", params)


def test_parse(parse_input: str, parse_expected: str):
    """Verify the parser accepts or rejects each program as expected."""
    if parse_expected == "ok":
        try:
            parse(parse_input)
        except ParseError as e:
            pytest.fail(f"Unexpected parse error: {e}")
        return
    assert parse_expected.startswith("error: "), parse_expected
    with pytest.raises(ParseError) as info:
        parse(parse_input)
    message = parse_expected[len("error: ") :]
    assert message in str(info.value)


def body_of(source: str) -> list:
    """Statements of the first function in source."""
    program = parse(source)
    fn = next(d for d in program.decls if isinstance(d, FunctionDecl))
    assert isinstance(fn.body, Block)
    return fn.body.stmts


def test_declaration_statement():
    (stmt,) = body_of("void f() { int x = 5; }")
    assert isinstance(stmt, DeclStmt)
    decl = stmt.decl
    assert isinstance(decl, VarDecl)
    assert isinstance(decl.typ, NamedType)
    assert decl.typ.name == "int"
    (d,) = decl.declarators
    assert d.name == "x"
    assert isinstance(d.init, Literal)
    assert (d.init.value, d.init.kind) == ("5", "int")


def test_assignment_statement():
    (stmt,) = body_of("void f() { x = 5; }")
    assert isinstance(stmt, ExprStmt)
    assert isinstance(stmt.expr, AssignExpr)
    assert stmt.expr.op == "="
    assert isinstance(stmt.expr.target, Identifier)


def test_static_const_flags():
    program = parse("static const int LIMIT = 10;")
    (decl,) = program.decls
    assert isinstance(decl, VarDecl)
    assert decl.is_static
    assert decl.is_const


def test_multiple_declarators():
    (stmt,) = body_of("void f() { int a = 1, b, c = 3; }")
    assert [d.name for d in stmt.decl.declarators] == ["a", "b", "c"]
    assert stmt.decl.declarators[1].init is None


def test_library_template_type():
    (stmt,) = body_of("void f() { vector<int> v; }")
    typ = stmt.decl.typ
    assert isinstance(typ, TemplateType)
    assert typ.name == "vector"
    assert [a.name for a in typ.args] == ["int"]


def test_nested_template_closing_shift():
    (stmt,) = body_of("void f() { vector<vector<int>> g; }")
    outer = stmt.decl.typ
    assert isinstance(outer, TemplateType)
    inner = outer.args[0]
    assert isinstance(inner, TemplateType)
    assert inner.name == "vector"


def test_rejected_template_arguments_keep_shift_operator():
    (stmt,) = body_of("int f(int a, int b) { bool r = (a < b >> 1); }")
    init = stmt.decl.declarators[0].init
    assert isinstance(init, BinaryExpr)
    assert init.op == "<"
    assert isinstance(init.right, BinaryExpr)
    assert init.right.op == ">>"


def test_shift_inside_parenthesized_assignment():
    stmts = body_of("int f(int a, int b) { bool r; r = (a < b >> 1); return r; }")
    assign = stmts[1].expr
    assert isinstance(assign, AssignExpr)
    assert assign.value.op == "<"
    assert assign.value.right.op == ">>"


def test_parser_leaves_token_list_untouched():
    tokens = tokenize("vector<vector<int>> v;")
    count = len(tokens)
    Parser(tokens).parse_program()
    assert len(tokens) == count
    assert [t.value for t in tokens].count(">>") == 1


def test_shift_expression_is_not_declaration():
    (stmt,) = body_of('void f() { cout << "hi" << endl; }')
    assert isinstance(stmt, ExprStmt)
    assert isinstance(stmt.expr, BinaryExpr)
    assert stmt.expr.op == "<<"


def test_container_method_call():
    (stmt,) = body_of("void f() { v.push_back(1); }")
    call = stmt.expr
    assert isinstance(call, ContainerMethodCall)
    assert call.method == "push_back"
    assert len(call.args) == 1


def test_math_call_recognised():
    (stmt,) = body_of("void f() { y = sqrt(x); }")
    assert isinstance(stmt.expr.value, MathCall)
    assert stmt.expr.value.name == "sqrt"


def test_unknown_function_stays_call():
    (stmt,) = body_of("void f() { helper(1, 2); }")
    assert isinstance(stmt.expr, CallExpr)
    assert len(stmt.expr.args) == 2


def test_range_for_bindings():
    (stmt,) = body_of("void f() { for (const auto& [k, v] : m) { } }")
    assert isinstance(stmt, RangeForStmt)
    assert stmt.bindings == ["k", "v"]


def test_template_class():
    program = parse("template <typename K, typename V> class Table { K key; V value; };")
    (decl,) = program.decls
    assert isinstance(decl, TemplateClassDecl)
    assert [p.name for p in decl.params] == ["K", "V"]
    assert decl.decl.name == "Table"
    assert len(decl.decl.private) == 2


def test_multiple_bases():
    program = parse("class A {}; class B {}; class C : public A, public B {};")
    cls = program.decls[2]
    assert isinstance(cls, ClassDecl)
    assert len(cls.bases) == 2
    assert [b.access for b in cls.bases] == ["public", "public"]


def test_default_access():
    program = parse("struct S { int a; }; class K { int b; public: int c; };")
    s, k = program.decls
    assert len(s.public) == 1
    assert len(k.private) == 1
    assert len(k.public) == 1


def test_forward_declaration():
    program = parse("class Node;")
    (decl,) = program.decls
    assert isinstance(decl, ClassDecl)
    assert decl.is_forward


def test_out_of_line_definitions():
    program = parse(
        "class Counter { public: Counter(); void inc(); int n; };\n"
        "Counter::Counter() : n(0) {}\n"
        "void Counter::inc() { n++; }\n"
    )
    ctor = program.decls[1]
    method = program.decls[2]
    assert isinstance(ctor, FunctionDecl)
    assert ctor.is_constructor
    assert ctor.scope == ["Counter"]
    assert [i.name for i in ctor.initializers] == ["n"]
    assert method.name == "inc"
    assert method.scope == ["Counter"]


def test_pure_virtual_member():
    program = parse("class Shape { public: virtual double area() const = 0; };")
    fn = program.decls[0].public[0]
    assert fn.is_virtual
    assert fn.is_pure
    assert fn.is_const
    assert fn.body is None


def test_top_level_directive_and_using():
    program = parse("#include <vector>\nusing namespace std;\nnamespace util { int k; }")
    directive, using, ns = program.decls
    assert isinstance(directive, PreprocessorDirective)
    assert directive.text == "#include <vector>"
    assert isinstance(using, UsingDirective)
    assert using.is_namespace
    assert isinstance(ns, NamespaceDecl)
    assert ns.name == "util"


def test_parse_error_location():
    with pytest.raises(ParseError) as info:
        parse("int main() {\n  x = 1\n}")
    err = info.value
    assert err.msg == "expected ';' after expression"
    assert (err.line, err.col) == (3, 1)
    assert str(err) == "expected ';' after expression at line 3 col 1"


def test_lexical_error_reported_by_parser():
    with pytest.raises(ParseError) as info:
        parse("int a = 1;\nint b = @;")
    assert info.value.msg == "lexical error: unexpected character '@'"
    assert (info.value.line, info.value.col) == (2, 9)
