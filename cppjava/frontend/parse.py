"""C++ parser: recursive descent with checkpoint/restore backtracking.

Declarations and expression statements share a prefix in C++ (``a * b;``,
``Foo x = y;``). Statements that could be either are parsed tentatively as a
declaration first; ``_save``/``_restore`` rewind the cursor when the
tentative path is rejected. Tentative helpers return None instead of
raising.
"""

from __future__ import annotations

import logging

from .ast import (
    AccumulateCall,
    ArrayType,
    AssignExpr,
    BaseSpec,
    BinaryExpr,
    Block,
    BreakStmt,
    CallExpr,
    CaseClause,
    CastExpr,
    CatchClause,
    ClassDecl,
    CommaExpr,
    ContainerMethodCall,
    ContinueStmt,
    Decl,
    DeclStmt,
    Declarator,
    DefaultClause,
    DeleteExpr,
    DoWhileStmt,
    EmptyStmt,
    EnumDecl,
    Enumerator,
    Expr,
    ExprStmt,
    FindCall,
    ForStmt,
    FriendClassDecl,
    FunctionDecl,
    FunctionType,
    GotoStmt,
    Identifier,
    IfStmt,
    InitializerList,
    LabelStmt,
    LambdaExpr,
    Literal,
    MathCall,
    MemberAccess,
    MemberInit,
    NamedType,
    NamespaceDecl,
    NewExpr,
    Param,
    PointerType,
    Pos,
    PreprocessorDirective,
    Program,
    QualifiedId,
    QualifiedName,
    RangeForStmt,
    ReferenceType,
    ReturnStmt,
    SizeofExpr,
    SortCall,
    Stmt,
    StringCall,
    SubscriptExpr,
    SwitchStmt,
    TemplateClassDecl,
    TemplateFunctionDecl,
    TemplateParam,
    TemplateType,
    TernaryExpr,
    ThrowStmt,
    TryStmt,
    TypedefDecl,
    TypeNode,
    UnaryExpr,
    UnionDecl,
    UsingDirective,
    VarDecl,
    WhileStmt,
)
from .tokens import (
    TK_CHAR,
    TK_DIRECTIVE,
    TK_EOF,
    TK_ERROR,
    TK_FLOAT,
    TK_IDENT,
    TK_INT,
    TK_OP,
    TK_STRING,
    Token,
)

logger = logging.getLogger(__name__)

ASSIGN_OPS: set[str] = {
    "=",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "&=",
    "|=",
    "^=",
    "<<=",
    ">>=",
}

PRIMITIVE_WORDS: set[str] = {
    "void",
    "bool",
    "char",
    "wchar_t",
    "short",
    "int",
    "long",
    "float",
    "double",
    "signed",
    "unsigned",
    "auto",
}

DECL_SPECIFIERS: set[str] = {
    "static",
    "inline",
    "virtual",
    "explicit",
    "constexpr",
    "extern",
    "friend",
    "mutable",
    "volatile",
    "register",
    "const",
}

# Library names that may start a declaration such as `string s = ...`
LIBRARY_TYPES: set[str] = {
    "string",
    "wstring",
    "vector",
    "list",
    "deque",
    "map",
    "unordered_map",
    "multimap",
    "set",
    "unordered_set",
    "multiset",
    "stack",
    "queue",
    "priority_queue",
    "bitset",
    "array",
    "pair",
    "tuple",
    "optional",
    "variant",
    "any",
    "function",
    "unique_ptr",
    "shared_ptr",
    "weak_ptr",
    "thread",
    "mutex",
    "recursive_mutex",
    "lock_guard",
    "unique_lock",
    "scoped_lock",
    "atomic",
    "size_t",
    "int8_t",
    "int16_t",
    "int32_t",
    "int64_t",
    "uint8_t",
    "uint16_t",
    "uint32_t",
    "uint64_t",
    "stringstream",
    "ostringstream",
    "istringstream",
    "ostream",
    "istream",
    "exception",
    "runtime_error",
    "logic_error",
    "invalid_argument",
    "out_of_range",
}

# Names after which `<` opens a template argument list in expressions
TEMPLATE_NAMES: set[str] = {
    "vector",
    "list",
    "deque",
    "map",
    "unordered_map",
    "set",
    "unordered_set",
    "stack",
    "queue",
    "priority_queue",
    "bitset",
    "array",
    "pair",
    "tuple",
    "optional",
    "function",
    "unique_ptr",
    "shared_ptr",
    "atomic",
    "make_pair",
    "make_tuple",
    "make_unique",
    "make_shared",
    "greater",
    "less",
    "numeric_limits",
    "lock_guard",
    "unique_lock",
}

# Method names that turn obj.m(args) into a ContainerMethodCall
CONTAINER_METHOD_NAMES: set[str] = {
    "push_back",
    "emplace_back",
    "pop_back",
    "push_front",
    "emplace_front",
    "pop_front",
    "push",
    "emplace",
    "pop",
    "top",
    "front",
    "back",
    "size",
    "length",
    "empty",
    "clear",
    "at",
    "insert",
    "erase",
    "find",
    "rfind",
    "count",
    "contains",
    "begin",
    "end",
    "rbegin",
    "rend",
    "substr",
    "c_str",
    "append",
    "compare",
    "reserve",
    "resize",
    "set",
    "reset",
    "test",
    "flip",
    "join",
    "detach",
    "lock",
    "unlock",
    "load",
    "store",
    "fetch_add",
    "fetch_sub",
    "exchange",
}

# Recognised library calls: name -> accepted argument counts
MATH_FUNCS: dict[str, set[int]] = {
    "sqrt": {1},
    "pow": {2},
    "abs": {1},
    "fabs": {1},
    "floor": {1},
    "ceil": {1},
    "sin": {1},
    "cos": {1},
    "tan": {1},
    "asin": {1},
    "acos": {1},
    "atan": {1},
    "atan2": {2},
    "exp": {1},
    "log": {1},
    "log10": {1},
    "log2": {1},
    "round": {1},
    "fmod": {2},
    "hypot": {2},
    "cbrt": {1},
    "min": {2},
    "max": {2},
    "fmin": {2},
    "fmax": {2},
    "trunc": {1},
}

STRING_FUNCS: dict[str, set[int]] = {
    "to_string": {1},
    "stoi": {1},
    "stol": {1},
    "stoll": {1},
    "stod": {1},
    "stof": {1},
    "atoi": {1},
    "strlen": {1},
    "strcmp": {2},
    "strcpy": {2},
    "strcat": {2},
    "toupper": {1},
    "tolower": {1},
    "isdigit": {1},
    "isalpha": {1},
    "isspace": {1},
    "isupper": {1},
    "islower": {1},
    "isalnum": {1},
}


class ParseError(Exception):
    """Parse error with location info."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        super().__init__(msg + " at line " + str(line) + " col " + str(col))


def _type_head(typ: TypeNode) -> str:
    """Last name component of a type, looking through pointers and references."""
    while isinstance(typ, (PointerType, ReferenceType, ArrayType)):
        typ = typ.base if not isinstance(typ, ArrayType) else typ.element
    if isinstance(typ, NamedType):
        return typ.name
    if isinstance(typ, QualifiedName):
        return typ.parts[-1]
    if isinstance(typ, TemplateType):
        return typ.name.split("::")[-1]
    return ""


def _normalize_builtin(words: list[str]) -> str:
    """unsigned long int -> unsigned long, signed -> int, ..."""
    rest = [w for w in words if w != "int"]
    if rest and rest[0] == "signed" and rest != ["signed", "char"]:
        rest = rest[1:]
    if rest == ["unsigned"]:
        return "unsigned int"
    return " ".join(rest) or "int"


class Parser:
    """Recursive descent parser for the supported C++ subset."""

    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = list(tokens)
        self.pos: int = 0
        self._splits: list[tuple[int, Token]] = []  # (index, original `>>`) of each split
        self.known_types: set[str] = set(LIBRARY_TYPES)
        self.template_names: set[str] = set(TEMPLATE_NAMES)
        self.class_stack: list[str] = []

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int) -> Token:
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[len(self.tokens) - 1]
        return self.tokens[idx]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.type != TK_EOF:
            self.pos += 1
        return tok

    def check(self, value: str) -> bool:
        tok = self.current()
        return tok.value == value and tok.type not in (TK_STRING, TK_CHAR)

    def match(self, value: str) -> bool:
        if self.check(value):
            self.advance()
            return True
        return False

    def at_type(self, type_: str) -> bool:
        return self.current().type == type_

    def at_ident(self) -> bool:
        return self.current().type == TK_IDENT

    def expect(self, value: str, msg: str | None = None) -> Token:
        tok = self.current()
        if not self.check(value):
            if msg is None:
                msg = "expected '" + value + "', got '" + self._describe(tok) + "'"
            raise self.error(msg)
        return self.advance()

    def expect_ident(self) -> Token:
        tok = self.current()
        if tok.type != TK_IDENT:
            raise self.error("expected identifier, got '" + self._describe(tok) + "'")
        return self.advance()

    def error(self, msg: str) -> ParseError:
        tok = self.current()
        return ParseError(msg, tok.line, tok.col)

    def _describe(self, tok: Token) -> str:
        if tok.type == TK_EOF:
            return "end of input"
        return tok.value

    def _pos(self) -> Pos:
        tok = self.current()
        return Pos(tok.line, tok.col)

    def _save(self) -> tuple[int, int]:
        return (self.pos, len(self._splits))

    def _restore(self, mark: tuple[int, int]) -> None:
        """Rewind the cursor and rejoin any `>>` split after the mark."""
        pos, n_splits = mark
        while len(self._splits) > n_splits:
            idx, original = self._splits.pop()
            self.tokens[idx : idx + 2] = [original]
        self.pos = pos

    def _split_shift(self) -> None:
        """Turn a `>>` closing two template argument lists into two `>` tokens."""
        tok = self.current()
        self._splits.append((self.pos, tok))
        self.tokens[self.pos] = Token(TK_OP, ">", tok.line, tok.col)
        self.tokens.insert(self.pos + 1, Token(TK_OP, ">", tok.line, tok.col + 1))

    def _is_known_type(self, typ: TypeNode) -> bool:
        while isinstance(typ, (PointerType, ReferenceType)):
            typ = typ.base
        if isinstance(typ, NamedType):
            first = typ.name.split(" ")[0]
            return first in PRIMITIVE_WORDS or typ.name in self.known_types
        if isinstance(typ, QualifiedName):
            return typ.parts[0] == "std" or typ.parts[-1] in self.known_types
        if isinstance(typ, TemplateType):
            head = typ.name.split("::")
            return (
                head[0] == "std"
                or head[-1] in self.known_types
                or head[-1] in self.template_names
            )
        return False

    def _starts_definite_decl(self) -> bool:
        tok = self.current()
        if tok.type == TK_IDENT:
            return False
        if tok.value in PRIMITIVE_WORDS or tok.value in DECL_SPECIFIERS:
            return True
        return tok.value == "typename"

    # ── Top Level ────────────────────────────────────────────

    def parse_program(self) -> Program:
        for tok in self.tokens:
            if tok.type == TK_ERROR:
                raise ParseError("lexical error: " + tok.value, tok.line, tok.col)
        decls: list[Decl] = []
        while not self.at_type(TK_EOF):
            if self.match(";"):
                continue
            decls.append(self.parse_decl())
        return Program(decls)

    def parse_decl(self, ctx: str = "namespace") -> Decl:
        tok = self.current()
        if tok.type == TK_DIRECTIVE:
            self.advance()
            return PreprocessorDirective(Pos(tok.line, tok.col), tok.value)
        if tok.value == "template":
            return self.parse_template(ctx)
        if tok.value == "namespace":
            return self.parse_namespace()
        if tok.value == "using":
            return self.parse_using()
        if tok.value == "typedef":
            return self.parse_typedef()
        if tok.value in ("class", "struct", "union", "enum"):
            if self._is_elaborated_var():
                self.advance()
                return self.parse_function_or_var(ctx)
            if tok.value == "enum":
                return self.parse_enum()
            if tok.value == "union":
                return self.parse_union()
            return self.parse_class()
        return self.parse_function_or_var(ctx)

    def _is_elaborated_var(self) -> bool:
        """struct Point p; / enum Color c = RED; (keyword used as a type prefix)."""
        if self.peek(1).type != TK_IDENT:
            return False
        nxt = self.peek(2)
        return nxt.type == TK_IDENT or nxt.value in ("*", "&")

    def parse_namespace(self) -> NamespaceDecl:
        pos = self._pos()
        self.expect("namespace")
        name: str | None = None
        if self.at_ident():
            parts = [self.advance().value]
            while self.match("::"):
                parts.append(self.expect_ident().value)
            name = "::".join(parts)
        self.expect("{")
        decls: list[Decl] = []
        while not self.check("}"):
            if self.at_type(TK_EOF):
                raise self.error("unterminated namespace")
            if self.match(";"):
                continue
            decls.append(self.parse_decl())
        self.expect("}")
        return NamespaceDecl(pos, name, decls)

    def parse_using(self) -> Decl:
        pos = self._pos()
        self.expect("using")
        if self.match("namespace"):
            name = self._qualified_text()
            self.expect(";")
            return UsingDirective(pos, name, True)
        if self.at_ident() and self.peek(1).value == "=":
            name = self.advance().value
            self.advance()
            typ = self.parse_type()
            self.expect(";")
            self.known_types.add(name)
            return TypedefDecl(pos, name, typ)
        self.match("typename")
        name = self._qualified_text()
        self.expect(";")
        return UsingDirective(pos, name, False)

    def _qualified_text(self) -> str:
        self.match("::")
        parts = [self.expect_ident().value]
        while self.match("::"):
            parts.append(self.expect_ident().value)
        return "::".join(parts)

    def parse_typedef(self) -> Decl:
        pos = self._pos()
        self.expect("typedef")
        if self.current().value in ("struct", "class", "union", "enum") and (
            self.peek(1).value == "{" or self.peek(2).value == "{"
        ):
            return self._parse_typedef_body(pos)
        base = self.parse_type(suffix=False)
        typ = self._declarator_prefix(base)
        name = self.expect_ident().value
        typ = self._array_suffix(typ)
        self.expect(";")
        self.known_types.add(name)
        return TypedefDecl(pos, name, typ)

    def _parse_typedef_body(self, pos: Pos) -> Decl:
        """typedef struct [Tag] { ... } Name; (the alias names the type)."""
        kw = self.advance().value
        tag: str | None = None
        if self.at_ident():
            tag = self.advance().value
        if kw == "enum":
            enumerators = self._enum_body()
            alias = self.expect_ident().value
            self.expect(";")
            self.known_types.add(alias)
            return EnumDecl(pos, alias, enumerators)
        alias_mark = self._save()
        depth = 0
        while True:
            tok = self.advance()
            if tok.type == TK_EOF:
                raise self.error("unterminated typedef body")
            if tok.value == "{":
                depth += 1
            elif tok.value == "}":
                depth -= 1
                if depth == 0:
                    break
        alias = self.expect_ident().value
        self._restore(alias_mark)
        self.known_types.add(alias)
        if tag is not None:
            self.known_types.add(tag)
        if kw == "union":
            members = self._union_body()
            decl: Decl = UnionDecl(pos, alias, members)
        else:
            decl = self._class_body(pos, alias, kw == "struct")
        self.expect_ident()
        self.expect(";")
        return decl

    # ── Templates ────────────────────────────────────────────

    def parse_template(self, ctx: str) -> Decl:
        pos = self._pos()
        self.expect("template")
        self.expect("<")
        params: list[TemplateParam] = []
        while not self.check(">"):
            params.append(self.parse_template_param())
            if not self.match(","):
                break
        self._expect_close_angle()
        for p in params:
            if p.kind == "type":
                self.known_types.add(p.name)
        if self.current().value in ("class", "struct"):
            cls = self.parse_class()
            self.template_names.add(cls.name)
            return TemplateClassDecl(pos, params, cls)
        decl = self.parse_function_or_var(ctx)
        if not isinstance(decl, FunctionDecl):
            raise ParseError("expected function or class after template", pos.line, pos.col)
        self.template_names.add(decl.name)
        return TemplateFunctionDecl(pos, params, decl)

    def parse_template_param(self) -> TemplateParam:
        pos = self._pos()
        if self.current().value in ("typename", "class"):
            self.advance()
            self.match("...")
            name = self.expect_ident().value if self.at_ident() else "T"
            default: TypeNode | Expr | None = None
            if self.match("="):
                default = self.parse_type()
            return TemplateParam(pos, name, "type", None, default)
        typ = self.parse_type()
        name = self.expect_ident().value
        value_default: TypeNode | Expr | None = None
        if self.match("="):
            value_default = self.parse_ternary()
        return TemplateParam(pos, name, "value", typ, value_default)

    def _expect_close_angle(self) -> None:
        if self.check(">>"):
            self._split_shift()
        self.expect(">")

    # ── Classes, enums, unions ───────────────────────────────

    def parse_class(self) -> ClassDecl:
        pos = self._pos()
        kw = self.advance().value
        name = self.expect_ident().value
        self.known_types.add(name)
        if self.match(";"):
            return ClassDecl(pos, name, kw == "struct", is_forward=True)
        cls = self._class_body(pos, name, kw == "struct")
        self.expect(";", "expected ';' after class definition")
        return cls

    def _class_body(self, pos: Pos, name: str, is_struct: bool) -> ClassDecl:
        self.match("final")
        bases: list[BaseSpec] = []
        if self.match(":"):
            while True:
                bases.append(self._base_spec(is_struct))
                if not self.match(","):
                    break
        self.expect("{")
        cls = ClassDecl(pos, name, is_struct, bases)
        sections = {"public": cls.public, "protected": cls.protected, "private": cls.private}
        access = "public" if is_struct else "private"
        self.class_stack.append(name)
        while not self.check("}"):
            if self.at_type(TK_EOF):
                raise self.error("unterminated class body")
            if self.current().value in sections and self.peek(1).value == ":":
                access = self.advance().value
                self.advance()
                continue
            if self.match(";"):
                continue
            sections[access].append(self.parse_member(name))
        self.class_stack.pop()
        self.expect("}")
        return cls

    def _base_spec(self, is_struct: bool) -> BaseSpec:
        pos = self._pos()
        access = "public" if is_struct else "private"
        is_virtual = False
        while self.current().value in ("public", "protected", "private", "virtual"):
            word = self.advance().value
            if word == "virtual":
                is_virtual = True
            else:
                access = word
        typ = self.parse_type(suffix=False)
        return BaseSpec(pos, typ, access, is_virtual)

    def parse_member(self, class_name: str) -> Decl:
        tok = self.current()
        if tok.value == "friend" and self.peek(1).value in ("class", "struct"):
            pos = self._pos()
            self.advance()
            self.advance()
            name = self.expect_ident().value
            self.expect(";")
            return FriendClassDecl(pos, name)
        if tok.value in ("class", "struct", "union", "enum", "template", "using", "typedef"):
            return self.parse_decl("class")
        if tok.type == TK_DIRECTIVE:
            return self.parse_decl("class")
        return self.parse_function_or_var("class")

    def parse_enum(self) -> EnumDecl:
        pos = self._pos()
        self.expect("enum")
        is_scoped = self.match("class") or self.match("struct")
        name: str | None = None
        if self.at_ident():
            name = self.advance().value
            self.known_types.add(name)
        underlying: TypeNode | None = None
        if self.match(":"):
            underlying = self.parse_type()
        if self.match(";"):
            return EnumDecl(pos, name, [], is_scoped, underlying)
        enumerators = self._enum_body()
        self.expect(";", "expected ';' after enum definition")
        return EnumDecl(pos, name, enumerators, is_scoped, underlying)

    def _enum_body(self) -> list[Enumerator]:
        self.expect("{")
        enumerators: list[Enumerator] = []
        while not self.check("}"):
            pos = self._pos()
            name = self.expect_ident().value
            value: Expr | None = None
            if self.match("="):
                value = self.parse_ternary()
            enumerators.append(Enumerator(pos, name, value))
            if not self.match(","):
                break
        self.expect("}")
        return enumerators

    def parse_union(self) -> UnionDecl:
        pos = self._pos()
        self.expect("union")
        name = self.expect_ident().value
        self.known_types.add(name)
        members = self._union_body()
        self.expect(";", "expected ';' after union definition")
        return UnionDecl(pos, name, members)

    def _union_body(self) -> list[Decl]:
        self.expect("{")
        members: list[Decl] = []
        while not self.check("}"):
            if self.at_type(TK_EOF):
                raise self.error("unterminated union body")
            if self.match(";"):
                continue
            members.append(self.parse_function_or_var("class"))
        self.expect("}")
        return members

    # ── Functions and variables ──────────────────────────────

    def _specifiers(self) -> set[str]:
        specs: set[str] = set()
        while True:
            tok = self.current()
            if tok.value in DECL_SPECIFIERS and tok.type != TK_IDENT:
                specs.add(self.advance().value)
                if tok.value == "extern" and self.at_type(TK_STRING):
                    self.advance()
                continue
            if tok.value == "typename":
                self.advance()
                continue
            return specs

    def parse_function_or_var(self, ctx: str) -> Decl:
        pos = self._pos()
        specs = self._specifiers()
        special = self._special_member(ctx)
        if special is not None:
            name, scope, is_dtor = special
            fn = FunctionDecl(pos, name, None, [], None, scope)
            fn.is_constructor = not is_dtor
            fn.is_destructor = is_dtor
            return self._finish_function(fn, specs)
        base = self.parse_type(suffix=False)
        typ = self._declarator_prefix(base)
        if self.check("("):
            raise self.error("unsupported declarator")
        name_pos = self._pos()
        parts = self._declarator_name()
        if self.check("(") and (ctx != "block" or len(parts) > 1):
            fn = FunctionDecl(pos, parts[-1], typ, [], None, parts[:-1])
            return self._finish_function(fn, specs)
        if len(parts) > 1 and ctx == "block":
            raise ParseError("qualified variable names are not supported", name_pos.line, name_pos.col)
        # `int Counter::total = 0;` keeps its qualifier in the declarator name
        return self._finish_var(pos, base, typ, "::".join(parts), name_pos, specs)

    def _special_member(self, ctx: str) -> tuple[str, list[str], bool] | None:
        """Detect constructor/destructor names: Foo(, ~Foo(, Foo::Foo(, Foo::~Foo(."""
        if ctx == "class" and self.class_stack:
            cls = self.class_stack[-1]
            if self.at_ident() and self.current().value == cls and self.peek(1).value == "(":
                self.advance()
                return cls, [], False
            if self.check("~") and self.peek(1).value == cls:
                self.advance()
                self.advance()
                return cls, [], True
            return None
        if ctx != "namespace" or not self.at_ident():
            return None
        if self.peek(1).value != "::":
            return None
        owner = self.current().value
        nxt = self.peek(2)
        if nxt.value == owner and self.peek(3).value == "(":
            self._bump(3)
            return owner, [owner], False
        if nxt.value == "~" and self.peek(3).value == owner and self.peek(4).value == "(":
            self._bump(4)
            return owner, [owner], True
        return None

    def _bump(self, n: int) -> None:
        for _ in range(n):
            self.advance()

    def _declarator_prefix(self, base: TypeNode) -> TypeNode:
        typ = base
        while True:
            if self.check("*"):
                pos = self._pos()
                self.advance()
                typ = PointerType(pos, typ)
                while self.current().value in ("const", "volatile"):
                    self.advance()
            elif self.check("&") or self.check("&&"):
                pos = self._pos()
                rvalue = self.advance().value == "&&"
                typ = ReferenceType(pos, typ, rvalue)
            else:
                return typ

    def _declarator_name(self) -> list[str]:
        if self.check("operator"):
            return [self._operator_name()]
        parts = [self.expect_ident().value]
        while self.check("::"):
            self.advance()
            if self.check("operator"):
                parts.append(self._operator_name())
                return parts
            if self.check("~"):
                self.advance()
                parts.append("~" + self.expect_ident().value)
                continue
            parts.append(self.expect_ident().value)
        return parts

    def _operator_name(self) -> str:
        self.expect("operator")
        if self.check("(") and self.peek(1).value == ")":
            self._bump(2)
            return "operator()"
        if self.check("[") and self.peek(1).value == "]":
            self._bump(2)
            return "operator[]"
        tok = self.current()
        if tok.type != TK_OP:
            raise self.error("expected operator symbol, got '" + self._describe(tok) + "'")
        self.advance()
        return "operator" + tok.value

    def _array_suffix(self, typ: TypeNode) -> TypeNode:
        sizes: list[tuple[Pos, Expr | None]] = []
        while self.check("["):
            pos = self._pos()
            self.advance()
            size: Expr | None = None
            if not self.check("]"):
                size = self.parse_expr()
            self.expect("]")
            sizes.append((pos, size))
        for pos, size in reversed(sizes):
            typ = ArrayType(pos, typ, size)
        return typ

    def _finish_function(self, fn: FunctionDecl, specs: set[str]) -> FunctionDecl:
        fn.is_static = "static" in specs
        fn.is_virtual = "virtual" in specs
        fn.is_inline = "inline" in specs
        fn.is_friend = "friend" in specs
        fn.is_explicit = "explicit" in specs
        self.expect("(")
        fn.params = self.parse_params()
        self.expect(")")
        while True:
            word = self.current().value
            if word == "const":
                self.advance()
                fn.is_const = True
            elif word == "noexcept":
                self.advance()
                if self.match("("):
                    self.parse_expr()
                    self.expect(")")
            elif word == "override" or word == "final":
                self.advance()
                fn.is_override = fn.is_override or word == "override"
            elif word == "->":
                self.advance()
                fn.ret = self.parse_type()
            else:
                break
        if self.match("="):
            tok = self.advance()
            if tok.value == "0":
                fn.is_pure = True
            elif tok.value == "default":
                fn.is_defaulted = True
            elif tok.value == "delete":
                fn.is_deleted = True
            else:
                raise ParseError("expected 0, default or delete", tok.line, tok.col)
            self.expect(";")
            return fn
        if self.match(":"):
            fn.initializers = self._member_inits()
        if self.check("{"):
            fn.body = self.parse_block()
            return fn
        self.expect(";", "expected function body or ';'")
        return fn

    def _member_inits(self) -> list[MemberInit]:
        inits: list[MemberInit] = []
        while True:
            pos = self._pos()
            name = self._qualified_text()
            if self.check("<"):
                self._template_args()
            if self.match("{"):
                args = self._expr_list("}")
                self.expect("}")
            else:
                self.expect("(")
                args = self._expr_list(")")
                self.expect(")")
            inits.append(MemberInit(pos, name, args))
            if not self.match(","):
                return inits

    def parse_params(self) -> list[Param]:
        params: list[Param] = []
        if self.check(")"):
            return params
        if self.check("void") and self.peek(1).value == ")":
            self.advance()
            return params
        while True:
            if self.match("..."):
                break
            params.append(self.parse_param())
            if not self.match(","):
                break
        return params

    def parse_param(self) -> Param:
        pos = self._pos()
        self._specifiers()
        base = self.parse_type(suffix=False)
        typ = self._declarator_prefix(base)
        name: str | None = None
        if self.at_ident():
            name = self.advance().value
        typ = self._array_suffix(typ)
        default: Expr | None = None
        if self.match("="):
            default = self.parse_assignment()
        return Param(pos, typ, name, default)

    def _finish_var(
        self,
        pos: Pos,
        base: TypeNode,
        first_typ: TypeNode,
        first_name: str,
        name_pos: Pos,
        specs: set[str],
    ) -> VarDecl:
        declarators = [self._declarator_rest(name_pos, first_name, first_typ)]
        while self.match(","):
            typ = self._declarator_prefix(base)
            dpos = self._pos()
            name = self.expect_ident().value
            declarators.append(self._declarator_rest(dpos, name, typ))
        self.expect(";", "expected ';' after declaration")
        return VarDecl(pos, base, declarators, "static" in specs, "const" in specs or "constexpr" in specs)

    def _declarator_rest(self, pos: Pos, name: str, typ: TypeNode) -> Declarator:
        typ = self._array_suffix(typ)
        decl = Declarator(pos, name, typ)
        if self.match("="):
            if self.check("{"):
                decl.init = self.parse_primary()
            else:
                decl.init = self.parse_assignment()
        elif self.check("{"):
            decl.init = self.parse_primary()
        elif self.match("("):
            decl.ctor_args = self._expr_list(")")
            self.expect(")")
        return decl

    def _try_local_decl(self) -> DeclStmt | None:
        """Tentative declaration for a statement starting with an identifier."""
        pos = self._pos()
        mark = self._save()
        base = self._type_soft(suffix=False)
        if base is None:
            self._restore(mark)
            return None
        typ = self._declarator_prefix(base)
        if self.at_ident():
            nxt = self.peek(1).value
            if nxt in ("(", ";", "[", ","):
                self._restore(mark)
                return DeclStmt(pos, self.parse_function_or_var("block"))
            if nxt in ("=", "{") and self._is_known_type(typ):
                self._restore(mark)
                return DeclStmt(pos, self.parse_function_or_var("block"))
        logger.debug("not a declaration at line %d col %d, re-parsing as expression", pos.line, pos.col)
        self._restore(mark)
        return None

    # ── Types ────────────────────────────────────────────────

    def parse_type(self, suffix: bool = True) -> TypeNode:
        """Type = cv? ( Builtin | Name ( '::' Name )* TemplateArgs? ) cv? ( '*' | '&' | '&&' )*"""
        typ = self._type_soft(suffix)
        if typ is None:
            raise self.error("expected type, got '" + self._describe(self.current()) + "'")
        return typ

    def _type_soft(self, suffix: bool = True) -> TypeNode | None:
        mark = self._save()
        while self.current().value in ("const", "volatile", "typename", "struct", "class", "enum"):
            self.advance()
        pos = self._pos()
        tok = self.current()
        typ: TypeNode
        if tok.value in PRIMITIVE_WORDS and tok.type != TK_IDENT:
            words: list[str] = []
            while self.current().value in PRIMITIVE_WORDS and self.current().type != TK_IDENT:
                words.append(self.advance().value)
            typ = NamedType(pos, _normalize_builtin(words))
        elif tok.type == TK_IDENT or (tok.value == "::" and self.peek(1).type == TK_IDENT):
            self.match("::")
            parts = [self.advance().value]
            while self.check("::") and self.peek(1).type == TK_IDENT:
                self.advance()
                parts.append(self.advance().value)
            args: list[TypeNode | Expr] | None = None
            if self.check("<"):
                args = self._template_args()
            if args is not None:
                typ = TemplateType(pos, "::".join(parts), args)
                while self.check("::") and self.peek(1).type == TK_IDENT:
                    self.advance()
                    parts.append(self.advance().value)
                    typ = QualifiedName(pos, parts)
            elif len(parts) > 1:
                typ = QualifiedName(pos, parts)
            else:
                typ = NamedType(pos, parts[0])
        else:
            self._restore(mark)
            return None
        while self.current().value in ("const", "volatile") and self.current().type != TK_IDENT:
            self.advance()
        if suffix:
            typ = self._declarator_prefix(typ)
        return typ

    def _template_args(self) -> list[TypeNode | Expr] | None:
        """'<' Arg ( ',' Arg )* '>'; returns None (cursor restored) on rejection."""
        mark = self._save()
        self.expect("<")
        args: list[TypeNode | Expr] = []
        if self.check(">"):
            self.advance()
            return args
        while True:
            arg = self._template_arg()
            if arg is None:
                self._restore(mark)
                return None
            args.append(arg)
            if not self.match(","):
                break
        if self.check(">>"):
            self._split_shift()
        if not self.match(">"):
            self._restore(mark)
            return None
        return args

    def _template_arg(self) -> TypeNode | Expr | None:
        tok = self.current()
        if tok.type == TK_INT:
            self.advance()
            return Literal(Pos(tok.line, tok.col), tok.value, "int")
        typ = self._type_soft()
        if typ is None:
            return None
        if self.check("("):
            mark = self._save()
            self.advance()
            params: list[TypeNode] = []
            while not self.check(")"):
                p = self._type_soft()
                if p is None:
                    self._restore(mark)
                    return typ
                params.append(p)
                if not self.match(","):
                    break
            if not self.match(")"):
                self._restore(mark)
                return typ
            if len(params) == 1 and isinstance(params[0], NamedType) and params[0].name == "void":
                params = []
            return FunctionType(typ.pos, typ, params)
        return typ

    # ── Statements ───────────────────────────────────────────

    def parse_block(self) -> Block:
        pos = self._pos()
        self.expect("{")
        stmts: list[Stmt] = []
        while not self.check("}"):
            if self.at_type(TK_EOF):
                raise self.error("expected '}', got end of input")
            stmts.append(self.parse_stmt())
        self.expect("}")
        return Block(pos, stmts)

    def parse_stmt(self) -> Stmt:
        pos = self._pos()
        tok = self.current()
        if tok.type == TK_DIRECTIVE:
            self.advance()
            return DeclStmt(pos, PreprocessorDirective(pos, tok.value))
        if tok.type not in (TK_IDENT, TK_STRING, TK_CHAR):
            if tok.value == "{":
                return self.parse_block()
            if tok.value == ";":
                self.advance()
                return EmptyStmt(pos)
            if tok.value == "if":
                return self.parse_if_stmt()
            if tok.value == "while":
                return self.parse_while_stmt()
            if tok.value == "do":
                return self.parse_do_stmt()
            if tok.value == "for":
                return self.parse_for_stmt()
            if tok.value == "switch":
                return self.parse_switch_stmt()
            if tok.value == "return":
                self.advance()
                value: Expr | None = None
                if not self.check(";"):
                    value = self.parse_expr()
                self.expect(";", "expected ';' after return")
                return ReturnStmt(pos, value)
            if tok.value == "break":
                self.advance()
                self.expect(";")
                return BreakStmt(pos)
            if tok.value == "continue":
                self.advance()
                self.expect(";")
                return ContinueStmt(pos)
            if tok.value == "goto":
                self.advance()
                label = self.expect_ident().value
                self.expect(";")
                return GotoStmt(pos, label)
            if tok.value == "try":
                return self.parse_try_stmt()
            if tok.value == "throw":
                self.advance()
                thrown: Expr | None = None
                if not self.check(";"):
                    thrown = self.parse_expr()
                self.expect(";")
                return ThrowStmt(pos, thrown)
            if tok.value in ("class", "struct", "union", "enum", "typedef", "using"):
                return DeclStmt(pos, self.parse_decl("block"))
            if self._starts_definite_decl():
                return DeclStmt(pos, self.parse_function_or_var("block"))
        if tok.type == TK_IDENT:
            if self.peek(1).value == ":" and self.peek(1).type == TK_OP:
                self._bump(2)
                return LabelStmt(pos, tok.value)
            decl = self._try_local_decl()
            if decl is not None:
                return decl
        elif tok.value == "::":
            decl = self._try_local_decl()
            if decl is not None:
                return decl
        expr = self.parse_expr()
        self.expect(";", "expected ';' after expression")
        return ExprStmt(pos, expr)

    def parse_if_stmt(self) -> IfStmt:
        pos = self._pos()
        self.expect("if")
        self.expect("(")
        cond = self.parse_expr()
        self.expect(")")
        then = self.parse_stmt()
        else_: Stmt | None = None
        if self.match("else"):
            else_ = self.parse_stmt()
        return IfStmt(pos, cond, then, else_)

    def parse_while_stmt(self) -> WhileStmt:
        pos = self._pos()
        self.expect("while")
        self.expect("(")
        cond = self.parse_expr()
        self.expect(")")
        body = self.parse_stmt()
        return WhileStmt(pos, cond, body)

    def parse_do_stmt(self) -> DoWhileStmt:
        pos = self._pos()
        self.expect("do")
        body = self.parse_stmt()
        self.expect("while")
        self.expect("(")
        cond = self.parse_expr()
        self.expect(")")
        self.expect(";")
        return DoWhileStmt(pos, body, cond)

    def parse_for_stmt(self) -> Stmt:
        pos = self._pos()
        self.expect("for")
        self.expect("(")
        ranged = self._try_range_for(pos)
        if ranged is not None:
            return ranged
        init: Stmt | None = None
        if self.check(";"):
            self.advance()
        else:
            init = self.parse_for_init()
        cond: Expr | None = None
        if not self.check(";"):
            cond = self.parse_expr()
        self.expect(";")
        incr: Expr | None = None
        if not self.check(")"):
            incr = self.parse_comma_expr()
        self.expect(")")
        body = self.parse_stmt()
        return ForStmt(pos, init, cond, incr, body)

    def parse_for_init(self) -> Stmt:
        pos = self._pos()
        if self._starts_definite_decl():
            return DeclStmt(pos, self.parse_function_or_var("block"))
        if self.at_ident():
            decl = self._try_local_decl()
            if decl is not None:
                return decl
        expr = self.parse_comma_expr()
        self.expect(";")
        return ExprStmt(pos, expr)

    def _try_range_for(self, pos: Pos) -> RangeForStmt | None:
        """for (T x : range) / for (auto& [k, v] : range)."""
        mark = self._save()
        self._specifiers()
        base = self._type_soft(suffix=False)
        if base is None:
            self._restore(mark)
            return None
        typ = self._declarator_prefix(base)
        bindings: list[str] = []
        if self.check("["):
            self.advance()
            while self.at_ident():
                bindings.append(self.advance().value)
                if not self.match(","):
                    break
            if not self.match("]"):
                self._restore(mark)
                return None
            name = "[" + ", ".join(bindings) + "]"
        elif self.at_ident():
            name = self.advance().value
        else:
            self._restore(mark)
            return None
        if not self.check(":") or self.current().type != TK_OP:
            self._restore(mark)
            return None
        self.advance()
        iterable = self.parse_expr()
        self.expect(")")
        body = self.parse_stmt()
        return RangeForStmt(pos, typ, name, iterable, body, bindings)

    def parse_switch_stmt(self) -> SwitchStmt:
        pos = self._pos()
        self.expect("switch")
        self.expect("(")
        cond = self.parse_expr()
        self.expect(")")
        self.expect("{")
        cases: list[CaseClause | DefaultClause] = []
        while not self.check("}"):
            cpos = self._pos()
            if self.match("case"):
                value = self.parse_ternary()
                self.expect(":")
                cases.append(CaseClause(cpos, value, self._case_body()))
            elif self.match("default"):
                self.expect(":")
                cases.append(DefaultClause(cpos, self._case_body()))
            else:
                raise self.error("expected 'case' or 'default', got '" + self._describe(self.current()) + "'")
        self.expect("}")
        return SwitchStmt(pos, cond, cases)

    def _case_body(self) -> list[Stmt]:
        body: list[Stmt] = []
        while not (self.check("case") or self.check("default") or self.check("}")):
            if self.at_type(TK_EOF):
                raise self.error("unterminated switch")
            body.append(self.parse_stmt())
        return body

    def parse_try_stmt(self) -> TryStmt:
        pos = self._pos()
        self.expect("try")
        body = self.parse_block()
        catches: list[CatchClause] = []
        while self.check("catch"):
            cpos = self._pos()
            self.advance()
            self.expect("(")
            typ: TypeNode | None = None
            name: str | None = None
            if not self.match("..."):
                self._specifiers()
                typ = self.parse_type()
                if self.at_ident():
                    name = self.advance().value
            self.expect(")")
            catches.append(CatchClause(cpos, typ, name, self.parse_block()))
        if not catches:
            raise self.error("expected 'catch' after try block")
        return TryStmt(pos, body, catches)

    # ── Expressions ──────────────────────────────────────────

    def parse_expr(self) -> Expr:
        return self.parse_assignment()

    def parse_comma_expr(self) -> Expr:
        """CommaExpr = Assignment ( ',' Assignment )*, for-loop headers only."""
        first = self.parse_assignment()
        if not self.check(","):
            return first
        exprs = [first]
        while self.match(","):
            exprs.append(self.parse_assignment())
        return CommaExpr(first.pos, exprs)

    def parse_assignment(self) -> Expr:
        """Assignment = Ternary ( AssignOp Assignment )?"""
        left = self.parse_ternary()
        tok = self.current()
        if tok.type == TK_OP and tok.value in ASSIGN_OPS:
            self.advance()
            right = self.parse_assignment()
            return AssignExpr(left.pos, tok.value, left, right)
        return left

    def parse_ternary(self) -> Expr:
        """Ternary = Or ( '?' Expr ':' Assignment )?"""
        cond = self.parse_or()
        if self.match("?"):
            then = self.parse_expr()
            self.expect(":")
            else_ = self.parse_assignment()
            return TernaryExpr(cond.pos, cond, then, else_)
        return cond

    def _binary(self, ops: tuple[str, ...], operand) -> Expr:
        left = operand()
        while self.current().type == TK_OP and self.current().value in ops:
            op = self.advance().value
            right = operand()
            left = BinaryExpr(left.pos, op, left, right)
        return left

    def parse_or(self) -> Expr:
        """Or = And ( '||' And )*"""
        return self._binary(("||",), self.parse_and)

    def parse_and(self) -> Expr:
        """And = BitOr ( '&&' BitOr )*"""
        return self._binary(("&&",), self.parse_bit_or)

    def parse_bit_or(self) -> Expr:
        """BitOr = BitXor ( '|' BitXor )*"""
        return self._binary(("|",), self.parse_bit_xor)

    def parse_bit_xor(self) -> Expr:
        """BitXor = BitAnd ( '^' BitAnd )*"""
        return self._binary(("^",), self.parse_bit_and)

    def parse_bit_and(self) -> Expr:
        """BitAnd = Equality ( '&' Equality )*"""
        return self._binary(("&",), self.parse_equality)

    def parse_equality(self) -> Expr:
        """Equality = Relational ( ( '==' | '!=' ) Relational )*"""
        return self._binary(("==", "!="), self.parse_relational)

    def parse_relational(self) -> Expr:
        """Relational = Shift ( ( '<' | '>' | '<=' | '>=' ) Shift )*"""
        return self._binary(("<", ">", "<=", ">="), self.parse_shift)

    def parse_shift(self) -> Expr:
        """Shift = Additive ( ( '<<' | '>>' ) Additive )*"""
        return self._binary(("<<", ">>"), self.parse_additive)

    def parse_additive(self) -> Expr:
        """Additive = Multiplicative ( ( '+' | '-' ) Multiplicative )*"""
        return self._binary(("+", "-"), self.parse_multiplicative)

    def parse_multiplicative(self) -> Expr:
        """Multiplicative = Unary ( ( '*' | '/' | '%' ) Unary )*"""
        return self._binary(("*", "/", "%"), self.parse_unary)

    def parse_unary(self) -> Expr:
        """Unary = ( '++' | '--' | '+' | '-' | '!' | '~' | '*' | '&' ) Unary
        | sizeof | new | delete | '(' Type ')' Unary | Postfix"""
        pos = self._pos()
        tok = self.current()
        if tok.type == TK_OP and tok.value in ("++", "--", "+", "-", "!", "~", "*", "&"):
            self.advance()
            operand = self.parse_unary()
            return UnaryExpr(pos, tok.value, operand, True)
        if tok.value == "sizeof" and tok.type == "sizeof":
            return self.parse_sizeof()
        if tok.value == "new" and tok.type == "new":
            return self.parse_new()
        if tok.value == "delete" and tok.type == "delete":
            self.advance()
            is_array = False
            if self.check("[") and self.peek(1).value == "]":
                self._bump(2)
                is_array = True
            target = self.parse_unary()
            return DeleteExpr(pos, target, is_array)
        if self.check("("):
            cast = self._try_c_cast()
            if cast is not None:
                return cast
        return self.parse_postfix()

    def _try_c_cast(self) -> CastExpr | None:
        pos = self._pos()
        mark = self._save()
        self.advance()
        typ = self._type_soft()
        if typ is None or not self.check(")") or not self._is_known_type(typ):
            self._restore(mark)
            return None
        self.advance()
        nxt = self.current()
        starts_operand = nxt.type in (TK_IDENT, TK_INT, TK_FLOAT, TK_STRING, TK_CHAR) or nxt.value in (
            "(",
            "!",
            "~",
            "-",
            "+",
            "*",
            "&",
            "++",
            "--",
            "this",
            "true",
            "false",
            "nullptr",
            "sizeof",
            "static_cast",
        )
        if not starts_operand:
            self._restore(mark)
            return None
        return CastExpr(pos, "c", typ, self.parse_unary())

    def parse_sizeof(self) -> SizeofExpr:
        pos = self._pos()
        self.expect("sizeof")
        if self.check("("):
            mark = self._save()
            self.advance()
            typ = self._type_soft()
            if typ is not None and self.check(")") and self._is_known_type(typ):
                self.advance()
                return SizeofExpr(pos, typ, None)
            self._restore(mark)
        return SizeofExpr(pos, None, self.parse_unary())

    def parse_new(self) -> NewExpr:
        pos = self._pos()
        self.expect("new")
        typ = self.parse_type(suffix=False)
        while self.check("*"):
            typ = PointerType(self._pos(), typ)
            self.advance()
        if self.match("["):
            size = self.parse_expr()
            self.expect("]")
            return NewExpr(pos, typ, None, size)
        if self.match("("):
            args = self._expr_list(")")
            self.expect(")")
            return NewExpr(pos, typ, args)
        if self.match("{"):
            args = self._expr_list("}")
            self.expect("}")
            return NewExpr(pos, typ, args)
        return NewExpr(pos, typ)

    def parse_postfix(self) -> Expr:
        """Postfix = Primary ( Call | Subscript | Member | '++' | '--' )*"""
        expr = self.parse_primary()
        while True:
            pos = self._pos()
            if self.check("("):
                self.advance()
                args = self._expr_list(")")
                self.expect(")")
                expr = self._make_call(expr, args, [])
            elif self.check("["):
                self.advance()
                index = self.parse_expr()
                self.expect("]")
                expr = SubscriptExpr(expr.pos, expr, index)
            elif self.check(".") or self.check("->"):
                arrow = self.advance().value == "->"
                self.match("template")
                if self.check("~"):
                    self.advance()
                    member = "~" + self.expect_ident().value
                else:
                    member = self.expect_ident().value
                if member in CONTAINER_METHOD_NAMES and self.check("("):
                    self.advance()
                    args = self._expr_list(")")
                    self.expect(")")
                    expr = ContainerMethodCall(expr.pos, expr, member, args, arrow)
                else:
                    expr = MemberAccess(expr.pos, expr, member, arrow)
            elif self.check("++") or self.check("--"):
                op = self.advance().value
                expr = UnaryExpr(pos, op, expr, False)
            else:
                return expr

    def _make_call(self, callee: Expr, args: list[Expr], targs: list[TypeNode | Expr]) -> Expr:
        """Build a call node, recognising math/string/algorithm library calls."""
        name: str | None = None
        if isinstance(callee, Identifier):
            name = callee.name
        elif isinstance(callee, QualifiedId) and len(callee.parts) == 2 and callee.parts[0] == "std":
            name = callee.parts[1]
        if name is not None and not targs:
            n = len(args)
            if name in MATH_FUNCS and n in MATH_FUNCS[name]:
                return MathCall(callee.pos, name, args)
            if name in STRING_FUNCS and n in STRING_FUNCS[name]:
                return StringCall(callee.pos, name, args)
            if name == "sort" and n in (2, 3):
                return SortCall(callee.pos, args)
            if name == "find" and n == 3:
                return FindCall(callee.pos, args)
            if name == "accumulate" and n in (3, 4):
                return AccumulateCall(callee.pos, args)
        return CallExpr(callee.pos, callee, args, targs)

    def _expr_list(self, close: str) -> list[Expr]:
        items: list[Expr] = []
        while not self.check(close):
            items.append(self.parse_assignment())
            if not self.match(","):
                break
        return items

    def parse_primary(self) -> Expr:
        pos = self._pos()
        tok = self.current()
        if tok.type == TK_INT:
            self.advance()
            return Literal(pos, tok.value, "int")
        if tok.type == TK_FLOAT:
            self.advance()
            return Literal(pos, tok.value, "float")
        if tok.type == TK_CHAR:
            self.advance()
            return Literal(pos, tok.value, "char")
        if tok.type == TK_STRING:
            self.advance()
            text = tok.value
            while self.at_type(TK_STRING):
                text = text[:-1] + self.advance().value[1:]
            return Literal(pos, text, "string")
        if tok.type == TK_IDENT:
            if tok.value == "NULL":
                self.advance()
                return Literal(pos, "NULL", "null")
            return self._parse_name()
        if tok.value == "::" and self.peek(1).type == TK_IDENT:
            self.advance()
            return self._parse_name()
        if tok.value in ("true", "false"):
            self.advance()
            return Literal(pos, tok.value, "bool")
        if tok.value == "nullptr":
            self.advance()
            return Literal(pos, "nullptr", "null")
        if tok.value == "this":
            self.advance()
            return Identifier(pos, "this")
        if tok.value in ("static_cast", "dynamic_cast", "const_cast", "reinterpret_cast"):
            self.advance()
            self.expect("<")
            typ = self.parse_type()
            self._expect_close_angle()
            self.expect("(")
            inner = self.parse_expr()
            self.expect(")")
            return CastExpr(pos, tok.value, typ, inner)
        if tok.value in PRIMITIVE_WORDS and self.peek(1).value == "(":
            typ = self.parse_type(suffix=False)
            self.expect("(")
            inner = self.parse_expr()
            self.expect(")")
            return CastExpr(pos, "functional", typ, inner)
        if tok.value == "(":
            self.advance()
            inner = self.parse_expr()
            self.expect(")")
            return inner
        if tok.value == "{":
            self.advance()
            elements = self._expr_list("}")
            self.expect("}")
            return InitializerList(pos, elements)
        if tok.value == "[":
            return self.parse_lambda()
        raise self.error("expected expression, got '" + self._describe(tok) + "'")

    def _parse_name(self) -> Expr:
        pos = self._pos()
        parts = [self.expect_ident().value]
        while self.check("::") and (self.peek(1).type == TK_IDENT or self.peek(1).value == "~"):
            self.advance()
            if self.match("~"):
                parts.append("~" + self.expect_ident().value)
            else:
                parts.append(self.expect_ident().value)
        callee: Expr
        if len(parts) == 1:
            callee = Identifier(pos, parts[0])
        else:
            callee = QualifiedId(pos, parts)
        if self.check("<") and parts[-1] in self.template_names:
            mark = self._save()
            targs = self._template_args()
            if targs is not None and self.check("("):
                self.advance()
                args = self._expr_list(")")
                self.expect(")")
                return self._make_call(callee, args, targs)
            if targs is not None and self.check("{"):
                self.advance()
                args = self._expr_list("}")
                self.expect("}")
                return self._make_call(callee, [InitializerList(pos, args)], targs)
            if targs is not None and self.check("::") and self.peek(1).type == TK_IDENT:
                self.advance()
                nested = QualifiedId(pos, parts + [self.advance().value])
                if self.match("("):
                    args = self._expr_list(")")
                    self.expect(")")
                    # numeric_limits<int>::max() keeps its type argument
                    return CallExpr(pos, nested, args, targs)
                return nested
            self._restore(mark)
        if self.check("{") and len(parts) == 1 and parts[0] in self.known_types and parts[0] not in LIBRARY_TYPES:
            self.advance()
            args = self._expr_list("}")
            self.expect("}")
            return CallExpr(pos, callee, args)
        return callee

    def parse_lambda(self) -> LambdaExpr:
        pos = self._pos()
        self.expect("[")
        captures: list[str] = []
        text = ""
        while not self.check("]"):
            if self.at_type(TK_EOF):
                raise self.error("unterminated lambda capture list")
            tok = self.advance()
            if tok.value == ",":
                captures.append(text)
                text = ""
            else:
                text += tok.value
        if text:
            captures.append(text)
        self.expect("]")
        params: list[Param] = []
        if self.match("("):
            params = self.parse_params()
            self.expect(")")
        ret: TypeNode | None = None
        while self.current().value in ("mutable", "noexcept", "->"):
            if self.advance().value == "->":
                ret = self.parse_type()
        body = self.parse_block()
        return LambdaExpr(pos, captures, params, body, ret)


def parse(tokens: list[Token]) -> Program:
    """Parse a token list into a Program."""
    return Parser(tokens).parse_program()
