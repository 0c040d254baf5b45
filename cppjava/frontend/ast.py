"""C++ AST: parse-time node definitions."""

from __future__ import annotations

from dataclasses import dataclass, field


# ============================================================
# POSITION
# ============================================================


@dataclass
class Pos:
    """Source position, 1-indexed."""

    line: int
    col: int


# ============================================================
# TYPES
# ============================================================


@dataclass
class TypeNode:
    """Base for all type nodes."""

    pos: Pos


@dataclass
class NamedType(TypeNode):
    """Built-in or user type name; multi-word built-ins use one space-joined name."""

    name: str


@dataclass
class QualifiedName(TypeNode):
    """A::B::C used as a type."""

    parts: list[str]


@dataclass
class TemplateType(TypeNode):
    """Name<Arg, ...>; args are types or constant expressions."""

    name: str
    args: list[TypeNode | Expr]


@dataclass
class PointerType(TypeNode):
    """T*."""

    base: TypeNode


@dataclass
class ReferenceType(TypeNode):
    """T& or T&&."""

    base: TypeNode
    rvalue: bool = False


@dataclass
class ArrayType(TypeNode):
    """T name[size]; size is None for T name[]."""

    element: TypeNode
    size: Expr | None = None


@dataclass
class FunctionType(TypeNode):
    """R(A, B) inside std::function<...>."""

    ret: TypeNode
    params: list[TypeNode]


# ============================================================
# DECLARATIONS
# ============================================================


@dataclass
class Decl:
    """Base for all declaration nodes."""

    pos: Pos


@dataclass
class PreprocessorDirective(Decl):
    """#include <x>, #define N 10, ... kept verbatim."""

    text: str


@dataclass
class UsingDirective(Decl):
    """using namespace std; or using std::cout;"""

    name: str
    is_namespace: bool


@dataclass
class TypedefDecl(Decl):
    """typedef T name; or using name = T;"""

    name: str
    typ: TypeNode


@dataclass
class NamespaceDecl(Decl):
    name: str | None
    decls: list[Decl]


@dataclass
class BaseSpec:
    """One entry of a class inheritance list."""

    pos: Pos
    typ: TypeNode
    access: str
    is_virtual: bool = False


@dataclass
class ClassDecl(Decl):
    """class/struct; members are split by access level."""

    name: str
    is_struct: bool
    bases: list[BaseSpec] = field(default_factory=list)
    public: list[Decl] = field(default_factory=list)
    protected: list[Decl] = field(default_factory=list)
    private: list[Decl] = field(default_factory=list)
    is_forward: bool = False

    def members(self) -> list[Decl]:
        return self.public + self.protected + self.private


@dataclass
class FriendClassDecl(Decl):
    name: str


@dataclass
class Enumerator:
    pos: Pos
    name: str
    value: Expr | None


@dataclass
class EnumDecl(Decl):
    """enum [class] Name [: T] { A, B = 2, ... }; name is None when anonymous."""

    name: str | None
    enumerators: list[Enumerator]
    is_scoped: bool = False
    underlying: TypeNode | None = None


@dataclass
class UnionDecl(Decl):
    name: str
    members: list[Decl]


@dataclass
class Param:
    pos: Pos
    typ: TypeNode
    name: str | None
    default: Expr | None = None


@dataclass
class MemberInit:
    """One `name(args)` entry of a constructor initializer list."""

    pos: Pos
    name: str
    args: list[Expr]


@dataclass
class FunctionDecl(Decl):
    """Free function, method, constructor or destructor.

    ``scope`` holds the qualifier of an out-of-line definition
    (``void Shape::draw()`` has scope ``["Shape"]``). ``ret`` is None for
    constructors and destructors. ``body`` is None for prototypes, pure
    virtual, defaulted and deleted functions.
    """

    name: str
    ret: TypeNode | None
    params: list[Param]
    body: Block | None
    scope: list[str] = field(default_factory=list)
    initializers: list[MemberInit] = field(default_factory=list)
    is_constructor: bool = False
    is_destructor: bool = False
    is_virtual: bool = False
    is_pure: bool = False
    is_static: bool = False
    is_const: bool = False
    is_inline: bool = False
    is_friend: bool = False
    is_override: bool = False
    is_explicit: bool = False
    is_deleted: bool = False
    is_defaulted: bool = False


@dataclass
class Declarator:
    """One name of a variable declaration.

    ``typ`` is the full type of this name, including its own pointer and
    array suffixes. ``ctor_args`` holds ``T x(a, b)`` arguments and is None
    when the name was not declared with parentheses.
    """

    pos: Pos
    name: str
    typ: TypeNode
    init: Expr | None = None
    ctor_args: list[Expr] | None = None


@dataclass
class VarDecl(Decl):
    """T a = 1, *b, c[3]; one node, several declarators."""

    typ: TypeNode
    declarators: list[Declarator]
    is_static: bool = False
    is_const: bool = False


@dataclass
class TemplateParam:
    """typename T, class T, or a non-type parameter such as int N."""

    pos: Pos
    name: str
    kind: str
    typ: TypeNode | None = None
    default: TypeNode | Expr | None = None


@dataclass
class TemplateClassDecl(Decl):
    params: list[TemplateParam]
    decl: ClassDecl


@dataclass
class TemplateFunctionDecl(Decl):
    params: list[TemplateParam]
    decl: FunctionDecl


@dataclass
class Program:
    """A whole translation unit."""

    decls: list[Decl]


# ============================================================
# STATEMENTS
# ============================================================


@dataclass
class Stmt:
    """Base for all statement nodes."""

    pos: Pos


@dataclass
class Block(Stmt):
    stmts: list[Stmt]


@dataclass
class DeclStmt(Stmt):
    """A declaration in statement position (variables, local classes, directives)."""

    decl: Decl


@dataclass
class ExprStmt(Stmt):
    expr: Expr


@dataclass
class EmptyStmt(Stmt):
    pass


@dataclass
class IfStmt(Stmt):
    cond: Expr
    then: Stmt
    else_: Stmt | None


@dataclass
class WhileStmt(Stmt):
    cond: Expr
    body: Stmt


@dataclass
class DoWhileStmt(Stmt):
    body: Stmt
    cond: Expr


@dataclass
class ForStmt(Stmt):
    """for (init; cond; incr) body; every header part is optional."""

    init: Stmt | None
    cond: Expr | None
    incr: Expr | None
    body: Stmt


@dataclass
class RangeForStmt(Stmt):
    """for (T name : iterable) body; ``bindings`` holds auto [a, b] names."""

    typ: TypeNode
    name: str
    iterable: Expr
    body: Stmt
    bindings: list[str] = field(default_factory=list)


@dataclass
class CaseClause:
    pos: Pos
    value: Expr
    body: list[Stmt]


@dataclass
class DefaultClause:
    pos: Pos
    body: list[Stmt]


@dataclass
class SwitchStmt(Stmt):
    cond: Expr
    cases: list[CaseClause | DefaultClause]


@dataclass
class ReturnStmt(Stmt):
    value: Expr | None


@dataclass
class BreakStmt(Stmt):
    pass


@dataclass
class ContinueStmt(Stmt):
    pass


@dataclass
class GotoStmt(Stmt):
    label: str


@dataclass
class LabelStmt(Stmt):
    label: str


@dataclass
class CatchClause:
    """catch (T name) { ... }; typ is None for catch (...)."""

    pos: Pos
    typ: TypeNode | None
    name: str | None
    body: Block


@dataclass
class TryStmt(Stmt):
    body: Block
    catches: list[CatchClause]


@dataclass
class ThrowStmt(Stmt):
    """throw expr; value is None for a bare rethrow."""

    value: Expr | None


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass
class Expr:
    """Base for all expression nodes."""

    pos: Pos


@dataclass
class Literal(Expr):
    """Raw literal text; kind is int, float, char, string, bool or null."""

    value: str
    kind: str


@dataclass
class Identifier(Expr):
    name: str


@dataclass
class QualifiedId(Expr):
    """std::cout, Color::Red, Shape::count."""

    parts: list[str]


@dataclass
class BinaryExpr(Expr):
    """left op right."""

    op: str
    left: Expr | None
    right: Expr | None


@dataclass
class UnaryExpr(Expr):
    """op operand (prefix) or operand op (postfix)."""

    op: str
    operand: Expr
    prefix: bool = True


@dataclass
class TernaryExpr(Expr):
    """cond ? then : else_."""

    cond: Expr
    then: Expr
    else_: Expr


@dataclass
class AssignExpr(Expr):
    """target op value; op is = or a compound assignment."""

    op: str
    target: Expr
    value: Expr


@dataclass
class CallExpr(Expr):
    callee: Expr
    args: list[Expr]
    template_args: list[TypeNode | Expr] = field(default_factory=list)


@dataclass
class MemberAccess(Expr):
    """obj.member or obj->member."""

    obj: Expr
    member: str
    arrow: bool = False


@dataclass
class SubscriptExpr(Expr):
    base: Expr
    index: Expr


@dataclass
class ContainerMethodCall(Expr):
    """receiver.method(args) where method is a standard container method name."""

    receiver: Expr
    method: str
    args: list[Expr]
    arrow: bool = False


@dataclass
class InitializerList(Expr):
    """{a, b, c}."""

    elements: list[Expr]


@dataclass
class LambdaExpr(Expr):
    captures: list[str]
    params: list[Param]
    body: Block
    ret: TypeNode | None = None


@dataclass
class NewExpr(Expr):
    """new T, new T(args), new T[size], new T{...}."""

    typ: TypeNode
    args: list[Expr] | None = None
    array_size: Expr | None = None


@dataclass
class DeleteExpr(Expr):
    target: Expr
    is_array: bool = False


@dataclass
class MathCall(Expr):
    """sqrt(x), pow(a, b), max(a, b), ..."""

    name: str
    args: list[Expr]


@dataclass
class StringCall(Expr):
    """to_string(x), stoi(s), strlen(s), toupper(c), ..."""

    name: str
    args: list[Expr]


@dataclass
class SortCall(Expr):
    """sort(first, last[, comp])."""

    args: list[Expr]


@dataclass
class FindCall(Expr):
    """find(first, last, value)."""

    args: list[Expr]


@dataclass
class AccumulateCall(Expr):
    """accumulate(first, last, init[, op])."""

    args: list[Expr]


@dataclass
class CastExpr(Expr):
    """kind is c, functional, static_cast, dynamic_cast, const_cast or reinterpret_cast."""

    kind: str
    typ: TypeNode
    expr: Expr


@dataclass
class SizeofExpr(Expr):
    """sizeof(T) or sizeof expr; exactly one of typ and expr is set."""

    typ: TypeNode | None = None
    expr: Expr | None = None


@dataclass
class CommaExpr(Expr):
    """a, b in for-loop headers."""

    exprs: list[Expr]
