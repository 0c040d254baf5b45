"""Java backend: C++ AST → Java source.

The whole translation unit becomes one public wrapper class. Classes,
structs, unions and enums become nested static types; globals and free
functions become static members. Container operations are resolved through
the declared-type table so that `v.push_back(x)` and `m[k] = v` pick the
Java collection spelling of the receiver's family.

Nothing here raises for unsupported input. Constructs without a Java
counterpart are emitted as inert comments (`// UNSUPPORTED: ...`,
`// WARNING: ...`), recorded in ``diagnostics`` and logged.
"""

from __future__ import annotations

import dataclasses
import logging
import re

from ..frontend.ast import (
    AccumulateCall,
    ArrayType,
    AssignExpr,
    BinaryExpr,
    Block,
    BreakStmt,
    CallExpr,
    CaseClause,
    CastExpr,
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
from .diagnostics import DiagnosticLog
from .mappings import (
    ATOMIC_TYPES,
    CONSTANT_NAMES,
    CONTAINER_METHODS,
    CONTAINER_TYPES,
    EXCEPTION_TYPES,
    LIBRARY_TYPES,
    MATH_CALLS,
    NUMERIC_LIMITS,
    OPAQUE_TYPES,
    OPERATOR_NAMES,
    SCANNER_READERS,
    SIZEOF_TYPES,
    SMART_POINTERS,
    STREAM_MANIPULATORS,
    STRING_CALLS,
    SUBSCRIPT_GET,
    SUBSCRIPT_SET,
    box_type,
    default_value,
    primitive_type,
)
from .scope import DeclaredTypes
from .util import (
    float_literal,
    int_literal,
    java_safe_name,
    java_string_literal,
    parse_int_literal,
)

logger = logging.getLogger(__name__)

# Names that pull in an import when they appear outside string literals
_UTIL_NAMES = re.compile(
    r"\b(List|ArrayList|LinkedList|Map|HashMap|TreeMap|Set|HashSet|TreeSet|Deque|ArrayDeque"
    r"|Stack|PriorityQueue|BitSet|Optional|Scanner|Collections|Arrays|Comparator|AbstractMap)\b"
)
_FUNCTION_NAMES = re.compile(r"\b(Supplier|Consumer|BiConsumer|Function|BiFunction|Predicate)\b")
_STREAM_NAMES = re.compile(r"\b(Stream|Collectors|IntStream)\b")
_ATOMIC_NAMES = re.compile(r"\b(AtomicInteger|AtomicLong|AtomicBoolean|AtomicReference)\b")
_STRING_RE = re.compile(r'"(?:[^"\\]|\\.)*"')

# C++ binary operator precedence (higher binds tighter)
_PRECEDENCE: dict[str, int] = {
    "||": 1,
    "&&": 2,
    "|": 3,
    "^": 4,
    "&": 5,
    "==": 6,
    "!=": 6,
    "<": 7,
    ">": 7,
    "<=": 7,
    ">=": 7,
    "<<": 8,
    ">>": 8,
    "+": 9,
    "-": 9,
    "*": 10,
    "/": 10,
    "%": 10,
}

_ARITH_OPS = frozenset({"+", "-", "*", "/", "%", "&", "|", "^", "<<", ">>"})
_NUMERIC_JAVA = frozenset({"int", "long", "short", "byte", "char", "float", "double"})
_RELATIONAL_METHODS = {"<": "< 0", ">": "> 0", "<=": "<= 0", ">=": ">= 0"}
_CONTAINER_FAMILIES = frozenset({"vector", "list", "deque", "map", "set", "stack", "queue", "priority_queue"})
_SEQUENCE_FAMILIES = frozenset({"vector", "list", "deque"})


def _prec(op: str) -> int:
    return _PRECEDENCE.get(op, 0)


def _needs_parens(child_op: str, parent_op: str, is_left: bool) -> bool:
    """Determine if a child binary expression needs parens."""
    child_prec = _prec(child_op)
    parent_prec = _prec(parent_op)
    if child_prec < parent_prec:
        return True
    # A right operand at equal precedence was parenthesised in the source
    return child_prec == parent_prec and not is_left


def _is_primary(text: str) -> bool:
    """True for names, calls, literals and already-parenthesised text."""
    if re.fullmatch(r"[\w.$]+(\(.*\))?|\"(?:[^\"\\]|\\.)*\"|'(?:[^'\\]|\\.)*'", text):
        depth = 0
        for c in text:
            if c == "(":
                depth += 1
            elif c == ")":
                depth -= 1
            elif c == " " and depth == 0:
                return False
        return True
    if text.startswith("(") and text.endswith(")"):
        depth = 0
        for i, c in enumerate(text):
            if c == "(":
                depth += 1
            elif c == ")":
                depth -= 1
                if depth == 0 and i != len(text) - 1:
                    return False
        return True
    return False


def _paren(text: str) -> str:
    return text if _is_primary(text) else "(" + text + ")"


def _type_name(typ: TypeNode | None) -> str:
    """Last name component of a type, looking through pointers and references."""
    while isinstance(typ, (PointerType, ReferenceType, ArrayType)):
        typ = typ.element if isinstance(typ, ArrayType) else typ.base
    match typ:
        case NamedType(name=name):
            return name
        case QualifiedName(parts=parts):
            return parts[-1]
        case TemplateType(name=name):
            return name.split("::")[-1]
        case _:
            return ""


def _callee_name(expr: Expr) -> str | None:
    """Bare or std::-qualified name of a callee."""
    match expr:
        case Identifier(name=name):
            return name
        case QualifiedId(parts=parts) if parts[0] == "std" and len(parts) == 2:
            return parts[1]
        case _:
            return None


def _is_stream(expr: Expr | None, names: tuple[str, ...]) -> bool:
    match expr:
        case Identifier(name=name):
            return name in names
        case QualifiedId(parts=parts):
            return parts[0] == "std" and parts[-1] in names
        case _:
            return False


class JavaBackend:
    """Emit Java source from a C++ Program."""

    def __init__(self) -> None:
        self.indent = 0
        self.lines: list[str] = []
        self.types = DeclaredTypes()
        self.diagnostics = DiagnosticLog()
        self.class_names: set[str] = set()
        self.class_name: str = "Main"
        self.current_class: str | None = None
        self._pending: list[str] = []  # warning comments for the next emitted line
        self._seen: set[tuple[int, int, str, str]] = set()
        self._last_pos = Pos(1, 1)
        self._aliases: dict[str, TypeNode] = {}
        self._enums: dict[str, bool] = {}  # enum name -> has explicit values
        self._enumerators: dict[str, str] = {}  # unscoped enumerator -> enum name
        self._namespaces: set[str] = set()
        self._out_of_line: dict[str, list[FunctionDecl]] = {}
        self._static_inits: dict[str, Declarator] = {}
        self._defined_functions: set[str] = set()
        self._function_returns: dict[str, TypeNode] = {}
        self._current_function: FunctionDecl | None = None
        self._in_main = False
        self._catch_vars: list[str] = []
        self._renames: dict[str, str] = {}
        self._temp_counter = 0
        self._throws_interrupted = False

    def emit(self, program: Program, class_name: str = "Main") -> str:
        """Emit Java code for a whole translation unit."""
        self.indent = 0
        self.lines = []
        self.types = DeclaredTypes()
        self.diagnostics = DiagnosticLog()
        self.class_names = set()
        self.class_name = class_name
        self.current_class = None
        self._pending = []
        self._seen = set()
        self._last_pos = Pos(1, 1)
        self._aliases = {}
        self._enums = {}
        self._enumerators = {}
        self._namespaces = set()
        self._out_of_line = {}
        self._static_inits = {}
        self._defined_functions = set()
        self._function_returns = {}
        self._current_function = None
        self._in_main = False
        self._catch_vars = []
        self._renames = {}
        self._temp_counter = 0
        self._throws_interrupted = False
        self._collect(program.decls)
        header: list[str] = []
        body: list[Decl] = []
        for decl in program.decls:
            match decl:
                case PreprocessorDirective(text=text):
                    header.append("// " + text)
                case UsingDirective(name=name, is_namespace=is_namespace):
                    header.append("// using " + ("namespace " if is_namespace else "") + name + ";")
                case _:
                    body.append(decl)
        self._line(f"public class {class_name} {{")
        self.indent += 1
        self._emit_members(body, top=True)
        self.indent -= 1
        self._line("}")
        out = self._imports()
        if out:
            out.append("")
        if header:
            out.extend(header)
            out.append("")
        out.extend(self.lines)
        return "\n".join(out) + "\n"

    def _imports(self) -> list[str]:
        code = "\n".join(
            _STRING_RE.sub('""', line) for line in self.lines if not line.lstrip().startswith("//")
        )
        imports: list[str] = []
        if _UTIL_NAMES.search(code):
            imports.append("import java.util.*;")
        if _FUNCTION_NAMES.search(code):
            imports.append("import java.util.function.*;")
        if _STREAM_NAMES.search(code):
            imports.append("import java.util.stream.*;")
        if _ATOMIC_NAMES.search(code):
            imports.append("import java.util.concurrent.atomic.*;")
        return imports

    # ── Pre-pass ─────────────────────────────────────────────

    def _collect(self, decls: list[Decl]) -> None:
        """Record names every later declaration may refer to."""
        for decl in decls:
            match decl:
                case TypedefDecl(name=name, typ=typ):
                    if _type_name(typ) != name:
                        self._aliases[name] = typ
                case ClassDecl(is_forward=False):
                    self._collect_class(decl)
                case TemplateClassDecl(decl=cls):
                    self._collect_class(cls)
                case UnionDecl(name=name, members=members):
                    self.class_names.add(name)
                    self._collect_fields(name, members)
                case EnumDecl(name=name, enumerators=enumerators, is_scoped=is_scoped) if name:
                    self._enums[name] = any(e.value is not None for e in enumerators)
                    if not is_scoped:
                        for e in enumerators:
                            self._enumerators[e.name] = name
                case NamespaceDecl(name=name, decls=inner):
                    if name:
                        self._namespaces.update(name.split("::"))
                    self._collect(inner)
                case FunctionDecl():
                    self._collect_function(decl)
                case TemplateFunctionDecl(decl=fn):
                    self._collect_function(fn)
                case VarDecl(declarators=declarators):
                    for d in declarators:
                        if "::" in d.name:
                            self._static_inits[d.name] = d
                case _:
                    pass

    def _collect_class(self, cls: ClassDecl) -> None:
        self.class_names.add(cls.name)
        if cls.bases:
            self.types.set_base(cls.name, _type_name(cls.bases[0].typ))
        self._collect_fields(cls.name, cls.members())
        for member in cls.members():
            match member:
                case ClassDecl(is_forward=False):
                    self._collect_class(member)
                case TemplateClassDecl(decl=inner):
                    self._collect_class(inner)
                case EnumDecl(name=name, enumerators=enumerators, is_scoped=is_scoped) if name:
                    self._enums[name] = any(e.value is not None for e in enumerators)
                    if not is_scoped:
                        for e in enumerators:
                            self._enumerators[e.name] = name
                case TypedefDecl(name=name, typ=typ):
                    self._aliases[name] = typ
                case _:
                    pass

    def _collect_fields(self, owner: str, members: list[Decl]) -> None:
        for member in members:
            if isinstance(member, VarDecl):
                for d in member.declarators:
                    self.types.add_field(owner, d.name, d.typ)

    def _collect_function(self, fn: FunctionDecl) -> None:
        if fn.scope and fn.scope[-1] not in self._namespaces:
            self._out_of_line.setdefault(fn.scope[-1], []).append(fn)
            return
        if fn.body is not None:
            self._defined_functions.add(fn.name)
        if fn.ret is not None:
            self._function_returns[fn.name] = fn.ret

    # ── Output helpers ───────────────────────────────────────

    def _line(self, text: str = "") -> None:
        if not text:
            self.lines.append("")
            return
        if self._pending:
            for comment in self._pending:
                self.lines.append("    " * self.indent + comment)
            self._pending = []
        self.lines.append("    " * self.indent + text)

    def _record(self, node: object, category: str, message: str) -> bool:
        """Add a diagnostic once per location; False when it was already recorded."""
        pos = getattr(node, "pos", None)
        if isinstance(pos, Pos):
            self._last_pos = pos
        else:
            pos = self._last_pos
        key = (pos.line, pos.col, category, message)
        if key in self._seen:
            return False
        self._seen.add(key)
        diag = self.diagnostics.add(pos.line, pos.col, category, message)
        logger.warning("%r", diag)
        return True

    def _warn(self, node: object, category: str, message: str, marker: str = "WARNING") -> None:
        if self._record(node, category, message):
            self._pending.append(f"// {marker}: {message}")

    def _unsupported(self, node: object, what: str) -> None:
        self._warn(node, "unsupported", what, marker="UNSUPPORTED")

    def _missing(self, parent: object, what: str) -> str:
        self._record(parent, "missing-node", "missing " + what + " in " + type(parent).__name__)
        return ""

    def _temp(self, base: str) -> str:
        self._temp_counter += 1
        return f"{base}{self._temp_counter}"

    # ── Types ────────────────────────────────────────────────

    def _resolve(self, typ: TypeNode | None) -> TypeNode | None:
        """Follow typedef aliases, references and smart pointers."""
        for _ in range(16):
            match typ:
                case ReferenceType(base=base):
                    typ = base
                case NamedType(name=name) if name in self._aliases:
                    typ = self._aliases[name]
                case TemplateType(name=name, args=args) if (
                    name.split("::")[-1] in SMART_POINTERS and args and isinstance(args[0], TypeNode)
                ):
                    typ = args[0]
                case _:
                    return typ
        return typ

    def _strip(self, typ: TypeNode | None) -> TypeNode | None:
        """Like _resolve, also erasing pointers to non-primitive types."""
        typ = self._resolve(typ)
        while isinstance(typ, PointerType) and self._primitive_of(typ.base) is None:
            typ = self._resolve(typ.base)
        return typ

    def _primitive_of(self, typ: TypeNode | None) -> str | None:
        """Java primitive (or String) a type maps to, if any."""
        typ = self._resolve(typ)
        match typ:
            case NamedType(name=name):
                return primitive_type(name)
            case QualifiedName(parts=parts):
                if parts[-1] == "size_type":
                    return "int"
                return primitive_type(parts[-1])
            case _:
                return None

    def _type(self, typ: TypeNode | None, boxed: bool = False) -> str:
        match typ:
            case None:
                return "void"
            case NamedType(name=name):
                return self._named_type(typ, name, boxed)
            case QualifiedName(parts=parts):
                if parts[-1] in ("iterator", "const_iterator", "reverse_iterator"):
                    return "var"
                if parts[-1] == "size_type":
                    return "Integer" if boxed else "int"
                if parts[0] != "std" and parts[0] not in self._namespaces and len(parts) > 1:
                    return ".".join(parts)
                return self._named_type(typ, parts[-1], boxed)
            case TemplateType():
                return self._template_type(typ, boxed)
            case PointerType(base=base):
                prim = self._primitive_of(base)
                if prim == "char":
                    return "String"
                if prim == "void":
                    return "Object"
                if prim is not None and prim != "var":
                    return prim + "[]"
                return self._type(base, boxed)
            case ReferenceType(base=base):
                return self._type(base, boxed)
            case ArrayType(element=element):
                return self._type(element) + "[]"
            case FunctionType():
                return self._function_type(typ)
            case _:
                self._unsupported(typ, "type " + type(typ).__name__)
                return "Object"

    def _named_type(self, node: TypeNode, name: str, boxed: bool) -> str:
        if name in self._aliases:
            return self._type(self._aliases[name], boxed)
        prim = primitive_type(name)
        if prim is not None:
            return box_type(prim) if boxed else prim
        if name in LIBRARY_TYPES:
            return LIBRARY_TYPES[name][1]
        if name in EXCEPTION_TYPES:
            return EXCEPTION_TYPES[name]
        if name in OPAQUE_TYPES:
            self._warn(node, "unsupported", "std::" + name + " has no Java counterpart; mapped to Object")
            return "Object"
        if name in CONTAINER_TYPES:
            return CONTAINER_TYPES[name][1]
        match name:
            case "ostream":
                return "java.io.PrintStream"
            case "istream":
                return "Scanner"
            case "iterator" | "const_iterator":
                return "var"
            case _:
                return java_safe_name(name)

    def _template_type(self, typ: TemplateType, boxed: bool = False) -> str:
        name = typ.name.split("::")[-1]
        args = typ.args
        if name in CONTAINER_TYPES:
            family, declared, _impl = CONTAINER_TYPES[name]
            if family == "bitset":
                return "BitSet"
            keep = 2 if family == "map" else 1
            return declared + self._generic_args(args[:keep])
        match name:
            case "array":
                if args and isinstance(args[0], TypeNode):
                    return self._type(args[0]) + "[]"
                return "Object[]"
            case "pair":
                return "Map.Entry" + self._generic_args(args)
            case "optional":
                return "Optional" + self._generic_args(args)
            case "function":
                if args and isinstance(args[0], FunctionType):
                    return self._function_type(args[0])
                return "Runnable"
            case "atomic":
                prim = self._primitive_of(args[0]) if args and isinstance(args[0], TypeNode) else None
                if prim in ATOMIC_TYPES:
                    return ATOMIC_TYPES[prim]
                return "AtomicReference" + self._generic_args(args)
            case _:
                pass
        if name in SMART_POINTERS and args and isinstance(args[0], TypeNode):
            return self._type(args[0], boxed)
        if name in LIBRARY_TYPES:
            return LIBRARY_TYPES[name][1]
        if name in OPAQUE_TYPES:
            self._warn(typ, "unsupported", "std::" + name + " has no Java counterpart; mapped to Object")
            return "Object"
        return java_safe_name(name) + self._generic_args(args)

    def _generic_args(self, args: list[TypeNode | Expr]) -> str:
        # Non-type arguments have no place in a Java generic list
        types = [self._type(a, boxed=True) for a in args if isinstance(a, TypeNode)]
        if not types:
            return ""
        return "<" + ", ".join(types) + ">"

    def _function_type(self, ft: FunctionType) -> str:
        ret = self._type(ft.ret)
        params = [self._type(p, boxed=True) for p in ft.params]
        if len(params) > 2:
            self._warn(ft, "unsupported", "std::function with more than two parameters mapped to Object")
            return "Object"
        if ret == "void":
            return ["Runnable", "Consumer<{}>", "BiConsumer<{}, {}>"][len(params)].format(*params)
        boxed = box_type(ret)
        return ["Supplier<{}>", "Function<{}, {}>", "BiFunction<{}, {}, {}>"][len(params)].format(
            *params, boxed
        )

    def _family_of(self, typ: TypeNode | None) -> str | None:
        """Container or library family a declared type belongs to."""
        typ = self._resolve(typ)
        match typ:
            case TemplateType(name=name):
                short = name.split("::")[-1]
                if short in CONTAINER_TYPES:
                    return CONTAINER_TYPES[short][0]
                if short in LIBRARY_TYPES:
                    return LIBRARY_TYPES[short][0]
                if short in ("atomic", "pair", "array", "function", "optional"):
                    return short
                return None
            case NamedType(name=name) | QualifiedName(parts=[*_, name]):
                if primitive_type(name) == "String":
                    return "string"
                if name in LIBRARY_TYPES:
                    return LIBRARY_TYPES[name][0]
                return None
            case PointerType(base=base):
                prim = self._primitive_of(base)
                if prim == "char":
                    return "string"
                if prim is not None:
                    return "array"
                return self._family_of(base)
            case ArrayType():
                return "array"
            case _:
                return None

    def _family(self, expr: Expr | None) -> str | None:
        if expr is None:
            return None
        return self._family_of(self._expr_type(expr))

    def _element_type(self, typ: TypeNode | None, keyed: bool = False) -> TypeNode | None:
        """Element type of a container or array; the key type when keyed."""
        typ = self._resolve(typ)
        match typ:
            case TemplateType(name=name, args=args):
                types = [a for a in args if isinstance(a, TypeNode)]
                if not types:
                    return None
                family = self._family_of(typ)
                if family == "map" and not keyed and len(types) > 1:
                    return types[1]
                return types[0]
            case ArrayType(element=element):
                return element
            case PointerType(base=base):
                if self._primitive_of(base) == "char":
                    return NamedType(typ.pos, "char")
                return base
            case NamedType() | QualifiedName() if self._family_of(typ) == "string":
                return NamedType(typ.pos, "char")
            case _:
                return None

    def _class_of(self, expr: Expr) -> str | None:
        typ = self._strip(self._expr_type(expr))
        name = _type_name(typ)
        if name in self.class_names:
            return name
        return None

    def _expr_type(self, expr: Expr | None) -> TypeNode | None:
        """Best-effort declared type of an expression."""
        match expr:
            case Identifier(name="this"):
                if self.current_class:
                    return PointerType(expr.pos, NamedType(expr.pos, self.current_class))
                return None
            case Identifier(name=name):
                typ = self.types.resolve(name)
                if typ is None and self.current_class:
                    typ = self.types.resolve_field(self.current_class, name)
                return typ
            case MemberAccess(obj=obj, member=member):
                obj_type = self._strip(self._expr_type(obj))
                if isinstance(obj_type, TemplateType) and self._family_of(obj_type) == "pair":
                    types = [a for a in obj_type.args if isinstance(a, TypeNode)]
                    if len(types) == 2 and member in ("first", "second"):
                        return types[0] if member == "first" else types[1]
                owner = _type_name(obj_type)
                if owner in self.class_names:
                    return self.types.resolve_field(owner, member)
                return None
            case SubscriptExpr(base=base):
                return self._element_type(self._expr_type(base))
            case ContainerMethodCall(receiver=receiver, method=method):
                rtype = self._expr_type(receiver)
                if method in ("front", "back", "top", "at"):
                    return self._element_type(rtype)
                if method in ("size", "length", "count"):
                    return NamedType(expr.pos, "int")
                if method == "substr":
                    return NamedType(expr.pos, "string")
                return None
            case Literal(kind=kind):
                match kind:
                    case "string":
                        return NamedType(expr.pos, "string")
                    case "int":
                        return NamedType(expr.pos, "long" if "l" in expr.value.lower() else "int")
                    case "float":
                        return NamedType(expr.pos, "float" if expr.value[-1] in "fF" else "double")
                    case "char" | "bool":
                        return NamedType(expr.pos, kind)
                    case _:
                        return None
            case BinaryExpr(op=op, left=left, right=right):
                if op in ("==", "!=", "<", ">", "<=", ">=", "&&", "||"):
                    return NamedType(expr.pos, "bool")
                left_type = self._expr_type(left)
                if self._family_of(left_type) == "string" or self._family_of(self._expr_type(right)) == "string":
                    return NamedType(expr.pos, "string")
                return left_type
            case UnaryExpr(op="*", operand=operand):
                return self._element_type(self._expr_type(operand)) if self._family(operand) == "array" else self._expr_type(operand)
            case UnaryExpr(op="!"):
                return NamedType(expr.pos, "bool")
            case UnaryExpr(operand=operand):
                return self._expr_type(operand)
            case CastExpr(typ=typ):
                return typ
            case CallExpr(callee=Identifier(name=name)) if name in self._function_returns:
                return self._function_returns[name]
            case CallExpr(callee=Identifier(name=name)) if name in self.class_names:
                return NamedType(expr.pos, name)
            case StringCall(name=name):
                if name == "to_string":
                    return NamedType(expr.pos, "string")
                if name in ("stod", "stof"):
                    return NamedType(expr.pos, "double")
                if name in ("toupper", "tolower"):
                    return NamedType(expr.pos, "char")
                return NamedType(expr.pos, "int")
            case MathCall(args=args) if expr.name in ("min", "max", "abs") and args:
                return self._expr_type(args[0])
            case MathCall():
                return NamedType(expr.pos, "double")
            case TernaryExpr(then=then):
                return self._expr_type(then)
            case _:
                return None

    # ── Declarations ─────────────────────────────────────────

    def _flush(self) -> None:
        """Write pending warning comments that no statement line will carry."""
        for comment in self._pending:
            self.lines.append("    " * self.indent + comment)
        self._pending = []

    def _placeholder(self, node: object, kind: str) -> None:
        self._record(node, "unsupported", kind)
        self._line("// UNSUPPORTED: " + kind)

    def _skip_top_level(self, decl: Decl) -> bool:
        match decl:
            case FunctionDecl(scope=scope) if scope:
                return scope[-1] in self.class_names
            case FunctionDecl(body=None, is_pure=False, is_deleted=False, name=name):
                return name in self._defined_functions
            case TemplateFunctionDecl(decl=fn) if fn.scope:
                return fn.scope[-1] in self.class_names
            case VarDecl(declarators=declarators):
                return all("::" in d.name and d.name.split("::")[-2] in self.class_names for d in declarators)
            case ClassDecl(is_forward=True, name=name):
                return name in self.class_names
            case _:
                return False

    def _emit_members(self, decls: list[Decl], access: str = "", top: bool = False) -> None:
        prev: Decl | None = None
        for decl in decls:
            if top and self._skip_top_level(decl):
                continue
            if prev is not None and not (isinstance(prev, VarDecl) and isinstance(decl, VarDecl)):
                self._line()
            self._emit_decl(decl, access, top)
            prev = decl

    def _emit_decl(self, decl: Decl, access: str = "", top: bool = False) -> None:
        match decl:
            case PreprocessorDirective(text=text):
                self._line("// " + text)
            case UsingDirective(name=name, is_namespace=is_namespace):
                self._line("// using " + ("namespace " if is_namespace else "") + name + ";")
            case TypedefDecl(name=name, typ=typ):
                self._line(f"// typedef {name} -> {self._type(typ)}")
            case NamespaceDecl(name=name, decls=decls):
                label = name or "(anonymous)"
                self._line(f"// namespace {label} {{")
                self._emit_members(decls, access, top)
                self._line(f"// }} namespace {label}")
            case ClassDecl(is_forward=True, name=name):
                self._line(f"// forward declaration: {name}")
            case ClassDecl():
                self._emit_class(decl, access)
            case TemplateClassDecl(params=params, decl=cls):
                type_params = self._template_params(decl, params)
                self._emit_class(cls, access, type_params)
            case EnumDecl():
                self._emit_enum(decl, access)
            case UnionDecl():
                self._emit_union(decl, access)
            case FunctionDecl():
                self._emit_function(decl, access, top)
            case TemplateFunctionDecl(params=params, decl=fn):
                type_params = self._template_params(decl, params)
                self._emit_function(fn, access, top, type_params)
            case VarDecl():
                self._emit_field(decl, access, top)
            case FriendClassDecl(name=name):
                self._line(f"// friend class {name}")
            case _:
                self._placeholder(decl, type(decl).__name__)

    def _template_params(self, node: Decl, params: list[TemplateParam]) -> str:
        message = "template semantics (specialization, non-type parameters, SFINAE) are not preserved"
        dropped = [p.name for p in params if p.kind != "type"]
        if dropped:
            message += "; non-type parameters dropped: " + ", ".join(dropped)
        self._warn(node, "template", message)
        names = [p.name for p in params if p.kind == "type"]
        if not names:
            return ""
        return "<" + ", ".join(names) + ">"

    def _emit_class(self, cls: ClassDecl, access: str = "", type_params: str = "", local: bool = False) -> None:
        extends = ""
        if cls.bases:
            extends = " extends " + self._type(cls.bases[0].typ, boxed=True)
            if len(cls.bases) > 1:
                extra = ", ".join(b.access + " " + self._type(b.typ, boxed=True) for b in cls.bases[1:])
                self._warn(
                    cls.bases[1],
                    "inheritance",
                    "multiple inheritance: additional bases " + extra + " not inherited",
                )
        members = cls.members()
        out_of_line = self._out_of_line.get(cls.name, [])
        is_abstract = any(isinstance(m, FunctionDecl) and (m.is_virtual or m.is_pure) for m in members)
        prefix = (access + " " if access else "") + ("" if local else "static ") + ("abstract " if is_abstract else "")
        self._line(f"{prefix}class {java_safe_name(cls.name)}{type_params}{extends} {{")
        self.indent += 1
        outer = self.current_class
        self.current_class = cls.name
        self.types.push()
        fields: list[tuple[str, TypeNode]] = []
        for member in members:
            if isinstance(member, VarDecl):
                for d in member.declarators:
                    self.types.declare(d.name, d.typ)
                    if not member.is_static:
                        fields.append((d.name, d.typ))
        has_ctor = any(isinstance(m, FunctionDecl) and m.is_constructor for m in members) or any(
            f.is_constructor for f in out_of_line
        )
        emitted = False
        for section, decls in (("public", cls.public), ("protected", cls.protected), ("private", cls.private)):
            if not decls:
                continue
            if emitted:
                self._line()
            self._emit_members(decls, section)
            emitted = True
        if cls.is_struct and not has_ctor:
            self._emit_aggregate_constructors(cls.name, fields, emitted)
        for fn in self._out_of_line.pop(cls.name, []):
            self._line()
            self._emit_function(fn, "public")
        self._flush()
        self.types.pop()
        self.current_class = outer
        self.indent -= 1
        self._line("}")

    def _emit_aggregate_constructors(self, name: str, fields: list[tuple[str, TypeNode]], emitted: bool) -> None:
        """No-arg and all-fields constructors so brace initialisation has a target."""
        if emitted:
            self._line()
        self._line(f"public {name}() {{}}")
        if not fields:
            return
        params = ", ".join(self._type(t) + " " + java_safe_name(n) for n, t in fields)
        self._line()
        self._line(f"public {name}({params}) {{")
        self.indent += 1
        for n, _ in fields:
            safe = java_safe_name(n)
            self._line(f"this.{safe} = {safe};")
        self.indent -= 1
        self._line("}")

    def _emit_union(self, union: UnionDecl, access: str = "") -> None:
        self._warn(union, "unsupported", f"union {union.name} members do not share storage")
        prefix = (access + " " if access else "") + "static "
        self._line(f"{prefix}class {java_safe_name(union.name)} {{")
        self.indent += 1
        outer = self.current_class
        self.current_class = union.name
        self.types.push()
        self._emit_members(union.members, "public")
        self.types.pop()
        self.current_class = outer
        self.indent -= 1
        self._line("}")

    def _emit_enum(self, enum: EnumDecl, access: str = "", local: bool = False) -> None:
        values = self._enum_values(enum)
        if enum.name is None:
            if local:
                mods = "final "
            else:
                mods = (access + " " if access else "") + "static final "
            for e, value in zip(enum.enumerators, values):
                self._line(f"{mods}int {java_safe_name(e.name)} = {value};")
                self.types.declare(e.name, NamedType(e.pos, "int"))
            return
        name = java_safe_name(enum.name)
        prefix = access + " " if access else ""
        names = [java_safe_name(e.name) for e in enum.enumerators]
        if not any(e.value is not None for e in enum.enumerators):
            self._line(f"{prefix}enum {name} {{")
            self.indent += 1
            if names:
                self._line(", ".join(names) + ";")
            self.indent -= 1
            self._line("}")
            return
        self._line(f"{prefix}enum {name} {{")
        self.indent += 1
        for i, (e, value) in enumerate(zip(names, values)):
            self._line(f"{e}({value}){';' if i == len(names) - 1 else ','}")
        self._line()
        self._line("private final int value;")
        self._line()
        self._line(f"{name}(int value) {{")
        self._line("    this.value = value;")
        self._line("}")
        self._line()
        self._line("public int getValue() {")
        self._line("    return value;")
        self._line("}")
        self.indent -= 1
        self._line("}")

    def _enum_values(self, enum: EnumDecl) -> list[str]:
        """Enumerator values in order; implicit ones continue from the previous value."""
        values: list[str] = []
        known: dict[str, int] = {}
        current = -1
        base: str | None = None
        offset = 0
        for e in enum.enumerators:
            if e.value is not None:
                value = self._const_eval(e.value, known)
                if value is not None:
                    current = value
                    base = None
                    known[e.name] = value
                    values.append(str(value))
                else:
                    base = self._expr(e.value)
                    offset = 0
                    values.append(base)
            elif base is not None:
                offset += 1
                values.append(f"({base}) + {offset}")
            else:
                current += 1
                known[e.name] = current
                values.append(str(current))
        return values

    def _const_eval(self, expr: Expr | None, env: dict[str, int] | None = None) -> int | None:
        """Fold an integer constant expression with C division semantics."""
        match expr:
            case Literal(kind="int", value=value):
                return parse_int_literal(value)
            case Literal(kind="char", value=value) if len(value) == 3:
                return ord(value[1])
            case Identifier(name=name) if env is not None and name in env:
                return env[name]
            case UnaryExpr(op=op, operand=operand) if op in ("-", "+", "~"):
                inner = self._const_eval(operand, env)
                if inner is None:
                    return None
                return -inner if op == "-" else (~inner if op == "~" else inner)
            case BinaryExpr(op=op, left=left, right=right):
                a = self._const_eval(left, env)
                b = self._const_eval(right, env)
                if a is None or b is None:
                    return None
                match op:
                    case "+":
                        return a + b
                    case "-":
                        return a - b
                    case "*":
                        return a * b
                    case "/" | "%":
                        if b == 0:
                            return None
                        q = abs(a) // abs(b)
                        if (a < 0) != (b < 0):
                            q = -q
                        return q if op == "/" else a - b * q
                    case "<<":
                        return a << b if b >= 0 else None
                    case ">>":
                        return a >> b if b >= 0 else None
                    case "&":
                        return a & b
                    case "|":
                        return a | b
                    case "^":
                        return a ^ b
                    case _:
                        return None
            case _:
                return None

    # ── Functions ────────────────────────────────────────────

    def _take_definition(self, owner: str | None, proto: FunctionDecl) -> FunctionDecl | None:
        """Remove and return the out-of-line definition matching an in-class prototype."""
        candidates = self._out_of_line.get(owner or "", [])
        for i, fn in enumerate(candidates):
            if (
                fn.name == proto.name
                and len(fn.params) == len(proto.params)
                and fn.is_constructor == proto.is_constructor
                and fn.is_destructor == proto.is_destructor
            ):
                return candidates.pop(i)
        return None

    def _merge(self, proto: FunctionDecl, definition: FunctionDecl) -> FunctionDecl:
        params = [
            Param(d.pos, d.typ, d.name or p.name, p.default) for p, d in zip(proto.params, definition.params)
        ]
        return dataclasses.replace(
            definition,
            params=params,
            scope=[],
            is_virtual=proto.is_virtual,
            is_static=proto.is_static,
            is_override=proto.is_override,
            is_friend=proto.is_friend,
            is_explicit=proto.is_explicit,
        )

    def _emit_function(self, fn: FunctionDecl, access: str = "", top: bool = False, type_params: str = "") -> None:
        owner = self.current_class
        if fn.is_destructor:
            self._take_definition(owner, fn)
            self._warn(fn, "memory", f"destructor ~{fn.name}() omitted (garbage-collected target)")
            self._flush()
            return
        if fn.is_deleted:
            self._line(f"// {fn.name}(...) = delete")
            return
        if fn.body is None and not fn.is_pure and not fn.is_defaulted:
            definition = self._take_definition(owner, fn) if owner is not None else None
            if definition is not None:
                fn = self._merge(fn, definition)
        if fn.is_defaulted and not fn.is_constructor:
            self._line(f"// {fn.name}(...) = default")
            return
        is_main = top and owner is None and fn.name == "main" and not fn.scope
        mods: list[str] = []
        if access:
            mods.append(access)
        elif top or owner is None:
            mods.append("public")
        if fn.is_pure:
            mods.append("abstract")
        elif top or owner is None or fn.is_static or fn.is_friend:
            mods.append("static")
        if fn.is_friend and owner is not None:
            self._warn(fn, "unsupported", f"friend function {fn.name} emitted as a static method")
        if type_params:
            mods.append(type_params)
        self.types.push()
        params = self._params(fn.params)
        if is_main:
            if fn.params:
                self._warn(fn, "unsupported", "main parameters are not translated; command-line arguments arrive in args")
            head = "public static void main(String[] args)"
        elif fn.is_constructor:
            head = " ".join(m for m in mods if m not in ("static", "abstract")) + " " + java_safe_name(fn.name)
            head = head.strip() + "(" + params + ")"
        else:
            name = self._method_name(fn)
            head = " ".join(mods + [self._type(fn.ret), name]) + "(" + params + ")"
        if fn.is_override:
            self._line("@Override")
        if fn.is_pure:
            self.types.pop()
            self._line(head + ";")
            return
        if fn.body is None and not fn.is_defaulted:
            self._warn(fn, "unsupported", f"function {fn.name} is declared but never defined")
            self._line(head + " {")
            self._line(f'    throw new UnsupportedOperationException("{fn.name}");')
            self._line("}")
            self.types.pop()
            return
        self._line(head + " {")
        head_index = len(self.lines) - 1
        saved = (self._current_function, self._in_main, self._throws_interrupted, self._catch_vars)
        self._current_function = fn
        self._in_main = is_main
        self._throws_interrupted = False
        self._catch_vars = []
        self.indent += 1
        if fn.is_constructor:
            self._emit_initializers(fn)
        if fn.body is not None:
            for stmt in fn.body.stmts:
                self._emit_stmt(stmt)
        self._flush()
        self.indent -= 1
        self._line("}")
        if self._throws_interrupted:
            self.lines[head_index] = self.lines[head_index][: -len(" {")] + " throws InterruptedException {"
        self._current_function, self._in_main, self._throws_interrupted, self._catch_vars = saved
        self.types.pop()

    def _method_name(self, fn: FunctionDecl) -> str:
        if not fn.name.startswith("operator"):
            return java_safe_name(fn.name)
        symbol = fn.name[len("operator") :].strip()
        suffix = OPERATOR_NAMES.get(symbol, "op")
        name = "operator_" + suffix
        self._warn(fn, "unsupported", f"operator overload {fn.name} emitted as method {name}")
        return name

    def _params(self, params: list[Param]) -> str:
        parts: list[str] = []
        for i, p in enumerate(params):
            name = p.name or f"arg{i}"
            if p.default is not None:
                self._warn(p, "unsupported", f"default argument for parameter {name} dropped")
            self.types.declare(name, p.typ)
            parts.append(self._type(p.typ) + " " + java_safe_name(name))
        return ", ".join(parts)

    def _emit_initializers(self, fn: FunctionDecl) -> None:
        """Constructor member-initializer list: base or delegating call first, then fields."""
        owner = self.current_class or fn.name
        base = self.types.class_bases.get(owner)
        calls: list[str] = []
        assigns: list[str] = []
        for init in fn.initializers:
            name = init.name.split("::")[-1]
            args = self._args(init.args)
            if name == owner:
                calls.append(f"this({args});")
            elif name == base or name in self.class_names or name in EXCEPTION_TYPES:
                calls.append(f"super({args});")
            else:
                field_type = self.types.resolve_field(owner, name)
                if len(init.args) == 1:
                    value = self._init_value(field_type, init.args[0])
                else:
                    value = self._construct(field_type, init.args, init)
                assigns.append(f"this.{java_safe_name(name)} = {value};")
        for text in calls + assigns:
            self._line(text)

    # ── Variables ────────────────────────────────────────────

    def _emit_field(self, decl: VarDecl, access: str = "", top: bool = False) -> None:
        for d in decl.declarators:
            if "::" in d.name:
                d = dataclasses.replace(d, name=d.name.split("::")[-1])
            if top or self.current_class is None:
                mods = "static "
            else:
                mods = (access + " " if access else "") + ("static " if decl.is_static else "")
                key = self.current_class + "::" + d.name
                if decl.is_static and d.init is None and key in self._static_inits:
                    outside = self._static_inits[key]
                    d = dataclasses.replace(d, init=outside.init, ctor_args=outside.ctor_args)
            self._emit_declarator(d, mods, decl.is_const)

    def _emit_declarator(self, d: Declarator, mods: str = "", is_const: bool = False) -> None:
        typ = d.typ
        name = java_safe_name(d.name)
        family = self._family_of(typ)
        self.types.declare(d.name, typ)
        if family == "thread":
            if d.ctor_args:
                body = self._thread_body(d.ctor_args[0], d.ctor_args[1:])
                self._line(f"{mods}Thread {name} = new Thread({body});")
                self._line(f"{name}.start();")
            else:
                self._line(f"{mods}Thread {name} = null;")
            return
        if family == "mutex":
            self._warn(d, "concurrency", f"mutex {name} mapped to a monitor object; use synchronized ({name}) {{ ... }}")
            self._line(f"{mods}final Object {name} = new Object();")
            return
        if family == "lock":
            self._warn(d, "concurrency", f"{_type_name(typ)} {name} dropped; guard the block with synchronized (...) {{ ... }}")
            self._flush()
            return
        resolved = self._resolve(typ)
        if isinstance(resolved, PointerType) and d.init is not None and self._is_array_alloc(d.init):
            typ = ArrayType(d.pos, resolved.base)
            self.types.declare(d.name, typ)
        jtype = self._type(typ)
        if jtype == "var" and d.init is not None:
            inferred = self._expr_type(d.init)
            if inferred is not None:
                self.types.declare(d.name, inferred)
        if d.init is not None:
            value: str | None = self._init_value(typ, d.init, jtype)
        elif d.ctor_args is not None:
            value = self._construct(typ, d.ctor_args, d)
        else:
            value = self._default_init(typ, jtype)
        final = "final " if is_const and value else ""
        if value:
            self._line(f"{mods}{final}{jtype} {name} = {value};")
        else:
            self._line(f"{mods}{jtype} {name};")

    def _is_array_alloc(self, expr: Expr) -> bool:
        match expr:
            case NewExpr(array_size=size):
                return size is not None
            case CallExpr(callee=callee) if _callee_name(callee) in ("malloc", "calloc"):
                return True
            case CastExpr(expr=inner):
                return self._is_array_alloc(inner)
            case _:
                return False

    def _thread_body(self, target: Expr, args: list[Expr]) -> str:
        """Runnable lambda for a std::thread; arguments are copied into final temps."""
        if isinstance(target, LambdaExpr) and not target.params:
            return self._expr(target)
        texts: list[str] = []
        for arg in args:
            text = self._expr(arg)
            if isinstance(arg, Literal):
                texts.append(text)
                continue
            temp = self._temp("arg")
            self._line(f"final var {temp} = {text};")
            texts.append(temp)
        if isinstance(target, LambdaExpr):
            fn = self._temp("task")
            self._line(f"final var {fn} = {self._expr(target)};")
            return f"() -> {fn}.accept({', '.join(texts)})"
        return f"() -> {self._expr(target)}({', '.join(texts)})"

    def _init_value(self, typ: TypeNode | None, init: Expr, jtype: str | None = None) -> str:
        if isinstance(init, InitializerList):
            return self._init_list(typ, init)
        if jtype is None:
            jtype = self._type(typ) if typ is not None else "var"
        family = self._family_of(typ)
        resolved = self._resolve(typ)
        if family in _CONTAINER_FAMILIES and isinstance(init, (Identifier, MemberAccess)):
            if self._family(init) == family:
                return f"new {self._impl(resolved)}<>({self._expr(init)})"
        if isinstance(resolved, TemplateType) and family == "function" and isinstance(init, Identifier):
            if init.name in self._defined_functions:
                return f"{self.class_name}::{java_safe_name(init.name)}"
        if isinstance(resolved, ArrayType) and isinstance(init, Literal) and init.kind == "string":
            return java_string_literal(init.value) + ".toCharArray()"
        if jtype == "float" and isinstance(init, Literal) and init.kind == "float" and init.value[-1] not in "fF":
            return float_literal(init.value) + "f"
        return self._expr(init)

    def _impl(self, typ: TypeNode | None) -> str:
        """Instantiation class of a container type (ArrayList for vector, ...)."""
        name = _type_name(typ)
        if name in CONTAINER_TYPES:
            return CONTAINER_TYPES[name][2]
        return self._type(typ)

    def _default_init(self, typ: TypeNode | None, jtype: str) -> str | None:
        """Java initialiser for a declaration without one; None leaves it bare."""
        resolved = self._resolve(typ)
        family = self._family_of(resolved)
        if isinstance(resolved, PointerType):
            return None
        if family in _CONTAINER_FAMILIES or family == "bitset":
            return self._construct(resolved, [], resolved)
        if family == "atomic":
            return f"new {jtype}()"
        if family == "string":
            return '""'
        if family == "stream":
            return "new StringBuilder()"
        if isinstance(resolved, ArrayType):
            return self._new_array(resolved)
        if isinstance(resolved, TemplateType) and family == "array":
            return self._new_array(resolved)
        name = _type_name(resolved)
        if name in self.class_names and isinstance(resolved, (NamedType, QualifiedName, TemplateType)):
            if "<" in jtype:
                return f"new {jtype.split('<')[0]}<>()"
            return f"new {jtype}()"
        return None

    def _new_array(self, typ: TypeNode) -> str | None:
        sizes: list[str] = []
        while True:
            match typ:
                case ArrayType(element=element, size=size):
                    if size is None:
                        return None
                    sizes.append(self._expr(size))
                    typ = element
                case TemplateType(name=name, args=[TypeNode() as element, size, *_]) if name.split("::")[-1] == "array":
                    sizes.append(self._expr(size) if isinstance(size, Expr) else "0")
                    typ = element
                case _:
                    break
        base = self._type(typ).split("<")[0]
        return f"new {base}" + "".join(f"[{s}]" for s in sizes)

    def _construct(self, typ: TypeNode | None, args: list[Expr], node: object) -> str:
        """Java expression for `T x(args)` or a `T(args)` temporary."""
        resolved = self._resolve(typ)
        family = self._family_of(resolved)
        if family == "string":
            if len(args) == 2:
                return f"String.valueOf({self._expr(args[1])}).repeat({self._expr(args[0])})"
            if args:
                return self._expr(args[0])
            return '""'
        if family == "bitset":
            size = None
            if isinstance(resolved, TemplateType):
                size = next((a for a in resolved.args if isinstance(a, Expr)), None)
            if args:
                self._warn(node, "unsupported", "bitset initial value dropped")
            return f"new BitSet({self._expr(size) if size is not None else ''})"
        if family in _CONTAINER_FAMILIES:
            return self._construct_container(resolved, family, args, node)
        if family == "atomic":
            return f"new {self._type(resolved)}({self._args(args)})"
        if family == "stream":
            return f"new StringBuilder({self._args(args)})"
        prim = self._primitive_of(resolved)
        if prim is not None:
            if args:
                return self._expr(args[0])
            return default_value(prim)
        jtype = self._type(resolved)
        if "<" in jtype:
            jtype = jtype.split("<")[0] + "<>"
        return f"new {jtype}({self._args(args)})"

    def _construct_container(self, typ: TypeNode | None, family: str, args: list[Expr], node: object) -> str:
        impl = self._impl(typ)
        if len(args) == 2 and self._is_iterator(args[0]) and self._is_iterator(args[1]):
            return f"new {impl}<>({self._iterator_source(args[0])})"
        if len(args) == 1 and self._family(args[0]) == family:
            return f"new {impl}<>({self._expr(args[0])})"
        if family == "priority_queue":
            if args:
                self._warn(node, "unsupported", "priority_queue comparator semantics are inverted in Java; check ordering")
                return f"new PriorityQueue<>({self._expr(args[-1])})"
            return f"new PriorityQueue<>({self._queue_order(typ)})"
        if not args:
            return f"new {impl}<>()"
        if family in _SEQUENCE_FAMILIES and len(args) <= 2:
            count = self._expr(args[0])
            element = self._element_type(typ)
            jelem = self._type(element, boxed=True) if element is not None else "Object"
            if len(args) == 2:
                fill = self._init_value(element, args[1])
            else:
                fill = self._default_init(element, self._type(element)) if element is not None else None
                fill = fill or default_value(jelem)
            element_family = self._family_of(element)
            if element_family in _CONTAINER_FAMILIES or _type_name(element) in self.class_names:
                return (
                    f"Stream.generate(() -> {fill}).limit({count})"
                    f".collect(Collectors.toCollection({impl}::new))"
                )
            return f"new {impl}<>(Collections.nCopies({count}, {fill}))"
        self._warn(node, "unsupported", f"{family} constructor arguments dropped")
        return f"new {impl}<>()"

    def _queue_order(self, typ: TypeNode | None) -> str:
        """Max-heap by default; an explicit greater<> comparator keeps natural order."""
        if isinstance(typ, TemplateType) and len(typ.args) >= 3:
            order = typ.args[2]
            if isinstance(order, TypeNode) and _type_name(order) == "greater":
                return ""
        return "Collections.reverseOrder()"

    def _is_iterator(self, expr: Expr) -> bool:
        match expr:
            case ContainerMethodCall(method=method):
                return method in ("begin", "end", "rbegin", "rend")
            case BinaryExpr(op="+" | "-", left=left) if left is not None:
                return self._is_iterator(left)
            case _:
                return False

    def _iterator_source(self, expr: Expr) -> str:
        match expr:
            case ContainerMethodCall(receiver=receiver):
                return self._expr(receiver)
            case BinaryExpr(left=left) if left is not None:
                return self._iterator_source(left)
            case _:
                return self._expr(expr)

    def _init_list(self, typ: TypeNode | None, lst: InitializerList) -> str:
        """Brace initialisation against a known target type."""
        resolved = self._resolve(typ)
        family = self._family_of(resolved)
        elements = lst.elements
        if family == "map":
            impl = self._impl(resolved)
            if not elements:
                return f"new {impl}<>()"
            key_type = self._element_type(resolved, keyed=True)
            value_type = self._element_type(resolved)
            entries: list[str] = []
            for e in elements:
                if isinstance(e, InitializerList) and len(e.elements) == 2:
                    k = self._elem_value(key_type, e.elements[0])
                    v = self._elem_value(value_type, e.elements[1])
                    entries.append(f"Map.entry({k}, {v})")
                else:
                    entries.append(self._expr(e))
            return f"new {impl}<>(Map.ofEntries({', '.join(entries)}))"
        if family in _CONTAINER_FAMILIES:
            impl = self._impl(resolved)
            if not elements:
                return self._construct_container(resolved, family, [], lst)
            if family == "stack":
                self._warn(lst, "unsupported", "stack brace initialisation mapped through a list copy")
                return f"new Stack<>() {{{{ addAll(Arrays.asList({self._list_items(resolved, elements)})); }}}}"
            if family == "priority_queue":
                return f"new PriorityQueue<>(Arrays.asList({self._list_items(resolved, elements)}))"
            return f"new {impl}<>(Arrays.asList({self._list_items(resolved, elements)}))"
        if family == "bitset":
            return self._construct(resolved, [], lst)
        if isinstance(resolved, (ArrayType, PointerType)) or family == "array":
            return self._array_init(resolved, lst)
        if family == "pair":
            items = self._list_items(resolved, elements, pair=True)
            return f"new AbstractMap.SimpleEntry<>({items})"
        if family == "string":
            return self._expr(elements[0]) if elements else '""'
        if family == "atomic":
            return f"new {self._type(resolved)}({self._args(elements)})"
        prim = self._primitive_of(resolved)
        if prim is not None:
            return self._expr(elements[0]) if elements else default_value(prim)
        name = _type_name(resolved)
        if name in self.class_names:
            field_types = list(self.types.class_fields.get(name, {}).values())
            items = [
                self._elem_value(field_types[i] if i < len(field_types) else None, e) for i, e in enumerate(elements)
            ]
            jtype = self._type(resolved)
            if "<" in jtype:
                jtype = jtype.split("<")[0] + "<>"
            return f"new {jtype}({', '.join(items)})"
        if resolved is not None:
            return self._construct(resolved, elements, lst)
        return f"Arrays.asList({self._args(elements)})"

    def _list_items(self, typ: TypeNode | None, elements: list[Expr], pair: bool = False) -> str:
        if pair and isinstance(typ, TemplateType):
            types = [a for a in typ.args if isinstance(a, TypeNode)]
            return ", ".join(
                self._elem_value(types[i] if i < len(types) else None, e) for i, e in enumerate(elements)
            )
        element = self._element_type(typ)
        return ", ".join(self._elem_value(element, e) for e in elements)

    def _elem_value(self, typ: TypeNode | None, expr: Expr) -> str:
        if isinstance(expr, InitializerList):
            return self._init_list(typ, expr)
        return self._init_value(typ, expr)

    def _array_init(self, typ: TypeNode | None, lst: InitializerList) -> str:
        if isinstance(typ, PointerType):
            typ = ArrayType(typ.pos, typ.base)
        elements = lst.elements
        size = typ.size if isinstance(typ, ArrayType) else None
        zero = not elements or (
            len(elements) == 1 and isinstance(elements[0], Literal) and elements[0].value in ("0", "0.0", "false")
        )
        if zero and size is not None:
            created = self._new_array(typ)
            if created is not None:
                return created
        items = self._array_items(typ, lst)
        literal = f"new {self._type(typ).split('<')[0]}{items}"
        if size is not None and not zero:
            count = self._const_eval(size)
            if count is not None and count > len(elements):
                return f"Arrays.copyOf({literal}, {count})"
        return literal

    def _array_items(self, typ: TypeNode | None, lst: InitializerList) -> str:
        element = self._element_type(typ)
        parts: list[str] = []
        for e in lst.elements:
            if isinstance(e, InitializerList) and isinstance(self._resolve(element), ArrayType):
                parts.append(self._array_items(element, e))
            else:
                parts.append(self._elem_value(element, e))
        return "{" + ", ".join(parts) + "}"

    # ── Statements ───────────────────────────────────────────

    def _emit_body(self, body: Stmt, prelude: list[str] | None = None) -> None:
        self.indent += 1
        self.types.push()
        for text in prelude or []:
            self._line(text)
        if isinstance(body, Block):
            for stmt in body.stmts:
                self._emit_stmt(stmt)
        else:
            self._emit_stmt(body)
        self._flush()
        self.types.pop()
        self.indent -= 1

    def _emit_stmt(self, stmt: Stmt) -> None:
        match stmt:
            case Block():
                self._line("{")
                self._emit_body(stmt)
                self._line("}")
            case DeclStmt(decl=decl):
                self._emit_local_decl(decl)
            case ExprStmt(expr=expr):
                self._emit_expr_stmt(expr)
            case EmptyStmt():
                pass
            case IfStmt():
                self._emit_if(stmt)
            case WhileStmt(cond=cond, body=body):
                self._line(f"while ({self._condition(cond)}) {{")
                self._emit_body(body)
                self._line("}")
            case DoWhileStmt(body=body, cond=cond):
                self._line("do {")
                self._emit_body(body)
                self._line(f"}} while ({self._condition(cond)});")
            case ForStmt():
                self._emit_for(stmt)
            case RangeForStmt():
                self._emit_range_for(stmt)
            case SwitchStmt():
                self._emit_switch(stmt)
            case ReturnStmt():
                self._emit_return(stmt)
            case BreakStmt():
                self._line("break;")
            case ContinueStmt():
                self._line("continue;")
            case GotoStmt(label=label):
                self._placeholder(stmt, "goto " + label)
            case LabelStmt(label=label):
                self._placeholder(stmt, "label " + label)
            case TryStmt():
                self._emit_try(stmt)
            case ThrowStmt():
                self._emit_throw(stmt)
            case _:
                self._placeholder(stmt, type(stmt).__name__)

    def _emit_local_decl(self, decl: Decl) -> None:
        match decl:
            case VarDecl(is_static=is_static, declarators=declarators, is_const=is_const):
                if is_static:
                    names = ", ".join(d.name for d in declarators)
                    self._warn(decl, "unsupported", f"local static {names} is re-initialised on every call")
                for d in declarators:
                    self._emit_declarator(d, "", is_const)
            case EnumDecl():
                self._emit_enum(decl, local=True)
            case ClassDecl(is_forward=False):
                self._collect_class(decl)
                self._emit_class(decl, local=True)
            case TypedefDecl() | UsingDirective() | PreprocessorDirective():
                self._emit_decl(decl)
            case FunctionDecl(name=name):
                self._line(f"// local declaration: {name}(...)")
            case _:
                self._placeholder(decl, type(decl).__name__)

    def _emit_if(self, stmt: IfStmt) -> None:
        self._line(f"if ({self._condition(stmt.cond)}) {{")
        self._emit_body(stmt.then)
        else_ = stmt.else_
        while isinstance(else_, IfStmt):
            self._line(f"}} else if ({self._condition(else_.cond)}) {{")
            self._emit_body(else_.then)
            else_ = else_.else_
        if else_ is not None:
            self._line("} else {")
            self._emit_body(else_)
        self._line("}")

    def _emit_for(self, stmt: ForStmt) -> None:
        self.types.push()
        init = ""
        match stmt.init:
            case DeclStmt(decl=VarDecl(declarators=declarators)) if declarators:
                items: list[str] = []
                jtype = self._type(declarators[0].typ)
                for d in declarators:
                    self.types.declare(d.name, d.typ)
                    if d.init is not None:
                        items.append(f"{java_safe_name(d.name)} = {self._init_value(d.typ, d.init, jtype)}")
                    else:
                        items.append(java_safe_name(d.name))
                init = jtype + " " + ", ".join(items)
            case ExprStmt(expr=expr):
                init = self._statement_expr(expr)
            case None:
                pass
            case _:
                self._unsupported(stmt.init, "for-loop initializer " + type(stmt.init).__name__)
        cond = self._condition(stmt.cond) if stmt.cond is not None else ""
        incr = self._statement_expr(stmt.incr) if stmt.incr is not None else ""
        if not (init or cond or incr):
            self._line("for (;;) {")
        else:
            self._line(f"for ({init}; {cond}; {incr}) {{")
        self._emit_body(stmt.body)
        self._line("}")
        self.types.pop()

    def _statement_expr(self, expr: Expr) -> str:
        """Expression used for its effect inside a for header."""
        match expr:
            case CommaExpr(exprs=exprs):
                return ", ".join(self._statement_expr(e) for e in exprs)
            case AssignExpr():
                return self._assign(expr)
            case _:
                return self._expr(expr)

    def _emit_range_for(self, stmt: RangeForStmt) -> None:
        self.types.push()
        source = self._expr(stmt.iterable)
        itype = self._expr_type(stmt.iterable)
        family = self._family_of(itype)
        element = self._element_type(itype)
        is_auto = self._primitive_of(stmt.typ) == "var"
        if family == "map":
            key = self._element_type(itype, keyed=True)
            entry = f"Map.Entry<{self._type(key, True)}, {self._type(element, True)}>"
            pair = TemplateType(stmt.pos, "pair", [t for t in (key, element) if t is not None])
            self._emit_entry_loop(stmt, entry, source + ".entrySet()", pair)
        elif stmt.bindings and self._family_of(element) == "pair":
            self._emit_entry_loop(stmt, self._type(element), source, element)
        elif family == "string":
            self.types.declare(stmt.name, NamedType(stmt.pos, "char"))
            self._line(f"for (char {java_safe_name(stmt.name)} : {source}.toCharArray()) {{")
            self._emit_body(stmt.body)
            self._line("}")
        else:
            if stmt.bindings:
                self._unsupported(stmt, "structured binding over " + (family or "unknown range"))
            if is_auto and element is not None:
                jtype = self._type(element)
                self.types.declare(stmt.name, element)
            else:
                jtype = self._type(stmt.typ)
                self.types.declare(stmt.name, stmt.typ)
            self._line(f"for ({jtype} {java_safe_name(stmt.name)} : {source}) {{")
            self._emit_body(stmt.body)
            self._line("}")
        self.types.pop()

    def _emit_entry_loop(self, stmt: RangeForStmt, entry: str, source: str, pair: TypeNode | None) -> None:
        """Loop over key/value entries, unpacking structured bindings from a temp."""
        if not stmt.bindings:
            if pair is not None:
                self.types.declare(stmt.name, pair)
            self._line(f"for ({entry} {java_safe_name(stmt.name)} : {source}) {{")
            self._emit_body(stmt.body)
            self._line("}")
            return
        temp = self._temp("entry")
        parts: list[TypeNode | None] = [None, None]
        if isinstance(pair, TemplateType):
            types = [a for a in pair.args if isinstance(a, TypeNode)]
            parts = (types + [None, None])[:2]
        prelude: list[str] = []
        for name, getter, typ in zip(stmt.bindings, ("getKey()", "getValue()"), parts):
            jtype = self._type(typ) if typ is not None else "var"
            prelude.append(f"{jtype} {java_safe_name(name)} = {temp}.{getter};")
        self._line(f"for ({entry} {temp} : {source}) {{")
        # bindings are declared inside the body scope
        self.types.push()
        for name, typ in zip(stmt.bindings, parts):
            if typ is not None:
                self.types.declare(name, typ)
        self._emit_body(stmt.body, prelude)
        self.types.pop()
        self._line("}")

    def _emit_switch(self, stmt: SwitchStmt) -> None:
        self._line(f"switch ({self._expr(stmt.cond)}) {{")
        self.indent += 1
        for clause in stmt.cases:
            match clause:
                case CaseClause(value=value):
                    self._line(f"case {self._case_label(value)}:")
                case DefaultClause():
                    self._line("default:")
            self.indent += 1
            self.types.push()
            for s in clause.body:
                self._emit_stmt(s)
            self._flush()
            self.types.pop()
            self.indent -= 1
        self.indent -= 1
        self._line("}")

    def _case_label(self, value: Expr) -> str:
        """Enum constants are written bare in Java case labels."""
        match value:
            case Identifier(name=name) if name in self._enumerators:
                return java_safe_name(name)
            case QualifiedId(parts=[*_, owner, name]) if owner in self._enums:
                return java_safe_name(name)
            case _:
                return self._expr(value)

    def _emit_return(self, stmt: ReturnStmt) -> None:
        value = stmt.value
        if self._in_main:
            if value is None or (isinstance(value, Literal) and value.value == "0"):
                self._line("return;")
            else:
                self._line(f"System.exit({self._expr(value)});")
            return
        if value is None:
            self._line("return;")
            return
        ret = self._current_function.ret if self._current_function is not None else None
        if isinstance(value, InitializerList):
            self._line(f"return {self._init_list(ret, value)};")
            return
        if ret is not None and self._type(ret) == "float" and isinstance(value, Literal) and value.kind == "float":
            self._line(f"return {self._init_value(ret, value, 'float')};")
            return
        self._line(f"return {self._expr(value)};")

    def _emit_try(self, stmt: TryStmt) -> None:
        self._line("try {")
        self._emit_body(stmt.body)
        for clause in stmt.catches:
            self.types.push()
            if clause.typ is None:
                jtype, name = "Exception", clause.name or "e"
            else:
                jtype = self._type(clause.typ)
                name = clause.name or self._temp("e")
                if jtype in _NUMERIC_JAVA or jtype in ("String", "boolean"):
                    self._warn(clause, "unsupported", f"catch by {jtype} mapped to RuntimeException")
                    jtype = "RuntimeException"
                self.types.declare(name, clause.typ)
            self._line(f"}} catch ({jtype} {java_safe_name(name)}) {{")
            self._catch_vars.append(java_safe_name(name))
            self._emit_body(clause.body)
            self._catch_vars.pop()
            self.types.pop()
        self._line("}")

    def _emit_throw(self, stmt: ThrowStmt) -> None:
        value = stmt.value
        if value is None:
            if self._catch_vars:
                self._line(f"throw {self._catch_vars[-1]};")
            else:
                self._warn(stmt, "unsupported", "rethrow outside a catch block")
                self._line("throw new RuntimeException();")
            return
        text = self._expr(value)
        match value:
            case Literal(kind="string"):
                self._line(f"throw new RuntimeException({text});")
            case Literal():
                self._line(f"throw new RuntimeException(String.valueOf({text}));")
            case _ if self._primitive_of(self._expr_type(value)) is not None:
                self._line(f"throw new RuntimeException(String.valueOf({text}));")
            case _:
                self._line(f"throw {text};")

    # ── Expression statements ────────────────────────────────

    def _emit_expr_stmt(self, expr: Expr) -> None:
        match expr:
            case BinaryExpr(op=">>") if _is_stream(self._chain(expr, ">>")[0], ("cin",)):
                for target in self._chain(expr, ">>")[1]:
                    self._emit_read(target)
            case DeleteExpr(target=target):
                keyword = "delete[]" if expr.is_array else "delete"
                self._warn(expr, "memory", f"{keyword} {self._expr(target)} omitted (garbage-collected target)")
                self._flush()
            case CallExpr(callee=callee, args=args) if _callee_name(callee) == "free":
                self._warn(expr, "memory", f"free({self._args(args)}) omitted (garbage-collected target)")
                self._flush()
            case CallExpr(callee=callee, args=[left, right]) if _callee_name(callee) == "swap":
                self._emit_swap(left, right)
            case ContainerMethodCall(receiver=receiver, method="lock" | "unlock", args=[]):
                name = self._expr(receiver)
                self._warn(
                    expr, "concurrency", f"{name}.{expr.method}() dropped; use synchronized ({name}) {{ ... }}"
                )
                self._flush()
            case ContainerMethodCall(method="push_back" | "emplace_back", receiver=receiver) if (
                self._family_of(self._element_type(self._expr_type(receiver))) == "thread"
            ):
                self._emit_thread_push(expr)
            case CommaExpr(exprs=exprs):
                for e in exprs:
                    self._emit_expr_stmt(e)
            case AssignExpr():
                self._line(self._assign(expr) + ";")
            case _:
                text = self._expr(expr)
                if text:
                    self._line(text + ";")
                else:
                    self._flush()

    def _chain(self, expr: Expr, op: str) -> tuple[Expr | None, list[Expr]]:
        """Split `a << b << c` into its root and operands."""
        operands: list[Expr] = []
        node: Expr | None = expr
        while isinstance(node, BinaryExpr) and node.op == op:
            if node.right is not None:
                operands.append(node.right)
            node = node.left
        operands.reverse()
        return node, operands

    def _emit_read(self, target: Expr) -> None:
        jtype = self._type(self._expr_type(target)) if self._expr_type(target) is not None else None
        reader = SCANNER_READERS.get(jtype or "")
        if reader is None:
            self._warn(target, "io", f"cannot choose a Scanner reader for {self._expr(target)}; reading a token")
            reader = "next()"
        self._line(self._store(target, f"new Scanner(System.in).{reader}") + ";")

    def _store(self, target: Expr, value: str) -> str:
        """Assignment of an already rendered value to an lvalue."""
        if isinstance(target, SubscriptExpr):
            family = self._family(target.base)
            if family in SUBSCRIPT_SET:
                return self._render(SUBSCRIPT_SET[family], target.base, [], [self._expr(target.index), value])
            if family == "string":
                base = self._expr(target.base)
                index = self._expr(target.index)
                return f"{base} = {base}.substring(0, {index}) + {value} + {base}.substring({index} + 1)"
        return f"{self._expr(target)} = {value}"

    def _emit_swap(self, left: Expr, right: Expr) -> None:
        if (
            isinstance(left, SubscriptExpr)
            and isinstance(right, SubscriptExpr)
            and self._family(left.base) in _SEQUENCE_FAMILIES
            and self._expr(left.base) == self._expr(right.base)
        ):
            base = self._expr(left.base)
            self._line(f"Collections.swap({base}, {self._expr(left.index)}, {self._expr(right.index)});")
            return
        typ = self._expr_type(left)
        jtype = self._type(typ) if typ is not None else "var"
        temp = self._temp("tmp")
        self._line(f"{jtype} {temp} = {self._expr(left)};")
        self._line(self._store(left, self._expr(right)) + ";")
        self._line(self._store(right, temp) + ";")

    def _emit_thread_push(self, call: ContainerMethodCall) -> None:
        """threads.emplace_back(f, a) / push_back(thread(f, a)): start before storing."""
        args = call.args
        if len(args) == 1 and isinstance(args[0], CallExpr) and _callee_name(args[0].callee) == "thread":
            args = args[0].args
        if not args:
            self._line(self._expr(call) + ";")
            return
        body = self._thread_body(args[0], args[1:])
        temp = self._temp("t")
        self._line(f"Thread {temp} = new Thread({body});")
        self._line(f"{temp}.start();")
        self._line(f"{self._expr(call.receiver)}.add({temp});")

    def _render(
        self, template: str, receiver: Expr | str, args: list[Expr], texts: list[str] | None = None
    ) -> str:
        r = self._expr(receiver) if isinstance(receiver, Expr) else receiver
        if texts is None:
            texts = [self._expr(a) for a in args]
        fields = {"r": _paren(r) if r else r, "args": ", ".join(texts)}
        for i in range(max(4, len(texts))):
            text = texts[i] if i < len(texts) else ""
            fields[f"a{i}"] = text
            fields[f"p{i}"] = _paren(text) if text else text
        return template.format(**fields)

    def _stream_target(self, root: Expr | None) -> str | None:
        """Java print target for the root of a `<<` chain, if it is an output stream."""
        if _is_stream(root, ("cout",)):
            return "System.out"
        if _is_stream(root, ("cerr", "clog")):
            return "System.err"
        if isinstance(root, Identifier):
            family = self._family(root)
            if family == "stream":
                return java_safe_name(root.name)
            if _type_name(self._resolve(self._expr_type(root))) == "ostream":
                return java_safe_name(root.name)
        return None

    def _stream_output(self, expr: BinaryExpr) -> str | None:
        root, operands = self._chain(expr, "<<")
        target = self._stream_target(root)
        if target is None:
            return None
        if self._family(root) == "stream":
            return target + "".join(
                f".append({self._expr(o)})" for o in operands if not self._is_manipulator(o)
            )
        newline = False
        parts: list[str] = []
        for i, operand in enumerate(operands):
            if _is_stream(operand, ("endl",)):
                if i == len(operands) - 1:
                    newline = True
                else:
                    parts.append('"\\n"')
                continue
            if self._is_manipulator(operand):
                continue
            text = self._expr(operand)
            if isinstance(operand, (BinaryExpr, TernaryExpr, AssignExpr)):
                text = "(" + text + ")"
            parts.append(text)
        method = "println" if newline else "print"
        if len(parts) > 1 and not parts[0].startswith('"'):
            parts.insert(0, '""')
        return f"{target}.{method}({' + '.join(parts)})"

    def _is_manipulator(self, expr: Expr) -> bool:
        name: str | None = None
        match expr:
            case Identifier(name=n):
                name = n
            case QualifiedId(parts=["std", n]):
                name = n
            case CallExpr(callee=callee):
                name = _callee_name(callee)
            case _:
                return False
        if name not in STREAM_MANIPULATORS:
            return False
        self._warn(expr, "io", f"stream manipulator {name} dropped")
        return True

    # ── Expressions ──────────────────────────────────────────

    def _args(self, args: list[Expr]) -> str:
        return ", ".join(self._expr(a) for a in args)

    def _expr(self, expr: Expr | None) -> str:
        match expr:
            case None:
                return ""
            case Literal():
                return self._literal(expr)
            case Identifier():
                return self._identifier(expr)
            case QualifiedId():
                return self._qualified(expr)
            case BinaryExpr():
                return self._binary(expr)
            case UnaryExpr():
                return self._unary(expr)
            case TernaryExpr(cond=cond, then=then, else_=else_):
                then_text = self._expr(then)
                else_text = self._expr(else_)
                if isinstance(then, (TernaryExpr, AssignExpr)):
                    then_text = "(" + then_text + ")"
                if isinstance(else_, AssignExpr):
                    else_text = "(" + else_text + ")"
                return f"{self._condition(cond)} ? {then_text} : {else_text}"
            case AssignExpr():
                return self._assign(expr)
            case CallExpr():
                return self._call(expr)
            case MemberAccess():
                return self._member(expr)
            case SubscriptExpr(base=base, index=index):
                family = self._family(base)
                if family in SUBSCRIPT_GET:
                    return self._render(SUBSCRIPT_GET[family], base, [index])
                return f"{_paren(self._expr(base))}[{self._expr(index)}]"
            case ContainerMethodCall():
                return self._method_call(expr)
            case InitializerList():
                return self._init_list(None, expr)
            case LambdaExpr():
                return self._lambda(expr)
            case NewExpr():
                return self._new(expr)
            case DeleteExpr(target=target):
                self._warn(expr, "memory", f"delete {self._expr(target)} omitted (garbage-collected target)")
                return ""
            case MathCall(name=name, args=args):
                return self._render(MATH_CALLS[name], "", args)
            case StringCall(name=name, args=args):
                return self._render(STRING_CALLS[name], "", args)
            case SortCall():
                return self._sort(expr)
            case FindCall():
                return self._find(expr)
            case AccumulateCall():
                return self._accumulate(expr)
            case CastExpr():
                return self._cast(expr)
            case SizeofExpr():
                return self._sizeof(expr)
            case _:
                kind = type(expr).__name__
                self._record(expr, "unsupported", kind)
                return f"/* UNSUPPORTED: {kind} */"

    def _literal(self, lit: Literal) -> str:
        match lit.kind:
            case "int":
                return int_literal(lit.value)
            case "float":
                return float_literal(lit.value)
            case "char" | "string":
                return java_string_literal(lit.value)
            case "null":
                return "null"
            case _:
                return lit.value

    def _identifier(self, expr: Identifier) -> str:
        name = expr.name
        if name in self._renames:
            return self._renames[name]
        if self.types.resolve(name) is not None:
            return java_safe_name(name)
        match name:
            case "this":
                return "this"
            case "cout":
                return "System.out"
            case "cerr" | "clog":
                return "System.err"
            case "cin":
                return "new Scanner(System.in)"
            case "endl":
                return '"\\n"'
            case "npos":
                return "-1"
            case _:
                pass
        if name in CONSTANT_NAMES:
            return CONSTANT_NAMES[name]
        if name in self._enumerators:
            return f"{self._enumerators[name]}.{java_safe_name(name)}"
        return java_safe_name(name)

    def _qualified(self, expr: QualifiedId) -> str:
        parts = list(expr.parts)
        while len(parts) > 1 and (parts[0] == "std" or parts[0] in self._namespaces):
            parts = parts[1:]
        if parts[-1] == "npos":
            return "-1"
        if len(parts) == 1:
            return self._identifier(Identifier(expr.pos, parts[0]))
        if parts[-2] in self._enums:
            return f"{java_safe_name(parts[-2])}.{java_safe_name(parts[-1])}"
        return ".".join(java_safe_name(p) for p in parts)

    def _binary(self, expr: BinaryExpr) -> str:
        op, left, right = expr.op, expr.left, expr.right
        if left is None:
            return self._missing(expr, "left operand")
        if right is None:
            return self._missing(expr, "right operand")
        if op == "<<":
            output = self._stream_output(expr)
            if output is not None:
                return output
        if op == ">>" and _is_stream(self._chain(expr, ">>")[0], ("cin",)):
            self._record(expr, "io", "console input used as a value")
            return "/* UNSUPPORTED: cin in expression */"
        if op in ("==", "!="):
            test = self._membership(left, right) or self._membership(right, left)
            if test is not None:
                return test if op == "!=" else "!" + _paren(test)
        if op == "/" and isinstance(left, SizeofExpr) and isinstance(right, SizeofExpr):
            length = self._array_length(left, right)
            if length is not None:
                return length
        if op in ("&&", "||"):
            left_text = self._condition(left)
            right_text = self._condition(right)
        else:
            left_family = self._family(left)
            right_family = self._family(right)
            strings = left_family == "string" or right_family == "string"
            nulls = any(isinstance(e, Literal) and e.kind == "null" for e in (left, right))
            if op in ("==", "!=") and strings and not nulls and self._is_string_value(left, right):
                test = f"{_paren(self._expr(left))}.equals({self._expr(right)})"
                return test if op == "==" else "!" + test
            if op in _RELATIONAL_METHODS and left_family == "string" and right_family == "string":
                return f"{_paren(self._expr(left))}.compareTo({self._expr(right)}) {_RELATIONAL_METHODS[op]}"
            left_text = self._expr(left)
            right_text = self._expr(right)
        if isinstance(left, BinaryExpr) and _needs_parens(left.op, op, True):
            left_text = "(" + left_text + ")"
        elif isinstance(left, (TernaryExpr, AssignExpr)):
            left_text = "(" + left_text + ")"
        if isinstance(right, BinaryExpr) and _needs_parens(right.op, op, False):
            right_text = "(" + right_text + ")"
        elif isinstance(right, (TernaryExpr, AssignExpr)):
            right_text = "(" + right_text + ")"
        return f"{left_text} {op} {right_text}"

    def _is_string_value(self, left: Expr, right: Expr) -> bool:
        """Both sides are strings (a char compared with a string element stays ==)."""
        for side in (left, right):
            if isinstance(side, Literal) and side.kind == "char":
                return False
            if self._primitive_of(self._expr_type(side)) == "char":
                return False
        return True

    def _is_end(self, expr: Expr) -> bool:
        return isinstance(expr, ContainerMethodCall) and expr.method == "end"

    def _membership(self, left: Expr, right: Expr) -> str | None:
        """`x.find(k) != x.end()` and `find(b, e, k) != x.end()` as a boolean test."""
        match left:
            case ContainerMethodCall(method="find", receiver=receiver, args=[key]) if self._is_end(right):
                family = self._family(receiver)
                target = _paren(self._expr(receiver))
                if family == "map":
                    return f"{target}.containsKey({self._expr(key)})"
                if family in ("set", "vector", "list", "deque"):
                    return f"{target}.contains({self._expr(key)})"
                return None
            case FindCall(args=[first, _, value]) if self._is_iterator(first) and self._is_end(right):
                return f"{_paren(self._iterator_source(first))}.contains({self._expr(value)})"
            case _:
                return None

    def _array_length(self, left: SizeofExpr, right: SizeofExpr) -> str | None:
        """sizeof(a) / sizeof(a[0]) is the element count."""
        if left.expr is None or not isinstance(right.expr, SubscriptExpr):
            return None
        whole = self._expr(left.expr)
        if whole != self._expr(right.expr.base):
            return None
        return f"{_paren(whole)}.length"

    def _truth_kind(self, expr: Expr) -> str:
        """How a value reads in a boolean context: bool, number or ref."""
        if isinstance(expr, BinaryExpr) and expr.op in _ARITH_OPS:
            return "number"
        typ = self._resolve(self._expr_type(expr))
        if isinstance(typ, (PointerType, ArrayType)):
            return "ref"
        prim = self._primitive_of(typ)
        if prim in _NUMERIC_JAVA:
            return "number"
        return "bool"

    def _condition(self, expr: Expr | None) -> str:
        """Render an expression in a boolean context, adding the implicit test."""
        if expr is None:
            return ""
        match expr:
            case ContainerMethodCall(method="count", receiver=receiver, args=[key]) if self._family(receiver) in (
                "map",
                "set",
            ):
                method = "containsKey" if self._family(receiver) == "map" else "contains"
                return f"{_paren(self._expr(receiver))}.{method}({self._expr(key)})"
            case BinaryExpr(op=op) if op in ("&&", "||", "==", "!=", "<", ">", "<=", ">="):
                return self._expr(expr)
            case UnaryExpr(op="!") | Literal(kind="bool"):
                return self._expr(expr)
            case _:
                pass
        kind = self._truth_kind(expr)
        text = self._expr(expr)
        if kind == "number":
            return f"{_paren(text)} != 0"
        if kind == "ref":
            return f"{_paren(text)} != null"
        return text

    def _negate(self, operand: Expr) -> str:
        match operand:
            case ContainerMethodCall(method="count"):
                return "!" + self._condition(operand)
            case _:
                pass
        kind = self._truth_kind(operand)
        if isinstance(operand, (BinaryExpr, TernaryExpr, AssignExpr)) or kind == "bool":
            return "!" + _paren(self._condition(operand))
        text = _paren(self._expr(operand))
        return f"{text} == 0" if kind == "number" else f"{text} == null"

    def _unary(self, expr: UnaryExpr) -> str:
        op, operand = expr.op, expr.operand
        if op in ("++", "--"):
            return self._step(expr)
        if op == "*":
            if self._family(operand) == "array":
                return f"{_paren(self._expr(operand))}[0]"
            if isinstance(operand, ContainerMethodCall) and operand.method in ("begin", "rbegin"):
                self._warn(expr, "unsupported", "iterator dereference mapped to the first element")
                return self._render("{r}.iterator().next()", operand.receiver, [])
            return self._expr(operand)
        if op == "&":
            text = self._expr(operand)
            prim = self._primitive_of(self._expr_type(operand))
            if prim in _NUMERIC_JAVA or prim == "boolean":
                self._warn(expr, "unsupported", f"address of {text} taken; Java passes primitives by value")
            return text
        if op == "!":
            return self._negate(operand)
        text = self._expr(operand)
        if isinstance(operand, (BinaryExpr, TernaryExpr, AssignExpr)):
            text = "(" + text + ")"
        if text.startswith(op):
            return f"{op}({text})"
        return op + text

    def _step(self, expr: UnaryExpr) -> str:
        """++/-- on plain variables, collection elements and atomics."""
        op, operand = expr.op, expr.operand
        sign = op[0]
        if isinstance(operand, SubscriptExpr):
            family = self._family(operand.base)
            base = _paren(self._expr(operand.base))
            key = self._expr(operand.index)
            if family == "map":
                value_type = self._element_type(self._expr_type(operand.base))
                default = default_value(self._type(value_type, boxed=True)) if value_type is not None else "0"
                return f"{base}.put({key}, {base}.getOrDefault({key}, {default}) {sign} 1)"
            if family in ("vector", "list"):
                return f"{base}.set({key}, {base}.get({key}) {sign} 1)"
        if self._family(operand) == "atomic":
            verb = "increment" if op == "++" else "decrement"
            if expr.prefix:
                return f"{_paren(self._expr(operand))}.{verb}AndGet()"
            return f"{_paren(self._expr(operand))}.getAnd{verb.capitalize()}()"
        text = self._expr(operand)
        return f"{op}{text}" if expr.prefix else f"{text}{op}"

    def _assign(self, expr: AssignExpr) -> str:
        op, target, value = expr.op, expr.target, expr.value
        if self._family(target) == "atomic":
            text = _paren(self._expr(target))
            match op:
                case "=":
                    return f"{text}.set({self._expr(value)})"
                case "+=":
                    return f"{text}.addAndGet({self._expr(value)})"
                case "-=":
                    return f"{text}.addAndGet(-{_paren(self._expr(value))})"
                case _:
                    self._warn(expr, "unsupported", f"atomic {op} has no Java counterpart")
        if isinstance(target, SubscriptExpr):
            family = self._family(target.base)
            element = self._element_type(self._expr_type(target.base))
            if op == "=":
                return self._store(target, self._init_value(element, value))
            binop = op[:-1]
            base = _paren(self._expr(target.base))
            key = self._expr(target.index)
            rhs = self._expr(value)
            if isinstance(value, (BinaryExpr, TernaryExpr, AssignExpr)):
                rhs = "(" + rhs + ")"
            if family == "map":
                default = default_value(self._type(element, boxed=True)) if element is not None else "0"
                return f"{base}.put({key}, {base}.getOrDefault({key}, {default}) {binop} {rhs})"
            if family in ("vector", "list"):
                return f"{base}.set({key}, {base}.get({key}) {binop} {rhs})"
        if op == "=":
            rhs = self._init_value(self._expr_type(target), value)
        else:
            rhs = self._expr(value)
        return f"{self._expr(target)} {op} {rhs}"

    # ── Calls ────────────────────────────────────────────────

    def _call(self, expr: CallExpr) -> str:
        callee, args, targs = expr.callee, expr.args, expr.template_args
        if isinstance(callee, MemberAccess):
            return self._member_call(expr, callee)
        name = _callee_name(callee)
        if name is None and isinstance(callee, QualifiedId):
            return self._qualified_call(expr, callee)
        match name:
            case "printf":
                return f"System.out.printf({self._printf_args(args)})"
            case "puts" if args:
                return f"System.out.println({self._expr(args[0])})"
            case "getline" if len(args) >= 2 and _is_stream(args[0], ("cin",)):
                return self._store(args[1], "new Scanner(System.in).nextLine()")
            case "make_pair" | "make_tuple" if len(args) == 2:
                return f"new AbstractMap.SimpleEntry<>({self._args(args)})"
            case "make_unique" | "make_shared" if targs and isinstance(targs[0], TypeNode):
                return self._new(NewExpr(expr.pos, targs[0], args))
            case "malloc" | "calloc":
                return self._allocation(expr, name, args)
            case "exit" | "_Exit" | "quick_exit":
                return f"System.exit({self._args(args)})"
            case "move" | "ref" | "cref" | "forward" if len(args) == 1:
                return self._expr(args[0])
            case "reverse" if len(args) == 2 and self._is_iterator(args[0]):
                source = self._iterator_source(args[0])
                if self._iterator_family(args[0]) == "string":
                    return f"{source} = new StringBuilder({source}).reverse().toString()"
                return f"Collections.reverse({source})"
            case "max_element" | "min_element" if len(args) == 2 and self._is_iterator(args[0]):
                method = "max" if name == "max_element" else "min"
                return f"Collections.{method}({self._iterator_source(args[0])})"
            case "fill" if len(args) == 3:
                if self._is_iterator(args[0]):
                    return f"Collections.fill({self._iterator_source(args[0])}, {self._expr(args[2])})"
                bounds = self._array_bounds(args[0], args[1])
                return f"Arrays.fill({self._expr(args[0])}, {bounds}, {self._expr(args[2])})"
            case "binary_search" if len(args) == 3 and self._is_iterator(args[0]):
                return f"Collections.binarySearch({self._iterator_source(args[0])}, {self._expr(args[2])}) >= 0"
            case "greater" | "less":
                return "Collections.reverseOrder()" if name == "greater" else "Comparator.naturalOrder()"
            case "thread" if args:
                return f"new Thread({self._thread_body(args[0], args[1:])})"
            case "rand" if not args:
                return "(int) (Math.random() * Integer.MAX_VALUE)"
            case "srand":
                self._warn(expr, "unsupported", "srand() dropped; Java seeds its generator itself")
                return ""
            case "time" if len(args) <= 1:
                return "System.currentTimeMillis() / 1000"
            case _:
                pass
        if name is not None and self.types.resolve(name) is None:
            constructed = self._temporary(expr, name)
            if constructed is not None:
                return constructed
        if self._family(callee) == "function":
            return self._invoke(callee, args)
        return f"{self._expr(callee)}({self._args(args)})"

    def _temporary(self, expr: CallExpr, name: str) -> str | None:
        """`T(args)` as a constructor call when T names a type."""
        args, targs = expr.args, expr.template_args
        if name in EXCEPTION_TYPES:
            return f"new {EXCEPTION_TYPES[name]}({self._args(args)})"
        if name in self.class_names:
            diamond = "<>" if targs else ""
            if len(args) == 1 and isinstance(args[0], InitializerList):
                args = args[0].elements
            return f"new {java_safe_name(name)}{diamond}({self._args(args)})"
        if name in CONTAINER_TYPES or name in LIBRARY_TYPES or name in ("pair", "array"):
            typ: TypeNode = TemplateType(expr.pos, name, targs) if targs else NamedType(expr.pos, name)
            if len(args) == 1 and isinstance(args[0], InitializerList):
                return self._init_list(typ, args[0])
            if name == "pair":
                return f"new AbstractMap.SimpleEntry<>({self._args(args)})"
            return self._construct(typ, args, expr)
        return None

    def _invoke(self, callee: Expr, args: list[Expr]) -> str:
        """Call through a std::function variable."""
        target = _paren(self._expr(callee))
        jtype = self._type(self._expr_type(callee))
        if jtype == "Runnable":
            return f"{target}.run()"
        if jtype.startswith("Supplier"):
            return f"{target}.get()"
        if jtype.startswith(("Consumer", "BiConsumer")):
            return f"{target}.accept({self._args(args)})"
        return f"{target}.apply({self._args(args)})"

    def _printf_args(self, args: list[Expr]) -> str:
        texts = [self._expr(a) for a in args]
        if args and isinstance(args[0], Literal) and args[0].kind == "string":
            texts[0] = re.sub(r"%(l{1,2}|z|h{1,2})?([diu])", "%d", texts[0])
            texts[0] = re.sub(r"%l?f", "%f", texts[0])
        return ", ".join(texts)

    def _allocation(self, expr: CallExpr, name: str, args: list[Expr]) -> str:
        """malloc(n * sizeof(T)) and calloc(n, sizeof(T)) as Java arrays."""
        count: Expr | None = None
        element: TypeNode | None = None
        if name == "calloc" and len(args) == 2 and isinstance(args[1], SizeofExpr):
            count, element = args[0], args[1].typ
        elif len(args) == 1:
            match args[0]:
                case BinaryExpr(op="*", left=SizeofExpr(typ=typ), right=right):
                    count, element = right, typ
                case BinaryExpr(op="*", left=left, right=SizeofExpr(typ=typ)):
                    count, element = left, typ
                case SizeofExpr(typ=typ):
                    count, element = Literal(expr.pos, "1", "int"), typ
                case _:
                    pass
        if count is None or element is None:
            self._warn(expr, "memory", f"{name}() size is not n * sizeof(T); allocating bytes")
            return f"new byte[{self._args(args)}]"
        base = self._type(element).split("<")[0]
        return f"new {base}[{self._expr(count)}]"

    def _array_bounds(self, first: Expr, last: Expr) -> str:
        """`a, a + n` as the index range `0, n`."""
        start = "0"
        if isinstance(first, BinaryExpr) and first.op == "+" and first.right is not None:
            start = self._expr(first.right)
        end = self._expr(last)
        if isinstance(last, BinaryExpr) and last.op == "+" and last.right is not None:
            end = self._expr(last.right)
        return f"{start}, {end}"

    def _qualified_call(self, expr: CallExpr, callee: QualifiedId) -> str:
        parts = list(callee.parts)
        args = self._args(expr.args)
        method = parts[-1]
        if "numeric_limits" in parts and expr.template_args:
            typ = expr.template_args[0]
            prim = self._primitive_of(typ) if isinstance(typ, TypeNode) else None
            wrapper = NUMERIC_LIMITS.get(prim or "")
            if wrapper is not None:
                match method:
                    case "max":
                        return f"{wrapper}.MAX_VALUE"
                    case "min":
                        return f"{wrapper}.MIN_VALUE"
                    case "lowest" if prim in ("float", "double"):
                        return f"-{wrapper}.MAX_VALUE"
                    case "lowest":
                        return f"{wrapper}.MIN_VALUE"
                    case _:
                        pass
            self._unsupported(expr, f"numeric_limits::{method}()")
            return f"/* UNSUPPORTED: numeric_limits::{method} */"
        if parts[-2:] == ["this_thread", "sleep_for"] and len(expr.args) == 1:
            self._throws_interrupted = True
            return f"Thread.sleep({self._duration_millis(expr.args[0])})"
        while len(parts) > 1 and (parts[0] == "std" or parts[0] in self._namespaces):
            parts = parts[1:]
        if len(parts) == 1:
            return self._call(dataclasses.replace(expr, callee=Identifier(callee.pos, parts[0])))
        owner = parts[-2]
        if self.current_class is not None and owner == self.types.class_bases.get(self.current_class):
            return f"super.{java_safe_name(method)}({args})"
        if owner in self.class_names:
            return f"{java_safe_name(owner)}.{java_safe_name(method)}({args})"
        return ".".join(java_safe_name(p) for p in parts) + f"({args})"

    def _duration_millis(self, duration: Expr) -> str:
        match duration:
            case CallExpr(callee=QualifiedId(parts=[*_, unit]), args=[amount]) | CallExpr(
                callee=Identifier(name=unit), args=[amount]
            ):
                text = self._expr(amount)
                match unit:
                    case "milliseconds":
                        return text
                    case "seconds":
                        return f"{_paren(text)} * 1000"
                    case "microseconds":
                        return f"{_paren(text)} / 1000"
                    case "minutes":
                        return f"{_paren(text)} * 60000"
                    case _:
                        pass
            case _:
                pass
        self._warn(duration, "unsupported", "sleep duration unit not recognised; passed through as milliseconds")
        return self._expr(duration)

    def _member_call(self, expr: CallExpr, callee: MemberAccess) -> str:
        obj, member = callee.obj, callee.member
        target = _paren(self._expr(obj))
        if member == "what" and not expr.args:
            return f"{target}.getMessage()"
        if member == "str" and not expr.args and self._family(obj) == "stream":
            return f"{target}.toString()"
        if self._family(callee) == "function":
            return self._invoke(callee, expr.args)
        return f"{target}.{java_safe_name(member)}({self._args(expr.args)})"

    def _member(self, expr: MemberAccess) -> str:
        obj, member = expr.obj, expr.member
        target = _paren(self._expr(obj))
        if member in ("first", "second"):
            owner = self._class_of(obj)
            if owner is None or self.types.resolve_field(owner, member) is None:
                return f"{target}.{'getKey' if member == 'first' else 'getValue'}()"
        return f"{target}.{java_safe_name(member)}"

    def _iterator_index(self, expr: Expr) -> str:
        """Index equivalent of an iterator expression such as v.begin() + i."""
        match expr:
            case ContainerMethodCall(method="begin"):
                return "0"
            case ContainerMethodCall(method="end", receiver=receiver):
                return self._render("{r}.size()", receiver, [])
            case BinaryExpr(op="+", left=left, right=right) if left is not None and right is not None:
                base = self._iterator_index(left)
                offset = self._expr(right)
                return offset if base == "0" else f"{base} + {offset}"
            case BinaryExpr(op="-", left=left, right=right) if left is not None and right is not None:
                return f"{self._iterator_index(left)} - {_paren(self._expr(right))}"
            case _:
                return self._expr(expr)

    def _method_call(self, call: ContainerMethodCall) -> str:
        receiver, method, args = call.receiver, call.method, call.args
        family = self._family(receiver)
        if family is None:
            if self._class_of(receiver) is None:
                self._warn(call, "unknown-receiver", f"receiver of {method}() has no known container type; call emitted unchanged")
            return f"{_paren(self._expr(receiver))}.{java_safe_name(method)}({self._args(args)})"
        target = _paren(self._expr(receiver))
        if method in ("begin", "end", "rbegin", "rend"):
            self._unsupported(call, f"iterator {method}() outside a recognised algorithm")
            return f"{target}.{method}()"
        if method == "reserve":
            return ""
        if family == "thread" and method == "join":
            self._throws_interrupted = True
            self._warn(call, "concurrency", "Thread.join() throws InterruptedException; the enclosing method declares it")
        if family == "thread" and method == "detach":
            self._warn(call, "concurrency", "detach() has no Java counterpart; the thread is left running")
            return ""
        if family in _SEQUENCE_FAMILIES and method == "erase" and len(args) == 2:
            return f"{target}.subList({self._iterator_index(args[0])}, {self._iterator_index(args[1])}).clear()"
        if family == "map" and method in ("insert", "emplace") and len(args) == 1:
            match args[0]:
                case InitializerList(elements=[key, value]) | CallExpr(
                    callee=Identifier(name="make_pair") | QualifiedId(parts=["std", "make_pair"]), args=[key, value]
                ):
                    return f"{target}.put({self._expr(key)}, {self._expr(value)})"
                case _:
                    entry = _paren(self._expr(args[0]))
                    return f"{target}.put({entry}.getKey(), {entry}.getValue())"
        texts = [self._iterator_index(a) if self._is_iterator(a) else self._expr(a) for a in args]
        template = CONTAINER_METHODS.get((family, method, len(args))) or CONTAINER_METHODS.get((family, method))
        if template is None:
            self._warn(call, "unmapped-method", f"{family}.{method}() has no Java mapping; call emitted unchanged")
            return f"{target}.{java_safe_name(method)}({', '.join(texts)})"
        return self._render(template, receiver, args, texts)

    # ── Algorithms ───────────────────────────────────────────

    def _iterator_family(self, expr: Expr) -> str | None:
        match expr:
            case ContainerMethodCall(receiver=receiver):
                return self._family(receiver)
            case BinaryExpr(left=left) if left is not None:
                return self._iterator_family(left)
            case _:
                return None

    def _sort(self, call: SortCall) -> str:
        first, last = call.args[0], call.args[1]
        comparator = self._comparator(call.args[2]) if len(call.args) == 3 else None
        if not self._is_iterator(first):
            if comparator is not None:
                self._warn(call, "unsupported", "comparator dropped; primitive arrays sort in natural order")
            return f"Arrays.sort({self._expr(first)}, {self._array_bounds(first, last)})"
        source = self._iterator_source(first)
        if isinstance(first, ContainerMethodCall) and first.method == "rbegin":
            comparator = "Collections.reverseOrder()"
        if self._iterator_family(first) == "string":
            self._unsupported(call, "sorting the characters of a string")
            return f"/* UNSUPPORTED: sort({source}) */"
        whole = (
            isinstance(first, ContainerMethodCall)
            and isinstance(last, ContainerMethodCall)
            and last.method in ("end", "rend")
        )
        if not whole:
            begin, end = self._iterator_index(first), self._iterator_index(last)
            return f"{_paren(source)}.subList({begin}, {end}).sort({comparator or 'null'})"
        if comparator is None:
            return f"Collections.sort({source})"
        return f"{_paren(source)}.sort({comparator})"

    def _comparator(self, expr: Expr) -> str:
        """A C++ less-than predicate as a Java Comparator."""
        match expr:
            case CallExpr(callee=callee) if _callee_name(callee) in ("greater", "less"):
                return self._expr(expr)
            case LambdaExpr(params=[first, second], body=Block(stmts=[ReturnStmt(value=value)])) if (
                value is not None and first.name and second.name
            ):
                a, b = java_safe_name(first.name), java_safe_name(second.name)
                self.types.push()
                self.types.declare(first.name, first.typ)
                self.types.declare(second.name, second.typ)
                before = self._condition(value)
                saved = self._renames
                self._renames = {**saved, first.name: b, second.name: a}
                after = self._condition(value)
                self._renames = saved
                self.types.pop()
                return f"({a}, {b}) -> {before} ? -1 : ({after} ? 1 : 0)"
            case Identifier(name=name) if name in self._defined_functions:
                fn = java_safe_name(name)
                return f"(a, b) -> {fn}(a, b) ? -1 : ({fn}(b, a) ? 1 : 0)"
            case _:
                self._warn(expr, "unsupported", "comparator passed through; check it returns an int")
                return self._expr(expr)

    def _find(self, call: FindCall) -> str:
        first, _, value = call.args
        if self._is_iterator(first):
            source = self._iterator_source(first)
            self._warn(call, "unsupported", "find() result used as an iterator; mapped to an index")
            return f"{_paren(source)}.indexOf({self._expr(value)})"
        self._unsupported(call, "find() over a raw array")
        return f"/* UNSUPPORTED: find({self._args(call.args)}) */"

    def _accumulate(self, call: AccumulateCall) -> str:
        first, last, init = call.args[0], call.args[1], call.args[2]
        if self._is_iterator(first):
            stream = f"{_paren(self._iterator_source(first))}.stream()"
        else:
            stream = f"Arrays.stream({self._expr(first)}, {self._array_bounds(first, last)})"
        op = "(a, b) -> a + b"
        if len(call.args) == 4:
            match call.args[3]:
                case CallExpr(callee=callee) if _callee_name(callee) == "multiplies":
                    op = "(a, b) -> a * b"
                case CallExpr(callee=callee) if _callee_name(callee) == "plus":
                    pass
                case other:
                    op = self._expr(other)
        return f"{stream}.reduce({self._expr(init)}, {op})"

    # ── Casts, sizeof, new, lambdas ──────────────────────────

    def _enum_of(self, expr: Expr) -> str | None:
        """Enum type name of an expression, if it has one."""
        match expr:
            case Identifier(name=name) if self.types.resolve(name) is None and name in self._enumerators:
                return self._enumerators[name]
            case QualifiedId(parts=[*_, owner, _]) if owner in self._enums:
                return owner
            case _:
                name = _type_name(self._resolve(self._expr_type(expr)))
                return name if name in self._enums else None

    def _cast(self, expr: CastExpr) -> str:
        kind, typ, inner = expr.kind, expr.typ, expr.expr
        if kind == "const_cast":
            return self._expr(inner)
        if kind == "dynamic_cast":
            target = self._type(self._strip(typ))
            text = _paren(self._expr(inner))
            return f"({text} instanceof {target} ? ({target}) {text} : null)"
        jtype = self._type(typ)
        if kind == "reinterpret_cast":
            self._warn(expr, "unsupported", f"reinterpret_cast to {jtype} is not type-safe in Java")
        target_enum = _type_name(self._resolve(typ))
        if target_enum in self._enums:
            return f"{java_safe_name(target_enum)}.values()[{self._expr(inner)}]"
        source_enum = self._enum_of(inner)
        if source_enum is not None and jtype in _NUMERIC_JAVA:
            method = "getValue" if self._enums.get(source_enum) else "ordinal"
            value = f"{_paren(self._expr(inner))}.{method}()"
            return value if jtype in ("int", "long", "double") else f"({jtype}) {value}"
        if jtype == "boolean":
            return self._condition(inner)
        if jtype == "String":
            return f"String.valueOf({self._expr(inner)})"
        text = self._expr(inner)
        if not _is_primary(text) or text.startswith("-"):
            text = "(" + text + ")"
        return f"({jtype}) {text}"

    def _sizeof(self, expr: SizeofExpr) -> str:
        if expr.typ is not None:
            jtype = self._type(expr.typ)
            if jtype in SIZEOF_TYPES:
                return SIZEOF_TYPES[jtype]
            self._unsupported(expr, f"sizeof({jtype})")
            return f"/* UNSUPPORTED: sizeof({jtype}) */"
        typ = self._resolve(self._expr_type(expr.expr))
        text = self._expr(expr.expr)
        if isinstance(typ, ArrayType):
            prim = self._primitive_of(typ.element)
            if prim in SIZEOF_TYPES:
                return f"{_paren(text)}.length * {SIZEOF_TYPES[prim]}"
        prim = self._primitive_of(typ)
        if prim in SIZEOF_TYPES:
            return SIZEOF_TYPES[prim]
        self._unsupported(expr, f"sizeof {text}")
        return f"/* UNSUPPORTED: sizeof({text}) */"

    def _new(self, expr: NewExpr) -> str:
        typ, args = expr.typ, expr.args or []
        if expr.array_size is not None:
            jtype = self._type(typ).split("<")[0]
            dims = jtype.count("[]")
            core = jtype.replace("[]", "")
            return f"new {core}[{self._expr(expr.array_size)}]" + "[]" * dims
        prim = self._primitive_of(typ)
        if prim == "String":
            return self._expr(args[0]) if args else '""'
        if prim is not None and prim != "var":
            # A pointer to a single primitive becomes a one-element array
            if args:
                return f"new {prim}[]{{{self._expr(args[0])}}}"
            return f"new {prim}[1]"
        if self._family_of(typ) in _CONTAINER_FAMILIES:
            return self._construct(typ, args, expr)
        if len(args) == 1 and isinstance(args[0], InitializerList):
            args = args[0].elements
        jtype = self._type(typ)
        if "<" in jtype:
            jtype = jtype.split("<")[0] + "<>"
        return f"new {jtype}({self._args(args)})"

    def _lambda(self, lam: LambdaExpr) -> str:
        names = [java_safe_name(p.name or f"arg{i}") for i, p in enumerate(lam.params)]
        head = f"({', '.join(names)})"
        self.types.push()
        for param in lam.params:
            if param.name:
                self.types.declare(param.name, param.typ)
        match lam.body.stmts:
            case [ReturnStmt(value=value)] if value is not None:
                text = self._expr(value)
                self.types.pop()
                return f"{head} -> {text}"
            case _:
                pass
        lines = self._capture_block(lam.body.stmts)
        self.types.pop()
        closing = "    " * self.indent + "}"
        return f"{head} -> {{\n" + "\n".join(lines) + "\n" + closing

    def _capture_block(self, stmts: list[Stmt]) -> list[str]:
        """Emit statements into a detached buffer one level deeper."""
        saved = (self.lines, self._pending, self._in_main, self._current_function)
        self.lines, self._pending = [], []
        self._in_main, self._current_function = False, None
        self.indent += 1
        self.types.push()
        for stmt in stmts:
            self._emit_stmt(stmt)
        self._flush()
        self.types.pop()
        self.indent -= 1
        captured = self.lines
        self.lines, self._pending, self._in_main, self._current_function = saved
        return captured


def emit_java(program: Program, class_name: str = "Main") -> str:
    """Translate a parsed program into the source of one Java class."""
    return JavaBackend().emit(program, class_name)
