"""C++ → Java lookup tables: types, containers, container methods, library calls.

Rendering templates use str.format fields:
  {r}     receiver, parenthesised when it is not a primary expression
  {args}  all arguments, comma-separated
  {a0}    argument 0 as written
  {p0}    argument 0, parenthesised when it is not a primary expression
"""

from __future__ import annotations


def primitive_type(name: str) -> str | None:
    """Java spelling of a C++ built-in type name, or None if it is not built in."""
    match name:
        case "int" | "unsigned int" | "size_t" | "int32_t" | "uint16_t" | "ptrdiff_t":
            return "int"
        case "long" | "long long" | "unsigned long" | "unsigned long long":
            return "long"
        case "int64_t" | "uint32_t" | "uint64_t":
            return "long"
        case "short" | "unsigned short" | "int16_t":
            return "short"
        case "signed char" | "int8_t":
            return "byte"
        case "uint8_t":
            return "int"
        case "char" | "unsigned char" | "wchar_t" | "char16_t":
            return "char"
        case "bool":
            return "boolean"
        case "float":
            return "float"
        case "double" | "long double":
            return "double"
        case "void":
            return "void"
        case "auto":
            return "var"
        case "string" | "wstring":
            return "String"
        case _:
            return None


def box_type(typ: str) -> str:
    """Convert primitive types to boxed types for generics."""
    match typ:
        case "int":
            return "Integer"
        case "long":
            return "Long"
        case "short":
            return "Short"
        case "byte":
            return "Byte"
        case "char":
            return "Character"
        case "boolean":
            return "Boolean"
        case "float":
            return "Float"
        case "double":
            return "Double"
        case "void":
            return "Void"
        case "var":
            return "Object"
        case _:
            return typ


def default_value(java_type: str) -> str:
    """Zero value used where C++ would value-initialise (vector<int>(n), m[k] += 1)."""
    match java_type:
        case "int" | "short" | "byte" | "Integer" | "Short" | "Byte":
            return "0"
        case "long" | "Long":
            return "0L"
        case "double" | "Double":
            return "0.0"
        case "float" | "Float":
            return "0.0f"
        case "boolean" | "Boolean":
            return "false"
        case "char" | "Character":
            return "'\\0'"
        case "String":
            return '""'
        case _:
            return "null"


# Byte sizes for sizeof(T)
SIZEOF_TYPES: dict[str, str] = {
    "int": "Integer.BYTES",
    "long": "Long.BYTES",
    "short": "Short.BYTES",
    "byte": "Byte.BYTES",
    "char": "1",
    "boolean": "1",
    "float": "Float.BYTES",
    "double": "Double.BYTES",
}

# Container name -> (family, declared Java type, Java instantiation class)
CONTAINER_TYPES: dict[str, tuple[str, str, str]] = {
    "vector": ("vector", "List", "ArrayList"),
    "list": ("list", "LinkedList", "LinkedList"),
    "deque": ("deque", "Deque", "ArrayDeque"),
    "map": ("map", "Map", "TreeMap"),
    "unordered_map": ("map", "Map", "HashMap"),
    "multimap": ("map", "Map", "TreeMap"),
    "set": ("set", "Set", "TreeSet"),
    "unordered_set": ("set", "Set", "HashSet"),
    "multiset": ("set", "Set", "TreeSet"),
    "stack": ("stack", "Stack", "Stack"),
    "queue": ("queue", "Deque", "ArrayDeque"),
    "priority_queue": ("priority_queue", "PriorityQueue", "PriorityQueue"),
    "bitset": ("bitset", "BitSet", "BitSet"),
}

# Non-container library types: name -> (family, Java type)
LIBRARY_TYPES: dict[str, tuple[str, str]] = {
    "string": ("string", "String"),
    "wstring": ("string", "String"),
    "thread": ("thread", "Thread"),
    "mutex": ("mutex", "Object"),
    "recursive_mutex": ("mutex", "Object"),
    "lock_guard": ("lock", "Object"),
    "unique_lock": ("lock", "Object"),
    "scoped_lock": ("lock", "Object"),
    "stringstream": ("stream", "StringBuilder"),
    "ostringstream": ("stream", "StringBuilder"),
}

ATOMIC_TYPES: dict[str, str] = {
    "int": "AtomicInteger",
    "long": "AtomicLong",
    "boolean": "AtomicBoolean",
}

SMART_POINTERS: set[str] = {"unique_ptr", "shared_ptr", "weak_ptr"}

# Types with no faithful Java counterpart; mapped to Object with a warning
OPAQUE_TYPES: set[str] = {"tuple", "variant", "any"}

# (family, method) -> rendering template; (family, method, argc) overrides
CONTAINER_METHODS: dict[tuple, str] = {
    ("vector", "push_back"): "{r}.add({args})",
    ("vector", "emplace_back"): "{r}.add({args})",
    ("vector", "pop_back"): "{r}.remove({r}.size() - 1)",
    ("vector", "at"): "{r}.get({a0})",
    ("vector", "front"): "{r}.get(0)",
    ("vector", "back"): "{r}.get({r}.size() - 1)",
    ("vector", "insert", 2): "{r}.add({a0}, {a1})",
    ("vector", "erase", 1): "{r}.remove({a0})",
    ("list", "push_back"): "{r}.addLast({args})",
    ("list", "emplace_back"): "{r}.addLast({args})",
    ("list", "push_front"): "{r}.addFirst({args})",
    ("list", "emplace_front"): "{r}.addFirst({args})",
    ("list", "pop_back"): "{r}.removeLast()",
    ("list", "pop_front"): "{r}.removeFirst()",
    ("list", "front"): "{r}.getFirst()",
    ("list", "back"): "{r}.getLast()",
    ("deque", "push_back"): "{r}.addLast({args})",
    ("deque", "emplace_back"): "{r}.addLast({args})",
    ("deque", "push_front"): "{r}.addFirst({args})",
    ("deque", "emplace_front"): "{r}.addFirst({args})",
    ("deque", "pop_back"): "{r}.pollLast()",
    ("deque", "pop_front"): "{r}.pollFirst()",
    ("deque", "front"): "{r}.peekFirst()",
    ("deque", "back"): "{r}.peekLast()",
    ("map", "insert"): "{r}.put({args})",
    ("map", "emplace"): "{r}.put({args})",
    ("map", "find"): "{r}.containsKey({a0})",
    ("map", "count"): "({r}.containsKey({a0}) ? 1 : 0)",
    ("map", "contains"): "{r}.containsKey({a0})",
    ("map", "erase"): "{r}.remove({a0})",
    ("map", "at"): "{r}.get({a0})",
    ("set", "insert"): "{r}.add({a0})",
    ("set", "emplace"): "{r}.add({a0})",
    ("set", "find"): "{r}.contains({a0})",
    ("set", "count"): "({r}.contains({a0}) ? 1 : 0)",
    ("set", "contains"): "{r}.contains({a0})",
    ("set", "erase"): "{r}.remove({a0})",
    ("stack", "push"): "{r}.push({a0})",
    ("stack", "emplace"): "{r}.push({a0})",
    ("stack", "pop"): "{r}.pop()",
    ("stack", "top"): "{r}.peek()",
    ("queue", "push"): "{r}.addLast({a0})",
    ("queue", "emplace"): "{r}.addLast({a0})",
    ("queue", "pop"): "{r}.pollFirst()",
    ("queue", "front"): "{r}.peekFirst()",
    ("queue", "back"): "{r}.peekLast()",
    ("priority_queue", "push"): "{r}.add({a0})",
    ("priority_queue", "emplace"): "{r}.add({a0})",
    ("priority_queue", "pop"): "{r}.poll()",
    ("priority_queue", "top"): "{r}.peek()",
    ("string", "size"): "{r}.length()",
    ("string", "length"): "{r}.length()",
    ("string", "substr", 1): "{r}.substring({a0})",
    ("string", "substr", 2): "{r}.substring({a0}, {a0} + {p1})",
    ("string", "find"): "{r}.indexOf({args})",
    ("string", "rfind"): "{r}.lastIndexOf({args})",
    ("string", "at"): "{r}.charAt({a0})",
    ("string", "c_str"): "{r}",
    ("string", "append"): "{r} += {a0}",
    ("string", "push_back"): "{r} += {a0}",
    ("string", "compare"): "{r}.compareTo({a0})",
    ("string", "front"): "{r}.charAt(0)",
    ("string", "back"): "{r}.charAt({r}.length() - 1)",
    ("string", "clear"): '{r} = ""',
    ("bitset", "set", 0): "{r}.set(0, {r}.size())",
    ("bitset", "set"): "{r}.set({args})",
    ("bitset", "reset", 0): "{r}.clear()",
    ("bitset", "reset"): "{r}.clear({args})",
    ("bitset", "test"): "{r}.get({a0})",
    ("bitset", "flip", 0): "{r}.flip(0, {r}.size())",
    ("bitset", "flip"): "{r}.flip({a0})",
    ("bitset", "count"): "{r}.cardinality()",
    ("array", "size"): "{r}.length",
    ("array", "empty"): "({r}.length == 0)",
    ("array", "at"): "{r}[{a0}]",
    ("array", "front"): "{r}[0]",
    ("array", "back"): "{r}[{r}.length - 1]",
    ("thread", "join"): "{r}.join()",
    ("atomic", "load"): "{r}.get()",
    ("atomic", "store"): "{r}.set({a0})",
    ("atomic", "fetch_add"): "{r}.getAndAdd({a0})",
    ("atomic", "fetch_sub"): "{r}.getAndAdd(-{p0})",
    ("atomic", "exchange"): "{r}.getAndSet({a0})",
}

# size/empty/clear behave the same on every collection family
for _family in ("vector", "list", "deque", "map", "set", "stack", "queue", "priority_queue"):
    CONTAINER_METHODS.setdefault((_family, "size"), "{r}.size()")
    CONTAINER_METHODS.setdefault((_family, "empty"), "{r}.isEmpty()")
    CONTAINER_METHODS.setdefault((_family, "clear"), "{r}.clear()")
CONTAINER_METHODS.setdefault(("string", "empty"), "{r}.isEmpty()")
CONTAINER_METHODS.setdefault(("bitset", "size"), "{r}.size()")
CONTAINER_METHODS.setdefault(("bitset", "none"), "{r}.isEmpty()")
CONTAINER_METHODS.setdefault(("bitset", "any"), "!{r}.isEmpty()")

# Indexable families and their Java read/write spellings
SUBSCRIPT_GET: dict[str, str] = {
    "vector": "{r}.get({a0})",
    "map": "{r}.get({a0})",
    "string": "{r}.charAt({a0})",
    "bitset": "{r}.get({a0})",
    "list": "{r}.get({a0})",
}

SUBSCRIPT_SET: dict[str, str] = {
    "vector": "{r}.set({a0}, {a1})",
    "map": "{r}.put({a0}, {a1})",
    "bitset": "{r}.set({a0}, {a1})",
    "list": "{r}.set({a0}, {a1})",
}

MATH_CALLS: dict[str, str] = {
    "sqrt": "Math.sqrt({a0})",
    "pow": "Math.pow({a0}, {a1})",
    "abs": "Math.abs({a0})",
    "fabs": "Math.abs({a0})",
    "floor": "Math.floor({a0})",
    "ceil": "Math.ceil({a0})",
    "sin": "Math.sin({a0})",
    "cos": "Math.cos({a0})",
    "tan": "Math.tan({a0})",
    "asin": "Math.asin({a0})",
    "acos": "Math.acos({a0})",
    "atan": "Math.atan({a0})",
    "atan2": "Math.atan2({a0}, {a1})",
    "exp": "Math.exp({a0})",
    "log": "Math.log({a0})",
    "log10": "Math.log10({a0})",
    "log2": "(Math.log({a0}) / Math.log(2))",
    "round": "Math.round({a0})",
    "fmod": "({p0} % {p1})",
    "hypot": "Math.hypot({a0}, {a1})",
    "cbrt": "Math.cbrt({a0})",
    "min": "Math.min({a0}, {a1})",
    "max": "Math.max({a0}, {a1})",
    "fmin": "Math.min({a0}, {a1})",
    "fmax": "Math.max({a0}, {a1})",
    "trunc": "(double) (long) {p0}",
}

STRING_CALLS: dict[str, str] = {
    "to_string": "String.valueOf({a0})",
    "stoi": "Integer.parseInt({a0})",
    "atoi": "Integer.parseInt({a0})",
    "stol": "Long.parseLong({a0})",
    "stoll": "Long.parseLong({a0})",
    "stod": "Double.parseDouble({a0})",
    "stof": "Float.parseFloat({a0})",
    "strlen": "{p0}.length()",
    "strcmp": "{p0}.compareTo({a1})",
    "strcpy": "{a0} = {a1}",
    "strcat": "{a0} += {a1}",
    "toupper": "Character.toUpperCase({a0})",
    "tolower": "Character.toLowerCase({a0})",
    "isdigit": "Character.isDigit({a0})",
    "isalpha": "Character.isLetter({a0})",
    "isspace": "Character.isWhitespace({a0})",
    "isupper": "Character.isUpperCase({a0})",
    "islower": "Character.isLowerCase({a0})",
    "isalnum": "Character.isLetterOrDigit({a0})",
}

EXCEPTION_TYPES: dict[str, str] = {
    "exception": "Exception",
    "runtime_error": "RuntimeException",
    "logic_error": "RuntimeException",
    "invalid_argument": "IllegalArgumentException",
    "domain_error": "ArithmeticException",
    "length_error": "IllegalStateException",
    "out_of_range": "IndexOutOfBoundsException",
    "overflow_error": "ArithmeticException",
    "underflow_error": "ArithmeticException",
    "bad_alloc": "OutOfMemoryError",
}

# Scanner readers keyed by the Java type of the target variable
SCANNER_READERS: dict[str, str] = {
    "int": "nextInt()",
    "long": "nextLong()",
    "short": "nextShort()",
    "byte": "nextByte()",
    "double": "nextDouble()",
    "float": "nextFloat()",
    "boolean": "nextBoolean()",
    "String": "next()",
    "char": "next().charAt(0)",
}

STREAM_MANIPULATORS: set[str] = {
    "fixed",
    "scientific",
    "setprecision",
    "setw",
    "setfill",
    "left",
    "right",
    "boolalpha",
    "noboolalpha",
    "showpoint",
    "hex",
    "dec",
    "oct",
    "flush",
}

# C++ operator overload names -> Java method-name suffixes
OPERATOR_NAMES: dict[str, str] = {
    "+": "plus",
    "-": "minus",
    "*": "times",
    "/": "div",
    "%": "mod",
    "==": "equals",
    "!=": "notEquals",
    "<": "less",
    ">": "greater",
    "<=": "lessEquals",
    ">=": "greaterEquals",
    "<<": "shiftLeft",
    ">>": "shiftRight",
    "=": "assign",
    "+=": "plusAssign",
    "-=": "minusAssign",
    "[]": "index",
    "()": "call",
    "!": "not",
    "++": "increment",
    "--": "decrement",
}

# <climits>/<cfloat> constants and their Java spellings
CONSTANT_NAMES: dict[str, str] = {
    "INT_MAX": "Integer.MAX_VALUE",
    "INT_MIN": "Integer.MIN_VALUE",
    "LONG_MAX": "Long.MAX_VALUE",
    "LONG_MIN": "Long.MIN_VALUE",
    "LLONG_MAX": "Long.MAX_VALUE",
    "LLONG_MIN": "Long.MIN_VALUE",
    "SHRT_MAX": "Short.MAX_VALUE",
    "SHRT_MIN": "Short.MIN_VALUE",
    "CHAR_MAX": "Character.MAX_VALUE",
    "DBL_MAX": "Double.MAX_VALUE",
    "DBL_MIN": "Double.MIN_VALUE",
    "FLT_MAX": "Float.MAX_VALUE",
    "FLT_MIN": "Float.MIN_VALUE",
    "EXIT_SUCCESS": "0",
    "EXIT_FAILURE": "1",
    "RAND_MAX": "Integer.MAX_VALUE",
    "M_PI": "Math.PI",
    "M_E": "Math.E",
}

# numeric_limits<T>::max()/min()/lowest() keyed by Java primitive
NUMERIC_LIMITS: dict[str, str] = {
    "int": "Integer",
    "long": "Long",
    "short": "Short",
    "byte": "Byte",
    "char": "Character",
    "float": "Float",
    "double": "Double",
}
