"""Java code generation from the C++ AST."""

from .diagnostics import Diagnostic, DiagnosticLog
from .java import JavaBackend, emit_java
from .scope import DeclaredTypes

__all__ = [
    "DeclaredTypes",
    "Diagnostic",
    "DiagnosticLog",
    "JavaBackend",
    "emit_java",
]
