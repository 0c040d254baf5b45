"""Declared-type table: which C++ type each visible name was declared with.

The Java backend consults it to pick container method spellings, subscript
forms and console-input readers. Scopes nest by block; class fields are
also kept per class so `obj.field` and `this->field` can be resolved.
"""

from __future__ import annotations

from ..frontend.ast import TypeNode


class DeclaredTypes:
    """Block-scoped symbol table mapping names to their declared type nodes."""

    def __init__(self) -> None:
        self.scopes: list[dict[str, TypeNode]] = [{}]
        self.class_fields: dict[str, dict[str, TypeNode]] = {}
        self.class_bases: dict[str, str] = {}

    def push(self) -> None:
        self.scopes.append({})

    def pop(self) -> None:
        if len(self.scopes) > 1:
            self.scopes.pop()

    def depth(self) -> int:
        return len(self.scopes)

    def declare(self, name: str, typ: TypeNode) -> None:
        """Bind name in the innermost scope, replacing an earlier binding there."""
        self.scopes[-1][name] = typ

    def resolve(self, name: str) -> TypeNode | None:
        for scope in reversed(self.scopes):
            typ = scope.get(name)
            if typ is not None:
                return typ
        return None

    def add_field(self, class_name: str, name: str, typ: TypeNode) -> None:
        if class_name not in self.class_fields:
            self.class_fields[class_name] = {}
        self.class_fields[class_name][name] = typ

    def set_base(self, class_name: str, base: str) -> None:
        self.class_bases[class_name] = base

    def resolve_field(self, class_name: str, name: str) -> TypeNode | None:
        """Look a field up on a class, then on its first base chain."""
        seen: set[str] = set()
        current: str | None = class_name
        while current is not None and current not in seen:
            seen.add(current)
            fields = self.class_fields.get(current)
            if fields is not None and name in fields:
                return fields[name]
            current = self.class_bases.get(current)
        return None
