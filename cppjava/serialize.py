"""Serialization of tokens and AST nodes to JSON-compatible structures."""

from __future__ import annotations

import dataclasses
import json

from .backend.diagnostics import Diagnostic
from .frontend.ast import Pos
from .frontend.tokens import Token


def serialize(obj: object) -> object:
    """Recursively serialize an object to a JSON-compatible structure."""
    if obj is None:
        return None
    if isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, (list, tuple)):
        return [serialize(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): serialize(v) for k, v in obj.items()}
    if isinstance(obj, Pos):
        return {"line": obj.line, "col": obj.col}
    if isinstance(obj, Token):
        return {"type": obj.type, "value": obj.value, "line": obj.line, "col": obj.col}
    if isinstance(obj, Diagnostic):
        return {"line": obj.line, "col": obj.col, "category": obj.category, "message": obj.message}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        d: dict[str, object] = {"_type": type(obj).__name__}
        for f in dataclasses.fields(obj):
            d[f.name] = serialize(getattr(obj, f.name))
        return d
    return "<unserializable>"


def to_json(obj: object) -> str:
    """Serialize object to pretty-printed JSON."""
    return json.dumps(serialize(obj), indent=2)
