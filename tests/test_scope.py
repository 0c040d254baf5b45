"""Tests for the declared-type table."""

from cppjava.backend.scope import DeclaredTypes
from cppjava.frontend.ast import NamedType, Pos

POS = Pos(1, 1)
INT = NamedType(POS, "int")
STRING = NamedType(POS, "string")


def test_inner_scope_shadows_outer():
    types = DeclaredTypes()
    types.declare("x", INT)
    types.push()
    types.declare("x", STRING)
    assert types.resolve("x") is STRING
    types.pop()
    assert types.resolve("x") is INT


def test_unknown_name():
    assert DeclaredTypes().resolve("nothing") is None


def test_pop_keeps_global_scope():
    types = DeclaredTypes()
    types.declare("g", INT)
    types.pop()
    types.pop()
    assert types.depth() == 1
    assert types.resolve("g") is INT


def test_depth_tracks_nesting():
    types = DeclaredTypes()
    types.push()
    types.push()
    assert types.depth() == 3
    types.pop()
    assert types.depth() == 2


def test_field_found_on_base():
    types = DeclaredTypes()
    types.add_field("Shape", "name", STRING)
    types.add_field("Circle", "radius", INT)
    types.set_base("Circle", "Shape")
    assert types.resolve_field("Circle", "radius") is INT
    assert types.resolve_field("Circle", "name") is STRING
    assert types.resolve_field("Shape", "radius") is None


def test_base_cycle_terminates():
    types = DeclaredTypes()
    types.set_base("A", "B")
    types.set_base("B", "A")
    assert types.resolve_field("A", "missing") is None
