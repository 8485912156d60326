#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

import pytest

from ff_internal_error import InternalCompilerError
from ff_type_graph import TypeGraph
from ff_types import NumericKind


def test_new_nodes_are_their_own_roots():
    graph = TypeGraph()
    a = graph.new_variable()
    b = graph.new_variable()

    assert a != b
    assert graph.find(a) == a
    assert graph.find(a) == graph.find(a)
    assert graph.is_variable(a)
    assert graph.kind_of(a) is None
    assert len(graph) == 2


def test_concrete_nodes_are_interned_per_graph():
    graph = TypeGraph()
    i32 = graph.concrete(NumericKind.I32)

    assert graph.concrete(NumericKind.I32) == i32
    assert graph.concrete(NumericKind.I64) != i32
    assert not graph.is_variable(i32)
    assert graph.kind_of(i32) is NumericKind.I32
    assert TypeGraph().concrete(NumericKind.F64) == 0


def test_union_redirects_find():
    graph = TypeGraph()
    a = graph.new_variable()
    i32 = graph.concrete(NumericKind.I32)

    graph.union(a, i32)

    assert graph.find(a) == i32
    assert graph.find(i32) == i32
    assert not graph.is_root(a)


def test_find_compresses_paths():
    graph = TypeGraph()
    a, b, c = graph.new_variable(), graph.new_variable(), graph.new_variable()
    graph.union(a, b)
    graph.union(b, c)

    assert graph.find(a) == c
    # after compression a points straight at the root
    assert graph._parents[a] == c
    assert graph.find(b) == c


def test_union_of_concrete_node_is_internal_error():
    graph = TypeGraph()
    i8 = graph.concrete(NumericKind.I8)
    a = graph.new_variable()

    with pytest.raises(InternalCompilerError) as excinfo:
        graph.union(i8, a)

    assert "[ICE-0110]" in excinfo.value.message


def test_union_of_non_root_is_internal_error():
    graph = TypeGraph()
    a, b, c = graph.new_variable(), graph.new_variable(), graph.new_variable()
    graph.union(a, b)

    with pytest.raises(InternalCompilerError) as excinfo:
        graph.union(a, c)

    assert "[ICE-0111]" in excinfo.value.message


def test_union_with_itself_is_internal_error():
    graph = TypeGraph()
    a = graph.new_variable()

    with pytest.raises(InternalCompilerError):
        graph.union(a, a)


def test_unknown_handle_is_internal_error():
    graph = TypeGraph()

    with pytest.raises(InternalCompilerError) as excinfo:
        graph.node(3)

    assert "[ICE-0100]" in excinfo.value.message


def test_describe():
    graph = TypeGraph()
    a = graph.new_variable()
    u8 = graph.concrete(NumericKind.U8)

    assert graph.describe(a) == f"?{a}"
    assert graph.describe(u8) == "u8"
