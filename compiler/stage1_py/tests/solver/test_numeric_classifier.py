#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

import pytest

from ff_constraints import ConstraintStore, SubtypeConstraint
from ff_numeric import admissible_kinds, classify_literal, is_admissible, literal_value
from ff_type_graph import TypeGraph
from ff_types import NumericKind, SIGNED_KINDS, UNSIGNED_KINDS

I8, I16, I32, I64 = SIGNED_KINDS
U8, U16, U32, U64 = UNSIGNED_KINDS
F32, F64 = NumericKind.F32, NumericKind.F64


def test_small_positive_integer_fits_everything():
    assert admissible_kinds(5) == list(NumericKind)


def test_negative_integer_excludes_unsigned_and_narrow():
    assert admissible_kinds(-200) == [I16, I32, I64, F32, F64]


@pytest.mark.parametrize("kind", SIGNED_KINDS)
def test_signed_bounds_are_twos_complement(kind):
    low, high = -(2 ** (kind.bits - 1)), 2 ** (kind.bits - 1) - 1

    assert is_admissible(low, kind)
    assert is_admissible(high, kind)
    assert not is_admissible(low - 1, kind)
    assert not is_admissible(high + 1, kind)


@pytest.mark.parametrize("kind", UNSIGNED_KINDS)
def test_unsigned_upper_bound_is_inclusive_by_default(kind):
    top = 2 ** kind.bits

    assert is_admissible(0, kind)
    assert is_admissible(top, kind)
    assert not is_admissible(top + 1, kind)
    assert not is_admissible(-1, kind)


@pytest.mark.parametrize("kind", UNSIGNED_KINDS)
def test_exact_unsigned_bounds(kind):
    top = 2 ** kind.bits

    assert is_admissible(top - 1, kind, exact_unsigned_bounds=True)
    assert not is_admissible(top, kind, exact_unsigned_bounds=True)


def test_u8_edge_values():
    assert U8 in admissible_kinds(256)
    assert U8 not in admissible_kinds(256, exact_unsigned_bounds=True)
    assert U8 in admissible_kinds(255, exact_unsigned_bounds=True)


def test_float_exact_integer_limits():
    assert F32 in admissible_kinds(2 ** 24)
    assert F32 not in admissible_kinds(2 ** 24 + 1)
    assert F32 in admissible_kinds(-(2 ** 24))
    assert F64 in admissible_kinds(2 ** 53 - 1)
    assert F64 not in admissible_kinds(2 ** 53)


def test_values_beyond_i64_only_fit_u64():
    assert admissible_kinds(2 ** 63) == [U64]
    assert admissible_kinds(2 ** 64) == [U64]
    assert admissible_kinds(2 ** 64, exact_unsigned_bounds=True) == []


def test_non_integral_values_only_fit_floats():
    assert admissible_kinds(3.5) == [F32, F64]
    assert admissible_kinds(-0.25) == [F32, F64]
    assert admissible_kinds(1e10 + 0.5) == [F64]


def test_literal_value_parsing():
    assert literal_value("42", False) == 42
    assert literal_value("-200", False) == -200
    assert literal_value("+7", False) == 7
    assert literal_value("18446744073709551616", False) == 2 ** 64
    assert literal_value("3.5", True) == 3.5
    value = literal_value("3.0", True)
    assert value == 3 and isinstance(value, int)
    assert literal_value(".5", True) == 0.5


def test_classify_emits_one_subtype_per_kind_with_fresh_colors():
    graph = TypeGraph()
    store = ConstraintStore()
    var = graph.new_variable()

    kinds = classify_literal(graph, store, var, -200)

    assert kinds == [I16, I32, I64, F32, F64]
    assert len(store.log) == len(kinds)
    assert all(isinstance(c, SubtypeConstraint) and c.left == var for c in store.log)
    assert [graph.kind_of(c.right) for c in store.log] == kinds
    colors = [c.color for c in store.log]
    assert len(set(colors)) == len(colors)


def test_classify_out_of_every_range_emits_nothing():
    graph = TypeGraph()
    store = ConstraintStore()
    var = graph.new_variable()

    assert classify_literal(graph, store, var, 2 ** 70) == []
    assert store.log == []
