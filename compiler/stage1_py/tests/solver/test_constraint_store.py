#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from ff_constraints import ConstraintStore, EqualConstraint, SubtypeConstraint


def test_subtype_constraints_get_increasing_colors():
    store = ConstraintStore()
    first = store.add_subtype(0, 1)
    second = store.add_subtype(0, 2)

    assert isinstance(first, SubtypeConstraint)
    assert (first.color, second.color) == (0, 1)


def test_explicit_color_is_shared():
    store = ConstraintStore()
    color = store.fresh_color()
    a = store.add_subtype(0, 1, color=color)
    b = store.add_subtype(0, 2, color=color)

    assert a.color == b.color == color
    assert store.add_subtype(3, 4).color == color + 1


def test_log_is_append_only_and_worklist_swaps():
    store = ConstraintStore()
    sub = store.add_subtype(0, 1)
    eq = store.add_equal(1, 2)

    assert isinstance(eq, EqualConstraint)
    assert store.has_pending()
    batch = store.take_worklist()

    assert batch == [sub, eq]
    assert not store.has_pending()
    assert store.log == [sub, eq]
    assert len(store) == 2

    again = store.add_equal(2, 3)
    assert store.take_worklist() == [again]
    assert store.log == [sub, eq, again]


def test_separate_stores_have_separate_colors():
    assert ConstraintStore().fresh_color() == 0
    store = ConstraintStore()
    store.fresh_color()
    assert ConstraintStore().fresh_color() == 0
