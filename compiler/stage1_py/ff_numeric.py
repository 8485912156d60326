"""
Numeric literal classification.

Computes the set of concrete kinds a literal value can inhabit and emits one
subtype obligation per admissible kind.
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from typing import List, Optional, Union, assert_never

from ff_ast import Span
from ff_constraints import ConstraintStore
from ff_type_graph import TypeGraph, TypeHandle
from ff_types import NumericClass, NumericKind

F32_EXACT_LIMIT = 2 ** 24  # largest magnitude with every integer exactly representable
F64_EXACT_LIMIT = 2 ** 53 - 1

LiteralValue = Union[int, float]


def literal_value(text: str, is_decimal: bool) -> LiteralValue:
    """
    Parse literal text. Decimal literals with an integral value (e.g. "3.0")
    are returned as int so they are classified like integers.
    """
    if not is_decimal:
        return int(text)
    value = float(text)
    if value.is_integer():
        return int(value)
    return value


def signed_range(bits: int) -> tuple[int, int]:
    return -(2 ** (bits - 1)), 2 ** (bits - 1) - 1


def unsigned_range(bits: int, exact: bool = False) -> tuple[int, int]:
    # Historically the upper bound is 2**bits (inclusive), one past the real maximum.
    upper = 2 ** bits - 1 if exact else 2 ** bits
    return 0, upper


def float_limit(kind: NumericKind) -> int:
    if kind is NumericKind.F32:
        return F32_EXACT_LIMIT
    if kind is NumericKind.F64:
        return F64_EXACT_LIMIT
    raise ValueError(f"not a float kind: {kind}")


def is_admissible(value: LiteralValue, kind: NumericKind, exact_unsigned_bounds: bool = False) -> bool:
    if isinstance(value, float):
        # non-integral literals only ever fit floats
        if not kind.is_float:
            return False
        limit = float_limit(kind)
        return -limit <= value <= limit

    match kind.numeric_class:
        case NumericClass.SIGNED:
            low, high = signed_range(kind.bits)
        case NumericClass.UNSIGNED:
            low, high = unsigned_range(kind.bits, exact_unsigned_bounds)
        case NumericClass.FLOAT:
            high = float_limit(kind)
            low = -high
        case _:
            assert_never(kind.numeric_class)
    return low <= value <= high


def admissible_kinds(value: LiteralValue, exact_unsigned_bounds: bool = False) -> List[NumericKind]:
    """Kinds that can hold `value`, in declaration order."""
    return [k for k in NumericKind if is_admissible(value, k, exact_unsigned_bounds)]


def classify_literal(
        graph: TypeGraph,
        store: ConstraintStore,
        variable: TypeHandle,
        value: LiteralValue,
        *,
        exact_unsigned_bounds: bool = False,
        origin: Optional[Span] = None,
) -> List[NumericKind]:
    """
    Emit `variable <: kind` for every admissible kind, each under a fresh
    color, and return the admissible kinds. Never raises; a value outside
    every range emits nothing.
    """
    kinds = admissible_kinds(value, exact_unsigned_bounds)
    for kind in kinds:
        store.add_subtype(variable, graph.concrete(kind), origin=origin)
    return kinds
