#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from enum import Enum
from typing import Dict, Optional

# ========================================
# The numeric kinds of the FF type system.
# ========================================


class NumericClass(Enum):
    SIGNED = "signed"
    UNSIGNED = "unsigned"
    FLOAT = "float"


class NumericKind(Enum):
    """
    The closed set of concrete numeric representations.

    Each member carries its source spelling, its class and its bit width.
    Code that switches over kinds ends with `assert_never` so that adding a
    member here forces every switch to be revisited.
    """
    I8 = ("i8", NumericClass.SIGNED, 8)
    I16 = ("i16", NumericClass.SIGNED, 16)
    I32 = ("i32", NumericClass.SIGNED, 32)
    I64 = ("i64", NumericClass.SIGNED, 64)
    U8 = ("u8", NumericClass.UNSIGNED, 8)
    U16 = ("u16", NumericClass.UNSIGNED, 16)
    U32 = ("u32", NumericClass.UNSIGNED, 32)
    U64 = ("u64", NumericClass.UNSIGNED, 64)
    F32 = ("f32", NumericClass.FLOAT, 32)
    F64 = ("f64", NumericClass.FLOAT, 64)

    @property
    def spelling(self) -> str:
        return self.value[0]

    @property
    def numeric_class(self) -> NumericClass:
        return self.value[1]

    @property
    def bits(self) -> int:
        return self.value[2]

    @property
    def is_float(self) -> bool:
        return self.numeric_class is NumericClass.FLOAT

    @property
    def is_signed(self) -> bool:
        return self.numeric_class is NumericClass.SIGNED

    @property
    def is_unsigned(self) -> bool:
        return self.numeric_class is NumericClass.UNSIGNED


SIGNED_KINDS = (NumericKind.I8, NumericKind.I16, NumericKind.I32, NumericKind.I64)
UNSIGNED_KINDS = (NumericKind.U8, NumericKind.U16, NumericKind.U32, NumericKind.U64)
FLOAT_KINDS = (NumericKind.F32, NumericKind.F64)

_KINDS_BY_SPELLING: Dict[str, NumericKind] = {k.spelling: k for k in NumericKind}

FF_TYPE_NAMES = tuple(_KINDS_BY_SPELLING)


def kind_from_name(name: str) -> Optional[NumericKind]:
    """
    Look up a numeric kind by its source spelling ("i32", "f64", ...).
    """
    return _KINDS_BY_SPELLING.get(name)


# --- type stringification for debugging ---

def format_kind(kind: Optional[NumericKind]) -> str:
    if kind is None:
        return "<variable>"
    return kind.spelling
