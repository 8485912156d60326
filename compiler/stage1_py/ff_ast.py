#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from typing import List, Optional


# ==========================
# AST definitions
# ==========================


@dataclass
class Span:
    start_line: int
    start_column: int
    end_line: int
    end_column: int


@dataclass
class Node:
    span: Optional[Span] = field(default=None, repr=False, compare=False, kw_only=True)


# --- types ---

@dataclass
class TypeRef(Node):
    name: str  # e.g. "i32", "f64"


# --- expressions ---

@dataclass
class Expr(Node):
    pass


@dataclass(eq=False)
class NumberLiteral(Expr):
    """
    A numeric literal as written in the source.

    `type` is the inference handle attached by InferenceSession.inferred();
    it stays None for an untyped literal. Literals compare by identity: two
    occurrences of "5" are distinct type variables.
    """
    value: str  # raw text, e.g. "5", "-200", "3.25"
    is_decimal: bool = False
    type: Optional[int] = field(default=None, compare=False)


# --- declarations ---

class TopLevelDecl(Node):
    pass


@dataclass
class FuncDecl(TopLevelDecl):
    name: str
    return_type: Optional[TypeRef]  # None means inferred from the body
    body: Expr
    export_as: Optional[str] = None


@dataclass
class ExportDecl(TopLevelDecl):
    name: str  # function being exported
    alias: str  # exported name


@dataclass
class Module(Node):
    name: str
    decls: List[TopLevelDecl]
    filename: Optional[str] = field(default=None, repr=False, compare=False, kw_only=True)

    def functions(self) -> List[FuncDecl]:
        return [d for d in self.decls if isinstance(d, FuncDecl)]

    def exports(self) -> List[ExportDecl]:
        return [d for d in self.decls if isinstance(d, ExportDecl)]
