"""
Inference session: the entry point the parser and backend use to type
numeric literals.

A session bundles the type graph, the constraint store, the solver and the
per-literal memo table, so several programs can be compiled in one process
without sharing state.
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from typing import Dict, List, Optional, Tuple

from ff_ast import NumberLiteral, Span
from ff_constraints import Constraint, ConstraintStore
from ff_context import CompilationContext
from ff_internal_error import InternalCompilerError
from ff_logger import log_trace
from ff_numeric import classify_literal, literal_value
from ff_solver import Solver
from ff_type_graph import TypeGraph, TypeHandle
from ff_types import NumericKind


class InferenceSession:
    def __init__(self, context: Optional[CompilationContext] = None) -> None:
        self.context = context or CompilationContext.default()
        self.graph = TypeGraph()
        self.store = ConstraintStore()
        self.solver = Solver(self.graph, self.store, self.context)
        # id(literal) -> (literal, handle); the literal is kept so its id stays unique
        self._literal_types: Dict[int, Tuple[NumberLiteral, TypeHandle]] = {}
        self._solved = False

    # --- literals ---

    def infer(self, literal: NumberLiteral) -> TypeHandle:
        """
        Return the type handle of `literal`, creating and classifying a fresh
        variable on first use. Repeated calls return the identical handle.
        """
        cached = self._literal_types.get(id(literal))
        if cached is not None:
            return cached[1]
        handle = self.graph.new_variable()
        value = literal_value(literal.value, literal.is_decimal)
        kinds = classify_literal(
            self.graph,
            self.store,
            handle,
            value,
            exact_unsigned_bounds=self.context.exact_unsigned_bounds,
            origin=literal.span,
        )
        if not kinds:
            self.solver.record_unrepresentable(handle, literal.span)
        log_trace(self.context, f"literal {literal.value} -> ?{handle}: {', '.join(k.spelling for k in kinds) or '<none>'}")
        self._literal_types[id(literal)] = (literal, handle)
        return handle

    def inferred(self, literal: NumberLiteral) -> NumberLiteral:
        """Attach the literal's type handle to the node and return the node."""
        literal.type = self.infer(literal)
        return literal

    def literals(self) -> List[Tuple[NumberLiteral, TypeHandle]]:
        return list(self._literal_types.values())

    # --- graph access ---

    def new_variable(self) -> TypeHandle:
        return self.graph.new_variable()

    def concrete(self, kind: NumericKind) -> TypeHandle:
        return self.graph.concrete(kind)

    def reify(self, handle: TypeHandle) -> TypeHandle:
        """Canonical node of `handle`'s class; the handle itself before any merge."""
        return self.graph.find(handle)

    def reify_kind(self, handle: TypeHandle) -> Optional[NumericKind]:
        """Canonical kind of `handle`, or None while it is still a variable."""
        return self.graph.kind_of(self.reify(handle))

    # --- constraints ---

    def constrain_equal(self, left: TypeHandle, right: TypeHandle, origin: Optional[Span] = None) -> None:
        self.store.add_equal(left, right, origin=origin)

    def constrain_subtype(self, left: TypeHandle, right: TypeHandle, origin: Optional[Span] = None) -> None:
        self.store.add_subtype(left, right, origin=origin)

    @property
    def constraints(self) -> List[Constraint]:
        """Every constraint emitted so far, in emission order."""
        return list(self.store.log)

    # --- solving ---

    @property
    def is_solved(self) -> bool:
        return self._solved

    def solve(self) -> int:
        """
        Run the solver to a fixpoint. Raises SubtypeError on a kind mismatch.
        """
        if self._solved:
            raise InternalCompilerError("[ICE-0200] inference session solved twice")
        self._solved = True
        return self.solver.solve()
