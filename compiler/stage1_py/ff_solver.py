"""
Subtype/equality constraint solver for numeric literal types.

A worklist fixpoint over a union-find type graph, adapted from Henglein's
subtype inference (1989). Subtype obligations whose left side is still a
variable are parked in the pending-subtype table of the variable's root;
obligations born from the same decomposition event share a color, and two
parked bounds with the same color force their right sides to be equal.
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from ff_ast import Span
from ff_constraints import Constraint, ConstraintStore, EqualConstraint, SubtypeConstraint
from ff_context import CompilationContext
from ff_internal_error import InternalCompilerError
from ff_logger import log_debug, log_trace
from ff_type_graph import TypeGraph, TypeHandle
from ff_types import NumericKind, format_kind


class SubtypeError(Exception):
    """
    Two concrete kinds were forced together but differ, or a literal was
    forced into a kind it cannot represent. Fatal: aborts the whole solve.
    """

    def __init__(
            self,
            message: str,
            left: Optional[NumericKind] = None,
            right: Optional[NumericKind] = None,
            origin: Optional[Span] = None,
    ):
        super().__init__(message)
        self.message = message
        self.left = left
        self.right = right
        self.origin = origin


@dataclass
class PendingBound:
    color: int
    right: TypeHandle
    source: TypeHandle  # left side of the constraint that recorded this bound
    origin: Optional[Span] = None


@dataclass
class Solver:
    graph: TypeGraph
    store: ConstraintStore
    context: CompilationContext = field(default_factory=CompilationContext.default)

    # root -> subtype bounds not yet discharged into a concrete kind
    pending: Dict[TypeHandle, List[PendingBound]] = field(default_factory=dict)
    # literal variable -> origin, for literals no kind can represent
    unrepresentable: Dict[TypeHandle, Optional[Span]] = field(default_factory=dict)

    def solve(self) -> int:
        """
        Drain the worklist to a fixpoint. Returns the number of constraints processed.
        """
        processed = 0
        rounds = 0
        while True:
            while self.store.has_pending():
                batch = self.store.take_worklist()
                rounds += 1
                log_debug(self.context, f"Solver round {rounds}: {len(batch)} constraint(s)")
                for constraint in batch:
                    self._solve_constraint(constraint)
                processed += len(batch)
            if not self.context.narrow_literals or not self._narrow():
                break
        log_debug(self.context, f"Solver reached fixpoint after {rounds} round(s), {processed} constraint(s)")
        return processed

    def record_unrepresentable(self, variable: TypeHandle, origin: Optional[Span] = None) -> None:
        """
        Note a literal that admits no kind. It emits no bounds, so narrowing
        checks it separately once its class is forced into a kind.
        """
        self.unrepresentable[variable] = origin

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _solve_constraint(self, constraint: Constraint) -> None:
        try:
            log_trace(self.context, f"solving {self.format_constraint(constraint)}")
            if isinstance(constraint, SubtypeConstraint):
                self._solve_subtype(constraint)
            else:
                self._solve_equal(constraint)
        except InternalCompilerError as e:
            raise e.locate(span=constraint.origin)

    def _solve_subtype(self, c: SubtypeConstraint) -> None:
        graph = self.graph
        if graph.is_variable(c.left):
            # x <: ...
            root = graph.find(c.left)
            earlier = self._pending_with_color(root, c.color)
            if earlier is not None:
                # f(x, x) <:_i f(y, z) gives x <:_i y and x <:_i z, hence y = z
                self.store.add_equal(earlier.right, c.right, origin=c.origin)
            elif not graph.is_variable(root):
                self.store.add_subtype(root, c.right, origin=c.origin, color=c.color)
            else:
                self.pending.setdefault(root, []).append(PendingBound(c.color, c.right, c.left, c.origin))
        elif graph.is_variable(c.right):
            # K <: x
            root = graph.find(c.right)
            if graph.is_variable(root):
                # collapse the bound onto the variable instead of keeping a lower bound
                self.store.add_equal(root, c.left, origin=c.origin)
            else:
                self.store.add_subtype(c.left, root, origin=c.origin, color=c.color)
        else:
            left_kind = graph.kind_of(c.left)
            right_kind = graph.kind_of(c.right)
            if left_kind is not right_kind:
                raise SubtypeError(
                    f"[TYP-0010] type mismatch: {format_kind(left_kind)} is not a subtype of {format_kind(right_kind)}",
                    left_kind, right_kind, c.origin,
                )

    def _solve_equal(self, c: EqualConstraint) -> None:
        graph = self.graph
        if not graph.is_variable(c.left) and not graph.is_variable(c.right):
            left_kind = graph.kind_of(c.left)
            right_kind = graph.kind_of(c.right)
            if left_kind is not right_kind:
                raise SubtypeError(
                    f"[TYP-0010] type mismatch: {format_kind(left_kind)} is not {format_kind(right_kind)}",
                    left_kind, right_kind, c.origin,
                )
            return

        left_root = graph.find(c.left)
        right_root = graph.find(c.right)
        if left_root == right_root:
            return

        if graph.is_variable(left_root):
            variable, other = left_root, right_root
        elif graph.is_variable(right_root):
            variable, other = right_root, left_root
        else:
            # both classes already resolved; compare the canonical forms next round
            self.store.add_equal(left_root, right_root, origin=c.origin)
            return

        graph.union(variable, other)
        self._migrate_bounds(variable, other)

    def _pending_with_color(self, root: TypeHandle, color: int) -> Optional[PendingBound]:
        for bound in self.pending.get(root, ()):
            if bound.color == color:
                return bound
        return None

    def _migrate_bounds(self, source: TypeHandle, target: TypeHandle) -> None:
        bounds = self.pending.pop(source, None)
        if not bounds:
            return
        into = self.pending.setdefault(target, [])
        for bound in bounds:
            bound.right = self.graph.find(bound.right)
            into.append(bound)

    # ------------------------------------------------------------------
    # Narrowing
    # ------------------------------------------------------------------

    def _narrow(self) -> bool:
        """
        Settle every class whose parked bounds are all concrete: the kinds a
        class may take are those admitted by every literal merged into it.
        Returns True if new constraints were emitted.
        """
        emitted = False
        for variable, origin in self.unrepresentable.items():
            kind = self.graph.kind_of(self.graph.find(variable))
            if kind is not None:
                raise SubtypeError(
                    f"[TYP-0020] numeric literal does not fit in {format_kind(kind)}",
                    None, kind, origin,
                )
        for root, bounds in list(self.pending.items()):
            if not self.graph.is_root(root):
                continue
            candidates = self._common_kinds(bounds)
            if candidates is None:
                continue
            origin = bounds[0].origin
            kind = self.graph.kind_of(root)
            if kind is not None:
                if kind not in candidates:
                    raise SubtypeError(
                        f"[TYP-0020] numeric literal does not fit in {format_kind(kind)}",
                        None, kind, self._origin_outside(bounds, kind) or origin,
                    )
                continue
            if not candidates:
                raise SubtypeError(
                    "[TYP-0030] numeric literals unified here have no numeric type in common",
                    None, None, origin,
                )
            if len(candidates) == 1:
                (only,) = candidates
                log_debug(self.context, f"Narrowing {self.graph.describe(root)} to {format_kind(only)}")
                self.store.add_equal(root, self.graph.concrete(only), origin=origin)
                emitted = True
        return emitted

    def _common_kinds(self, bounds: List[PendingBound]) -> Optional[Set[NumericKind]]:
        by_source: Dict[TypeHandle, Set[NumericKind]] = {}
        for bound in bounds:
            kind = self.graph.kind_of(self.graph.find(bound.right))
            if kind is None:
                return None
            by_source.setdefault(bound.source, set()).add(kind)
        common: Optional[Set[NumericKind]] = None
        for kinds in by_source.values():
            common = set(kinds) if common is None else common & kinds
        return common

    def _origin_outside(self, bounds: List[PendingBound], kind: NumericKind) -> Optional[Span]:
        """Origin of a literal merged into this class that does not admit `kind`."""
        admitted: Dict[TypeHandle, bool] = {}
        for bound in bounds:
            fits = self.graph.kind_of(self.graph.find(bound.right)) is kind
            admitted[bound.source] = admitted.get(bound.source, False) or fits
        for bound in bounds:
            if not admitted[bound.source]:
                return bound.origin
        return None

    # --- debugging ---

    def format_constraint(self, constraint: Constraint) -> str:
        left = self.graph.describe(constraint.left)
        right = self.graph.describe(constraint.right)
        if isinstance(constraint, SubtypeConstraint):
            return f"{left} <:{constraint.color} {right}"
        return f"{left} = {right}"
