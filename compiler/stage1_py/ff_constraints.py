#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from typing import List, Optional, Union

from ff_ast import Span
from ff_type_graph import TypeHandle


@dataclass(eq=False)
class SubtypeConstraint:
    """
    `left <: right`, tagged with the color of the decomposition event that
    produced it. `right` is rewritten to its canonical form when the bound is
    re-homed during a merge; every other field is fixed at creation.
    """
    left: TypeHandle
    right: TypeHandle
    color: int
    origin: Optional[Span] = field(default=None, repr=False)


@dataclass(eq=False)
class EqualConstraint:
    left: TypeHandle
    right: TypeHandle
    origin: Optional[Span] = field(default=None, repr=False)


Constraint = Union[SubtypeConstraint, EqualConstraint]


@dataclass
class ConstraintStore:
    """
    Append-only log of every constraint ever emitted, plus the worklist of
    constraints still waiting to be solved.
    """
    log: List[Constraint] = field(default_factory=list)
    worklist: List[Constraint] = field(default_factory=list)
    _next_color: int = 0

    def __len__(self) -> int:
        return len(self.log)

    def fresh_color(self) -> int:
        color = self._next_color
        self._next_color += 1
        return color

    def add_subtype(
            self,
            left: TypeHandle,
            right: TypeHandle,
            origin: Optional[Span] = None,
            color: Optional[int] = None,
    ) -> SubtypeConstraint:
        if color is None:
            color = self.fresh_color()
        constraint = SubtypeConstraint(left, right, color, origin)
        self._push(constraint)
        return constraint

    def add_equal(self, left: TypeHandle, right: TypeHandle, origin: Optional[Span] = None) -> EqualConstraint:
        constraint = EqualConstraint(left, right, origin)
        self._push(constraint)
        return constraint

    def has_pending(self) -> bool:
        return bool(self.worklist)

    def take_worklist(self) -> List[Constraint]:
        """Swap the worklist for an empty one and return the previous batch."""
        batch = self.worklist
        self.worklist = []
        return batch

    def _push(self, constraint: Constraint) -> None:
        self.log.append(constraint)
        self.worklist.append(constraint)
