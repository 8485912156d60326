#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ff_internal_error import InternalCompilerError
from ff_types import NumericKind, format_kind

# A type node is addressed by its index in the session's arena.
TypeHandle = int


@dataclass(frozen=True)
class TypeNode:
    """
    One node of the type graph: a Variable (`kind is None`) or a Concrete
    node carrying exactly one numeric kind.
    """
    handle: TypeHandle
    kind: Optional[NumericKind] = None

    @property
    def is_variable(self) -> bool:
        return self.kind is None


@dataclass
class TypeGraph:
    """
    Arena of type nodes plus the union-find forest over them.

    Only Variable nodes ever receive a parent, so Concrete nodes are always
    roots of their own class and the forest stays acyclic.
    """
    _nodes: List[TypeNode] = field(default_factory=list)
    _parents: Dict[TypeHandle, TypeHandle] = field(default_factory=dict)
    _concrete_cache: Dict[NumericKind, TypeHandle] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self._nodes)

    # --- node creation ---

    def new_variable(self) -> TypeHandle:
        handle = len(self._nodes)
        self._nodes.append(TypeNode(handle))
        return handle

    def concrete(self, kind: NumericKind) -> TypeHandle:
        """
        Get (or create) the canonical Concrete node for `kind`.
        """
        if kind not in self._concrete_cache:
            handle = len(self._nodes)
            self._nodes.append(TypeNode(handle, kind))
            self._concrete_cache[kind] = handle
        return self._concrete_cache[kind]

    # --- queries ---

    def node(self, handle: TypeHandle) -> TypeNode:
        if not 0 <= handle < len(self._nodes):
            raise InternalCompilerError(f"[ICE-0100] unknown type handle {handle}")
        return self._nodes[handle]

    def is_variable(self, handle: TypeHandle) -> bool:
        return self.node(handle).is_variable

    def kind_of(self, handle: TypeHandle) -> Optional[NumericKind]:
        return self.node(handle).kind

    def is_root(self, handle: TypeHandle) -> bool:
        return handle not in self._parents

    # --- union-find ---

    def find(self, handle: TypeHandle) -> TypeHandle:
        root = handle
        while root in self._parents:
            root = self._parents[root]
        # path compression
        while handle != root:
            parent = self._parents[handle]
            self._parents[handle] = root
            handle = parent
        return root

    def union(self, variable: TypeHandle, target: TypeHandle) -> None:
        """
        Make `target` the parent of the root Variable `variable`.
        """
        if not self.is_variable(variable):
            raise InternalCompilerError(
                f"[ICE-0110] cannot merge concrete type {format_kind(self.kind_of(variable))} (handle {variable})"
            )
        if not self.is_root(variable):
            raise InternalCompilerError(f"[ICE-0111] cannot merge non-root type variable (handle {variable})")
        if variable == target:
            raise InternalCompilerError(f"[ICE-0112] cannot merge type variable {variable} into itself")
        self.node(target)
        self._parents[variable] = target

    def describe(self, handle: TypeHandle) -> str:
        """Debug rendering: `?3` for variables, the kind spelling for concrete nodes."""
        kind = self.kind_of(handle)
        if kind is None:
            return f"?{handle}"
        return format_kind(kind)
