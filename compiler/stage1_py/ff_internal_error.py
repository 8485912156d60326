#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional

from ff_ast import Span

_ICE_CODE_RE = re.compile(r"\[(ICE-\d{4})\]")


@dataclass(frozen=True)
class ICELocation:
    filename: Optional[str]
    span: Optional[Span]

    def describe(self) -> str:
        """`file:line:col`, `file`, `line:col` or "" depending on what is known."""
        parts = []
        if self.filename:
            parts.append(self.filename)
        if self.span is not None:
            parts.append(f"{self.span.start_line}:{self.span.start_column}")
        return ":".join(parts)


class InternalCompilerError(RuntimeError):
    """
    ICE = compiler bug / violated pipeline invariant.
    Not for user mistakes (those are Diagnostics).

    The type graph and the solver know nothing about files; an ICE raised
    while solving is located with the origin span of the constraint being
    processed, and the driver adds the filename on the way out.
    """

    def __init__(self, message: str, loc: ICELocation | None = None):
        super().__init__(message)
        self.message = message
        self.loc = loc

    @property
    def code(self) -> str:
        match = _ICE_CODE_RE.search(self.message)
        return match.group(1) if match else "ICE-9999"

    def locate(self, *, filename: Optional[str] = None, span: Optional[Span] = None) -> InternalCompilerError:
        """Fill in location parts that are still unknown; known parts are kept."""
        loc = self.loc or ICELocation(filename=None, span=None)
        if loc.filename is None and filename is not None:
            loc = replace(loc, filename=filename)
        if loc.span is None and span is not None:
            loc = replace(loc, span=span)
        self.loc = loc
        return self

    def format(self) -> str:
        message = self.message
        if f"[{self.code}]" not in message:
            message = f"[{self.code}] {message}"
        where = self.loc.describe() if self.loc else ""
        if where:
            return f"{where}: internal compiler error: {message}"
        return f"internal compiler error: {message}"
