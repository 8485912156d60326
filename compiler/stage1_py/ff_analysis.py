#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ff_ast import FuncDecl, Module
from ff_context import CompilationContext
from ff_diagnostics import Diagnostic
from ff_infer import InferenceSession
from ff_types import NumericKind, kind_from_name


@dataclass
class AnalysisResult:
    """
    Full front-end analysis result for one source file.

    Contains:
      - the parsed module (None when lexing/parsing failed)
      - the inference session that typed its literals (solved once analysis succeeds)
      - compilation context (cross-cutting compiler options)
      - functions by name and exports by exported name
      - diagnostics accumulated from all passes
    """
    module: Optional[Module] = None
    session: Optional[InferenceSession] = None
    context: CompilationContext = field(default_factory=CompilationContext.default)

    functions: Dict[str, FuncDecl] = field(default_factory=dict)
    # exported name -> function name
    exports: Dict[str, str] = field(default_factory=dict)

    diagnostics: List[Diagnostic] = field(default_factory=list)

    def has_errors(self) -> bool:
        return any(d.kind == "error" for d in self.diagnostics)

    def has_warnings(self) -> bool:
        return any(d.kind == "warning" for d in self.diagnostics)

    def return_kind(self, func: FuncDecl) -> Optional[NumericKind]:
        """
        The function's result kind: the annotation if present, otherwise the
        canonical kind of its body (None while that is still a variable).
        """
        if func.return_type is not None:
            return kind_from_name(func.return_type.name)
        if self.session is None or func.body.type is None:
            return None
        return self.session.reify_kind(func.body.type)
