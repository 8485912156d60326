"""
FF Code Generation Backend

Lowers a fully-analyzed FF module to WebAssembly text. The backend decides
WHAT to emit (functions in declaration order, then exports) and rejects types
it cannot lower; the WatEmitter decides HOW it is spelled.
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from typing import NoReturn, Optional, assert_never

from ff_analysis import AnalysisResult
from ff_ast import FuncDecl, Node, NumberLiteral
from ff_internal_error import InternalCompilerError, ICELocation
from ff_logger import log_debug, log_stage
from ff_numeric import LiteralValue, float_limit, literal_value, signed_range, unsigned_range
from ff_types import NumericKind, format_kind
from ff_wat_emitter import WatEmitter


@dataclass
class BackendError(Exception):
    """A well-typed program the wasm backend still cannot lower."""
    message: str
    node: Optional[Node] = None


def wasm_value_type(kind: NumericKind) -> Optional[str]:
    """Wasm value type used for `kind`, or None if the backend cannot lower it."""
    match kind:
        case NumericKind.I8 | NumericKind.I16 | NumericKind.U8 | NumericKind.U16:
            return None
        case NumericKind.I32 | NumericKind.U32:
            return "i32"
        case NumericKind.I64 | NumericKind.U64:
            return "i64"
        case NumericKind.F32:
            return "f32"
        case NumericKind.F64:
            return "f64"
        case _:
            assert_never(kind)


@dataclass
class Backend:
    analysis: AnalysisResult

    # Target-specific emitter (handles all code emission)
    emitter: WatEmitter = field(default_factory=WatEmitter)

    def generate(self) -> str:
        """
        Main entry point: generate the WAT module for the analyzed program.
        """
        log_stage(self.analysis.context, "Generating WebAssembly text")
        if self.analysis.module is None:
            raise ValueError("Cannot generate code without a module")
        if self.analysis.has_errors():
            raise ValueError("Cannot generate code with semantic errors")
        session = self.analysis.session
        if session is None or not session.is_solved:
            self.ice("[ICE-0300] code generation requested before type constraints were solved")

        module = self.analysis.module
        self.emitter.emit_module_start(module.name)
        for func in module.functions():
            self._emit_function(func)
        for alias, name in self.analysis.exports.items():
            log_debug(self.analysis.context, f"Exporting '{name}' as '{alias}'")
            self.emitter.emit_export(alias, name)
        self.emitter.emit_module_end()
        return self.emitter.to_string()

    def ice(self, message: str, *, node=None) -> NoReturn:
        filename = self.analysis.module.filename if self.analysis.module is not None else None
        span = getattr(node, "span", None) if node is not None else None
        raise InternalCompilerError(message, ICELocation(filename=filename, span=span))

    # --- functions ---

    def _emit_function(self, func: FuncDecl) -> None:
        if not isinstance(func.body, NumberLiteral):
            self.ice(f"[ICE-0310] unsupported function body in '{func.name}'", node=func.body)

        kind = self._literal_kind(func.body)
        result_kind = self.analysis.return_kind(func)
        if result_kind is not kind:
            self.ice(
                f"[ICE-0320] body of '{func.name}' has type {format_kind(kind)}, "
                f"declared {format_kind(result_kind)}",
                node=func,
            )

        valtype = self._lower_kind(kind, func.body)
        value = self._checked_value(func.body, kind)
        log_debug(self.analysis.context, f"Emitting function '{func.name}' -> {valtype}")
        self.emitter.emit_function(func.name, valtype, value, source=func.body.value)

    def _literal_kind(self, literal: NumberLiteral) -> NumericKind:
        if literal.type is None:
            self.ice("[ICE-0330] numeric literal has no type", node=literal)
        kind = self.analysis.session.reify_kind(literal.type)
        if kind is None:
            raise BackendError(
                f"[GEN-0010] type variable could not be narrowed: numeric literal '{literal.value}' "
                f"needs a type annotation",
                literal,
            )
        return kind

    def _lower_kind(self, kind: NumericKind, node: Node) -> str:
        valtype = wasm_value_type(kind)
        if valtype is None:
            raise BackendError(f"[GEN-0020] type {format_kind(kind)} is not supported by the wasm backend", node)
        return valtype

    def _checked_value(self, literal: NumberLiteral, kind: NumericKind) -> LiteralValue:
        value = literal_value(literal.value, literal.is_decimal)
        if kind.is_float:
            limit = float_limit(kind)
            fits = -limit <= value <= limit
        elif isinstance(value, float):
            fits = False
        else:
            if kind.is_signed:
                low, high = signed_range(kind.bits)
            else:
                low, high = unsigned_range(kind.bits, exact=True)
            fits = low <= value <= high
        if not fits:
            raise BackendError(
                f"[GEN-0040] numeric literal '{literal.value}' does not fit in {format_kind(kind)}",
                literal,
            )
        return value
