#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from pathlib import Path

from ff_analysis import AnalysisResult
from ff_ast import Module
from ff_context import CompilationContext
from ff_diagnostics import Diagnostic, diag_from_node, diag_from_span, diag_from_token
from ff_infer import InferenceSession
from ff_internal_error import InternalCompilerError
from ff_lexer import LexerError, Lexer
from ff_logger import log_info, log_debug, log_stage
from ff_parser import Parser, ParseError
from ff_solver import SubtypeError
from ff_types import format_kind


class FFDriver:
    """
    Stage-1 driver:
      - read file
      - tokenize
      - parse (typing every literal through a fresh InferenceSession)
      - collect functions and exports
      - solve the literal constraints, exactly once

    Entry points:
      - analyze_file(path): analyze an FF source file.
      - analyze_source(text, filename): analyze source text directly.
    """

    def __init__(self, context: CompilationContext | None = None):
        self.context = context or CompilationContext.default()

    # --- Public API ---

    def analyze_file(self, path: str | Path) -> AnalysisResult:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            result = AnalysisResult(context=self.context)
            result.diagnostics.append(
                Diagnostic(kind="error", message=f"file: [DRV-0010] FF source file not found: {path}")
            )
            return result
        return self.analyze_source(text, filename=str(path), module_name=path.stem)

    def analyze_source(self, text: str, filename: str = "<input>", module_name: str = "main") -> AnalysisResult:
        log_info(self.context, f"Starting analysis for '{filename}'")
        result = AnalysisResult(context=self.context)
        session = InferenceSession(self.context)
        result.session = session

        # 1. Lex + parse (literals are typed as they are parsed)
        log_stage(self.context, "Parsing", filename)
        try:
            module = self._parse_source(text, filename, module_name, session)
        except LexerError as e:
            # syntax error during lexing
            result.diagnostics.append(
                Diagnostic(
                    kind="error",
                    message=f"syntax: {e.message}",
                    filename=e.filename,
                    line=e.line,
                    column=e.column,
                )
            )
            return result
        except ParseError as e:
            # syntax error during parsing
            result.diagnostics.append(
                diag_from_token(
                    kind="error",
                    message=e.message,
                    token=e.token,
                    filename=e.filename,
                )
            )
            return result
        result.module = module

        # 2. Function and export names
        log_stage(self.context, "Resolving function names")
        self._collect_functions(result)
        log_debug(self.context, f"Found {len(result.functions)} function(s), {len(result.exports)} export(s)")

        # 3. Literal types
        log_stage(self.context, "Solving type constraints")
        try:
            processed = session.solve()
        except SubtypeError as e:
            result.diagnostics.append(
                diag_from_span("error", e.message, filename=filename, span=e.origin)
            )
            return result
        except InternalCompilerError as e:
            raise e.locate(filename=filename)
        log_debug(self.context, f"Solved {processed} constraint(s), {len(session.constraints)} in the log")

        self._report_ambiguous_literals(result)

        log_info(self.context, f"Analysis complete: {len(result.diagnostics)} total diagnostic(s), {len([d for d in result.diagnostics if d.kind == 'error'])} error(s)")
        return result

    # --- Internal helpers ---

    def _parse_source(self, text: str, filename: str, module_name: str, session: InferenceSession) -> Module:
        log_debug(self.context, f"Lexing {filename}")
        lexer = Lexer(text, filename=filename)
        tokens = lexer.tokenize()
        log_debug(self.context, f"Lexed {len(tokens)} token(s) from {filename}")

        parser = Parser(tokens, filename=filename, session=session)
        module = parser.parse_module(filename=filename, name=module_name)
        log_debug(self.context, f"Parsed {len(module.decls)} item(s) from {filename}")
        return module

    def _collect_functions(self, result: AnalysisResult) -> None:
        module = result.module
        filename = module.filename
        for func in module.functions():
            if func.name in result.functions:
                result.diagnostics.append(
                    diag_from_node("error", f"[RES-0010] function with name '{func.name}' already exists",
                                   filename=filename, node=func)
                )
                continue
            result.functions[func.name] = func

        for func in module.functions():
            if func.export_as is not None and result.functions.get(func.name) is func:
                self._add_export(result, func.export_as, func.name, func)
        for export in module.exports():
            if export.name not in result.functions:
                result.diagnostics.append(
                    diag_from_node("error", f"[RES-0020] cannot export unknown function '{export.name}'",
                                   filename=filename, node=export)
                )
                continue
            self._add_export(result, export.alias, export.name, export)

    def _add_export(self, result: AnalysisResult, alias: str, name: str, node) -> None:
        if alias in result.exports:
            result.diagnostics.append(
                diag_from_node("error", f"[RES-0021] duplicate export name '{alias}'",
                               filename=result.module.filename, node=node)
            )
            return
        result.exports[alias] = name

    def _report_ambiguous_literals(self, result: AnalysisResult) -> None:
        session = result.session
        for literal, handle in session.literals():
            if session.reify_kind(handle) is None:
                result.diagnostics.append(
                    diag_from_node(
                        "warning",
                        f"[TYP-0040] type of numeric literal '{literal.value}' could not be narrowed to a single kind",
                        filename=result.module.filename,
                        node=literal,
                    )
                )
            else:
                log_debug(self.context, f"literal '{literal.value}' resolved to {format_kind(session.reify_kind(handle))}")
