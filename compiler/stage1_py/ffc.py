#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

import argparse
from pathlib import Path
from typing import Dict, List, Optional

from ff_analysis import AnalysisResult
from ff_ast_printer import format_module
from ff_backend import Backend, BackendError
from ff_context import CompilationContext, LogLevel, log_level_from_env
from ff_diagnostics import Diagnostic, diag_from_node
from ff_driver import FFDriver
from ff_internal_error import InternalCompilerError
from ff_lexer import TokenKind, Lexer, LexerError
from ff_logger import log_diagnostic, log_error, log_info
from ff_types import format_kind


def _load_file_lines(path: str, cache: Dict[str, List[str]]) -> List[str]:
    if path not in cache:
        text = Path(path).read_text(encoding="utf-8")
        cache[path] = text.splitlines()
    return cache[path]


def print_diagnostics(result: AnalysisResult, context: CompilationContext) -> None:
    file_cache: Dict[str, List[str]] = {}

    for diag in result.diagnostics:
        print_diagnostic_with_snippet(diag, file_cache, context)


def print_diagnostic_with_snippet(diag: Diagnostic, file_cache: Dict[str, List[str]],
                                  context: Optional[CompilationContext] = None) -> None:
    # First line: header
    log_diagnostic(context, diag.kind, diag.format())

    if not diag.filename or diag.line is None:
        return

    try:
        lines = _load_file_lines(diag.filename, file_cache)
    except OSError:
        # Can't read file; fall back to header only
        return

    line_idx = diag.line - 1
    if not (0 <= line_idx < len(lines)):
        return

    src_line = lines[line_idx]

    # Pretty "N | ..." formatting (calculate width so multi-digit line numbers align)
    width = max(5, len(str(diag.line)))
    gutter = f"{diag.line:>{width}} | "

    log_diagnostic(context, diag.kind, gutter + src_line)

    if diag.column is None:
        return

    # Determine caret span (simple case: same line)
    start_col = max(1, diag.column)
    if diag.end_line is None or diag.end_column is None:
        end_col = start_col
    else:
        if diag.end_line == diag.line:
            end_col = max(start_col, diag.end_column)
        else:
            end_col = len(src_line) + 1

    caret_width = max(1, end_col - start_col)
    # Spaces: same gutter, then (start_col-1) spaces before carets
    caret_prefix = " " * width + " | " + " " * (start_col - 1)
    carets = "^" * caret_width
    log_diagnostic(context, diag.kind, caret_prefix + carets)


def build_compilation_context(args: argparse.Namespace) -> CompilationContext:
    """Build a CompilationContext from command-line arguments."""
    # Log format
    log_rich_format = getattr(args, 'log', False)

    # Convert verbosity count to LogLevel; without -v, FF_LOG_LEVEL decides
    verbosity = getattr(args, 'verbosity', 0)
    if verbosity >= 3:
        log_level = LogLevel.DEBUG
    elif verbosity >= 1:
        log_level = LogLevel.INFO
    else:
        log_level = log_level_from_env(LogLevel.WARNING)

    return CompilationContext(
        log_rich_format=log_rich_format,
        log_level=log_level,
        trace_solver=getattr(args, 'trace_solver', False),
        exact_unsigned_bounds=getattr(args, 'exact_unsigned_bounds', False),
        narrow_literals=not getattr(args, 'no_narrowing', False),
    )


def _run_analysis(args):
    """Run the analysis pipeline, returning (result, context, exit_code)."""
    context = build_compilation_context(args)
    driver = FFDriver(context=context)
    result = driver.analyze_file(args.entry)
    print_diagnostics(result, context=context)
    exit_code = 1 if (result.module is None or result.has_errors()) else 0
    return result, context, exit_code


def _generate(result: AnalysisResult, context: CompilationContext) -> Optional[str]:
    """Run the backend; report failures and return None."""
    backend = Backend(result)
    try:
        return backend.generate()
    except BackendError as e:
        filename = result.module.filename if result.module is not None else None
        print_diagnostic_with_snippet(diag_from_node("error", e.message, filename=filename, node=e.node), {}, context)
    except InternalCompilerError as e:
        log_error(context, e.format())
    return None


def cmd_build(args: argparse.Namespace) -> int:
    """Compile an FF source file to a .wat file."""
    result, context, exit_code = _run_analysis(args)
    if exit_code != 0:
        return exit_code

    wat = _generate(result, context)
    if wat is None:
        return 1

    out_path = Path(args.output) if args.output else Path(args.entry).with_suffix(".wat")
    out_path.write_text(wat, encoding="utf-8")
    log_info(context, f"Wrote {out_path}")
    return 0


def cmd_codegen(args: argparse.Namespace) -> int:
    """Generate WAT for a source file and print it (or write it with -o)."""
    result, context, exit_code = _run_analysis(args)
    if exit_code != 0:
        return exit_code

    wat = _generate(result, context)
    if wat is None:
        return 1

    if args.output:
        Path(args.output).write_text(wat, encoding="utf-8")
    else:
        print(wat, end="")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    _, _, exit_code = _run_analysis(args)
    return exit_code


def cmd_tok(args: argparse.Namespace) -> int:
    """Dump lexer tokens."""
    context = build_compilation_context(args)
    path = Path(args.entry)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        log_error(context, f"error: [FFC-0010] cannot read {path}: {e}")
        return 1

    try:
        tokens = Lexer(text, filename=str(path)).tokenize()
    except LexerError as e:
        log_error(context, f"{e.filename}:{e.line}:{e.column}: error: {e.message}")
        return 1

    for tok in tokens:
        if not args.include_eof and tok.kind is TokenKind.EOF:
            continue
        # Format: file:line:col: KIND  'text'
        print(
            f"{path}:{tok.line}:{tok.column}:\t"
            f"{tok.kind.name:<12} {tok.text!r}"
        )
    return 0


def cmd_ast(args: argparse.Namespace) -> int:
    """Pretty-print the parsed AST, with the solved kind of every literal."""
    result, _, _ = _run_analysis(args)
    if result.module is None:
        return 1
    print(format_module(result.module, session=result.session if result.session.is_solved else None))
    return 0


def cmd_type(args: argparse.Namespace) -> int:
    """
    Dump inferred type information:

      - function result kinds
      - the canonical kind of every numeric literal
    """
    result, _, exit_code = _run_analysis(args)
    if result.module is None or not result.session.is_solved:
        return 1

    print("functions:")
    funcs = result.module.functions()
    if funcs:
        for func in funcs:
            print(f"  {func.name}: {format_kind(result.return_kind(func))}")
    else:
        print("  <none>")

    print("literals:")
    literals = result.session.literals()
    if literals:
        for literal, handle in literals:
            loc = f"{literal.span.start_line}:{literal.span.start_column}" if literal.span else "?"
            print(f"  {loc:<8} {literal.value:<24} {format_kind(result.session.reify_kind(handle))}")
    else:
        print("  <none>")
    return exit_code


def cmd_constraints(args: argparse.Namespace) -> int:
    """Dump the constraint log in emission order, as the solver left it."""
    result, _, exit_code = _run_analysis(args)
    if result.session is None or result.module is None:
        return 1
    solver = result.session.solver
    for index, constraint in enumerate(result.session.constraints):
        print(f"{index:>5}  {solver.format_constraint(constraint)}")
    return exit_code


def _add_entry_arg(parser: argparse.ArgumentParser) -> None:
    """Add the entry file argument."""
    parser.add_argument("entry", help="FF source file (e.g. 'main.ff')")


def _add_output_arg(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument("--output", "-o", help=help_text)


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog="ffc", description="FF compiler (Stage 1)")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    parser.add_argument("-v", "--verbose",
                        action='count',
                        default=0,
                        dest='verbosity',
                        help="Increase verbosity: -v=INFO, -vvv=DEBUG (default: $FF_LOG_LEVEL or WARNING)")
    parser.add_argument("-l", "--log",
                        action='store_true',
                        default=False,
                        help="Enable rich log formatting (timestamps, levels)")
    parser.add_argument("--trace-solver",
                        action='store_true',
                        help="Log every constraint as it is solved (needs -vvv)")
    parser.add_argument("--exact-unsigned-bounds",
                        action='store_true',
                        help="Admit unsigned literals only up to 2**bits - 1 (default: up to 2**bits)")
    parser.add_argument("--no-narrowing",
                        action='store_true',
                        help="Do not narrow literals to their single admissible type")

    ###########################
    # build command
    ###########################
    p_build = subparsers.add_parser("build", help="Compile to a .wat file")
    _add_output_arg(p_build, "Output .wat path (default: <entry>.wat)")
    _add_entry_arg(p_build)
    p_build.set_defaults(func=cmd_build)

    ###########################
    # gen command
    ###########################
    p_gen = subparsers.add_parser("gen", help="Generate WebAssembly text", aliases=["codegen"])
    _add_output_arg(p_gen, "Output file (default: stdout)")
    _add_entry_arg(p_gen)
    p_gen.set_defaults(func=cmd_codegen)

    ###########################
    # check command
    ###########################
    p_check = subparsers.add_parser("check", help="Parse and type a source file", aliases=["analyze"])
    _add_entry_arg(p_check)
    p_check.set_defaults(func=cmd_check)

    ###########################
    # tok command
    ###########################
    p_tok = subparsers.add_parser("tok", help="Dump lexer tokens", aliases=["tokens"])
    p_tok.add_argument("--include-eof", "-I", action="store_true",
                       help="Include the EOF token in the output")
    _add_entry_arg(p_tok)
    p_tok.set_defaults(func=cmd_tok)

    ###########################
    # ast command
    ###########################
    p_ast = subparsers.add_parser("ast", help="Pretty-print the parsed AST")
    _add_entry_arg(p_ast)
    p_ast.set_defaults(func=cmd_ast)

    ###########################
    # type command
    ###########################
    p_type = subparsers.add_parser("type", help="Dump inferred types", aliases=["types"])
    _add_entry_arg(p_type)
    p_type.set_defaults(func=cmd_type)

    ###########################
    # constraints command
    ###########################
    p_cons = subparsers.add_parser("constraints", help="Dump the type constraint log")
    _add_entry_arg(p_cons)
    p_cons.set_defaults(func=cmd_constraints)

    args = parser.parse_args(argv)

    rc = args.func(args)
    raise SystemExit(rc)


if __name__ == "__main__":
    main()
