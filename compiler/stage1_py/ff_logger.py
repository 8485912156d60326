"""
Logging utilities for the FF compiler.

Everything goes to stderr, filtered by the CompilationContext log level.
Solver tracing is a separate switch (`trace_solver`) layered on DEBUG, and
diagnostics are logged at the level matching their kind so that warnings
such as an ambiguous literal can be silenced without hiding errors.
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

import sys
import time
from typing import Optional

from ff_context import CompilationContext, LogLevel

_LEVEL_TAGS = {
    LogLevel.ERROR: "ERROR",
    LogLevel.WARNING: "WARNING",
    LogLevel.INFO: "INFO",
    LogLevel.DEBUG: "DEBUG",
}


def log(context: Optional[CompilationContext], log_level: LogLevel, message: str, tag: Optional[str] = None) -> None:
    """
    Log a message if the context's logging level admits `log_level`.

    Args:
        context:    The compilation context containing logging level.
        log_level:  The level of the message to log.
        message:    The message to log.
        tag:        Overrides the level name in the rich-format prefix.
    """
    if context is None:
        print("No context provided for logging.", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        return
    if context.log_level < log_level:
        return
    prefix = ""
    if context.log_rich_format:
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        prefix = f"{timestamp} [{tag or _LEVEL_TAGS.get(log_level, log_level.name)}] "
    print(f"{prefix}{message}", file=sys.stderr)


def log_error(context: Optional[CompilationContext], message: str) -> None:
    log(context, LogLevel.ERROR, message)


def log_warning(context: Optional[CompilationContext], message: str) -> None:
    log(context, LogLevel.WARNING, message)


def log_info(context: Optional[CompilationContext], message: str) -> None:
    log(context, LogLevel.INFO, message)


def log_debug(context: Optional[CompilationContext], message: str) -> None:
    log(context, LogLevel.DEBUG, message)


def log_trace(context: Optional[CompilationContext], message: str) -> None:
    """
    Solver trace line: logged at DEBUG, and only when `trace_solver` is on.
    """
    if context is not None and not context.trace_solver:
        return
    log(context, LogLevel.DEBUG, message, tag="TRACE")


def log_diagnostic(context: Optional[CompilationContext], kind: str, message: str) -> None:
    """
    Log one line of a diagnostic: ERROR for "error", WARNING for anything else.
    """
    log(context, LogLevel.ERROR if kind == "error" else LogLevel.WARNING, message)


def log_stage(context: Optional[CompilationContext], stage: str, filename: Optional[str] = None) -> None:
    """
    Log the start of a compilation stage.

    Args:
        context: The compilation context containing logging flags.
        stage: The name of the compilation stage (e.g., "Parsing", "Solving type constraints").
        filename: Optional source file being processed.
    """
    if filename:
        log(context, LogLevel.INFO, f"{stage} '{filename}'")
    else:
        log(context, LogLevel.INFO, f"{stage}...")
