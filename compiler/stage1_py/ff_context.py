"""
Compilation context for cross-cutting compiler options.

This module defines the CompilationContext dataclass which holds compiler
options that affect multiple stages of compilation (type inference,
diagnostics, logging, etc.).
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

import os
from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Hierarchical logging levels for the FF compiler."""
    SILENT = 0      # No logging
    ERROR = 3       # Error messages only
    WARNING = 6     # Warning messages (default)
    INFO = 10       # General progress messages (-v)
    DEBUG = 30      # Detailed diagnostic information (-vvv)


def log_level_from_env(default: LogLevel = LogLevel.WARNING) -> LogLevel:
    """Read the default log level from `FF_LOG_LEVEL` (e.g. `INFO`), falling back to `default`."""
    name = os.getenv("FF_LOG_LEVEL")
    if not name:
        return default
    try:
        return LogLevel[name.strip().upper()]
    except KeyError:
        return default


@dataclass
class CompilationContext:
    """
    Holds cross-cutting compiler options that affect multiple compilation stages.

    Attributes:
        log_rich_format:        If True, emit logs in rich format: may include log level, timestamps, etc.
        log_level:              Current logging level.
        trace_solver:           If True, log every constraint as the solver processes it (DEBUG level).
        exact_unsigned_bounds:  If True, unsigned literals must fit in [0, 2**b - 1]; the default keeps
                                the historical inclusive bound [0, 2**b].
        narrow_literals:        If True, the solver narrows a literal to its single admissible kind and
                                rejects literals forced into a kind they cannot represent.
    """
    log_rich_format: bool = False
    log_level: LogLevel = LogLevel.WARNING
    trace_solver: bool = False
    exact_unsigned_bounds: bool = False
    narrow_literals: bool = True

    @staticmethod
    def default() -> 'CompilationContext':
        """Create a CompilationContext with default settings."""
        return CompilationContext(log_level=LogLevel.WARNING)
