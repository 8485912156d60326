#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

import sys
from pathlib import Path
from textwrap import dedent

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from ff_ast import NumberLiteral
from ff_context import CompilationContext
from ff_driver import FFDriver
from ff_infer import InferenceSession


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def write_ff_file(temp_project: Path):
    def _write(name: str, content: str) -> Path:
        file_path = temp_project / f"{name}.ff"
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(dedent(content))
        return file_path

    return _write


@pytest.fixture
def session() -> InferenceSession:
    return InferenceSession(CompilationContext.default())


@pytest.fixture
def literal():
    """Build an untyped numeric literal node from its source text."""

    def _literal(text: str) -> NumberLiteral:
        return NumberLiteral(text, is_decimal="." in text)

    return _literal


@pytest.fixture
def analyze_source():
    """Analyze FF source text.

    Usage:
        def test_something(analyze_source):
            result = analyze_source('''
                function main(): i32 42
            ''')
            assert not result.has_errors()
    """

    def _analyze(src: str, context: CompilationContext | None = None):
        driver = FFDriver(context=context)
        return driver.analyze_source(dedent(src), filename="main.ff")

    return _analyze


@pytest.fixture
def codegen_source(analyze_source):
    """Analyze and generate WAT for FF source text.

    Returns (wat, diagnostics) tuple. wat is None if analysis failed.
    """

    def _codegen(src: str, context: CompilationContext | None = None):
        result = analyze_source(src, context)

        if result.has_errors():
            return None, result.diagnostics

        from ff_backend import Backend

        backend = Backend(result)
        wat = backend.generate()
        return wat, result.diagnostics

    return _codegen


def has_error_code(diagnostics, code: str) -> bool:
    """Check if any diagnostic contains the given error code.

    Args:
        diagnostics: List of Diagnostic objects
        code: Error code string like "TYP-0010" or "[TYP-0010]"

    Returns:
        True if any diagnostic message contains the error code
    """
    if not code.startswith("["):
        code = f"[{code}]"
    return any(code in d.message for d in diagnostics)
