#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

import pytest

from ff_analysis import AnalysisResult
from ff_ast import Expr, FuncDecl, Module
from ff_backend import Backend, BackendError, wasm_value_type
from ff_context import CompilationContext
from ff_infer import InferenceSession
from ff_internal_error import InternalCompilerError
from ff_parser import Parser
from ff_types import NumericKind


def test_annotated_function_and_export(codegen_source):
    wat, diags = codegen_source("""
        function answer: i32 42
        export answer
    """)

    assert diags == []
    assert wat == (
        "(module $main\n"
        "  (func $answer (result i32)\n"
        "    i32.const 42\n"
        "  )\n"
        '  (export "answer" (func $answer))\n'
        ")\n"
    )


def test_functions_precede_exports_in_declaration_order(codegen_source):
    wat, _ = codegen_source("""
        export as second function b: i64 2
        function a: i32 1
        export a as first
    """)

    lines = wat.splitlines()
    assert lines.index("  (func $b (result i64)") < lines.index("  (func $a (result i32)")
    assert lines[-3:] == [
        '  (export "second" (func $b))',
        '  (export "first" (func $a))',
        ")",
    ]


def test_export_function_uses_its_own_name(codegen_source):
    wat, _ = codegen_source("export function main: u32 7")

    assert '(export "main" (func $main))' in wat
    assert "i32.const 7" in wat


def test_unannotated_function_uses_narrowed_literal_type(codegen_source):
    wat, diags = codegen_source("function big 9223372036854775808")

    assert diags == []
    assert "(func $big (result i64)" in wat
    assert "i64.const 9223372036854775808" in wat


@pytest.mark.parametrize(
    "src, expected",
    [
        ("function f: f64 3.25", "f64.const 0x1.a000000000000p+1"),
        ("function f: f32 0.5", "f32.const 0x1.0000000000000p-1"),
        ("function f: f32 3", "f32.const 0x1.8000000000000p+1"),
        ("function f: i64 -5", "i64.const -5"),
        ("function f: i32 3.0", "i32.const 3"),
    ],
)
def test_constant_spelling(codegen_source, src, expected):
    wat, _ = codegen_source(src)

    assert f"    {expected}\n" in wat


def test_unresolved_literal_is_rejected(codegen_source):
    with pytest.raises(BackendError) as excinfo:
        codegen_source("function f 5")

    assert "[GEN-0010]" in excinfo.value.message
    assert excinfo.value.node.value == "5"


def test_narrow_integer_kinds_are_not_lowered(codegen_source):
    with pytest.raises(BackendError) as excinfo:
        codegen_source("function f: i8 5")

    assert "[GEN-0020] type i8 is not supported by the wasm backend" in excinfo.value.message


def test_value_past_real_unsigned_maximum_is_rejected(codegen_source):
    with pytest.raises(BackendError) as excinfo:
        codegen_source("function f: u32 4294967296")

    assert "[GEN-0040] numeric literal '4294967296' does not fit in u32" in excinfo.value.message


def test_out_of_range_literal_reaches_backend_without_narrowing(codegen_source):
    with pytest.raises(BackendError) as excinfo:
        codegen_source("function f: i32 4294967296", CompilationContext(narrow_literals=False))

    assert "[GEN-0040]" in excinfo.value.message


def test_generate_refuses_module_with_errors(analyze_source):
    result = analyze_source("function f 1 function f 2")

    with pytest.raises(ValueError):
        Backend(result).generate()


def test_generate_requires_a_module():
    with pytest.raises(ValueError):
        Backend(AnalysisResult()).generate()


def test_generate_before_solving_is_an_internal_error():
    parser = Parser.from_source("function f: i32 1")
    module = parser.parse_module(filename="main.ff")
    result = AnalysisResult(module=module, session=parser.session)

    with pytest.raises(InternalCompilerError) as excinfo:
        Backend(result).generate()

    assert "[ICE-0300]" in excinfo.value.message
    assert excinfo.value.loc.filename == "main.ff"


def test_non_literal_body_is_an_internal_error():
    session = InferenceSession()
    session.solve()
    module = Module("m", [FuncDecl("f", None, Expr())])
    result = AnalysisResult(module=module, session=session, functions={"f": module.decls[0]})

    with pytest.raises(InternalCompilerError) as excinfo:
        Backend(result).generate()

    assert "[ICE-0310]" in excinfo.value.message


@pytest.mark.parametrize(
    "kind, expected",
    [
        (NumericKind.I8, None),
        (NumericKind.U16, None),
        (NumericKind.I32, "i32"),
        (NumericKind.U32, "i32"),
        (NumericKind.I64, "i64"),
        (NumericKind.U64, "i64"),
        (NumericKind.F32, "f32"),
        (NumericKind.F64, "f64"),
    ],
)
def test_wasm_value_type(kind, expected):
    assert wasm_value_type(kind) == expected


def test_generated_module_is_named_after_file(write_ff_file):
    from ff_driver import FFDriver

    path = write_ff_file("answer", "function main: i32 1\n")
    result = FFDriver().analyze_file(path)

    assert Backend(result).generate().startswith("(module $answer\n")


@pytest.mark.parametrize(
    "src",
    [
        "function f: f64 " + "9" * 400,
        "function f: f64 9007199254740993",  # 2**53 + 1
        "function f: f32 16777217",  # 2**24 + 1
        "function f: i32 2.5",
    ],
)
def test_float_and_fractional_constants_out_of_range_without_narrowing(codegen_source, src):
    with pytest.raises(BackendError) as excinfo:
        codegen_source(src, CompilationContext(narrow_literals=False))

    assert "[GEN-0040]" in excinfo.value.message


def test_source_literal_kept_as_comment_when_spelling_changes(codegen_source):
    wat, _ = codegen_source("function f: f64 3.25\nfunction g: i32 3.0\nfunction h: i32 42")

    assert "    ;; 3.25\n    f64.const 0x1.a000000000000p+1\n" in wat
    assert "    ;; 3.0\n    i32.const 3\n" in wat
    assert ";; 42" not in wat
