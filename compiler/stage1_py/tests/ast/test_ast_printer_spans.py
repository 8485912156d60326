#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from ff_ast_printer import format_module
from ff_parser import Parser


def parse(src: str):
    parser = Parser.from_source(src)
    return parser.parse_module(), parser.session


def test_ast_printer_includes_spans_in_header_lines():
    src = """function answer: i32 42
export answer as a
"""
    mod, _ = parse(src)
    printed = format_module(mod)

    assert "Module(name='main') @1:1-2:19" in printed
    assert "FuncDecl(name='answer') @1:1-1:24" in printed
    assert "TypeRef(name='i32') @1:18-1:21" in printed
    assert "ExportDecl(name='answer', alias='a') @2:1-2:19" in printed


def test_ast_printer_shows_type_variable_without_session():
    mod, _ = parse("function f 5")
    printed = format_module(mod)

    assert "NumberLiteral(value='5', is_decimal=False) : ?0 @1:12-1:13" in printed


def test_ast_printer_shows_solved_kind_with_session():
    mod, session = parse("function f: u64 5\nfunction g 0.5")
    session.solve()
    printed = format_module(mod, session=session)

    assert "NumberLiteral(value='5', is_decimal=False) : u64 @1:17-1:18" in printed
    assert "NumberLiteral(value='0.5', is_decimal=True) : <variable> @2:12-2:15" in printed


def test_ast_printer_indents_children():
    mod, _ = parse("export function f: f32 1.5")
    lines = format_module(mod).splitlines()

    assert lines[0].startswith("Module(")
    assert lines[1] == "  decls:"
    assert lines[2].startswith("    FuncDecl(name='f', export_as='f')")
    assert lines[3] == "      return_type:"
    assert lines[4].startswith("        TypeRef(name='f32')")
    assert lines[5] == "      body:"
