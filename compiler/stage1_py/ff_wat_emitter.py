"""
WebAssembly Text Emitter

Handles WAT-specific code emission. Knows how to spell a module, a function,
a constant and an export, but not why or when. All decisions about what to
emit live in the Backend.
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from typing import List, Optional, Union

WAT_VALUE_TYPES = ("i32", "i64", "f32", "f64")


@dataclass
class WatCodeBuilder:
    """
    Helper for building WAT text with indentation tracking.
    """
    lines: List[str] = field(default_factory=list)
    indent_level: int = 0
    indent_str: str = "  "  # 2 spaces

    def indent(self) -> None:
        self.indent_level += 1

    def dedent(self) -> None:
        assert self.indent_level > 0, "dedent below zero"
        self.indent_level -= 1

    def emit(self, line: str = "") -> None:
        """Emit a line with current indentation."""
        if line:
            self.lines.append(self.indent_str * self.indent_level + line)
        else:
            self.lines.append("")

    def to_string(self) -> str:
        return "\n".join(self.lines) + "\n"


@dataclass
class WatEmitter:
    """
    WAT-specific code emitter.

    Does NOT:
    - Decide which functions or exports exist
    - Check types (the backend passes already-lowered value types)
    """
    out: WatCodeBuilder = field(default_factory=WatCodeBuilder)

    @staticmethod
    def mangle(name: str) -> str:
        return f"${name}"

    @staticmethod
    def format_const(valtype: str, value: Union[int, float]) -> str:
        if valtype not in WAT_VALUE_TYPES:
            raise ValueError(f"not a wasm value type: {valtype}")
        if valtype.startswith("f"):
            # hex floats round-trip exactly
            return f"{valtype}.const {float(value).hex()}"
        return f"{valtype}.const {int(value)}"

    def emit_module_start(self, module_name: str) -> None:
        self.out.emit(f"(module ${module_name}")
        self.out.indent()

    def emit_module_end(self) -> None:
        self.out.dedent()
        self.out.emit(")")

    def emit_comment(self, text: str) -> None:
        self.out.emit(f";; {text}")

    def emit_function(self, name: str, result: str, value: Union[int, float], source: Optional[str] = None) -> None:
        """
        Emit a function returning one constant. `source` is the literal as
        written; it is kept as a comment when the constant reads differently.
        """
        self.out.emit(f"(func {self.mangle(name)} (result {result})")
        self.out.indent()
        const = self.format_const(result, value)
        if source is not None and const.partition(" ")[2] != source:
            self.emit_comment(source)
        self.out.emit(const)
        self.out.dedent()
        self.out.emit(")")

    def emit_export(self, alias: str, name: str) -> None:
        self.out.emit(f'(export "{alias}" (func {self.mangle(name)}))')

    def to_string(self) -> str:
        return self.out.to_string()
