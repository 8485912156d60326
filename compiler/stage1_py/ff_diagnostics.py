#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

import os
from dataclasses import dataclass
from typing import Optional

from ff_ast import Node, Span
from ff_lexer import Token


DIAGNOSTIC_CODE_FAMILIES = {
    "LEX": [
        "LEX-0010",
        "LEX-0020",
        "LEX-0030",
    ],
    "PAR": [
        "PAR-0010",
        "PAR-0020",
        "PAR-0021",
        "PAR-0030",
        "PAR-0031",
        "PAR-0040",
        "PAR-0050",
        "PAR-0060",
        "PAR-0061",
        "PAR-0062",
        "PAR-0063",
    ],
    "DRV": [
        "DRV-0010",
    ],
    "RES": [
        "RES-0010",
        "RES-0020",
        "RES-0021",
    ],
    # ICE codes are internal compiler errors raised as exceptions,
    # not user-facing diagnostics; they are excluded from this registry.
    "TYP": [
        "TYP-0010",
        "TYP-0020",
        "TYP-0030",
        "TYP-0040",
    ],
    "GEN": [
        "GEN-0010",
        "GEN-0020",
        "GEN-0040",
    ],
}


@dataclass
class Diagnostic:
    kind: str  # "error" or "warning"
    message: str
    filename: Optional[str] = None  # file path

    # Primary location (start of the span)
    line: Optional[int] = None
    column: Optional[int] = None

    # Optional end of span (exclusive)
    end_line: Optional[int] = None
    end_column: Optional[int] = None

    # Return the one-line header; snippets will be printed at the call site
    def format(self) -> str:
        loc = ""
        if self.filename is not None:
            loc += f"{os.path.abspath(str(self.filename))}"
        if self.line is not None:
            loc += f":{self.line}"
            if self.column is not None:
                loc += f":{self.column}"
        if loc:
            loc += ": "
        return f"{loc}{self.kind}: {self.message}"


def diag_from_span(
        kind: str,
        message: str,
        *,
        filename: Optional[str],
        span: Optional[Span],
) -> Diagnostic:
    line = column = end_line = end_column = None
    if span is not None:
        line = span.start_line
        column = span.start_column
        end_line = span.end_line
        end_column = span.end_column
    return Diagnostic(
        kind=kind,
        message=message,
        filename=filename,
        line=line,
        column=column,
        end_line=end_line,
        end_column=end_column,
    )


def diag_from_node(
        kind: str,
        message: str,
        *,
        filename: Optional[str],
        node: Optional[Node],
) -> Diagnostic:
    return diag_from_span(kind, message, filename=filename, span=node.span if node is not None else None)


def diag_from_token(
        kind: str,
        message: str,
        *,
        filename: Optional[str],
        token: Optional[Token],
) -> Diagnostic:
    line = column = end_line = end_column = None
    if token is not None:
        line = token.line
        column = token.column
        end_line = token.line
        end_column = token.column + len(token.text)
    return Diagnostic(
        kind=kind,
        message=message,
        filename=filename,
        line=line,
        column=column,
        end_line=end_line,
        end_column=end_column,
    )
