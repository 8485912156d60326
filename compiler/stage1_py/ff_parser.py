#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass
from typing import List, Optional

from ff_ast import Span, TypeRef, TopLevelDecl, FuncDecl, ExportDecl, Module, Expr, NumberLiteral
from ff_infer import InferenceSession
from ff_lexer import TokenKind, Token, Lexer
from ff_types import kind_from_name


# ==========================
# Parser
# ==========================

@dataclass
class ParseError(Exception):
    message: str
    token: Optional[Token] = None
    filename: Optional[str] = None


class Parser:
    """
    Recursive-descent parser for FF programs.

    Every numeric literal is typed through the inference session as soon as
    it is built, and annotated return types constrain the body's type. The
    parser never solves; the driver does that once the whole program is read.
    """

    def __init__(
            self,
            tokens: List[Token],
            filename: Optional[str] = None,
            session: Optional[InferenceSession] = None,
    ) -> None:
        self.tokens = tokens
        self.index = 0
        self.filename = filename
        self.session = session or InferenceSession()

    @classmethod
    def from_source(cls, source: str, session: Optional[InferenceSession] = None) -> "Parser":
        lexer = Lexer.from_source(source)
        tokens = lexer.tokenize()
        return cls(tokens, session=session)

    # --- token utilities ---

    def _peek(self) -> Token:
        return self.tokens[self.index]

    def _last(self) -> Token:
        return self.tokens[self.index - 1 if self.index > 0 else 0]

    def _at_end(self) -> bool:
        return self._peek().kind is TokenKind.EOF

    def _advance(self) -> Token:
        tok = self._peek()
        if not self._at_end():
            self.index += 1
        return tok

    def _check(self, kind: TokenKind) -> bool:
        return self._peek().kind is kind

    def _match(self, *kinds: TokenKind) -> bool:
        if self._peek().kind in kinds:
            self._advance()
            return True
        return False

    def _expect(self, kind: TokenKind, msg: str) -> Token:
        if not self._check(kind):
            raise ParseError(f"{msg}, got {self._peek()} instead", self._peek(), self.filename)
        return self._advance()

    def _span_start(self) -> Span:
        here = self._peek()
        return Span(here.line, here.column, here.line, here.column)

    def _extend_span(self, start: Span) -> Span:
        here = self._last()
        return Span(
            start.start_line,
            start.start_column,
            here.line,
            here.column + len(here.text),
        )

    # --- entry point ---

    def parse_module(self, filename: Optional[str] = None, name: str = "main") -> Module:
        # item*

        if filename is not None:
            self.filename = filename

        start = self._span_start()
        decls: List[TopLevelDecl] = []
        while not self._at_end():
            decls.append(self._parse_item())

        return Module(name, decls, span=self._extend_span(start), filename=self.filename)

    # --- top-level items ---

    def _parse_item(self) -> TopLevelDecl:
        if self._check(TokenKind.FUNCTION):
            return self._parse_function()
        if self._check(TokenKind.EXPORT):
            return self._parse_export()
        raise ParseError(
            f"[PAR-0010] unexpected token at top level: {self._peek()}, expected 'function' or 'export'",
            self._peek(),
            self.filename,
        )

    def _parse_function(self, export_as: Optional[str] = None) -> FuncDecl:
        # function <Ident> [ "(" ")" ] [ ":" <Type> ] <Expr>
        start = self._span_start()
        self._expect(TokenKind.FUNCTION, "[PAR-0020] expected 'function'")
        name_tok = self._expect(TokenKind.IDENT, "[PAR-0021] expected function name")
        if self._match(TokenKind.LPAREN):
            self._expect(TokenKind.RPAREN, "[PAR-0030] expected ')' after '('")

        return_type: Optional[TypeRef] = None
        if self._match(TokenKind.COLON):
            return_type = self._parse_type()

        body = self._parse_expr()
        if return_type is not None and isinstance(body, NumberLiteral):
            kind = kind_from_name(return_type.name)
            self.session.constrain_equal(body.type, self.session.concrete(kind), origin=return_type.span)

        return FuncDecl(name_tok.text, return_type, body, export_as=export_as, span=self._extend_span(start))

    def _parse_export(self) -> TopLevelDecl:
        # export function ...
        # export as <Ident> function ...
        # export <Ident> [ as <Ident> ]
        start = self._span_start()
        self._expect(TokenKind.EXPORT, "[PAR-0060] expected 'export'")

        if self._check(TokenKind.FUNCTION):
            func = self._parse_function()
            func.export_as = func.name
            return func

        if self._match(TokenKind.AS):
            alias = self._expect(TokenKind.IDENT, "[PAR-0061] expected export name after 'as'")
            if not self._check(TokenKind.FUNCTION):
                raise ParseError(
                    f"[PAR-0062] expected 'function' after 'export as {alias.text}', got {self._peek()} instead",
                    self._peek(),
                    self.filename,
                )
            return self._parse_function(export_as=alias.text)

        if self._check(TokenKind.IDENT):
            name_tok = self._advance()
            alias_text = name_tok.text
            if self._match(TokenKind.AS):
                alias_text = self._expect(TokenKind.IDENT, "[PAR-0061] expected export name after 'as'").text
            return ExportDecl(name_tok.text, alias_text, span=self._extend_span(start))

        raise ParseError(
            f"[PAR-0063] expected 'function', 'as' or a function name after 'export', got {self._peek()} instead",
            self._peek(),
            self.filename,
        )

    # --- types ---

    def _parse_type(self) -> TypeRef:
        start = self._span_start()
        tok = self._expect(TokenKind.IDENT, "[PAR-0031] expected type name after ':'")
        if kind_from_name(tok.text) is None:
            raise ParseError(f"[PAR-0040] invalid type '{tok.text}'", tok, self.filename)
        return TypeRef(tok.text, span=self._extend_span(start))

    # --- expressions ---

    def _parse_expr(self) -> Expr:
        if self._check(TokenKind.NUMBER):
            return self._parse_number()
        raise ParseError(f"[PAR-0050] invalid expression: {self._peek()}", self._peek(), self.filename)

    def _parse_number(self) -> NumberLiteral:
        start = self._span_start()
        tok = self._advance()
        literal = NumberLiteral(tok.text, tok.is_decimal, span=self._extend_span(start))
        return self.session.inferred(literal)
