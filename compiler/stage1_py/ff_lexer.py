#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass
from enum import Enum, auto
from typing import List


# ==========================
# Tokens and lexer
# ==========================

class TokenKind(Enum):
    # Special
    EOF = auto()

    IDENT = auto()  # identifier, e.g. main, i32, etc.
    NUMBER = auto()  # numeric literal, e.g. 42, -7, 3.5, .25

    # Keywords
    FUNCTION = auto()
    EXPORT = auto()
    AS = auto()

    # Punctuation
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    COLON = auto()  # :


KEYWORDS = {
    "function": TokenKind.FUNCTION,
    "export": TokenKind.EXPORT,
    "as": TokenKind.AS,
}


@dataclass
class Token:
    kind: TokenKind
    text: str
    line: int
    column: int
    is_decimal: bool = False  # NUMBER only: written with a decimal point

    def __repr__(self) -> str:
        return f"{self.text!r}" if self.kind != TokenKind.EOF else "end-of-file"


@dataclass
class LexerError(Exception):
    message: str
    filename: str
    line: int
    column: int


def is_digit(c: str) -> bool:
    """ASCII digits only; str.isdigit() also accepts superscripts and other scripts."""
    return "0" <= c <= "9"


class Lexer:
    def __init__(self, source: str, filename: str = "<input>") -> None:
        self.source = source
        self.filename = filename
        self.length = len(source)
        self.index = 0
        self.line = 1
        self.column = 1

    @classmethod
    def from_source(cls, source: str) -> "Lexer":
        return cls(source)

    # --- low-level char utilities ---

    def _at_end(self) -> bool:
        return self.index >= self.length

    def _peek(self) -> str:
        if self._at_end():
            return "\0"
        return self.source[self.index]

    def _peek_next(self) -> str:
        if self.index + 1 >= self.length:
            return "\0"
        return self.source[self.index + 1]

    def _advance(self) -> str:
        c = self._peek()
        if not self._at_end():
            self.index += 1
            if c == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return c

    # --- main API ---

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        while True:
            tok = self._next_token()
            tokens.append(tok)
            if tok.kind is TokenKind.EOF:
                break
        return tokens

    def _next_token(self) -> Token:
        self._skip_ws_and_comments()
        start_line, start_col = self.line, self.column

        if self._at_end():
            return Token(TokenKind.EOF, "", start_line, start_col)

        if self._starts_number():
            text = self._read_number()
            return Token(TokenKind.NUMBER, text, start_line, start_col, is_decimal="." in text)

        c = self._advance()

        # identifiers / keywords
        if c.isalpha() or c == "_":
            ident = [c]
            while self._peek().isalnum() or self._peek() == "_":
                ident.append(self._advance())
            text = "".join(ident)
            return Token(KEYWORDS.get(text, TokenKind.IDENT), text, start_line, start_col)

        if c == "(":
            return Token(TokenKind.LPAREN, c, start_line, start_col)
        if c == ")":
            return Token(TokenKind.RPAREN, c, start_line, start_col)
        if c == ":":
            return Token(TokenKind.COLON, c, start_line, start_col)

        raise LexerError(f"[LEX-0010] unexpected character {c!r} at {start_line}:{start_col}", self.filename,
                         start_line, start_col)

    def _starts_number(self) -> bool:
        c = self._peek()
        if c in ("+", "-"):
            c = self._peek_next()
            if c == ".":
                nxt = self.source[self.index + 2] if self.index + 2 < self.length else "\0"
                return is_digit(nxt)
            return is_digit(c)
        if c == ".":
            return is_digit(self._peek_next())
        return is_digit(c)

    def _read_number(self) -> str:
        # [+-]? ( [0-9]+ ( "." [0-9]* )? | "." [0-9]+ )
        chars: List[str] = []
        if self._peek() in ("+", "-"):
            chars.append(self._advance())
        while is_digit(self._peek()):
            chars.append(self._advance())
        if self._peek() == ".":
            chars.append(self._advance())
            while is_digit(self._peek()):
                chars.append(self._advance())
        if self._peek().isalnum() or self._peek() == "_":
            raise LexerError(f"[LEX-0030] invalid character '{self._peek()}' after numeric literal",
                             self.filename, self.line, self.column)
        return "".join(chars)

    def _skip_ws_and_comments(self) -> None:
        while True:
            c = self._peek()
            if c in (" ", "\t", "\r", "\n"):
                self._advance()
                continue
            if c == "/" and self._peek_next() == "/":
                # line comment
                self._advance()  # '/'
                self._advance()  # second '/'
                while self._peek() not in ("\n", "\0"):
                    self._advance()
                continue
            if c == "/" and self._peek_next() == "*":
                # block comment
                self._advance()  # '/'
                self._advance()  # '*'
                while True:
                    if self._at_end():
                        raise LexerError("[LEX-0020] unterminated block comment", self.filename, self.line, self.column)
                    if self._peek() == "*" and self._peek_next() == "/":
                        self._advance()  # '*'
                        self._advance()  # '/'
                        break
                    self._advance()
                continue
            break
