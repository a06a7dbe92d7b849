# treespec/tokenizer.py
# Scans a branching tree into a flat token stream.
#
# Tokens:
#   TEE     `├`
#   CORNER  `└`
#   WORD    any run of non-whitespace characters
#   WHEN / GIVEN / IT   a WORD equal (case-insensitively) to the keyword
#
# `//` starts a comment that runs to the end of the line. Spaces, `─` and `│`
# only draw the tree and produce no tokens; nesting is recovered later from
# token columns.

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .errors import TokenizeError, TokenizeErrorKind
from .span import Position, Span

logger = logging.getLogger(__name__)

FILLER_GLYPHS = {"─", "│"}
IDENTIFIER_MODE_ENDS = {"\n", "\t", "\r"}


class TokenKind(Enum):
    TEE = "tee"
    CORNER = "corner"
    WORD = "word"
    WHEN = "when"
    GIVEN = "given"
    IT = "it"


KEYWORDS = {"when": TokenKind.WHEN, "given": TokenKind.GIVEN, "it": TokenKind.IT}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    span: Span
    lexeme: str

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.lexeme!r}, {self.span.start.line}:{self.span.start.column})"


def is_valid_identifier_char(c: str) -> bool:
    """Characters allowed in a condition title. `-` is turned into `_` later."""
    return c.isalnum() or c in ("_", "-", "'", '"')


def _opens_branch(tokens: List[Token]) -> bool:
    # Only a keyword right after a glyph starts a condition title; `when` inside
    # an action title is plain prose.
    return bool(tokens) and tokens[-1].kind in (TokenKind.TEE, TokenKind.CORNER)


class _Scanner:
    def __init__(self, text: str):
        self.text = text
        self.pos = Position(0, 1, 1)
        # Identifier mode starts after a `when`/`given` keyword and lasts until
        # the end of the line: condition titles become function names.
        self.identifier_mode = False

    # -- cursor --------------------------------------------------------------

    def is_eof(self) -> bool:
        return self.pos.offset >= len(self.text)

    def char(self) -> str:
        return self.text[self.pos.offset]

    def peek(self) -> Optional[str]:
        nxt = self.pos.offset + 1
        return self.text[nxt] if nxt < len(self.text) else None

    def advance(self) -> None:
        offset, line, column = self.pos.offset, self.pos.line, self.pos.column
        if self.char() == "\n":
            line, column = line + 1, 1
        else:
            column += 1
        self.pos = Position(offset + 1, line, column)

    def error(self, kind: TokenizeErrorKind, **detail) -> TokenizeError:
        return TokenizeError(kind, self.text, Span.splat(self.pos), **detail)

    # -- scanning ------------------------------------------------------------

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        while not self.is_eof():
            c = self.char()
            if c in FILLER_GLYPHS and self.identifier_mode:
                raise self.error(TokenizeErrorKind.IDENTIFIER_CHAR_INVALID, char=c)
            if c in IDENTIFIER_MODE_ENDS:
                self.identifier_mode = False
            elif c in FILLER_GLYPHS or c.isspace():
                pass
            elif c == "├":
                tokens.append(Token(TokenKind.TEE, Span.splat(self.pos), c))
            elif c == "└":
                tokens.append(Token(TokenKind.CORNER, Span.splat(self.pos), c))
            elif c == "/" and self.peek() == "/":
                self.identifier_mode = False
                self.skip_comment()
            else:
                token = self.scan_word()
                if token.kind in (TokenKind.WHEN, TokenKind.GIVEN) and _opens_branch(tokens):
                    self.identifier_mode = True
                tokens.append(token)
            self.advance()
        return tokens

    def skip_comment(self) -> None:
        # Stop right before the line break so the main loop still sees it.
        while self.peek() is not None and self.peek() != "\n":
            self.advance()

    def scan_word(self) -> Token:
        start = self.pos
        chars = []
        while True:
            c = self.char()
            if self.identifier_mode and not is_valid_identifier_char(c):
                raise self.error(TokenizeErrorKind.IDENTIFIER_CHAR_INVALID, char=c)
            chars.append(c)
            nxt = self.peek()
            if nxt is None or nxt.isspace():
                break
            self.advance()
        lexeme = "".join(chars)
        kind = KEYWORDS.get(lexeme.lower(), TokenKind.WORD)
        return Token(kind, Span(start, self.pos), lexeme)


def tokenize(text: str) -> List[Token]:
    """Tokenize one tree. Raises TokenizeError on an invalid condition title."""
    tokens = _Scanner(text).tokenize()
    logger.debug("tokenized %d characters into %d tokens", len(text), len(tokens))
    return tokens
