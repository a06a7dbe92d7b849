# treespec/parser.py
# Recursive-descent parser: tokens -> AST.
#
# Grammar:
#   Root        := WORD Branch*
#   Branch      := (TEE | CORNER) (Condition | Action)
#   Condition   := (WHEN | GIVEN) WORD* Branch*
#   Action      := IT WORD* Description*
#   Description := (TEE | CORNER) WORD*
#
# There is no indent token: a branch owns every following glyph whose column
# is strictly greater than its own.

from __future__ import annotations

import logging
from typing import List, Optional, Union

from .ast import Action, Condition, Description, Root
from .errors import ParseError, ParseErrorKind
from .span import Span
from .tokenizer import Token, TokenKind, tokenize
from .utils import sanitize

logger = logging.getLogger(__name__)

BRANCH_KINDS = (TokenKind.TEE, TokenKind.CORNER)
CONDITION_KINDS = (TokenKind.WHEN, TokenKind.GIVEN)
STRING_KINDS = (TokenKind.WORD, TokenKind.WHEN, TokenKind.GIVEN, TokenKind.IT)

_ROOT_LEVEL_ERRORS = {
    TokenKind.WHEN: ParseErrorKind.WHEN_UNEXPECTED,
    TokenKind.GIVEN: ParseErrorKind.GIVEN_UNEXPECTED,
    TokenKind.IT: ParseErrorKind.IT_UNEXPECTED,
}


class Parser:
    """Parses one tree. A fresh cursor is used for every `parse` call."""

    def __init__(self, text: str, tokens: List[Token]):
        self.text = text
        self.tokens = tokens
        self.current = 0

    # -- cursor --------------------------------------------------------------

    def is_eof(self) -> bool:
        return self.current >= len(self.tokens)

    def current_token(self) -> Optional[Token]:
        return None if self.is_eof() else self.tokens[self.current]

    def peek(self) -> Optional[Token]:
        nxt = self.current + 1
        return self.tokens[nxt] if nxt < len(self.tokens) else None

    def previous(self) -> Token:
        return self.tokens[self.current - 1]

    def consume(self) -> Optional[Token]:
        if self.is_eof():
            return None
        self.current += 1
        return self.current_token()

    def error(self, kind: ParseErrorKind, span: Span, **detail) -> ParseError:
        return ParseError(kind, self.text, span, **detail)

    # -- productions ---------------------------------------------------------

    def parse(self) -> Root:
        self.current = 0
        root_token = self.current_token()
        if root_token is None:
            raise self.error(ParseErrorKind.TREE_EMPTY, Span())
        if root_token.kind is not TokenKind.WORD:
            raise self.error(ParseErrorKind.TREE_ROOTLESS, root_token.span)
        return self.parse_root(root_token)

    def parse_root(self, token: Token) -> Root:
        self.consume()
        children: List[Union[Condition, Action]] = []
        while not self.is_eof():
            current = self.current_token()
            if current.kind in BRANCH_KINDS:
                children.append(self.parse_branch(current))
            elif current.kind is TokenKind.WORD:
                raise self.error(ParseErrorKind.WORD_UNEXPECTED, current.span, lexeme=current.lexeme)
            else:
                raise self.error(_ROOT_LEVEL_ERRORS[current.kind], current.span)

        end = children[-1].span.end if children else token.span.end
        return Root(contract_name=token.lexeme, children=children, span=Span(token.span.start, end))

    def parse_branch(self, token: Token) -> Union[Condition, Action]:
        """Parse the condition or action introduced by the glyph `token`."""
        first = self.peek()
        if first is None:
            raise self.error(ParseErrorKind.EOF_UNEXPECTED, Span.splat(token.span.end))
        if first.kind not in CONDITION_KINDS and first.kind is not TokenKind.IT:
            raise self.error(ParseErrorKind.TOKEN_UNEXPECTED, first.span, lexeme=first.lexeme)

        has_sibling = self.has_later_sibling(token)
        if token.kind is TokenKind.TEE and not has_sibling:
            raise self.error(ParseErrorKind.TEE_LAST_CHILD, Span.splat(token.span.end))
        if token.kind is TokenKind.CORNER and has_sibling:
            raise self.error(ParseErrorKind.CORNER_NOT_LAST_CHILD, Span.splat(token.span.end))

        if first.kind in CONDITION_KINDS:
            return self.parse_condition(token)
        return self.parse_action(token)

    def has_later_sibling(self, token: Token) -> bool:
        column = token.span.start.column
        for later in self.tokens[self.current + 1:]:
            col = later.span.start.column
            if col < column:
                return False
            if col == column and later.kind in BRANCH_KINDS:
                return True
        return False

    def parse_condition(self, token: Token) -> Condition:
        start_token = self.peek()
        title = self.parse_string(start_token)
        if len(title) == len(start_token.lexeme):
            raise self.error(ParseErrorKind.TITLE_MISSING, start_token.span)

        children: List[Union[Condition, Action]] = []
        while self._is_nested_under(token):
            children.append(self.parse_branch(self.current_token()))

        return Condition(
            title=sanitize(title),
            children=children,
            span=Span(token.span.start, self.previous().span.end),
        )

    def parse_action(self, token: Token) -> Action:
        title = self.parse_string(self.peek())

        children: List[Description] = []
        while self._is_nested_under(token):
            current = self.current_token()
            nxt = self.peek()
            if nxt is None:
                raise self.error(ParseErrorKind.EOF_UNEXPECTED, Span.splat(current.span.end))
            if nxt.kind is not TokenKind.WORD:
                raise self.error(
                    ParseErrorKind.DESCRIPTION_TOKEN_UNEXPECTED, nxt.span, lexeme=nxt.lexeme
                )
            column_delta = current.span.start.column - token.span.start.column
            children.append(self.parse_description(current, column_delta))

        return Action(
            title=title,
            children=children,
            span=Span(token.span.start, self.previous().span.end),
        )

    def parse_description(self, token: Token, column_delta: int) -> Description:
        # `column_delta` spaces keep the drawn nesting visible in the emitted comment.
        text = self.parse_string(self.peek())
        return Description(
            text=" " * column_delta + text,
            span=Span(token.span.start, self.previous().span.end),
        )

    def parse_string(self, start_token: Token) -> str:
        """Consume `start_token` and every word after it; return them space-joined."""
        self.consume()
        words = [start_token.lexeme]
        token = self.consume()
        while token is not None and token.kind in STRING_KINDS:
            words.append(token.lexeme)
            token = self.consume()
        return " ".join(words)

    def _is_nested_under(self, token: Token) -> bool:
        current = self.current_token()
        return current is not None and current.span.start.column > token.span.start.column


def parse(text: str, tokens: Optional[List[Token]] = None) -> Root:
    """Parse one tree, tokenizing `text` first unless tokens are supplied."""
    if tokens is None:
        tokens = tokenize(text)
    root = Parser(text, tokens).parse()
    logger.debug("parsed tree %r with %d top-level nodes", root.contract_name, len(root.children))
    return root
