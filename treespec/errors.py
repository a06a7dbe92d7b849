# treespec/errors.py
# Compile-time (frontend) errors with caret-annotated rendering.
#
# Every error keeps the text it was produced from plus a Span into that text,
# so the message can point at the offending characters:
#
#   •••••••••••••••••••••••••••••••••••
#   treespec error: a `Tee` must not be the last child
#
#   ├── when something bad happens
#   ^
#
#   --- (line 2, column 1) ---

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from .span import Position, Span

DIVIDER = "•" * 79


class TokenizeErrorKind(Enum):
    IDENTIFIER_CHAR_INVALID = "invalid identifier: {char!r}"


class ParseErrorKind(Enum):
    TOKEN_UNEXPECTED = "unexpected token '{lexeme}'"
    DESCRIPTION_TOKEN_UNEXPECTED = "unexpected token in description '{lexeme}'"
    WHEN_UNEXPECTED = "unexpected `when` keyword"
    GIVEN_UNEXPECTED = "unexpected `given` keyword"
    IT_UNEXPECTED = "unexpected `it` keyword"
    WORD_UNEXPECTED = "unexpected `word` '{lexeme}'"
    EOF_UNEXPECTED = "unexpected end of file"
    TREE_EMPTY = "found an empty tree"
    TREE_ROOTLESS = "missing a root"
    TITLE_MISSING = "found a condition/action without a title"
    CORNER_NOT_LAST_CHILD = "a `Corner` must be the last child"
    TEE_LAST_CHILD = "a `Tee` must not be the last child"


class SemanticErrorKind(Enum):
    IDENTIFIER_DUPLICATED = "found an identifier more than once in lines: {lines}"
    CONDITION_EMPTY = "found a condition with no children"
    NODE_UNEXPECTED = "unexpected child node"
    TREE_EMPTY = "no rules where defined"


class CombineErrorKind(Enum):
    CONTRACT_NAME_MISMATCH = "contract name mismatch: expected '{expected}', found '{actual}'"
    CONTRACT_NAME_MISSING = "contract name missing at tree root #{index}"
    SEPARATOR_MISSING = (
        "separator missing at tree root #{index}. Expected to find `::` between "
        "the contract name and the function name when multiple roots exist"
    )


def _format_spans(spans: Iterable[Span]) -> str:
    return ", ".join(str(s.start.line) for s in spans)


class FrontendError(Exception):
    """Base class for every error raised while compiling a tree."""

    phase = "frontend"

    def __init__(self, kind: Enum, text: str, span: Optional[Span] = None, **detail: Any):
        self.kind = kind
        self.text = text
        self.span = span if span is not None else Span()
        self.detail: Dict[str, Any] = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        fields = dict(self.detail)
        if "spans" in fields:
            fields["lines"] = _format_spans(fields["spans"])
        return self.kind.value.format(**fields)

    def notate(self) -> str:
        """Return the offending line with carets under the error span."""
        lines = self.text.splitlines()
        idx = self.span.start.line - 1
        if idx < 0 or idx >= len(lines):
            return ""
        width = max(1, self.span.end.column - self.span.start.column + 1)
        return lines[idx] + "\n" + " " * (self.span.start.column - 1) + "^" * width + "\n"

    def __str__(self) -> str:
        out = [DIVIDER + "\n"]
        if self.span.start.offset == 0 and self.span.end.offset == 0:
            out.append(f"treespec error: {self.message}")
            return "".join(out)
        out.append(f"treespec error: {self.message}\n\n")
        out.append(self.notate() + "\n")
        out.append(f"--- (line {self.span.start.line}, column {self.span.start.column}) ---\n")
        return "".join(out)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrontendError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.kind == other.kind
            and self.span == other.span
            and self.detail == other.detail
        )

    __hash__ = Exception.__hash__


class TokenizeError(FrontendError):
    phase = "tokenizer"


class ParseError(FrontendError):
    phase = "parser"


class SemanticError(FrontendError):
    phase = "semantics"


class CombineError(FrontendError):
    phase = "combiner"


class SemanticErrors(Exception):
    """All semantic errors found in one tree, reported together."""

    def __init__(self, errors: List[SemanticError]):
        self.errors = list(errors)
        super().__init__("".join(str(e) for e in self.errors))

    def __str__(self) -> str:
        return "".join(str(e) for e in self.errors)

    def __iter__(self):
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)


def describe(error: Exception) -> str:
    """One-line summary used when a compile error becomes a check violation."""
    if isinstance(error, SemanticErrors):
        return "at least one semantic error occurred while parsing the tree"
    if isinstance(error, FrontendError):
        return f"an error occurred while parsing the tree: {error.message}"
    return "an error occurred while parsing the solidity file"


__all__ = [
    "DIVIDER",
    "Position",
    "Span",
    "TokenizeErrorKind",
    "ParseErrorKind",
    "SemanticErrorKind",
    "CombineErrorKind",
    "FrontendError",
    "TokenizeError",
    "ParseError",
    "SemanticError",
    "CombineError",
    "SemanticErrors",
    "describe",
]
