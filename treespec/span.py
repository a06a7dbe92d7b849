# treespec/span.py
# Source positions and spans shared by every compiler phase.

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """A position in the tree text.

    `offset` is the 0-based character index; `line` and `column` are 1-based.
    """

    offset: int = 0
    line: int = 1
    column: int = 1


@dataclass(frozen=True)
class Span:
    """A range in the tree text. `end` points at the last character covered."""

    start: Position = Position()
    end: Position = Position()

    @classmethod
    def splat(cls, pos: Position) -> "Span":
        return cls(pos, pos)

    def with_start(self, pos: Position) -> "Span":
        return Span(pos, self.end)

    def with_end(self, pos: Position) -> "Span":
        return Span(self.start, pos)

    def shifted(self, base: Position) -> "Span":
        """Move a span measured inside a sub-text that starts at `base`."""
        return Span(_shift(self.start, base), _shift(self.end, base))


def _shift(pos: Position, base: Position) -> Position:
    column = pos.column + base.column - 1 if pos.line == 1 else pos.column
    return Position(pos.offset + base.offset, pos.line + base.line - 1, column)
