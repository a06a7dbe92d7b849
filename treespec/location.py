# treespec/location.py
# Where a violation was found: a whole file, or a line in it.

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class File:
    file: str

    def __str__(self) -> str:
        return self.file


@dataclass(frozen=True)
class Code:
    file: str
    line: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"
