# treespec/ast.py
# AST produced by the parser. Each node owns its children outright.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from .span import Span


@dataclass
class Description:
    """Free text nested under an action, e.g. `└── because X`."""

    text: str
    span: Span = field(default_factory=Span)


@dataclass
class Action:
    """An `it ...` leaf. `title` is kept verbatim."""

    title: str
    children: List[Description] = field(default_factory=list)
    span: Span = field(default_factory=Span)


@dataclass
class Condition:
    """A `when ...` / `given ...` branch. `title` is sanitized."""

    title: str
    children: List[Union["Condition", Action]] = field(default_factory=list)
    span: Span = field(default_factory=Span)

    @property
    def keyword(self) -> str:
        return self.title.split(maxsplit=1)[0].lower() if self.title else ""

    @property
    def has_nested_conditions(self) -> bool:
        return any(isinstance(c, Condition) for c in self.children)


@dataclass
class Root:
    """Top of one tree. `contract_name` is the bare first line (`Foo` or `Foo::bar`)."""

    contract_name: str
    children: List[Union[Condition, Action]] = field(default_factory=list)
    span: Span = field(default_factory=Span)


Node = Union[Root, Condition, Action, Description]

__all__ = ["Root", "Condition", "Action", "Description", "Node"]
