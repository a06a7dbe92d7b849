# treespec/hir.py
# High-level intermediate representation shared by the scaffold emitter and
# the checker. A compiled unit is one Root holding one ContractDefinition.

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .span import Span


class FunctionTy(Enum):
    FUNCTION = "function"
    MODIFIER = "modifier"


class StatementType(Enum):
    VM_SKIP = "vm_skip"


@dataclass
class Comment:
    lexeme: str


@dataclass
class Statement:
    ty: StatementType


@dataclass
class FunctionDefinition:
    identifier: str
    ty: FunctionTy = FunctionTy.FUNCTION
    span: Span = field(default_factory=Span)
    modifiers: Optional[List[str]] = None
    children: Optional[List[Union[Comment, Statement]]] = None

    @property
    def is_modifier(self) -> bool:
        return self.ty is FunctionTy.MODIFIER

    @property
    def is_function(self) -> bool:
        return self.ty is FunctionTy.FUNCTION


@dataclass
class ContractDefinition:
    identifier: str
    children: List[Any] = field(default_factory=list)

    def functions(self) -> List[FunctionDefinition]:
        """Functions and modifiers, in emission order."""
        return [c for c in self.children if isinstance(c, FunctionDefinition)]


@dataclass
class Root:
    children: List[Any] = field(default_factory=list)

    def find_contract(self) -> Optional[ContractDefinition]:
        for child in self.children:
            if isinstance(child, ContractDefinition):
                return child
        return None


Hir = Union[Root, ContractDefinition, FunctionDefinition, Comment, Statement]


def _span_to_dict(span: Span) -> Dict[str, Any]:
    return {
        "start": {"offset": span.start.offset, "line": span.start.line, "column": span.start.column},
        "end": {"offset": span.end.offset, "line": span.end.line, "column": span.end.column},
    }


def hir_to_dict(node: Hir) -> Dict[str, Any]:
    """Plain JSON-ready data for a HIR node and everything below it."""
    if isinstance(node, Root):
        return {"type": "Root", "children": [hir_to_dict(c) for c in node.children]}
    if isinstance(node, ContractDefinition):
        return {
            "type": "ContractDefinition",
            "identifier": node.identifier,
            "children": [hir_to_dict(c) for c in node.children],
        }
    if isinstance(node, FunctionDefinition):
        return {
            "type": "FunctionDefinition",
            "identifier": node.identifier,
            "ty": node.ty.value,
            "span": _span_to_dict(node.span),
            "modifiers": list(node.modifiers) if node.modifiers is not None else None,
            "children": [hir_to_dict(c) for c in node.children] if node.children is not None else None,
        }
    if isinstance(node, Comment):
        return {"type": "Comment", "lexeme": node.lexeme}
    if isinstance(node, Statement):
        return {"type": "Statement", "ty": node.ty.value}
    raise TypeError(f"not a HIR node: {type(node).__name__}")
