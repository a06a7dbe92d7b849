# treespec/sol.py
# Solidity parsing with tree-sitter, reduced to what the checker needs:
# contracts and the functions/modifiers in their bodies, with character offsets.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_language

logger = logging.getLogger(__name__)

_PARSER: Optional[Parser] = None


class SolidityParseError(Exception):
    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        super().__init__(message)


@dataclass
class SolPart:
    """A member of a contract body. `kind` is function, modifier or other."""

    kind: str
    name: Optional[str]
    start: int
    end: int
    line: int

    @property
    def is_function(self) -> bool:
        return self.kind == "function"

    @property
    def is_modifier(self) -> bool:
        return self.kind == "modifier"


@dataclass
class SolContract:
    name: str
    start: int
    end: int
    line: int
    name_start: int
    name_end: int
    # Offset right after the opening `{` of the body.
    body_start: int
    parts: List[SolPart] = field(default_factory=list)

    def definitions(self) -> List[SolPart]:
        """Functions and modifiers, in source order."""
        return [p for p in self.parts if p.kind in ("function", "modifier")]


@dataclass
class SolSource:
    text: str
    contracts: List[SolContract] = field(default_factory=list)

    def find_contract(self) -> Optional[SolContract]:
        return self.contracts[0] if self.contracts else None


def get_parser() -> Parser:
    global _PARSER
    if _PARSER is None:
        _PARSER = Parser(get_language("solidity"))
        logger.debug("loaded solidity grammar")
    return _PARSER


class _Offsets:
    """Byte offset -> character offset for one source text."""

    def __init__(self, text: str):
        self.data = text.encode("utf-8")
        self.ascii = len(self.data) == len(text)

    def __call__(self, byte_offset: int) -> int:
        if self.ascii:
            return byte_offset
        return len(self.data[:byte_offset].decode("utf-8", errors="ignore"))


def _node_name(node: Node) -> Optional[str]:
    name = node.child_by_field_name("name")
    if name is None:
        name = next((c for c in node.named_children if c.type == "identifier"), None)
    return name.text.decode("utf-8") if name is not None else None


_PART_KINDS = {"function_definition": "function", "modifier_definition": "modifier"}


def _first_error_line(node: Node) -> Optional[int]:
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error:
            return _first_error_line(child)
    return None


def parse(text: str) -> SolSource:
    """Parse Solidity source. Raises SolidityParseError on syntax errors."""
    tree = get_parser().parse(text.encode("utf-8"))
    root = tree.root_node
    if root.has_error:
        line = _first_error_line(root)
        raise SolidityParseError(f"syntax error near line {line}", line)

    offset = _Offsets(text)
    source = SolSource(text=text)
    for node in root.named_children:
        if node.type != "contract_declaration":
            continue
        name_node = node.child_by_field_name("name")
        body = node.child_by_field_name("body")
        if body is None:
            body = next((c for c in node.named_children if c.type == "contract_body"), None)
        if name_node is None or body is None:
            continue
        contract = SolContract(
            name=name_node.text.decode("utf-8"),
            start=offset(node.start_byte),
            end=offset(node.end_byte),
            line=node.start_point[0] + 1,
            name_start=offset(name_node.start_byte),
            name_end=offset(name_node.end_byte),
            body_start=offset(body.start_byte) + 1,
        )
        for member in body.named_children:
            if member.type == "comment":
                continue
            kind = _PART_KINDS.get(member.type, "other")
            contract.parts.append(
                SolPart(
                    kind=kind,
                    name=_node_name(member) if kind != "other" else None,
                    start=offset(member.start_byte),
                    end=offset(member.end_byte),
                    line=member.start_point[0] + 1,
                )
            )
        source.contracts.append(contract)

    logger.debug("parsed %d contract(s)", len(source.contracts))
    return source


def find_matching(contract: SolContract, name: str, kind: str) -> Optional[Tuple[int, SolPart]]:
    """Index into `contract.parts` and the part named `name` of the given kind."""
    for idx, part in enumerate(contract.parts):
        if part.kind == kind and part.name == name:
            return idx, part
    return None
