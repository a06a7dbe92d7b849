# treespec/emitter.py
# HIR -> Solidity test skeleton.

from __future__ import annotations

from typing import List, Optional

from . import hir
from .config import Config
from .utils import sanitize

HEADER = "// SPDX-License-Identifier: UNLICENSED\npragma solidity {version};\n\n"


def normalize_comment(lexeme: str) -> str:
    """Capitalize the first letter and end with a period, keeping leading spaces.

    >>> normalize_comment("   it should revert!")
    '   It should revert.'
    """
    core = lexeme.strip()
    if not core:
        return lexeme
    prefix = lexeme[: len(lexeme) - len(lexeme.lstrip())]
    for i, ch in enumerate(core):
        if ch.isalpha():
            core = core[:i] + ch.upper() + core[i + 1:]
            break
    if core[-1] in "!?":
        core = core[:-1] + "."
    elif core[-1] != ".":
        core += "."
    return prefix + core


class Emitter:
    def __init__(self, cfg: Optional[Config] = None):
        self.cfg = cfg or Config()

    @property
    def indent(self) -> str:
        return " " * self.cfg.indent

    def emit(self, node: hir.Hir) -> str:
        if isinstance(node, hir.Root):
            return self.emit_root(node)
        if isinstance(node, hir.ContractDefinition):
            return self.emit_contract(node)
        if isinstance(node, hir.FunctionDefinition):
            return self.emit_function(node)
        if isinstance(node, hir.Comment):
            return self.emit_comment(node)
        raise TypeError("a statement can't be a top-level source unit in Solidity")

    def emit_root(self, root: hir.Root) -> str:
        out = [HEADER.format(version=self.cfg.solidity_version)]
        for child in root.children:
            if isinstance(child, hir.ContractDefinition):
                out.append(self.emit_contract(child))
        return "".join(out)

    def emit_contract(self, contract: hir.ContractDefinition) -> str:
        parts = [
            self.emit_function(fn)
            for fn in contract.functions()
            if not (fn.is_modifier and self.cfg.skip_modifiers)
        ]
        body = "\n\n".join(parts)
        header = f"contract {sanitize(contract.identifier)} {{\n"
        return header + (body + "\n" if body else "") + "}"

    def emit_function(self, fn: hir.FunctionDefinition) -> str:
        """One function or modifier, indented for a contract body, without a trailing newline."""
        ind = self.indent
        if fn.is_modifier:
            return f"{ind}modifier {fn.identifier}() {{\n{ind * 2}_;\n{ind}}}"

        modifiers = "".join(f" {m}" for m in fn.modifiers or [])
        lines: List[str] = [f"{ind}function {fn.identifier}() external{modifiers} {{"]
        for child in fn.children or []:
            if isinstance(child, hir.Comment):
                lines.append(self.emit_comment(child))
            elif isinstance(child, hir.Statement):
                lines.append(self.emit_statement(child))
        lines.append(f"{ind}}}")
        return "\n".join(lines)

    def emit_comment(self, comment: hir.Comment) -> str:
        lexeme = normalize_comment(comment.lexeme) if self.cfg.format_descriptions else comment.lexeme
        return f"{self.indent * 2}// {lexeme}"

    def emit_statement(self, statement: hir.Statement) -> str:
        if statement.ty is hir.StatementType.VM_SKIP:
            return f"{self.indent * 2}vm.skip(true);"
        raise ValueError(f"unsupported statement: {statement.ty}")


def emit(node: hir.Hir, cfg: Optional[Config] = None) -> str:
    return Emitter(cfg).emit(node)
