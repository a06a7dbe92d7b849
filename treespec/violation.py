# treespec/violation.py
# Mismatches between a tree and its Solidity test file, and how to fix them.
#
# Rendering:
#
#   warn: function "test_WhenX" is missing in .sol
#        + fix: run `treespec check --fix Foo.tree`
#      --> Foo.tree:2

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from . import hir
from .errors import describe
from .location import Code, File
from .sol import SolPart, find_matching

logger = logging.getLogger(__name__)


class ViolationKind:
    fixable = False

    @property
    def message(self) -> str:
        raise NotImplementedError

    def help(self) -> Optional[str]:
        return None

    def fix(self, ctx):
        """Patch `ctx` in place and return it. Kinds that can't be fixed return it unchanged."""
        return ctx

    def __str__(self) -> str:
        return self.message


@dataclass
class ContractMissing(ViolationKind):
    name: str
    fixable = True

    @property
    def message(self) -> str:
        return f'contract "{self.name}" is missing in .sol'

    def help(self) -> Optional[str]:
        return f'consider adding a contract with name "{self.name}"'

    def fix(self, ctx):
        return ctx.update_src(ctx.emitter().emit(ctx.hir) + "\n")


@dataclass
class ContractNameNotMatches(ViolationKind):
    expected: str
    found: str
    fixable = True

    @property
    def message(self) -> str:
        return f'contract "{self.expected}" is missing in .sol -- found "{self.found}" instead'

    def help(self) -> Optional[str]:
        return f'consider renaming the contract to "{self.expected}"'

    def fix(self, ctx):
        contract = ctx.parsed.find_contract()
        if contract is None or contract.name != self.found:
            return ctx
        src = ctx.src[: contract.name_start] + self.expected + ctx.src[contract.name_end:]
        return ctx.update_src(src)


@dataclass
class SolidityFileMissing(ViolationKind):
    filename: str

    @property
    def message(self) -> str:
        return f"the tree is missing its matching Solidity file: {self.filename}"

    def help(self) -> Optional[str]:
        filename = self.filename.replace(".t.sol", ".tree")
        return f"consider running `treespec scaffold {filename}`"


@dataclass
class FileUnreadable(ViolationKind):
    @property
    def message(self) -> str:
        return "treespec couldn't read the file"


@dataclass
class ParsingFailed(ViolationKind):
    error: Exception

    @property
    def message(self) -> str:
        return describe(self.error)


@dataclass
class FunctionOrderMismatch(ViolationKind):
    """`part` sits at `sol_idx` in the contract but belongs at `hir_idx`.

    Order violations are fixed all at once by `checker.fix_order`.
    """

    part: SolPart
    sol_idx: int
    hir_idx: int
    fixable = True

    @property
    def message(self) -> str:
        return f"incorrect position for function `{self.part.name}`"

    def help(self) -> Optional[str]:
        return "consider reordering the function in the file"


@dataclass
class MatchingFunctionMissing(ViolationKind):
    function: hir.FunctionDefinition
    hir_idx: int
    fixable = True

    @property
    def message(self) -> str:
        return f'function "{self.function.identifier}" is missing in .sol'

    def fix(self, ctx):
        contract_hir = ctx.hir.find_contract()
        contract_sol = ctx.parsed.find_contract()
        if contract_hir is None or contract_sol is None:
            return ctx

        # Insert after the nearest expected predecessor that is already present.
        for prev in reversed(contract_hir.children[: self.hir_idx]):
            found = find_matching(contract_sol, prev.identifier, prev.ty.value)
            if found is not None:
                logger.debug("inserting %s after %s", self.function.identifier, prev.identifier)
                return ctx.insert_function_at(self.function, found[1].end)
        return ctx.insert_function_at(self.function, contract_sol.body_start, at_body_start=True)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MatchingFunctionMissing):
            return NotImplemented
        return self.function.identifier == other.function.identifier and self.hir_idx == other.hir_idx


@dataclass
class Violation:
    kind: ViolationKind
    location: Union[File, Code]

    @property
    def is_fixable(self) -> bool:
        return self.kind.fixable

    def __str__(self) -> str:
        lines = [f"warn: {self.kind.message}"]
        help_text = self.kind.help()
        if help_text:
            lines.append(f"     = help: {help_text}")
        if self.is_fixable:
            tree = self.location.file.replace(".t.sol", ".tree")
            lines.append(f"     + fix: run `treespec check --fix {tree}`")
        lines.append(f"   --> {self.location}")
        return "\n".join(lines) + "\n"
