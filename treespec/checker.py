# treespec/checker.py
# Structural matching between a tree and its Solidity test file.
#
# Every function and modifier the tree would generate must be present in the
# Solidity contract (same name, same kind) and appear in the same relative
# order. Matching is by name only; bodies are never compared.

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from . import hir
from .config import Config
from .context import Context, ViolationError
from .location import Code, File
from .sol import SolContract, find_matching
from .utils import sanitize, squash_blank_lines
from .violation import (
    ContractMissing,
    ContractNameNotMatches,
    FunctionOrderMismatch,
    MatchingFunctionMissing,
    Violation,
)

logger = logging.getLogger(__name__)

SEPARATOR_LINES = (
    "// <<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<",
    "// ==================== TREESPEC AUTOGENERATED SEPARATOR ===================",
    "// >>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>>",
    "//    Code below this section could not be automatically moved by treespec",
    "// =========================================================================",
)


def find_order_inversions(pairs: Sequence[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """Return the `(hir_idx, sol_idx)` pairs that are out of order.

    `pairs` is in expected order. Pair i is out of order when some later pair
    has a smaller Solidity index. Each flagged pair is reported once, sorted.
    """
    flagged = set()
    for i in range(len(pairs) - 1):
        for j in range(i + 1, len(pairs)):
            if pairs[i][1] > pairs[j][1]:
                flagged.add(pairs[i])
    return sorted(flagged)


class StructuralMatcher:
    def check(self, ctx: Context) -> List[Violation]:
        contract_hir = ctx.hir.find_contract()
        if contract_hir is None:
            return []

        contract_sol = ctx.parsed.find_contract()
        if contract_sol is None:
            return [Violation(ContractMissing(contract_hir.identifier), File(str(ctx.tree)))]

        violations = self.check_contract_name(contract_hir, contract_sol, ctx)
        violations.extend(self.check_functions(contract_hir, contract_sol, ctx))
        return violations

    def check_contract_name(
        self, contract_hir: hir.ContractDefinition, contract_sol: SolContract, ctx: Context
    ) -> List[Violation]:
        expected = sanitize(contract_hir.identifier)
        if contract_sol.name == expected:
            return []
        return [
            Violation(
                ContractNameNotMatches(expected, contract_sol.name),
                Code(str(ctx.sol), contract_sol.line),
            )
        ]

    def check_functions(
        self, contract_hir: hir.ContractDefinition, contract_sol: SolContract, ctx: Context
    ) -> List[Violation]:
        violations: List[Violation] = []
        present: List[Tuple[int, int]] = []
        for hir_idx, fn in enumerate(contract_hir.children):
            if not isinstance(fn, hir.FunctionDefinition):
                continue
            found = find_matching(contract_sol, fn.identifier, fn.ty.value)
            if found is None:
                if ctx.cfg.skip_modifiers and fn.is_modifier:
                    continue
                violations.append(
                    Violation(
                        MatchingFunctionMissing(fn, hir_idx),
                        Code(str(ctx.tree), fn.span.start.line),
                    )
                )
                continue
            present.append((hir_idx, found[0]))

        for hir_idx, sol_idx in find_order_inversions(present):
            part = contract_sol.parts[sol_idx]
            violations.append(
                Violation(
                    FunctionOrderMismatch(part, sol_idx, hir_idx),
                    Code(str(ctx.sol), part.line),
                )
            )
        return violations


def check(tree: Union[str, Path], cfg: Optional[Config] = None) -> List[Violation]:
    """Check one tree file against its `.t.sol` companion."""
    try:
        ctx = Context.new(tree, cfg)
    except ViolationError as e:
        return [e.violation]
    violations = StructuralMatcher().check(ctx)
    logger.debug("%s: %d violation(s)", tree, len(violations))
    return violations


def fix(violation: Violation, ctx: Context) -> Context:
    """Apply a single fix. Order violations are handled by `fix_order`."""
    return violation.kind.fix(ctx)


def fix_order(violations: Sequence[Violation], ctx: Context) -> Context:
    """Rewrite the contract body so matched functions follow the tree's order.

    Parts the tree knows nothing about are kept after the sorted ones, below
    an autogenerated separator.
    """
    if not any(isinstance(v.kind, FunctionOrderMismatch) for v in violations):
        return ctx
    contract_hir = ctx.hir.find_contract()
    contract_sol = ctx.parsed.find_contract()
    if contract_hir is None or contract_sol is None or not contract_sol.parts:
        return ctx

    matched = []
    for fn in contract_hir.children:
        found = find_matching(contract_sol, fn.identifier, fn.ty.value)
        if found is not None:
            matched.append(found)
    matched_idx = {idx for idx, _ in matched}

    src = ctx.src
    indent = " " * ctx.cfg.indent
    region_start = contract_sol.parts[0].start
    region_end = contract_sol.end - 1  # the closing brace

    sorted_text = ("\n\n" + indent).join(src[p.start:p.end] for _, p in matched)

    # Cut the matched parts out; whatever remains could not be placed.
    pieces = []
    cursor = region_start
    for part in sorted((p for _, p in matched), key=lambda p: p.start):
        pieces.append(src[cursor:part.start])
        cursor = part.end
    pieces.append(src[cursor:region_end])
    leftover = squash_blank_lines("".join(pieces)).strip("\n")

    out = [src[:region_start], sorted_text]
    unplaced = [p for idx, p in enumerate(contract_sol.parts) if idx not in matched_idx]
    if unplaced:
        out.append("\n\n" + "\n".join(indent + line for line in SEPARATOR_LINES))
    if leftover.strip():
        out.append("\n" + ("" if unplaced else "\n") + leftover)
    out.append("\n" + src[region_end:])
    logger.debug("reordered %d part(s), %d left unplaced", len(matched), len(unplaced))
    return ctx.update_src("".join(out))


def fix_all(violations: Sequence[Violation], ctx: Context) -> Context:
    """Two passes: everything but order first, then re-check and reorder."""
    for violation in violations:
        if violation.is_fixable and not isinstance(violation.kind, FunctionOrderMismatch):
            ctx = fix(violation, ctx)
    remaining = StructuralMatcher().check(ctx)
    return fix_order(remaining, ctx)
