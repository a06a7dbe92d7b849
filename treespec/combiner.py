# treespec/combiner.py
# Merges the HIRs of a multi-root tree file into one contract.
#
# With several roots, each root must be named `Contract::function`. Test
# functions get the PascalCased function part inserted after their `test_`
# (or `test_Revert<Keyword>_`) prefix; modifiers are deduplicated by name.

from __future__ import annotations

import logging
import re
from typing import List, Set

from . import hir
from .errors import CombineError, CombineErrorKind
from .span import Span
from .utils import upper_first_letter

logger = logging.getLogger(__name__)

CONTRACT_IDENTIFIER_SEPARATOR = "::"

_TEST_PREFIX_RE = re.compile(r"^(test_Revert[A-Z][a-z]*_|test_)")


def prefix_test_name(test_name: str, function_name: str) -> str:
    """`test_WhenX` + `transfer` -> `test_TransferWhenX`.

    >>> prefix_test_name("test_RevertWhen_X", "f")
    'test_RevertWhen_FX'
    """
    m = _TEST_PREFIX_RE.match(test_name)
    if m is None:
        return test_name
    return m.group(1) + upper_first_letter(function_name) + test_name[m.end():]


class Combiner:
    def __init__(self, text: str):
        self.text = text

    def error(self, kind: CombineErrorKind, **detail) -> CombineError:
        return CombineError(kind, self.text, Span(), **detail)

    def combine(self, hirs: List[hir.Root]) -> hir.Root:
        if len(hirs) == 1:
            return hirs[0]

        contract_name = None
        children: List[hir.FunctionDefinition] = []
        seen_modifiers: Set[str] = set()
        seen_functions: Set[str] = set()

        for idx, root in enumerate(hirs, start=1):
            for child in root.children:
                # Anything that isn't a contract is dropped.
                if not isinstance(child, hir.ContractDefinition):
                    continue
                if CONTRACT_IDENTIFIER_SEPARATOR not in child.identifier:
                    raise self.error(CombineErrorKind.SEPARATOR_MISSING, index=idx)
                name, function_name = child.identifier.split(CONTRACT_IDENTIFIER_SEPARATOR, 1)
                if not name.strip():
                    raise self.error(CombineErrorKind.CONTRACT_NAME_MISSING, index=idx)
                if contract_name is None:
                    contract_name = name
                elif name != contract_name:
                    raise self.error(
                        CombineErrorKind.CONTRACT_NAME_MISMATCH, actual=name, expected=contract_name
                    )

                for fn in child.functions():
                    if fn.is_modifier:
                        if fn.identifier in seen_modifiers:
                            continue
                        seen_modifiers.add(fn.identifier)
                        children.append(fn)
                        continue
                    identifier = prefix_test_name(fn.identifier, function_name)
                    unique = identifier
                    suffix = 2
                    while unique in seen_functions:
                        unique = f"{identifier}{suffix}"
                        suffix += 1
                    seen_functions.add(unique)
                    children.append(
                        hir.FunctionDefinition(
                            identifier=unique,
                            ty=fn.ty,
                            span=fn.span,
                            modifiers=fn.modifiers,
                            children=fn.children,
                        )
                    )

        logger.debug("combined %d roots into contract %r", len(hirs), contract_name)
        contract = hir.ContractDefinition(identifier=contract_name or "", children=children)
        return hir.Root(children=[contract])


def combine(text: str, hirs: List[hir.Root]) -> hir.Root:
    return Combiner(text).combine(hirs)
