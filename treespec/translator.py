# treespec/translator.py
# AST -> HIR. Synthesizes modifier and test function names.
#
# For every condition, in order:
#   1. its modifier definition (only if it has nested conditions, once per tree)
#   2. the test function for its direct actions (if any)
#   3. the HIR of its nested conditions
#
# Function names are unique per tree. A colliding name is extended with the
# PascalCase titles of enclosing conditions, nearest first, and finally with
# a numeric suffix starting at 2.

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Set, Union

from . import hir
from .ast import Action, Condition, Root
from .config import Config
from .utils import sanitize, to_pascal_case, upper_first_letter

logger = logging.getLogger(__name__)

REVERT_TITLE = "it should revert"


class _TranslationState:
    """Mutable state for translating one tree. Never shared between trees."""

    def __init__(self):
        self.modifier_stack: List[str] = []
        self.emitted_modifiers: Set[str] = set()
        self.allocated_names: Set[str] = set()
        self.ancestors: List[Condition] = []

    def allocate(self, base: str, ancestors: List[Condition]) -> str:
        candidate = base
        for ancestor in reversed(ancestors):
            if candidate not in self.allocated_names:
                break
            candidate += to_pascal_case(ancestor.title)
        name = candidate
        suffix = 2
        while name in self.allocated_names:
            name = f"{candidate}{suffix}"
            suffix += 1
        self.allocated_names.add(name)
        return name


def is_revert_action(action: Action) -> bool:
    return sanitize(action.title.strip().lower()) == REVERT_TITLE


def condition_function_name(condition: Condition) -> str:
    """`when stuff called` -> `test_WhenStuffCalled`.

    A condition whose only action is `it should revert` is named
    `test_RevertWhen_StuffCalled` instead.
    """
    words = condition.title.split()
    keyword = upper_first_letter(words[0])
    rest = "".join(upper_first_letter(w) for w in words[1:])
    actions = [c for c in condition.children if isinstance(c, Action)]
    if len(actions) == 1 and is_revert_action(actions[0]):
        return f"test_Revert{keyword}_{rest}"
    return f"test_{keyword}{rest}"


def action_function_name(action: Action) -> str:
    """Name of a top-level action: `It reverts when X.` -> `test_RevertsWhenX`."""
    words = action.title.split()[1:]
    return "test_" + sanitize("".join(upper_first_letter(w) for w in words))


class Translator:
    def __init__(self, modifiers: Dict[str, str], cfg: Optional[Config] = None):
        self.modifiers = modifiers
        self.cfg = cfg or Config()
        self.state = _TranslationState()

    def translate(self, root: Root) -> hir.Root:
        self.state = _TranslationState()
        contract_children: List[hir.FunctionDefinition] = []
        for node in root.children:
            if isinstance(node, Action):
                contract_children.append(self.visit_top_level_action(node))
            elif isinstance(node, Condition):
                contract_children.extend(self.visit_condition(node))
            else:
                raise TypeError(f"unexpected child of root: {type(node).__name__}")

        contract = hir.ContractDefinition(identifier=root.contract_name, children=contract_children)
        logger.debug(
            "translated %r into %d definitions", root.contract_name, len(contract_children)
        )
        return hir.Root(children=[contract])

    def visit_top_level_action(self, action: Action) -> hir.FunctionDefinition:
        children = self.visit_action(action)
        if self.cfg.emit_vm_skip:
            children.append(hir.Statement(hir.StatementType.VM_SKIP))
        return hir.FunctionDefinition(
            identifier=self.state.allocate(action_function_name(action), []),
            ty=hir.FunctionTy.FUNCTION,
            span=action.span,
            modifiers=None,
            children=children,
        )

    def visit_condition(self, condition: Condition) -> List[hir.FunctionDefinition]:
        state = self.state
        out: List[hir.FunctionDefinition] = []

        has_modifier = condition.has_nested_conditions
        if has_modifier:
            modifier = self.modifiers[condition.title]
            state.modifier_stack.append(modifier)
            if modifier not in state.emitted_modifiers:
                state.emitted_modifiers.add(modifier)
                out.append(
                    hir.FunctionDefinition(
                        identifier=modifier,
                        ty=hir.FunctionTy.MODIFIER,
                        span=condition.span,
                    )
                )

        comments: List[Union[hir.Comment, hir.Statement]] = []
        for child in condition.children:
            if isinstance(child, Action):
                comments.extend(self.visit_action(child))

        if comments:
            if self.cfg.emit_vm_skip:
                comments.append(hir.Statement(hir.StatementType.VM_SKIP))
            out.append(
                hir.FunctionDefinition(
                    identifier=state.allocate(condition_function_name(condition), state.ancestors),
                    ty=hir.FunctionTy.FUNCTION,
                    span=condition.span,
                    modifiers=list(state.modifier_stack) or None,
                    children=comments,
                )
            )

        state.ancestors.append(condition)
        for child in condition.children:
            if isinstance(child, Condition):
                out.extend(self.visit_condition(child))
        state.ancestors.pop()

        if has_modifier:
            state.modifier_stack.pop()
        return out

    def visit_action(self, action: Action) -> List[Union[hir.Comment, hir.Statement]]:
        comments: List[Union[hir.Comment, hir.Statement]] = [hir.Comment(action.title)]
        comments.extend(hir.Comment(d.text) for d in action.children)
        return comments


def translate_ast(root: Root, modifiers: Dict[str, str], cfg: Optional[Config] = None) -> hir.Root:
    return Translator(modifiers, cfg).translate(root)
