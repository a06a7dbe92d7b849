# treespec/semantics.py
# Validates a parsed tree before translation. Errors are collected during a
# full walk and raised together, so one run reports every problem.

from __future__ import annotations

import logging
from typing import Dict, List

from .ast import Action, Condition, Description, Root
from .errors import SemanticError, SemanticErrorKind, SemanticErrors
from .span import Span
from .utils import lower_first_letter, sanitize, to_pascal_case

logger = logging.getLogger(__name__)


def derived_identifier(title: str) -> str:
    """The name the translator would derive from a title, used for duplicate checks."""
    return lower_first_letter(to_pascal_case(sanitize(title)))


class SemanticAnalyzer:
    def __init__(self, text: str):
        self.text = text
        self.errors: List[SemanticError] = []
        # One identifier table per parent: the same title under different
        # parents is resolved later by name disambiguation.
        self.scopes: List[Dict[str, List[Span]]] = []

    def error(self, kind: SemanticErrorKind, span: Span, **detail) -> None:
        self.errors.append(SemanticError(kind, self.text, span, **detail))

    def analyze(self, root: Root) -> None:
        self.errors = []
        self.scopes = []
        self.visit_root(root)
        for scope in self.scopes:
            for spans in scope.values():
                if len(spans) > 1:
                    self.error(
                        SemanticErrorKind.IDENTIFIER_DUPLICATED,
                        Span.splat(spans[0].start),
                        spans=list(spans),
                    )
        if self.errors:
            logger.debug("semantic analysis found %d error(s)", len(self.errors))
            raise SemanticErrors(self.errors)

    def _record(self, scope: Dict[str, List[Span]], title: str, span: Span) -> None:
        scope.setdefault(derived_identifier(title), []).append(span)

    def visit_root(self, root: Root) -> None:
        if not root.children:
            self.error(SemanticErrorKind.TREE_EMPTY, Span.splat(root.span.end))
        scope: Dict[str, List[Span]] = {}
        self.scopes.append(scope)
        for child in root.children:
            if isinstance(child, Condition):
                self._record(scope, child.title, child.span)
                self.visit_condition(child)
            elif isinstance(child, Action):
                # Top-level actions become functions of their own.
                self._record(scope, child.title, child.span)
                self.visit_action(child)
            else:
                self.error(SemanticErrorKind.NODE_UNEXPECTED, child.span)

    def visit_condition(self, condition: Condition) -> None:
        if not condition.children:
            self.error(SemanticErrorKind.CONDITION_EMPTY, condition.span)
        scope: Dict[str, List[Span]] = {}
        self.scopes.append(scope)
        for child in condition.children:
            if isinstance(child, Condition):
                self._record(scope, child.title, child.span)
                self.visit_condition(child)
            elif isinstance(child, Action):
                self.visit_action(child)
            else:
                self.error(SemanticErrorKind.NODE_UNEXPECTED, child.span)

    def visit_action(self, action: Action) -> None:
        for child in action.children:
            if not isinstance(child, Description):
                self.error(SemanticErrorKind.NODE_UNEXPECTED, child.span)


def analyze(text: str, root: Root) -> None:
    """Raise SemanticErrors if `root` cannot be translated."""
    SemanticAnalyzer(text).analyze(root)
