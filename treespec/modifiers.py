# treespec/modifiers.py
# Maps every condition title to the modifier name it would get.

from __future__ import annotations

from typing import Dict, Union

from .ast import Action, Condition, Root
from .utils import to_modifier_name


class ModifierDiscoverer:
    """Collects `title -> modifierName` in order of first appearance.

    The translator emits modifier definitions in this order. No validation is
    done here.
    """

    def __init__(self):
        self.modifiers: Dict[str, str] = {}

    def discover(self, root: Root) -> Dict[str, str]:
        self.modifiers = {}
        for child in root.children:
            self._visit(child)
        return self.modifiers

    def _visit(self, node: Union[Condition, Action]) -> None:
        if not isinstance(node, Condition):
            return
        self.modifiers.setdefault(node.title, to_modifier_name(node.title))
        for child in node.children:
            self._visit(child)


def discover(root: Root) -> Dict[str, str]:
    return ModifierDiscoverer().discover(root)
