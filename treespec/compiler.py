# treespec/compiler.py
# End-to-end pipeline: text -> trees -> (tokens -> AST -> checks -> HIR) -> combined HIR.

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from . import hir
from .combiner import combine
from .config import Config
from .modifiers import discover
from .parser import parse
from .semantics import analyze
from .span import Position
from .tokenizer import tokenize
from .translator import translate_ast

logger = logging.getLogger(__name__)

TREES_SEPARATOR = "\n\n"


def _only_comments(tree: str) -> bool:
    return all(line.strip().startswith("//") for line in tree.splitlines())


def locate_trees(text: str) -> List[Tuple[str, Position]]:
    """Like `split_trees`, paired with where each tree starts in `text`."""
    if not text.strip():
        return [("", Position())]
    located = []
    cursor = 0
    for fragment in text.split(TREES_SEPARATOR):
        tree = fragment.strip()
        if tree and not _only_comments(tree):
            offset = cursor + len(fragment) - len(fragment.lstrip())
            line_start = text.rfind("\n", 0, offset) + 1
            located.append((tree, Position(offset, text.count("\n", 0, offset) + 1, offset - line_start + 1)))
        cursor += len(fragment) + len(TREES_SEPARATOR)
    return located


def split_trees(text: str) -> List[str]:
    """Split a file into its trees. Blank lines separate trees.

    Fragments that are empty or hold only `//` comments are dropped. Empty
    input yields a single empty tree so the parser can report it.
    """
    return [tree for tree, _ in locate_trees(text)]


def translate_tree(tree: str, cfg: Optional[Config] = None) -> hir.Root:
    """Compile a single tree. Raises a FrontendError or SemanticErrors."""
    tokens = tokenize(tree)
    ast = parse(tree, tokens)
    analyze(tree, ast)
    modifiers = discover(ast)
    return translate_ast(ast, modifiers, cfg)


def _rebase(root: hir.Root, base: Position) -> hir.Root:
    # Function spans point into the whole file, not the tree.
    contract = root.find_contract()
    if contract is not None:
        for fn in contract.functions():
            fn.span = fn.span.shifted(base)
    return root


def translate(text: str, cfg: Optional[Config] = None) -> hir.Root:
    """Compile every tree in `text` and combine them into one HIR."""
    cfg = cfg or Config()
    hirs = [_rebase(translate_tree(tree, cfg), base) for tree, base in locate_trees(text)]
    logger.debug("translated %d tree(s)", len(hirs))
    return combine(text, hirs)
