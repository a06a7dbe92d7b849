# treespec/context.py
# Everything one check/fix cycle works on: the tree, its expected HIR, and the
# Solidity file with its parsed structure. Fixers patch `src` and re-parse.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from . import hir
from .compiler import translate
from .config import Config
from .emitter import Emitter
from .errors import FrontendError, SemanticErrors
from .location import File
from .sol import SolidityParseError, SolSource, parse as parse_sol
from .violation import FileUnreadable, ParsingFailed, SolidityFileMissing, Violation

logger = logging.getLogger(__name__)

TREE_EXTENSION = ".tree"
SOL_EXTENSION = ".t.sol"


class ViolationError(Exception):
    """Raised while building a Context; carries the violation to report."""

    def __init__(self, violation):
        self.violation = violation
        super().__init__(str(violation))


def sol_path_for(tree: Path) -> Path:
    """`foo/Bar.tree` -> `foo/Bar.t.sol`"""
    name = tree.name
    stem = name[: -len(TREE_EXTENSION)] if name.endswith(TREE_EXTENSION) else tree.stem
    return tree.with_name(stem + SOL_EXTENSION)


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("cannot read %s: %s", path, e)
        raise ViolationError(Violation(FileUnreadable(), File(str(path)))) from e


class Context:
    def __init__(
        self,
        tree: Path,
        hir_root: hir.Root,
        sol: Path,
        src: str,
        parsed: SolSource,
        cfg: Config,
    ):
        self.tree = tree
        self.hir = hir_root
        self.sol = sol
        self.src = src
        self.parsed = parsed
        self.cfg = cfg

    @classmethod
    def new(cls, tree: Union[str, Path], cfg: Optional[Config] = None) -> "Context":
        """Build a context for `tree`, raising ViolationError if that is impossible."""
        cfg = cfg or Config()
        tree = Path(tree)
        text = _read(tree)
        try:
            expected = translate(text, cfg.for_check())
        except (FrontendError, SemanticErrors) as e:
            raise ViolationError(Violation(ParsingFailed(e), File(str(tree)))) from e

        sol = sol_path_for(tree)
        if not sol.exists():
            raise ViolationError(Violation(SolidityFileMissing(str(tree)), File(str(tree))))
        src = _read(sol)
        try:
            parsed = parse_sol(src)
        except SolidityParseError as e:
            raise ViolationError(Violation(ParsingFailed(e), File(str(sol)))) from e
        return cls(tree, expected, sol, src, parsed, cfg)

    def update_src(self, src: str) -> "Context":
        """Replace the Solidity text and re-parse it."""
        self.parsed = parse_sol(src)
        self.src = src
        return self

    def emitter(self) -> Emitter:
        return Emitter(self.cfg)

    def insert_function_at(
        self, fn: hir.FunctionDefinition, offset: int, at_body_start: bool = False
    ) -> "Context":
        rendered = self.emitter().emit_function(fn)
        if at_body_start:
            patch = "\n" + rendered + "\n"
        else:
            patch = "\n\n" + rendered
        return self.update_src(self.src[:offset] + patch + self.src[offset:])
