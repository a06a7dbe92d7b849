# treespec/__init__.py
# Branching-tree spec compiler and Solidity test checker.

from __future__ import annotations

from .compiler import translate
from .checker import check, fix

__all__ = ["translate", "check", "fix"]
__version__ = "0.3.0"
