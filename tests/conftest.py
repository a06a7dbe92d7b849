# tests/conftest.py
# Shared fixtures: tree/Solidity file pairs written to a temp dir.

from textwrap import dedent

import pytest


TREE = dedent("""\
    Foo
    ├── when a
    │  └── it x
    └── when b
       └── it y
    """)

SOL = dedent("""\
    // SPDX-License-Identifier: UNLICENSED
    pragma solidity 0.8.0;

    contract Foo {
      function test_WhenA() external {
        // it x
      }

      function test_WhenB() external {
        // it y
      }
    }
    """)


@pytest.fixture
def write_pair(tmp_path):
    """Write `<name>.tree` (and `<name>.t.sol` unless sol is None); return the tree path."""

    def _write(tree: str = TREE, sol=SOL, name: str = "Foo"):
        tree_path = tmp_path / f"{name}.tree"
        tree_path.write_text(tree, encoding="utf-8")
        if sol is not None:
            (tmp_path / f"{name}.t.sol").write_text(sol, encoding="utf-8")
        return tree_path

    return _write
