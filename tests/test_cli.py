# tests/test_cli.py
import json

from conftest import SOL
from treespec.cli import main


def test_scaffold_prints_to_stdout(write_pair, capsys):
    tree = write_pair(sol=None)
    assert main(["scaffold", str(tree)]) == 0
    assert capsys.readouterr().out == SOL


def test_scaffold_writes_files(write_pair, capsys):
    tree = write_pair(sol=None)
    assert main(["scaffold", "-w", str(tree)]) == 0
    sol = tree.with_name("Foo.t.sol")
    assert sol.read_text(encoding="utf-8") == SOL
    assert f"wrote {sol}" in capsys.readouterr().out


def test_scaffold_does_not_overwrite_without_force(write_pair, capsys):
    tree = write_pair(sol="// mine\n")
    assert main(["scaffold", "-w", str(tree)]) == 0
    assert tree.with_name("Foo.t.sol").read_text(encoding="utf-8") == "// mine\n"
    assert "already exists" in capsys.readouterr().err
    assert main(["scaffold", "-w", "-f", str(tree)]) == 0
    assert tree.with_name("Foo.t.sol").read_text(encoding="utf-8") == SOL


def test_scaffold_options(write_pair, capsys):
    tree = write_pair(tree="Foo\n└── when a\n   └── when b\n      └── it x\n", sol=None)
    assert main(["scaffold", "-m", "-S", "-s", "0.8.20", "--format-descriptions", str(tree)]) == 0
    out = capsys.readouterr().out
    assert "pragma solidity 0.8.20;" in out
    assert "modifier" not in out
    assert "vm.skip(true);" in out
    assert "// It x." in out


def test_scaffold_emit_hir(write_pair, capsys):
    tree = write_pair(sol=None)
    assert main(["scaffold", "--emit-hir", str(tree)]) == 0
    doc = json.loads(capsys.readouterr().out)
    assert doc["type"] == "Root"
    assert [f["identifier"] for f in doc["children"][0]["children"]] == ["test_WhenA", "test_WhenB"]


def test_scaffold_reports_compile_errors_and_continues(write_pair, tmp_path, capsys):
    bad = write_pair(tree="Foo\n├── when a\n   └── it x\n", sol=None, name="Bad")
    good = write_pair(sol=None)
    assert main(["scaffold", str(bad), str(good)]) == 1
    captured = capsys.readouterr()
    assert "treespec error: a `Tee` must not be the last child" in captured.err
    assert "contract Foo {" in captured.out


def test_scaffold_uses_config_file(write_pair, tmp_path, capsys):
    tree = write_pair(sol=None)
    cfg = tmp_path / "treespec.json"
    cfg.write_text(json.dumps({"indent": 4, "solidity_version": "0.8.19"}), encoding="utf-8")
    assert main(["scaffold", "-c", str(cfg), str(tree)]) == 0
    out = capsys.readouterr().out
    assert "pragma solidity 0.8.19;" in out
    assert "\n    function test_WhenA() external {\n" in out


def test_invalid_config_file(write_pair, tmp_path, capsys):
    tree = write_pair(sol=None)
    cfg = tmp_path / "treespec.json"
    cfg.write_text('{"indent": -1}', encoding="utf-8")
    assert main(["scaffold", "-c", str(cfg), str(tree)]) == 2
    assert "invalid config" in capsys.readouterr().err


def test_missing_config_file(write_pair, tmp_path, capsys):
    tree = write_pair(sol=None)
    assert main(["scaffold", "-c", str(tmp_path / "nope.json"), str(tree)]) == 2
    assert "cannot read" in capsys.readouterr().err


def test_scaffold_continues_after_undecodable_tree(write_pair, tmp_path, capsys):
    bad = tmp_path / "Bad.tree"
    bad.write_bytes(b"Foo\n\xff\xfe")
    good = write_pair(sol=None)
    assert main(["scaffold", str(bad), str(good)]) == 1
    captured = capsys.readouterr()
    assert f"error: cannot read {bad}" in captured.err
    assert "contract Foo {" in captured.out


def test_check_passes(write_pair, capsys):
    assert main(["check", str(write_pair())]) == 0
    assert "No issues found" in capsys.readouterr().out


def test_check_reports_violations(write_pair, capsys):
    tree = write_pair(sol=SOL.replace("contract Foo", "contract Bar"))
    assert main(["check", str(tree)]) == 1
    out = capsys.readouterr().out
    assert 'warn: contract "Foo" is missing in .sol -- found "Bar" instead' in out
    assert "warn: 1 check failed (run `treespec check --fix <.tree files>` to apply 1 fix)" in out


def test_check_fix_writes_the_file(write_pair, capsys):
    tree = write_pair(sol=SOL.replace("contract Foo", "contract Bar"))
    assert main(["check", "--fix", str(tree)]) == 0
    assert tree.with_name("Foo.t.sol").read_text(encoding="utf-8") == SOL


def test_check_fix_stdout_leaves_the_file(write_pair, capsys):
    broken = SOL.replace("contract Foo", "contract Bar")
    tree = write_pair(sol=broken)
    assert main(["check", "--fix", "--stdout", str(tree)]) == 0
    assert capsys.readouterr().out.startswith(SOL)
    assert tree.with_name("Foo.t.sol").read_text(encoding="utf-8") == broken


def test_check_continues_after_missing_files(write_pair, capsys):
    missing = write_pair(sol=None, name="Missing")
    ok = write_pair()
    assert main(["check", str(missing), str(ok)]) == 1
    out = capsys.readouterr().out
    assert "the tree is missing its matching Solidity file" in out
    assert "warn: 1 check failed" in out
