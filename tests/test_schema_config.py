# tests/test_schema_config.py
import json

import pytest

from treespec.compiler import translate
from treespec.config import Config, ConfigError, load_config
from treespec.hir import hir_to_dict
from treespec.schema import validate_config_doc, validate_hir_doc


TREE = "Foo\n└── when a\n   ├── it x\n   └── when b\n      └── it y"


def test_hir_document_validates():
    doc = hir_to_dict(translate(TREE, Config(emit_vm_skip=True)))
    assert validate_hir_doc(doc) == []
    contract = doc["children"][0]
    assert contract["identifier"] == "Foo"
    assert [c["ty"] for c in contract["children"]] == ["modifier", "function", "function"]
    assert contract["children"][0]["children"] is None
    assert contract["children"][1]["children"][-1] == {"type": "Statement", "ty": "vm_skip"}


def test_hir_document_round_trips_through_json():
    doc = hir_to_dict(translate(TREE))
    assert validate_hir_doc(json.loads(json.dumps(doc))) == []


def test_invalid_hir_document_is_reported():
    doc = hir_to_dict(translate(TREE))
    doc["children"][0]["children"][0]["ty"] = "event"
    problems = validate_hir_doc(doc)
    assert problems
    assert problems[0].startswith("children/0/children/0")


def test_config_schema():
    assert validate_config_doc({"skip_modifiers": True, "indent": 4, "solidity_version": "^0.8.13"}) == []
    assert validate_config_doc({"indent": 0})
    assert validate_config_doc({"unknown": 1})


def test_load_config(tmp_path):
    path = tmp_path / "treespec.json"
    path.write_text(json.dumps({"emit_vm_skip": True, "indent": 4}), encoding="utf-8")
    cfg = load_config(path)
    assert cfg == Config(emit_vm_skip=True, indent=4)


def test_load_config_rejects_invalid_files(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text('{"indent": "two"}', encoding="utf-8")
    with pytest.raises(ConfigError) as ex:
        load_config(bad)
    assert "indent" in str(ex.value)

    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(broken)


def test_load_config_reports_unreadable_files(tmp_path):
    with pytest.raises(ConfigError) as ex:
        load_config(tmp_path / "missing.json")
    assert "cannot read" in str(ex.value)

    binary = tmp_path / "binary.json"
    binary.write_bytes(b"\xff\xfe{")
    with pytest.raises(ConfigError):
        load_config(binary)


def test_config_replace_ignores_unset_values():
    cfg = Config(skip_modifiers=True).replace(skip_modifiers=None, indent=4)
    assert cfg == Config(skip_modifiers=True, indent=4)


def test_check_config_drops_cosmetic_options():
    cfg = Config(skip_modifiers=True, emit_vm_skip=True, format_descriptions=True, indent=4)
    assert cfg.for_check() == Config(skip_modifiers=True)
