# treespec/schema.py
# JSON schemas for config files and HIR documents, validated with jsonschema.

from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from .hir import Hir, hir_to_dict

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "treespec config",
    "type": "object",
    "properties": {
        "skip_modifiers": {"type": "boolean"},
        "emit_vm_skip": {"type": "boolean"},
        "solidity_version": {"type": "string", "pattern": r"^[\^~>=<]*\d+\.\d+\.\d+$"},
        "format_descriptions": {"type": "boolean"},
        "indent": {"type": "integer", "minimum": 1, "maximum": 8},
    },
    "additionalProperties": False,
}

_POSITION = {
    "type": "object",
    "properties": {
        "offset": {"type": "integer", "minimum": 0},
        "line": {"type": "integer", "minimum": 1},
        "column": {"type": "integer", "minimum": 1},
    },
    "required": ["offset", "line", "column"],
    "additionalProperties": False,
}

HIR_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "treespec HIR",
    "$ref": "#/$defs/Root",
    "$defs": {
        "Position": _POSITION,
        "Span": {
            "type": "object",
            "properties": {"start": {"$ref": "#/$defs/Position"}, "end": {"$ref": "#/$defs/Position"}},
            "required": ["start", "end"],
            "additionalProperties": False,
        },
        "Root": {
            "type": "object",
            "properties": {
                "type": {"const": "Root"},
                "children": {
                    "type": "array",
                    "items": {"$ref": "#/$defs/ContractDefinition"},
                    "minItems": 1,
                    "maxItems": 1,
                },
            },
            "required": ["type", "children"],
            "additionalProperties": False,
        },
        "ContractDefinition": {
            "type": "object",
            "properties": {
                "type": {"const": "ContractDefinition"},
                "identifier": {"type": "string", "minLength": 1},
                "children": {"type": "array", "items": {"$ref": "#/$defs/FunctionDefinition"}},
            },
            "required": ["type", "identifier", "children"],
            "additionalProperties": False,
        },
        "FunctionDefinition": {
            "type": "object",
            "properties": {
                "type": {"const": "FunctionDefinition"},
                "identifier": {"type": "string", "minLength": 1},
                "ty": {"enum": ["function", "modifier"]},
                "span": {"$ref": "#/$defs/Span"},
                "modifiers": {
                    "oneOf": [{"type": "null"}, {"type": "array", "items": {"type": "string"}}]
                },
                "children": {
                    "oneOf": [
                        {"type": "null"},
                        {
                            "type": "array",
                            "items": {
                                "oneOf": [
                                    {"$ref": "#/$defs/Comment"},
                                    {"$ref": "#/$defs/Statement"},
                                ]
                            },
                        },
                    ]
                },
            },
            "required": ["type", "identifier", "ty", "span", "modifiers", "children"],
            "additionalProperties": False,
        },
        "Comment": {
            "type": "object",
            "properties": {"type": {"const": "Comment"}, "lexeme": {"type": "string"}},
            "required": ["type", "lexeme"],
            "additionalProperties": False,
        },
        "Statement": {
            "type": "object",
            "properties": {"type": {"const": "Statement"}, "ty": {"enum": ["vm_skip"]}},
            "required": ["type", "ty"],
            "additionalProperties": False,
        },
    },
}


def _error_messages(validator: Draft202012Validator, doc: Any) -> List[str]:
    errs = sorted(validator.iter_errors(doc), key=lambda e: list(e.path))
    return [f"{'/'.join(str(p) for p in e.path) or '<root>'}: {e.message}" for e in errs]


def validate_config_doc(doc: Any) -> List[str]:
    """Return a list of problems with a config document; empty means valid."""
    return _error_messages(Draft202012Validator(CONFIG_SCHEMA), doc)


def validate_hir_doc(doc: Any) -> List[str]:
    """Return a list of problems with a HIR document; empty means valid."""
    return _error_messages(Draft202012Validator(HIR_SCHEMA), doc)


__all__ = ["CONFIG_SCHEMA", "HIR_SCHEMA", "hir_to_dict", "validate_config_doc", "validate_hir_doc", "Hir"]
