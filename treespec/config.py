# treespec/config.py
# Options shared by the compiler, the scaffold emitter and the checker.

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

from .schema import validate_config_doc

logger = logging.getLogger(__name__)

DEFAULT_SOLIDITY_VERSION = "0.8.0"
DEFAULT_INDENT = 2


class ConfigError(Exception):
    def __init__(self, path: Union[str, Path], problems):
        self.path = str(path)
        self.problems = list(problems)
        super().__init__(f"invalid config {self.path}: " + "; ".join(self.problems))


@dataclass
class Config:
    skip_modifiers: bool = False
    emit_vm_skip: bool = False
    solidity_version: str = DEFAULT_SOLIDITY_VERSION
    format_descriptions: bool = False
    indent: int = DEFAULT_INDENT

    def replace(self, **changes: Any) -> "Config":
        """Copy with the given fields changed; `None` values are ignored."""
        return dataclasses.replace(self, **{k: v for k, v in changes.items() if v is not None})

    def for_check(self) -> "Config":
        """Expected HIR for checks ignores cosmetic generation options."""
        return Config(skip_modifiers=self.skip_modifiers)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


def load_config(path: Union[str, Path]) -> Config:
    """Read a JSON config file, validate it and return a Config."""
    p = Path(path)
    try:
        doc = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(p, [f"cannot read: {e}"]) from e
    except json.JSONDecodeError as e:
        raise ConfigError(p, [f"not valid JSON: {e}"]) from e
    problems = validate_config_doc(doc)
    if problems:
        raise ConfigError(p, problems)
    logger.debug("loaded config from %s: %s", p, doc)
    return Config(**doc)
