# treespec/cli.py
# `treespec scaffold` and `treespec check`.

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .checker import StructuralMatcher, fix_all
from .compiler import translate
from .config import Config, ConfigError, load_config
from .context import Context, ViolationError, sol_path_for
from .emitter import emit
from .errors import FrontendError, SemanticErrors
from .hir import hir_to_dict
from .schema import validate_hir_doc
from .sol import SolidityParseError
from .utils import pluralize

logger = logging.getLogger("treespec")


def _load_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _base_config(args: argparse.Namespace) -> Config:
    cfg = load_config(args.config) if args.config else Config()
    return cfg.replace(skip_modifiers=args.skip_modifiers)


def cmd_scaffold(args: argparse.Namespace) -> int:
    cfg = _base_config(args).replace(
        emit_vm_skip=args.vm_skip,
        solidity_version=args.solidity_version,
        format_descriptions=args.format_descriptions,
    )
    failed = 0
    for name in args.files:
        path = Path(name)
        try:
            text = _load_text(path)
            hir_root = translate(text, cfg)
        except (OSError, UnicodeDecodeError) as e:
            print(f"error: cannot read {path}: {e}", file=sys.stderr)
            failed += 1
            continue
        except (FrontendError, SemanticErrors) as e:
            print(f"{e}\nerror: failed to compile {path}", file=sys.stderr)
            failed += 1
            continue

        if args.emit_hir:
            doc = hir_to_dict(hir_root)
            problems = validate_hir_doc(doc)
            if problems:
                for p in problems:
                    print(f"error: {path}: {p}", file=sys.stderr)
                failed += 1
                continue
            print(json.dumps(doc, indent=2, ensure_ascii=False))
            continue

        code = emit(hir_root, cfg) + "\n"
        if not args.write_files:
            print(code, end="")
            continue

        target = sol_path_for(path)
        if target.exists() and not args.force_write:
            print(f"warn: skipping {target}, file already exists (use -f to overwrite)", file=sys.stderr)
            continue
        target.write_text(code, encoding="utf-8")
        logger.debug("wrote %s", target)
        print(f"wrote {target}")
    return 1 if failed else 0


def cmd_check(args: argparse.Namespace) -> int:
    cfg = _base_config(args)
    remaining = 0
    fixable = 0
    for name in args.files:
        try:
            ctx = Context.new(name, cfg)
        except ViolationError as e:
            print(e.violation)
            remaining += 1
            continue

        violations = StructuralMatcher().check(ctx)
        if args.fix and violations:
            try:
                ctx = fix_all(violations, ctx)
            except SolidityParseError as e:
                print(f"error: fixing {ctx.sol} produced invalid Solidity: {e}", file=sys.stderr)
                remaining += len(violations)
                continue
            if args.stdout:
                print(ctx.src, end="")
            else:
                ctx.sol.write_text(ctx.src, encoding="utf-8")
                print(f"fixed {ctx.sol}")
            violations = StructuralMatcher().check(ctx)

        for v in violations:
            print(v)
        remaining += len(violations)
        fixable += sum(1 for v in violations if v.is_fixable)

    if remaining:
        msg = f"warn: {remaining} {pluralize(remaining, 'check', 'checks')} failed"
        if fixable and not args.fix:
            msg += f" (run `treespec check --fix <.tree files>` to apply {fixable} {pluralize(fixable, 'fix', 'fixes')})"
        print(msg)
        return 1
    print("All checks completed successfully! No issues found.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="treespec",
        description="Generate and check Solidity test skeletons from branching tree specs.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("files", nargs="+", help="The .tree files to process.")
    common.add_argument("-c", "--config", default=None, help="JSON config file.")
    common.add_argument("-m", "--skip-modifiers", action="store_true", default=None,
                        help="Don't emit (or require) modifiers.")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")

    s = sub.add_parser("scaffold", parents=[common], help="Generate .t.sol files from .tree files.")
    s.add_argument("-w", "--write-files", action="store_true", help="Write <name>.t.sol next to each tree.")
    s.add_argument("-f", "--force-write", action="store_true", help="Overwrite existing files.")
    s.add_argument("-s", "--solidity-version", default=None, help="Version for the pragma directive.")
    s.add_argument("-S", "--vm-skip", action="store_true", default=None,
                   help="Add `vm.skip(true);` to every test.")
    s.add_argument("--format-descriptions", action="store_true", default=None,
                   help="Capitalize comments and end them with a period.")
    s.add_argument("--emit-hir", action="store_true", help="Print the HIR as JSON instead of Solidity.")
    s.set_defaults(func=cmd_scaffold)

    c = sub.add_parser("check", parents=[common], help="Check .t.sol files against their trees.")
    c.add_argument("--fix", action="store_true", help="Fix violations in place.")
    c.add_argument("--stdout", action="store_true", help="With --fix, print the result instead of writing.")
    c.set_defaults(func=cmd_check)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    try:
        return args.func(args)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
