from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from tqdm.auto import tqdm

from auditor.services.compliance_service import summarize
from normalizer.model import Dialect
from wcagpiper.core import api
from wcagpiper.core.managers.config_manager import config_manager
from wcagpiper.core.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)

LEVELS = ["A", "AA", "AAA"]
FORMATS = [d.value for d in Dialect]


def infer_format(path: Path) -> str:
    """Dialect from the file name: .jsx/.tsx -> react, .vue -> vue, .component.html -> angular."""
    name = path.name.lower()
    if name.endswith((".jsx", ".tsx")):
        return Dialect.REACT.value
    if name.endswith(".vue"):
        return Dialect.VUE.value
    if name.endswith(".component.html"):
        return Dialect.ANGULAR.value
    return Dialect.HTML.value


def _read(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Could not read %s: %s", path, e)
        print(f"❌ Could not read {path}: {e}", file=sys.stderr)
        return None


def _setting(text: str) -> Tuple[str, str]:
    """argparse type for `--set`: 'key.path=value' -> (key path, value)."""
    key, sep, value = text.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got '{text}'")
    return key.strip(), value.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wcagpiper", description="Find and fix WCAG accessibility issues.")
    parser.add_argument("--log-level", type=str, default=None, help="Override the configured log level.")
    parser.add_argument(
        "--set", dest="overrides", action="append", default=[], type=_setting, metavar="KEY=VALUE",
        help="Override a setting for this run, e.g. remediator.indent=4. Repeatable."
    )
    subparsers = parser.add_subparsers(dest="subcommand", help="Subcommands")

    def add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--format", choices=FORMATS, default=None, help="Source dialect (default: from extension).")
        sub.add_argument("--level", choices=LEVELS, default="AA", help="WCAG conformance level.")

    # 1. Subcommand: ANALYZE
    analyze_parser = subparsers.add_parser("analyze", help="Report violations as JSON")
    analyze_parser.add_argument("files", nargs="+", type=Path)
    add_common(analyze_parser)

    # 2. Subcommand: FIX
    fix_parser = subparsers.add_parser("fix", help="Fix violations and print the result")
    fix_parser.add_argument("file", type=Path)
    fix_parser.add_argument("--no-autofix", action="store_true", help="Only re-encode and format.")
    fix_parser.add_argument("--write", action="store_true", help="Write the result back to the file.")
    add_common(fix_parser)

    # 3. Subcommand: VALIDATE
    validate_parser = subparsers.add_parser("validate", help="Print a compliance summary per file")
    validate_parser.add_argument("files", nargs="+", type=Path)
    add_common(validate_parser)

    # 4. Subcommand: CONFIG
    subparsers.add_parser("config", help="Print the effective configuration as JSON")

    return parser


def _iter_sources(files: List[Path], fmt: Optional[str]):
    """Yields (path, code, format) per readable file; unreadable ones yield code None."""
    for path in tqdm(files, desc="Analyzing", unit="file", disable=len(files) < 2):
        yield path, _read(path), fmt or infer_format(path)


def _handle_analyze(args: argparse.Namespace) -> int:
    status = 0
    reports = {}
    for path, code, fmt in _iter_sources(args.files, args.format):
        if code is None:
            status = 1
            continue
        reports[str(path)] = api.analyze(code, level=args.level, format=fmt).to_dict()

    print(json.dumps(reports if len(args.files) > 1 else next(iter(reports.values()), {}), indent=2))
    return status


def _handle_fix(args: argparse.Namespace) -> int:
    code = _read(args.file)
    if code is None:
        return 1

    fmt = args.format or infer_format(args.file)
    result = api.analyze(code, level=args.level, format=fmt)
    fixed = api.fix(code, result.violations, level=args.level, format=fmt, auto_fix=not args.no_autofix)

    if args.write:
        args.file.write_text(fixed, encoding="utf-8")
        if args.no_autofix:
            print(f"✅ Reformatted {args.file} (no fixes applied)", file=sys.stderr)
        else:
            print(f"✅ Fixed {len(result.violations)} violation record(s) in {args.file}", file=sys.stderr)
    else:
        print(fixed)
    return 0


def _handle_validate(args: argparse.Namespace) -> int:
    status = 0
    summaries = {}
    for path, code, fmt in _iter_sources(args.files, args.format):
        if code is None:
            status = 1
            continue
        summary = summarize(api.analyze(code, level=args.level, format=fmt), args.level)
        summaries[str(path)] = summary.model_dump(mode="json")
        if not summary.compliant and status == 0:
            status = 2

    print(json.dumps(summaries, indent=2))
    return status


def _apply_overrides(overrides: List[Tuple[str, str]]) -> bool:
    for key_path, value in overrides:
        if not config_manager.set_nested(key_path, value):
            print(f"❌ Invalid setting: {key_path}={value}", file=sys.stderr)
            return False
    return True


def _handle_config(_args: argparse.Namespace) -> int:
    print(json.dumps(config_manager.get_all(), indent=2))
    return 0


def _setup_logging(override: Optional[str]) -> None:
    if override:
        config_manager.set_nested("debug.level", override)
    level = config_manager.get_nested("debug.level", "WARNING")
    silenced = config_manager.get_nested("debug.silenced_loggers", {}) or {}
    configure_logger(level, silenced_loggers=silenced)


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for the `wcagpiper` command."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    if not _apply_overrides(args.overrides):
        return 2
    _setup_logging(args.log_level)

    if args.subcommand == "analyze":
        return _handle_analyze(args)
    elif args.subcommand == "fix":
        return _handle_fix(args)
    elif args.subcommand == "validate":
        return _handle_validate(args)
    elif args.subcommand == "config":
        return _handle_config(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
