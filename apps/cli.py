"""Command-line entry points for the build-support tools.

Each helper is installed as a ``console_scripts`` entry, reads its defaults
from the task section of the YAML config and lets command-line flags
override them.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from common.base.logging import get_logger, normalize_use_rich, setup_logging
from common.shared.loader import load_task_config
from common.shared.report import summarize_counts
from mirror import DirSyncOptions, sync_dirs
from scrub import (
    FileKind,
    ScrubError,
    ScrubOptions,
    build_target_set,
    classify_file,
    load_file_list,
    parse_clear_byte,
    run_scrub,
)
from scrub.report import export_ledger, summary_lines

log = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "configs" / "config.yaml"


def _configure_logging(logging_cfg: Dict[str, Any], level_override: Optional[str] = None) -> None:
    setup_logging(
        level=level_override or logging_cfg.get("level"),
        use_rich=normalize_use_rich(logging_cfg.get("use_rich")),
        log_dir=logging_cfg.get("log_dir"),
        file_prefix=logging_cfg.get("file_prefix"),
    )


def _resolve_config_path(explicit: Optional[str]) -> Optional[Path]:
    if explicit:
        return Path(explicit).expanduser().resolve()
    if DEFAULT_CONFIG_PATH.exists():  # pragma: no branch - default install path
        return DEFAULT_CONFIG_PATH
    return None


def _load_task_payload(
    parser: argparse.ArgumentParser,
    task: str,
    config_arg: Optional[str],
    level_override: Optional[str] = None,
) -> Dict[str, Any]:
    config_path = _resolve_config_path(config_arg)
    try:
        raw = load_task_config(task, str(config_path) if config_path else None)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))
    payload: Dict[str, Any] = dict(raw)
    logging_cfg = payload.pop("__logging__", {}) or {}
    _configure_logging(logging_cfg, level_override)
    return payload


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", "-c", help="Path to configuration YAML (defaults to repo config).")
    parser.add_argument("--log-level", help="Override the configured log level (DEBUG, INFO, ...).")


# ----------------------------------------------------------------------
# strclear
# ----------------------------------------------------------------------

def _build_strclear_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="strclear",
        description=(
            "Clear (or replace) target strings in binary and text files. "
            "Usage: strclear FILE TARGET [REPLACEMENT] | strclear -f LIST TARGET [REPLACEMENT] "
            "| strclear -B FILE"
        ),
    )
    parser.add_argument("args", nargs="*", metavar="ARG", help="FILE TARGET [REPLACEMENT]")
    parser.add_argument(
        "-B",
        "--is-binary",
        action="store_true",
        help="Classify one file; exit 1 if it is binary, 0 if it is text.",
    )
    parser.add_argument("-t", "--text-only", action="store_true", help="Only process text files.")
    parser.add_argument("-b", "--binary-only", action="store_true", help="Only process binary files.")
    parser.add_argument("-f", "--files", metavar="LIST", help="Newline-delimited list of files to process.")
    parser.add_argument("--clear-char", help="Byte written over cleared targets: a character, \\0 or 0xNN.")
    parser.add_argument(
        "-p",
        "--paths",
        action="store_true",
        help="Treat the target as a path and also clear its absolute, canonical and normalized forms.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Print a per-file summary.")
    parser.add_argument("-j", "--workers", type=int, help="Worker pool size (defaults to CPU count).")
    parser.add_argument("--report-dir", help="Write a timestamped CSV report of every file into this directory.")
    parser.add_argument(
        "--progress",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show a progress bar while files are processed.",
    )
    _add_common_arguments(parser)
    return parser


def _strclear_is_binary(parser: argparse.ArgumentParser, positional: List[str], verbose: bool) -> int:
    if len(positional) != 1:
        parser.error("-B takes exactly one file")
    path = positional[0]
    try:
        kind = classify_file(path)
    except ScrubError as exc:
        log.error(f"❌ {exc}")
        return 2
    if verbose:
        print(f"{path}: {kind.value}")
    return 1 if kind is FileKind.BINARY else 0


def cli_strclear(argv: Optional[Iterable[str]] = None) -> int:
    parser = _build_strclear_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    cfg = _load_task_payload(parser, "str_clear", args.config, args.log_level)

    verbose = args.verbose or bool(cfg.get("verbose", False))
    positional: List[str] = list(args.args)

    if args.is_binary:
        return _strclear_is_binary(parser, positional, verbose)

    text_only = args.text_only or bool(cfg.get("text_only", False))
    binary_only = args.binary_only or bool(cfg.get("binary_only", False))
    if text_only and binary_only:
        parser.error("can specify --text-only or --binary-only, not both")

    if args.files:
        if not 1 <= len(positional) <= 2:
            parser.error("with -f expected: TARGET [REPLACEMENT]")
        try:
            files = load_file_list(args.files)
        except OSError as exc:
            parser.error(f"unable to read file list {args.files}: {exc}")
        target, replacement = positional[0], (positional[1] if len(positional) > 1 else "")
    else:
        if not 2 <= len(positional) <= 3:
            parser.error("expected: FILE TARGET [REPLACEMENT]")
        files = [positional[0]]
        target, replacement = positional[1], (positional[2] if len(positional) > 2 else "")

    if replacement and binary_only:
        log.warning("⚠️ Replacement strings are not supported in binary-only mode; clearing instead")
        replacement = ""

    try:
        clear_byte = parse_clear_byte(args.clear_char or str(cfg.get("clear_char", "\\0")))
        options = ScrubOptions(
            replacement=replacement,
            clear_byte=clear_byte,
            binary_only=binary_only,
            text_only=text_only,
            workers=args.workers if args.workers is not None else cfg.get("workers"),
        )
        path_mode = args.paths or bool(cfg.get("path_mode", False))
        targets = build_target_set([target], expand_paths=path_mode)
    except ValueError as exc:
        parser.error(str(exc))

    progress = args.progress if args.progress is not None else bool(cfg.get("progress", False))
    ledger = run_scrub(files, targets, options, show_progress=progress)

    log.debug(summarize_counts("Scrub Summary", ledger.counts()))
    if verbose:
        for line in summary_lines(ledger, target, targets, options, path_mode=path_mode):
            print(line)

    report_dir = args.report_dir or cfg.get("report_dir")
    if report_dir:
        try:
            export_ledger(ledger, Path(report_dir).expanduser())
        except OSError as exc:
            log.error(f"❌ Unable to write report into {report_dir}: {exc}")
            return 1

    for path, result in ledger.failures():
        log.error(f"❌ {path}: {result.error} {result.detail}")
    return 1 if ledger.any_failed else 0


# ----------------------------------------------------------------------
# dirsync
# ----------------------------------------------------------------------

def cli_dirsync(argv: Optional[Iterable[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="dirsync", description="Mirror SRC into DST.")
    parser.add_argument("src", help="Source directory.")
    parser.add_argument("dst", help="Destination directory (created if missing).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every addition, even on initial copy.")
    parser.add_argument("-l", "--listfile", help="Write canonical paths of added/changed entries here.")
    parser.add_argument(
        "-x",
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob of relative paths to leave alone (repeatable).",
    )
    parser.add_argument(
        "--nofix-symlinks",
        action="store_true",
        help="Keep absolute symlinks into SRC as-is instead of re-rooting them in DST.",
    )
    parser.add_argument("--skip-hidden", action="store_true", help="Ignore dot files and dot directories.")
    _add_common_arguments(parser)
    args = parser.parse_args(list(argv) if argv is not None else None)
    cfg = _load_task_payload(parser, "dir_sync", args.config, args.log_level)

    src = Path(args.src).expanduser()
    if not src.is_dir():
        log.error(f"❌ Source is not a directory: {src}")
        return 1

    listfile = args.listfile or cfg.get("listfile")
    options = DirSyncOptions(
        verbose=args.verbose or bool(cfg.get("verbose", False)),
        fix_symlinks=not args.nofix_symlinks and bool(cfg.get("fix_symlinks", True)),
        skip_hidden=args.skip_hidden or bool(cfg.get("skip_hidden", False)),
        listfile=Path(listfile).expanduser() if listfile else None,
        excludes=list(cfg.get("exclude", [])) + list(args.exclude),
    )

    try:
        result = sync_dirs(src, Path(args.dst).expanduser(), options)
    except OSError as exc:
        log.error(f"❌ Mirror failed: {exc}")
        return 1
    return 0 if result.ok else 1
