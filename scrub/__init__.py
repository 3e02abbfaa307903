"""Concurrent string scrubbing (clear or replace) across binary and text files."""

from .classify import FileKind, classify_file, classify_sample
from .engine import load_file_list, run_scrub, scrub_file
from .errors import LoopGuardError, OpenError, PathExpansionPartialFailure, ScrubError, WriteError
from .ledger import ResultKind, ScrubResult, TallyLedger
from .options import ScrubOptions, parse_clear_byte
from .targets import TargetSet, build_target_set, expand_path_forms

__all__ = [
    "FileKind",
    "classify_file",
    "classify_sample",
    "load_file_list",
    "run_scrub",
    "scrub_file",
    "LoopGuardError",
    "OpenError",
    "PathExpansionPartialFailure",
    "ScrubError",
    "WriteError",
    "ResultKind",
    "ScrubResult",
    "TallyLedger",
    "ScrubOptions",
    "parse_clear_byte",
    "TargetSet",
    "build_target_set",
    "expand_path_forms",
]
