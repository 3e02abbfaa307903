"""
scrub.text

Substring replacement (or removal) over text files.

Targets are applied one after another over the evolving content, so a later
target also sees text produced by an earlier target's replacement. That
order dependence is intended. A replacement that itself contains a target is
refused outright.
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

from common.base.file_io import read_text_lossless, write_text_lossless
from common.base.logging import get_logger

from .errors import LoopGuardError, OpenError, WriteError
from .ledger import ScrubResult
from .targets import TargetSet

log = get_logger(__name__)


def replace_text(content: str, targets: TargetSet, replacement: str = "") -> Tuple[str, int]:
    """
    Replace every occurrence of each target, in TargetSet order.

    For one target the scan restarts at 0, splices the replacement at each
    match and resumes right after the inserted text, never rescanning it.
    ``str.replace`` performs precisely that non-overlapping left-to-right pass.

    Returns:
        (new_content, number_of_matches)
    """
    matches = 0
    for target in targets:
        found = content.count(target)
        if found:
            content = content.replace(target, replacement)
            matches += found
    return content, matches


def scrub_text_file(path: Path | str, targets: TargetSet, replacement: str = "") -> ScrubResult:
    """
    Clear (empty replacement) or replace targets in a text file.

    Raises:
        LoopGuardError: the replacement contains a target; the file is untouched.
        OpenError: the file could not be read.
        WriteError: the updated content could not be written.
    """
    if replacement:
        offending = targets.first_contained_in(replacement)
        if offending is not None:
            raise LoopGuardError(str(path), offending, replacement)

    try:
        content = read_text_lossless(path)
    except OSError as exc:
        raise OpenError(str(path), f"unable to open: {exc.strerror or exc}") from exc

    updated, matches = replace_text(content, targets, replacement)
    make_result = ScrubResult.replaced if replacement else ScrubResult.cleared
    if not matches:
        return make_result(0)

    try:
        write_text_lossless(path, updated)
    except OSError as exc:
        raise WriteError(str(path), f"unable to write updated contents: {exc.strerror or exc}") from exc

    log.debug(f"{'Replaced' if replacement else 'Cleared'} {matches} instance(s) in text {path}")
    return make_result(matches)
