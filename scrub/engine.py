"""
scrub.engine

Per-file scrub pipeline (classify, filter, clear or replace) and the
pool-backed run over a whole file set.
"""

from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import Iterable, List, Sequence

from common.base.file_io import read_lines
from common.base.logging import get_logger
from common.shared.utils import Progress

from .binary import scrub_binary_file
from .classify import FileKind, classify_file
from .dispatcher import WorkDispatcher
from .ledger import ScrubResult, TallyLedger
from .options import ScrubOptions
from .targets import TargetSet
from .text import scrub_text_file

log = get_logger(__name__)


def scrub_file(
    path: str,
    targets: TargetSet,
    options: ScrubOptions,
    encoded_targets: Sequence[bytes] | None = None,
) -> ScrubResult:
    """Classify one file and clear or replace its targets according to ``options``."""
    kind = classify_file(path)

    if kind is FileKind.BINARY:
        if options.text_only:
            return ScrubResult.skipped("binary file excluded by text-only mode")
        byte_targets = encoded_targets if encoded_targets is not None else targets.as_bytes()
        return scrub_binary_file(path, byte_targets, options.clear_byte)

    if options.binary_only:
        return ScrubResult.skipped("text file excluded by binary-only mode")
    return scrub_text_file(path, targets, options.replacement)


def run_scrub(
    files: Iterable[str | Path],
    targets: TargetSet,
    options: ScrubOptions | None = None,
    *,
    show_progress: bool = False,
) -> TallyLedger:
    """
    Scrub every file on a worker pool and return the sealed ledger.

    Args:
        files: Paths to process; duplicates are processed once.
        targets: Target set built once for the whole run.
        options: Replacement, clear byte, mode filter and pool size.
        show_progress: Display a tqdm progress bar while workers run.
    """
    options = options or ScrubOptions()
    file_list = list(dict.fromkeys(str(f) for f in files))
    handler = partial(scrub_file, targets=targets, options=options, encoded_targets=targets.as_bytes())

    log.debug(f"Scrubbing {len(file_list)} file(s) for {len(targets)} target(s)")
    with Progress(desc="Scrubbing", total=len(file_list), disable=not show_progress) as progress:
        ledger = WorkDispatcher(options.workers, progress=progress).run(file_list, handler)

    counts = ledger.counts()
    log.info(
        f"✅ Scrub complete: {counts['Cleared']} cleared, {counts['Replaced']} replaced, "
        f"{counts['Unchanged']} unchanged, {counts['Skipped']} skipped, {counts['Failed']} failed"
    )
    return ledger


def load_file_list(path: Path | str) -> List[str]:
    """Read a newline-delimited file list; blank lines are ignored and duplicates collapsed."""
    return list(dict.fromkeys(line for line in read_lines(path) if line.strip()))
