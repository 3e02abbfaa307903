"""
scrub.binary

Length-preserving clearing of byte strings inside binary files. Offsets
recorded elsewhere in the binary stay valid because every match is overwritten
with exactly as many clear bytes as it had.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, Tuple

from common.base.file_io import read_bytes, write_bytes
from common.base.logging import get_logger

from .errors import OpenError, WriteError
from .ledger import ScrubResult

log = get_logger(__name__)

DEFAULT_CLEAR_BYTE = 0x00


def clear_bytes(buffer: bytes, targets: Sequence[bytes], clear_byte: int = DEFAULT_CLEAR_BYTE) -> Tuple[bytes, int]:
    """
    Overwrite every occurrence of each target with ``clear_byte``.

    Targets are applied in order. Within one target the scan is left to right
    and non-overlapping, resuming after each cleared run, which is exactly
    what ``bytes.replace`` does for a same-length replacement.

    Returns:
        (new_buffer, number_of_matches)
    """
    if not 0 <= clear_byte <= 0xFF:
        raise ValueError(f"clear byte out of range: {clear_byte}")

    fill = bytes([clear_byte])
    matches = 0
    for target in targets:
        if not target:
            continue
        found = buffer.count(target)
        if found:
            buffer = buffer.replace(target, fill * len(target))
            matches += found
    return buffer, matches


def scrub_binary_file(
    path: Path | str,
    targets: Sequence[bytes],
    clear_byte: int = DEFAULT_CLEAR_BYTE,
) -> ScrubResult:
    """Clear targets in a binary file; the file is only rewritten when something matched."""
    try:
        original = read_bytes(path)
    except OSError as exc:
        raise OpenError(str(path), f"unable to open: {exc.strerror or exc}") from exc

    updated, matches = clear_bytes(original, targets, clear_byte)
    if not matches:
        return ScrubResult.cleared(0)

    try:
        write_bytes(path, updated)
    except OSError as exc:
        raise WriteError(str(path), f"unable to write updated contents: {exc.strerror or exc}") from exc

    log.debug(f"Cleared {matches} instance(s) in binary {path}")
    return ScrubResult.cleared(matches)
