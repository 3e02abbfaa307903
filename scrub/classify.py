"""
scrub.classify

Binary/text heuristic over a file prefix. The verdict is statistical: a NUL
byte means binary, otherwise more than 10% bytes outside the text alphabet
does.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from common.base.file_io import read_prefix

from .errors import OpenError

SAMPLE_SIZE = 4096
NONTEXT_THRESHOLD = 0.1

# Printable ASCII, \t \n \f \r, and UTF-8 lead bytes 0xC2-0xF4.
TEXT_BYTES = frozenset(range(32, 127)) | frozenset(b"\t\n\f\r") | frozenset(range(0xC2, 0xF5))


class FileKind(str, Enum):
    BINARY = "binary"
    TEXT = "text"


def classify_sample(sample: bytes, threshold: float = NONTEXT_THRESHOLD) -> FileKind:
    if not sample:
        return FileKind.TEXT
    if b"\0" in sample:
        return FileKind.BINARY

    nontext = sum(1 for byte in sample if byte not in TEXT_BYTES)
    if nontext / len(sample) > threshold:
        return FileKind.BINARY
    return FileKind.TEXT


def classify_file(path: Path | str, sample_size: int = SAMPLE_SIZE) -> FileKind:
    """Classify ``path`` from its first ``sample_size`` bytes."""
    try:
        sample = read_prefix(path, sample_size)
    except OSError as exc:
        raise OpenError(str(path), f"unable to open: {exc.strerror or exc}") from exc
    return classify_sample(sample)
