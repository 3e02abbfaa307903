"""Run options for a scrub invocation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .binary import DEFAULT_CLEAR_BYTE


@dataclass(frozen=True)
class ScrubOptions:
    replacement: str = ""
    clear_byte: int = DEFAULT_CLEAR_BYTE
    binary_only: bool = False
    text_only: bool = False
    workers: Optional[int] = None

    def __post_init__(self) -> None:
        if self.binary_only and self.text_only:
            raise ValueError("can specify binary-only or text-only, not both")
        if not 0 <= self.clear_byte <= 0xFF:
            raise ValueError(f"clear byte out of range: {self.clear_byte}")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"worker count must be at least 1, got {self.workers}")


def parse_clear_byte(value: str) -> int:
    """
    Parse a clear character: a single character with code < 256, ``\\0``, or
    a hex literal such as ``0x20``.
    """
    if value in ("\\0", "\0"):
        return 0
    if value.lower().startswith("0x") and len(value) > 2:
        try:
            parsed = int(value, 16)
        except ValueError as exc:
            raise ValueError(f"invalid clear character: {value!r}") from exc
    elif len(value) == 1:
        parsed = ord(value)
    else:
        raise ValueError(f"clear character must be a single character, got {value!r}")
    if parsed > 0xFF:
        raise ValueError(f"clear character must fit in one byte, got {value!r}")
    return parsed


def format_clear_byte(value: int) -> str:
    if value == 0:
        return "\\0"
    char = chr(value)
    return char if char.isprintable() else f"0x{value:02x}"
