"""Filesystem helper utilities shared across common modules."""

from __future__ import annotations

from pathlib import Path


def ensure_dir(path: Path | str) -> Path:
    p = Path(path).expanduser()
    p.mkdir(parents=True, exist_ok=True)
    return p


def ensure_parent(path: Path | str) -> Path:
    return ensure_dir(Path(path).expanduser().parent)
