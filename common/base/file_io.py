"""Utility helpers for performing file I/O with consistent defaults."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional

import yaml


DEFAULT_ENCODING = "utf-8"
# Undecodable bytes survive a read/write round trip unchanged.
LOSSLESS_ERRORS = "surrogateescape"


def _to_path(path: Path | str) -> Path:
    return Path(path).expanduser()


def read_text_lossless(path: Path | str) -> str:
    with open(_to_path(path), "r", encoding=DEFAULT_ENCODING, errors=LOSSLESS_ERRORS, newline="") as handle:
        return handle.read()


def write_text_lossless(path: Path | str, content: str) -> None:
    with open(_to_path(path), "w", encoding=DEFAULT_ENCODING, errors=LOSSLESS_ERRORS, newline="") as handle:
        handle.write(content)


def encode_lossless(value: str) -> bytes:
    return value.encode(DEFAULT_ENCODING, LOSSLESS_ERRORS)


def read_bytes(path: Path | str) -> bytes:
    return _to_path(path).read_bytes()


def read_prefix(path: Path | str, size: int) -> bytes:
    with open(_to_path(path), "rb") as handle:
        return handle.read(size)


def write_bytes(path: Path | str, payload: bytes) -> None:
    _to_path(path).write_bytes(payload)


@contextmanager
def open_file(
    path: Path | str,
    mode: str = "r",
    *,
    encoding: str = DEFAULT_ENCODING,
    newline: Optional[str] = None,
) -> Iterator[Any]:
    path_obj = _to_path(path)
    kwargs: dict[str, Any] = {}
    if "b" in mode:
        if newline is not None:
            raise ValueError("newline is not supported in binary mode")
    else:
        kwargs["encoding"] = encoding
        kwargs["newline"] = newline
    with open(path_obj, mode, **kwargs) as handle:
        yield handle


def read_lines(path: Path | str) -> list[str]:
    """Read a newline-delimited file, dropping line terminators."""
    with open(_to_path(path), "r", encoding=DEFAULT_ENCODING, errors=LOSSLESS_ERRORS) as handle:
        return [line.rstrip("\n") for line in handle]


def read_yaml(path: Path | str) -> Mapping[str, Any] | list[Any]:
    with open_file(path, "r") as handle:
        data = yaml.safe_load(handle)
    return data if data is not None else {}
