from __future__ import annotations

import pytest

from scrub.binary import clear_bytes, scrub_binary_file
from scrub.errors import OpenError
from scrub.ledger import ResultKind


def test_clear_replaces_with_nul_run(write_file) -> None:
    path = write_file("FOO.bin", b"FOO.TXT\0")

    result = scrub_binary_file(path, [b"OO."])

    assert path.read_bytes() == b"F\0\0\0TXT\0"
    assert result.kind is ResultKind.CLEARED
    assert result.count == 1
    assert result.signed_count == -1


def test_length_is_preserved_and_count_is_exact() -> None:
    buffer = b"xxabcxxabcabc--ab"
    updated, matches = clear_bytes(buffer, [b"abc"])

    assert len(updated) == len(buffer)
    assert matches == 3
    assert updated == b"xx\0\0\0xx\0\0\0\0\0\0--ab"


def test_custom_clear_byte() -> None:
    updated, matches = clear_bytes(b"-key-", [b"key"], ord(" "))
    assert updated == b"-   -"
    assert matches == 1


def test_overlapping_candidates_resume_after_match() -> None:
    updated, matches = clear_bytes(b"aaaa", [b"aa"])
    assert matches == 2
    assert updated == b"\0\0\0\0"

    updated, matches = clear_bytes(b"aaa", [b"aa"])
    assert matches == 1
    assert updated == b"\0\0a"


def test_clearing_is_idempotent(write_file) -> None:
    path = write_file("twice.bin", b"\x01\x02/build/dir\x00/build/dir/x")

    first = scrub_binary_file(path, [b"/build/dir"])
    after_first = path.read_bytes()
    second = scrub_binary_file(path, [b"/build/dir"])

    assert first.count == 2
    assert second.count == 0
    assert path.read_bytes() == after_first


def test_unmatched_file_is_not_rewritten(write_file) -> None:
    path = write_file("nomatch.bin", b"\0\1\2\3")
    before = path.stat().st_mtime_ns

    result = scrub_binary_file(path, [b"zzz"])

    assert result.count == 0
    assert not result.changed
    assert path.stat().st_mtime_ns == before


def test_out_of_range_clear_byte_is_rejected() -> None:
    with pytest.raises(ValueError):
        clear_bytes(b"abc", [b"a"], 256)


def test_missing_file_raises_open_error(tmp_path) -> None:
    with pytest.raises(OpenError):
        scrub_binary_file(tmp_path / "gone.bin", [b"x"])
