from __future__ import annotations

import pytest

from scrub.errors import LoopGuardError
from scrub.ledger import ResultKind
from scrub.targets import TargetSet
from scrub.text import replace_text, scrub_text_file


def test_clear_removes_every_occurrence(write_file) -> None:
    path = write_file("a.txt", "foo bar foo")

    result = scrub_text_file(path, TargetSet.from_strings(["foo"]))

    assert path.read_text(encoding="utf-8") == " bar "
    assert result.kind is ResultKind.CLEARED
    assert result.signed_count == -2


def test_replace_substitutes_target(write_file) -> None:
    path = write_file("b.txt", "path/a path/b")

    result = scrub_text_file(path, TargetSet.from_strings(["path/a"]), "PATHA")

    assert path.read_text(encoding="utf-8") == "PATHA path/b"
    assert result.kind is ResultKind.REPLACED
    assert result.signed_count == 1


def test_loop_guard_leaves_file_untouched(write_file) -> None:
    path = write_file("loop.txt", "abc abc")
    before = path.read_bytes()

    with pytest.raises(LoopGuardError) as excinfo:
        scrub_text_file(path, TargetSet.from_strings(["abc"]), "xabcx")

    assert excinfo.value.kind == "loop-guard"
    assert path.read_bytes() == before


def test_replacement_is_not_rescanned() -> None:
    content, matches = replace_text("aXa", TargetSet.from_strings(["a"]), "bb")
    assert content == "bbXbb"
    assert matches == 2


def test_later_target_sees_earlier_replacement() -> None:
    # "xyz" runs first; its replacement completes an "aq" that the next target consumes.
    targets = TargetSet.from_strings(["xyz", "aq"])
    content, matches = replace_text("xyzq", targets, "a")
    assert list(targets) == ["xyz", "aq"]
    assert content == "a"
    assert matches == 2


def test_crlf_and_undecodable_bytes_survive(write_file) -> None:
    path = write_file("mixed.txt", b"one\r\ntarget \xff\xfe two\r\n")

    scrub_text_file(path, TargetSet.from_strings(["target "]))

    assert path.read_bytes() == b"one\r\n\xff\xfe two\r\n"


def test_empty_file_reports_zero(write_file) -> None:
    path = write_file("empty.txt", "")
    result = scrub_text_file(path, TargetSet.from_strings(["x"]))
    assert result.count == 0
    assert not result.changed
