from __future__ import annotations

import pytest

from mirror.patterns import glob_match, matches_any


@pytest.mark.parametrize(
    "pattern, text, expected",
    [
        ("*", "", True),
        ("*", "a/b/c", True),
        ("*.o", "obj/dir/file.o", True),
        ("*.o", "file.c", False),
        ("a?c", "abc", True),
        ("a?c", "ac", False),
        ("[.]*", ".git", True),
        ("[.]*", "src/.git", False),
        ("*/[.]*", "src/.git", True),
        ("*/[.]*", "src/.git/config", True),
        ("[a-c]x", "bx", True),
        ("[a-c]x", "dx", False),
        ("[!a-c]x", "dx", True),
        ("[^a-c]x", "ax", False),
        ("[]]", "]", True),
        ("[!]]", "a", True),
        ("a[b", "a[b", True),
        ("a[b", "ab", False),
        ("a*b*c", "aXbYbZc", True),
        ("a*b*c", "aXbYbZ", False),
        ("**x", "yyx", True),
        ("abc", "abcd", False),
        ("", "", True),
    ],
)
def test_glob_match(pattern: str, text: str, expected: bool) -> None:
    assert glob_match(pattern, text) is expected


def test_long_star_runs_stay_linear() -> None:
    text = "a" * 2000
    assert not glob_match("*a*a*a*a*a*a*b", text)
    assert glob_match("*a*a*a*a*a*a*a", text)


def test_matches_any() -> None:
    assert matches_any(["*.tmp", "build/*"], "build/out.o")
    assert not matches_any([], "anything")
