"""
mirror.patterns

Exclude-pattern matching for directory mirroring.

Semantics (whole-string match against a POSIX relative path):
 - ``*`` matches any run of characters, ``/`` included
 - ``?`` matches exactly one character
 - ``[set]`` matches one character from the set; ``a-z`` ranges are allowed,
   a leading ``!`` or ``^`` negates, and ``]`` is literal as the first member
 - an unterminated ``[`` matches a literal ``[``

The matcher is iterative: on a mismatch it only ever backtracks to the most
recent ``*``, giving O(len(pattern) * len(text)) worst-case time.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple


def _match_class(pattern: str, start: int, char: str) -> Optional[Tuple[bool, int]]:
    """Match ``char`` against the set opening just before ``start``; None if unterminated."""
    i = start
    negate = False
    if i < len(pattern) and pattern[i] in "!^":
        negate = True
        i += 1

    matched = False
    first = True
    while i < len(pattern) and (first or pattern[i] != "]"):
        low = pattern[i]
        if i + 2 < len(pattern) and pattern[i + 1] == "-" and pattern[i + 2] != "]":
            if low <= char <= pattern[i + 2]:
                matched = True
            i += 3
        else:
            if low == char:
                matched = True
            i += 1
        first = False

    if i >= len(pattern):
        return None
    return matched != negate, i + 1


def glob_match(pattern: str, text: str) -> bool:
    p = t = 0
    star_p = -1
    star_t = 0

    while t < len(text):
        if p < len(pattern):
            token = pattern[p]
            if token == "*":
                while p < len(pattern) and pattern[p] == "*":
                    p += 1
                if p == len(pattern):
                    return True
                star_p, star_t = p, t
                continue
            if token == "?":
                p += 1
                t += 1
                continue
            if token == "[":
                outcome = _match_class(pattern, p + 1, text[t])
                if outcome is None:
                    if text[t] == "[":
                        p += 1
                        t += 1
                        continue
                elif outcome[0]:
                    p = outcome[1]
                    t += 1
                    continue
            elif token == text[t]:
                p += 1
                t += 1
                continue

        if star_p < 0:
            return False
        star_t += 1
        p, t = star_p, star_t

    while p < len(pattern) and pattern[p] == "*":
        p += 1
    return p == len(pattern)


def matches_any(patterns: Iterable[str], text: str) -> bool:
    return any(glob_match(pattern, text) for pattern in patterns)
