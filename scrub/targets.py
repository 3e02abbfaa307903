"""
scrub.targets

Target strings for a scrub run.

A path-like target can be expanded into every spelling under which the same
file may appear in build output (as given, absolute, symlink-resolved and
lexically normalized). All raw and expanded strings are merged into a single
TargetSet ordered longest first, so a short target never clears part of a
longer one that contains it at the same position.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from common.base.file_io import encode_lossless
from common.base.logging import get_logger

from .errors import PathExpansionPartialFailure

log = get_logger(__name__)


# ----------------------------------------------------------------------
# PATH-FORM EXPANSION
# ----------------------------------------------------------------------

def lexically_normal(raw: str) -> str:
    """
    Collapse ``.``, ``..`` and repeated separators without touching the filesystem.

    Unlike ``os.path.normpath`` a directory spelling keeps its trailing
    separator: ``out/`` stays ``out/`` and ``a/b/..`` becomes ``a/``, so a
    directory target never degrades into a bare name.
    """
    norm = os.path.normpath(raw)
    stripped = raw.rstrip(os.sep)
    names_dir = raw.endswith(os.sep) or os.path.basename(stripped) in (".", "..")
    if names_dir and not norm.endswith(os.sep) and os.path.basename(norm) not in (".", ".."):
        norm += os.sep
    return norm


def expand_path_forms(
    raw: str,
    failures: Optional[List[PathExpansionPartialFailure]] = None,
) -> List[str]:
    """
    Return the equivalent spellings of ``raw``, original first.

    The absolute, canonical and normalized forms are only added when the path
    currently exists, and only when they differ from every form collected so
    far. A form that cannot be computed is skipped; the failure is appended to
    ``failures`` when a list is supplied.
    """
    if not raw:
        return []

    forms = [raw]
    if not os.path.exists(raw):
        return forms

    def _add(form: str) -> None:
        if form and form not in forms:
            forms.append(form)

    def _failed(form: str, exc: OSError) -> None:
        failure = PathExpansionPartialFailure(raw, form, exc)
        log.warning(f"⚠️ Path expansion degraded: {failure}")
        if failures is not None:
            failures.append(failure)

    try:
        _add(raw if os.path.isabs(raw) else os.path.join(os.getcwd(), raw))
    except OSError as exc:
        _failed("absolute", exc)

    try:
        _add(os.path.realpath(raw, strict=True))
    except OSError as exc:
        _failed("canonical", exc)

    _add(lexically_normal(raw))
    return forms


# ----------------------------------------------------------------------
# TARGET SET
# ----------------------------------------------------------------------

def _priority(target: str) -> Tuple[int, str]:
    return len(encode_lossless(target)), target


@dataclass(frozen=True)
class TargetSet:
    """Deduplicated targets, longest first (ties in descending lexicographic order)."""

    targets: Tuple[str, ...]
    expansion_failures: Tuple[PathExpansionPartialFailure, ...] = ()

    @classmethod
    def from_strings(
        cls,
        strings: Iterable[str],
        expansion_failures: Iterable[PathExpansionPartialFailure] = (),
    ) -> "TargetSet":
        unique = {s for s in strings if s}
        ordered = tuple(sorted(unique, key=_priority, reverse=True))
        return cls(ordered, tuple(expansion_failures))

    def __iter__(self) -> Iterator[str]:
        return iter(self.targets)

    def __len__(self) -> int:
        return len(self.targets)

    def __contains__(self, item: object) -> bool:
        return item in self.targets

    def as_bytes(self) -> Tuple[bytes, ...]:
        return tuple(encode_lossless(t) for t in self.targets)

    def first_contained_in(self, text: str) -> Optional[str]:
        """Return the first target that occurs inside ``text``, if any."""
        for target in self.targets:
            if target in text:
                return target
        return None


def build_target_set(raw_targets: Iterable[str], *, expand_paths: bool = False) -> TargetSet:
    """
    Merge raw target strings (optionally path-expanded) into one TargetSet.

    Raises:
        ValueError: if no non-empty target remains.
    """
    collected: List[str] = []
    failures: List[PathExpansionPartialFailure] = []
    for raw in raw_targets:
        if expand_paths:
            forms = expand_path_forms(raw, failures)
            if len(forms) > 1:
                log.debug(f"Expanded target {raw!r} into {len(forms)} path forms")
            collected.extend(forms)
        else:
            collected.append(raw)

    target_set = TargetSet.from_strings(collected, failures)
    if not target_set:
        raise ValueError("empty target string supplied")
    return target_set
