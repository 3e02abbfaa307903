"""
scrub.ledger

Per-file results and the tally ledger workers record them in.

A ScrubResult is tagged (cleared, replaced, skipped or error) so that "no
matches" and "failed" never share a value. The ledger accepts one entry per
path from any thread and only allows reads after it has been sealed, which
the dispatcher does once every worker has joined.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import ScrubError


class ResultKind(str, Enum):
    CLEARED = "cleared"
    REPLACED = "replaced"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(frozen=True)
class ScrubResult:
    kind: ResultKind
    count: int = 0
    error: Optional[str] = None
    detail: str = ""

    @classmethod
    def cleared(cls, count: int) -> "ScrubResult":
        return cls(ResultKind.CLEARED, count)

    @classmethod
    def replaced(cls, count: int) -> "ScrubResult":
        return cls(ResultKind.REPLACED, count)

    @classmethod
    def skipped(cls, reason: str) -> "ScrubResult":
        return cls(ResultKind.SKIPPED, detail=reason)

    @classmethod
    def failed(cls, exc: ScrubError) -> "ScrubResult":
        return cls(ResultKind.ERROR, error=exc.kind, detail=exc.message)

    @property
    def is_error(self) -> bool:
        return self.kind is ResultKind.ERROR

    @property
    def changed(self) -> bool:
        return self.kind in (ResultKind.CLEARED, ResultKind.REPLACED) and self.count > 0

    @property
    def signed_count(self) -> int:
        """Legacy convention: negative for cleared, positive for replaced, 0 otherwise."""
        if self.kind is ResultKind.CLEARED:
            return -self.count
        if self.kind is ResultKind.REPLACED:
            return self.count
        return 0


class TallyLedger:
    """Thread-safe path → ScrubResult map, readable only once sealed."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[str, ScrubResult] = {}
        self._sealed = False

    def record(self, path: str, result: ScrubResult) -> None:
        with self._lock:
            if self._sealed:
                raise RuntimeError("ledger is sealed; no further results can be recorded")
            if path in self._entries:
                raise RuntimeError(f"result for {path} recorded twice")
            self._entries[path] = result

    def seal(self) -> None:
        with self._lock:
            self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def _require_sealed(self) -> None:
        if not self._sealed:
            raise RuntimeError("ledger read before all workers finished")

    def __len__(self) -> int:
        self._require_sealed()
        return len(self._entries)

    def __getitem__(self, path: str) -> ScrubResult:
        self._require_sealed()
        return self._entries[path]

    def __contains__(self, path: object) -> bool:
        self._require_sealed()
        return path in self._entries

    def items(self) -> List[Tuple[str, ScrubResult]]:
        """Entries sorted by path."""
        self._require_sealed()
        return sorted(self._entries.items())

    def __iter__(self) -> Iterator[str]:
        return iter(path for path, _ in self.items())

    def as_dict(self) -> Dict[str, ScrubResult]:
        self._require_sealed()
        return dict(self._entries)

    def failures(self) -> List[Tuple[str, ScrubResult]]:
        return [(path, result) for path, result in self.items() if result.is_error]

    @property
    def any_failed(self) -> bool:
        return bool(self.failures())

    def counts(self) -> Dict[str, int]:
        """Number of files per outcome, for summaries."""
        totals = {"Cleared": 0, "Replaced": 0, "Unchanged": 0, "Skipped": 0, "Failed": 0}
        for _, result in self.items():
            if result.is_error:
                totals["Failed"] += 1
            elif result.kind is ResultKind.SKIPPED:
                totals["Skipped"] += 1
            elif not result.changed:
                totals["Unchanged"] += 1
            elif result.kind is ResultKind.CLEARED:
                totals["Cleared"] += 1
            else:
                totals["Replaced"] += 1
        return totals
