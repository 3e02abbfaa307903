"""
scrub.errors

File-scoped error taxonomy for the scrub engine. Every error carries the path
it belongs to and a short ``kind`` label used as the ledger's error marker.
"""

from __future__ import annotations

from typing import Optional


class ScrubError(Exception):
    """Base class for per-file scrub failures."""

    kind = "internal"

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class OpenError(ScrubError):
    """The file is missing or could not be read."""

    kind = "open"


class WriteError(ScrubError):
    """Mutated content could not be written back."""

    kind = "write"


class LoopGuardError(ScrubError):
    """The replacement string contains one of the target strings."""

    kind = "loop-guard"

    def __init__(self, path: str, target: str, replacement: str):
        super().__init__(
            path,
            f"replacement {replacement!r} contains target {target!r}; refusing to rewrite",
        )
        self.target = target
        self.replacement = replacement


class PathExpansionPartialFailure(ScrubError):
    """Non-fatal: a path spelling could not be computed while expanding a target."""

    kind = "path-expansion"

    def __init__(self, path: str, form: str, cause: Optional[BaseException] = None):
        detail = f"could not compute {form} form"
        if cause is not None:
            detail = f"{detail} ({cause})"
        super().__init__(path, detail)
        self.form = form
        self.cause = cause
