"""One-way directory mirroring with exclude globs and symlink re-rooting."""

from .patterns import glob_match, matches_any
from .symlinks import fix_symlinks
from .sync import (
    DirSyncOptions,
    SyncEvent,
    SyncResult,
    atomic_copy_file,
    gather_paths,
    sync_dirs,
)

__all__ = [
    "glob_match",
    "matches_any",
    "fix_symlinks",
    "DirSyncOptions",
    "SyncEvent",
    "SyncResult",
    "atomic_copy_file",
    "gather_paths",
    "sync_dirs",
]
