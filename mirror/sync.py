"""
mirror.sync

One-way directory mirroring.

Features:
 - Gathers relative paths on both sides, honoring exclude globs
 - Computes add / remove / change sets (type, mtime, size, link target)
 - Copies files atomically, preserving permissions and mtime
 - Recreates symlinks verbatim, then optionally re-roots absolute ones
 - Optional list file of canonical destination paths that were written
"""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Sequence, Set

from common.base.file_io import open_file
from common.base.fs import ensure_dir, ensure_parent
from common.base.logging import get_logger

from .patterns import matches_any
from .symlinks import fix_symlinks

log = get_logger(__name__)

HIDDEN_EXCLUDES = ("[.]*", "*/[.]*")
TEMP_PREFIX = ".dirsync_tmp_"
COPY_CHUNK = 1024 * 1024


# ----------------------------------------------------------------------
# DATA TYPES
# ----------------------------------------------------------------------

@dataclass
class DirSyncOptions:
    verbose: bool = False
    fix_symlinks: bool = True
    skip_hidden: bool = False
    listfile: Optional[Path] = None
    excludes: List[str] = field(default_factory=list)

    def effective_excludes(self) -> List[str]:
        hidden = list(HIDDEN_EXCLUDES) if self.skip_hidden else []
        return hidden + list(self.excludes)


@dataclass
class SyncEvent:
    action: str
    path: Path
    kind: str = ""
    target: Optional[str] = None

    def __str__(self) -> str:
        parts = [f"[{self.action}]"]
        if self.kind:
            parts.append(self.kind)
        parts.append(str(self.path))
        if self.target is not None:
            parts.append(f"-> {self.target}")
        return " ".join(parts)


@dataclass
class SyncResult:
    added: List[PurePosixPath] = field(default_factory=list)
    removed: List[PurePosixPath] = field(default_factory=list)
    changed: List[PurePosixPath] = field(default_factory=list)
    events: List[SyncEvent] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)
    initial_copy: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors


# ----------------------------------------------------------------------
# PATH GATHERING
# ----------------------------------------------------------------------

def gather_paths(root: Path | str, excludes: Sequence[str] = ()) -> Set[PurePosixPath]:
    """
    Every entry below ``root`` as a POSIX relative path, minus excluded ones.

    Symlinked directories are listed but not descended into. An excluded
    directory is still walked; its children are tested on their own.
    """
    root_path = Path(root)
    found: Set[PurePosixPath] = set()
    for dirpath, dirnames, filenames in os.walk(root_path):
        for name in dirnames + filenames:
            rel = PurePosixPath((Path(dirpath) / name).relative_to(root_path).as_posix())
            if excludes and matches_any(excludes, str(rel)):
                continue
            found.add(rel)
    return found


def entry_type(path: Path) -> str:
    if path.is_symlink():
        return "link"
    if path.is_dir():
        return "dir"
    if path.is_file():
        return "file"
    return "other"


def needs_update(src: Path, dst: Path) -> bool:
    src_type = entry_type(src)
    if src_type != entry_type(dst):
        return True
    try:
        if src_type == "file":
            s, d = src.stat(), dst.stat()
            return s.st_mtime_ns != d.st_mtime_ns or s.st_size != d.st_size
        if src_type == "link":
            return os.readlink(src) != os.readlink(dst)
    except OSError:
        return True
    return False


# ----------------------------------------------------------------------
# FILE OPERATIONS
# ----------------------------------------------------------------------

def atomic_copy_file(src: Path | str, dst: Path | str) -> None:
    """Copy ``src`` to a temp file beside ``dst`` and rename it into place."""
    dst_path = Path(dst)
    ensure_parent(dst_path)
    fd, tmp_name = tempfile.mkstemp(prefix=TEMP_PREFIX, dir=dst_path.parent)
    try:
        with os.fdopen(fd, "wb") as out_handle, open(src, "rb") as in_handle:
            shutil.copyfileobj(in_handle, out_handle, COPY_CHUNK)
        os.replace(tmp_name, dst_path)
    except BaseException:
        if os.path.lexists(tmp_name):
            os.unlink(tmp_name)
        raise


def remove_entry(path: Path) -> bool:
    """Remove a file, symlink or directory tree; False when nothing was there."""
    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        shutil.rmtree(path)
        return True
    return False


def _copy_entry(src: Path, dst: Path) -> str:
    kind = entry_type(src)
    if kind == "dir":
        ensure_dir(dst)
        shutil.copymode(src, dst)
    elif kind == "link":
        ensure_parent(dst)
        if os.path.lexists(dst):
            remove_entry(dst)
        os.symlink(os.readlink(src), dst)
    elif kind == "file":
        atomic_copy_file(src, dst)
        shutil.copystat(src, dst)
    else:
        raise OSError(f"unsupported file type: {src}")
    return kind


# ----------------------------------------------------------------------
# MIRROR
# ----------------------------------------------------------------------

def _emit(result: SyncResult, event: SyncEvent, quiet: bool = False) -> None:
    result.events.append(event)
    if quiet:
        log.debug(str(event))
    else:
        log.info(str(event))


def _link_target(path: Path, kind: str) -> Optional[str]:
    return os.readlink(path) if kind == "link" else None


def sync_dirs(src: Path | str, dst: Path | str, options: Optional[DirSyncOptions] = None) -> SyncResult:
    """
    Make ``dst`` mirror ``src``.

    Removals run first, then additions in parent-before-child order, then
    in-place changes. An entry whose type differs on the two sides is
    removed and re-added. Per-entry failures are logged and collected in
    ``SyncResult.errors``; the rest of the tree is still processed.

    Raises:
        NotADirectoryError: if ``src`` is not a directory.
    """
    options = options or DirSyncOptions()
    src_root = Path(src)
    dst_root = Path(dst)
    if not src_root.is_dir():
        raise NotADirectoryError(f"source is not a directory: {src_root}")

    result = SyncResult()
    result.initial_copy = not dst_root.exists() or not any(dst_root.iterdir())
    ensure_dir(dst_root)
    quiet_adds = result.initial_copy and not options.verbose

    excludes = options.effective_excludes()
    src_paths = gather_paths(src_root, excludes)
    dst_paths = gather_paths(dst_root, excludes)

    to_remove = set(dst_paths - src_paths)
    to_add = set(src_paths - dst_paths)
    to_change: Set[PurePosixPath] = set()
    for rel in src_paths & dst_paths:
        sp, dp = src_root / rel, dst_root / rel
        if entry_type(sp) != entry_type(dp):
            to_remove.add(rel)
            to_add.add(rel)
        elif needs_update(sp, dp):
            to_change.add(rel)

    log.debug(
        f"Sync plan {src_root} → {dst_root}: {len(to_add)} add, "
        f"{len(to_remove)} remove, {len(to_change)} change"
    )

    for rel in sorted(to_remove):
        dp = dst_root / rel
        try:
            if remove_entry(dp):
                result.removed.append(rel)
                _emit(result, SyncEvent("rm", dp))
        except OSError as exc:
            log.error(f"❌ Failed to remove {dp}: {exc}")
            result.errors.append(f"{dp}: {exc}")

    for rel in sorted(to_add):
        sp, dp = src_root / rel, dst_root / rel
        try:
            kind = _copy_entry(sp, dp)
        except OSError as exc:
            log.error(f"❌ Failed to add {dp}: {exc}")
            result.errors.append(f"{dp}: {exc}")
            continue
        result.added.append(rel)
        _emit(result, SyncEvent("add", dp, kind, _link_target(dp, kind)), quiet=quiet_adds)

    for rel in sorted(to_change):
        sp, dp = src_root / rel, dst_root / rel
        try:
            kind = _copy_entry(sp, dp)
        except OSError as exc:
            log.error(f"❌ Failed to update {dp}: {exc}")
            result.errors.append(f"{dp}: {exc}")
            continue
        result.changed.append(rel)
        _emit(result, SyncEvent("chg", dp, kind, _link_target(dp, kind)))

    if options.fix_symlinks:
        for link, new_target in fix_symlinks(dst_root, src_root):
            _emit(result, SyncEvent("fix", link, "link", new_target))

    if options.listfile:
        canonical_dst = dst_root.resolve()
        result.written = [canonical_dst / rel for rel in result.added + result.changed]
        write_listfile(options.listfile, result.written)

    log.info(
        f"✅ Mirror complete: {len(result.added)} added, {len(result.removed)} removed, "
        f"{len(result.changed)} changed, {len(result.errors)} failed"
    )
    return result


def write_listfile(path: Path | str, entries: Iterable[Path]) -> None:
    ensure_parent(path)
    with open_file(path, "w") as handle:
        for entry in entries:
            handle.write(f"{entry}\n")
    log.debug(f"Wrote list file {path}")
