from __future__ import annotations

import os
from pathlib import Path

import pytest

from mirror.symlinks import fix_symlinks
from mirror.sync import DirSyncOptions, atomic_copy_file, gather_paths, sync_dirs


def _make_tree(root: Path) -> None:
    (root / "sub" / "deep").mkdir(parents=True)
    (root / "top.txt").write_text("top", encoding="utf-8")
    (root / "sub" / "mid.txt").write_text("mid", encoding="utf-8")
    (root / "sub" / "deep" / "leaf.bin").write_bytes(b"\0\1\2")
    (root / ".hidden").write_text("h", encoding="utf-8")
    (root / "sub" / ".cache").mkdir()
    (root / "sub" / ".cache" / "c.txt").write_text("c", encoding="utf-8")


def _rel(paths) -> set:
    return {str(p) for p in paths}


def test_gather_paths_lists_every_entry(tmp_path: Path) -> None:
    _make_tree(tmp_path)
    assert _rel(gather_paths(tmp_path)) == {
        "top.txt",
        ".hidden",
        "sub",
        "sub/mid.txt",
        "sub/deep",
        "sub/deep/leaf.bin",
        "sub/.cache",
        "sub/.cache/c.txt",
    }


def test_excluded_directory_children_are_tested_on_their_own(tmp_path: Path) -> None:
    _make_tree(tmp_path)
    found = _rel(gather_paths(tmp_path, ["[.]*", "*/[.]*"]))
    assert ".hidden" not in found
    assert "sub/.cache" not in found
    assert "sub/.cache/c.txt" not in found

    found = _rel(gather_paths(tmp_path, ["sub"]))
    assert "sub" not in found
    assert "sub/mid.txt" in found


def test_initial_copy_mirrors_tree(tmp_path: Path) -> None:
    src, dst = tmp_path / "src", tmp_path / "dst"
    _make_tree(src)
    os.chmod(src / "top.txt", 0o640)

    result = sync_dirs(src, dst)

    assert result.ok and result.initial_copy
    assert (dst / "sub" / "deep" / "leaf.bin").read_bytes() == b"\0\1\2"
    assert (dst / "top.txt").stat().st_mode & 0o777 == 0o640
    assert (dst / "top.txt").stat().st_mtime_ns == (src / "top.txt").stat().st_mtime_ns
    assert _rel(gather_paths(src)) == _rel(gather_paths(dst))


def test_second_sync_is_a_no_op(tmp_path: Path) -> None:
    src, dst = tmp_path / "src", tmp_path / "dst"
    _make_tree(src)
    sync_dirs(src, dst)

    result = sync_dirs(src, dst)

    assert not result.initial_copy
    assert result.added == [] and result.removed == [] and result.changed == []


def test_add_remove_change(tmp_path: Path) -> None:
    src, dst = tmp_path / "src", tmp_path / "dst"
    _make_tree(src)
    sync_dirs(src, dst)

    (src / "sub" / "mid.txt").write_text("mid, longer now", encoding="utf-8")
    (src / "new.txt").write_text("new", encoding="utf-8")
    (src / "top.txt").unlink()
    (dst / "stray").mkdir()
    (dst / "stray" / "junk.txt").write_text("junk", encoding="utf-8")

    result = sync_dirs(src, dst)

    assert _rel(result.added) == {"new.txt"}
    assert _rel(result.removed) == {"stray", "top.txt"}
    assert _rel(result.changed) == {"sub/mid.txt"}
    assert not (dst / "stray").exists()
    assert (dst / "sub" / "mid.txt").read_text(encoding="utf-8") == "mid, longer now"
    actions = {(event.action, event.path.name) for event in result.events}
    assert ("rm", "stray") in actions and ("chg", "mid.txt") in actions


def test_type_mismatch_replaces_entry(tmp_path: Path) -> None:
    src, dst = tmp_path / "src", tmp_path / "dst"
    (src / "thing").mkdir(parents=True)
    (src / "thing" / "inner.txt").write_text("x", encoding="utf-8")
    dst.mkdir()
    (dst / "thing").write_text("was a file", encoding="utf-8")

    result = sync_dirs(src, dst)

    assert result.ok
    assert (dst / "thing").is_dir()
    assert (dst / "thing" / "inner.txt").read_text(encoding="utf-8") == "x"


def test_skip_hidden_and_excludes_leave_entries_alone(tmp_path: Path) -> None:
    src, dst = tmp_path / "src", tmp_path / "dst"
    _make_tree(src)
    dst.mkdir()
    (dst / ".keepme").write_text("local", encoding="utf-8")

    sync_dirs(src, dst, DirSyncOptions(skip_hidden=True, excludes=["*.bin"]))

    assert (dst / ".keepme").exists()
    assert not (dst / ".hidden").exists()
    assert not (dst / "sub" / ".cache").exists()
    assert not (dst / "sub" / "deep" / "leaf.bin").exists()
    assert (dst / "sub" / "mid.txt").exists()


def test_listfile_holds_canonical_destination_paths(tmp_path: Path) -> None:
    src, dst = tmp_path / "src", tmp_path / "dst"
    _make_tree(src)
    listfile = tmp_path / "out" / "written.txt"

    sync_dirs(src, dst, DirSyncOptions(listfile=listfile))

    lines = listfile.read_text(encoding="utf-8").splitlines()
    assert str(dst.resolve() / "sub" / "mid.txt") in lines
    assert all(Path(line).is_absolute() for line in lines)


def test_absolute_symlink_into_source_is_re_rooted(tmp_path: Path) -> None:
    src, dst = tmp_path / "src", tmp_path / "dst"
    _make_tree(src)
    (src / "sub" / "abs_link").symlink_to((src / "top.txt").resolve())
    (src / "rel_link").symlink_to("top.txt")

    result = sync_dirs(src, dst)

    abs_link = dst / "sub" / "abs_link"
    assert abs_link.is_symlink()
    assert os.readlink(abs_link) == os.path.join("..", "top.txt")
    assert abs_link.resolve() == (dst / "top.txt").resolve()
    assert os.readlink(dst / "rel_link") == "top.txt"
    assert any(event.action == "fix" for event in result.events)


def test_nofix_keeps_absolute_symlink(tmp_path: Path) -> None:
    src, dst = tmp_path / "src", tmp_path / "dst"
    _make_tree(src)
    target = (src / "top.txt").resolve()
    (src / "abs_link").symlink_to(target)

    sync_dirs(src, dst, DirSyncOptions(fix_symlinks=False))

    assert os.readlink(dst / "abs_link") == str(target)
    assert fix_symlinks(dst, src) == [(dst / "abs_link", "top.txt")]


def test_atomic_copy_leaves_no_temp_files(tmp_path: Path) -> None:
    source = tmp_path / "payload.bin"
    source.write_bytes(os.urandom(4096))
    target = tmp_path / "out" / "payload.bin"

    atomic_copy_file(source, target)

    assert target.read_bytes() == source.read_bytes()
    assert [p.name for p in target.parent.iterdir()] == ["payload.bin"]


def test_atomic_copy_cleans_up_on_failure(tmp_path: Path) -> None:
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    with pytest.raises(OSError):
        atomic_copy_file(tmp_path / "missing.bin", out_dir / "x.bin")
    assert list(out_dir.iterdir()) == []


def test_source_must_be_a_directory(tmp_path: Path) -> None:
    not_dir = tmp_path / "file.txt"
    not_dir.write_text("x", encoding="utf-8")
    with pytest.raises(NotADirectoryError):
        sync_dirs(not_dir, tmp_path / "dst")
