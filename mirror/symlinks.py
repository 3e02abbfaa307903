"""Re-root absolute symlinks copied from a source tree into its mirror."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Tuple

from common.base.logging import get_logger

log = get_logger(__name__)


def fix_symlinks(dst_root: Path | str, src_root: Path | str) -> List[Tuple[Path, str]]:
    """
    Rewrite absolute links in ``dst_root`` that point into ``src_root``.

    Each such link becomes a relative link to the equivalent path under
    ``dst_root``. Relative links and links pointing outside the source tree
    are left alone. Returns ``(link, new_target)`` for every rewritten link.
    """
    dst_path = Path(dst_root)
    canonical_src = Path(src_root).resolve()
    canonical_dst = dst_path.resolve()
    fixed: List[Tuple[Path, str]] = []

    for dirpath, dirnames, filenames in os.walk(dst_path):
        for name in dirnames + filenames:
            link = Path(dirpath) / name
            if not link.is_symlink():
                continue
            try:
                target = os.readlink(link)
                if not os.path.isabs(target):
                    continue
                inside = Path(target).resolve().relative_to(canonical_src)
            except ValueError:
                continue
            except (OSError, RuntimeError) as exc:
                log.debug(f"Skipping unresolvable link {link}: {exc}")
                continue

            new_target = os.path.relpath(canonical_dst / inside, link.parent.resolve())
            try:
                link.unlink()
                os.symlink(new_target, link)
            except OSError as exc:
                log.error(f"❌ Failed to re-root symlink {link}: {exc}")
                continue
            fixed.append((link, new_target))

    return fixed
