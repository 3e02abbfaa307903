"""
common.shared.utils

Common reusable utilities shared across the build-support tools.
"""

from __future__ import annotations

from typing import Any, Optional

from tqdm import tqdm


# ----------------------------------------------------------------------
# PROGRESS HELPERS
# ----------------------------------------------------------------------

class Progress:
    """
    Simple wrapper for tqdm progress bars that automatically closes
    on completion or interruption. Pass ``total`` and call ``update`` as
    work finishes (safe to call from worker threads).
    """

    def __init__(
        self,
        desc: str = "Processing",
        total: Optional[int] = None,
        disable: bool = False,
    ):
        self._tqdm = tqdm(
            desc=desc,
            total=total,
            leave=False,
            dynamic_ncols=True,
            disable=disable,
        )

    def __enter__(self) -> "Progress":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def update(self, n: int = 1) -> None:
        self._tqdm.update(n)

    def close(self) -> None:
        self._tqdm.close()
