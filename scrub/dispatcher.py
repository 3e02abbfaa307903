"""
scrub.dispatcher

Fixed-size worker pool draining one shared FIFO of file tasks.

The producer enqueues every path, then posts one stop sentinel per worker;
because the queue is FIFO a worker only meets its sentinel once all real work
has been taken. Workers block on ``Queue.get`` between tasks. Per-file errors
are recorded in the ledger and never stop the pool. The ledger is sealed
after every worker has joined, which is the only point it may be read.
"""

from __future__ import annotations

import os
import queue
import threading
from typing import Callable, Iterable, List, Optional

from common.base.logging import get_logger
from common.shared.utils import Progress

from .errors import ScrubError
from .ledger import ScrubResult, TallyLedger

log = get_logger(__name__)

FALLBACK_POOL_SIZE = 4

TaskHandler = Callable[[str], ScrubResult]

_DONE = object()


def default_pool_size() -> int:
    return os.cpu_count() or FALLBACK_POOL_SIZE


class WorkDispatcher:
    """Run a handler over file tasks on a bounded pool of threads."""

    def __init__(self, workers: Optional[int] = None, progress: Optional[Progress] = None):
        if workers is not None and workers < 1:
            raise ValueError(f"worker count must be at least 1, got {workers}")
        self.workers = workers or default_pool_size()
        self.progress = progress

    def run(self, tasks: Iterable[str], handler: TaskHandler) -> TallyLedger:
        ledger = TallyLedger()
        work: "queue.Queue[object]" = queue.Queue()
        threads: List[threading.Thread] = []

        try:
            for index in range(self.workers):
                thread = threading.Thread(
                    target=self._work,
                    args=(work, handler, ledger),
                    name=f"scrub-worker-{index}",
                    daemon=True,
                )
                thread.start()
                threads.append(thread)
        except RuntimeError:
            log.critical("💥 Unable to start the worker pool")
            self._stop(work, threads)
            raise

        log.debug(f"Started {len(threads)} worker(s)")

        queued = 0
        for path in dict.fromkeys(tasks):
            work.put(path)
            queued += 1
        self._stop(work, threads)

        ledger.seal()
        log.debug(f"Worker pool drained: {queued} task(s) processed")
        return ledger

    @staticmethod
    def _stop(work: "queue.Queue[object]", threads: List[threading.Thread]) -> None:
        for _ in threads:
            work.put(_DONE)
        for thread in threads:
            thread.join()

    def _work(self, work: "queue.Queue[object]", handler: TaskHandler, ledger: TallyLedger) -> None:
        while True:
            item = work.get()
            if item is _DONE:
                return
            path = str(item)
            try:
                result = handler(path)
            except ScrubError as exc:
                log.error(f"❌ {exc}")
                result = ScrubResult.failed(exc)
            except Exception as exc:
                log.error(f"❌ Unexpected error while processing {path}: {exc}", exc_info=True)
                result = ScrubResult.failed(ScrubError(path, str(exc)))
            ledger.record(path, result)
            if self.progress is not None:
                self.progress.update()
