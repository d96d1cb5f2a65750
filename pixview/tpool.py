"""A small pool of worker threads with a FIFO task queue."""

from __future__ import annotations

import logging
import os
import threading
from collections import deque
from typing import Callable, Deque, List, Optional, Tuple

#: Upper limit on the number of worker threads.
MAX_THREADS = 8

_log = logging.getLogger(__name__)

Worker = Callable[[], None]
Cleanup = Callable[[], None]
_Task = Tuple[Optional[Worker], Optional[Cleanup]]


def default_thread_count() -> int:
    """Number of online CPUs minus one for the main thread, in 1..MAX_THREADS."""
    cpus = (os.cpu_count() or 0) - 1
    return min(max(cpus, 1), MAX_THREADS)


class ThreadPool:
    """Runs submitted callables on a fixed set of background threads."""

    def __init__(self, size: Optional[int] = None):
        wanted = default_thread_count() if size is None else size
        if wanted < 1:
            raise ValueError("thread pool needs at least one thread")

        self._cond = threading.Condition()
        self._queue: Deque[_Task] = deque()
        self._working = 0
        self._closed = False
        self._threads: List[threading.Thread] = []

        for index in range(wanted):
            thread = threading.Thread(
                target=self._run, name=f"tpool-{index}", daemon=True
            )
            try:
                thread.start()
            except RuntimeError:
                break
            self._threads.append(thread)

    def threads(self) -> int:
        """Number of threads in the pool."""
        return len(self._threads)

    def _run(self) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: bool(self._queue))
                worker, cleanup = self._queue.popleft()
                self._working += 1

            try:
                if worker is not None:
                    worker()
            except Exception:
                _log.exception("thread pool task failed")
            finally:
                if cleanup is not None:
                    try:
                        cleanup()
                    except Exception:
                        _log.exception("thread pool cleanup failed")
                with self._cond:
                    self._working -= 1
                    self._cond.notify_all()

            if worker is None:
                return

    def _enqueue(self, task: _Task) -> None:
        with self._cond:
            self._queue.append(task)
            self._cond.notify_all()

    def submit(self, worker: Worker, cleanup: Optional[Cleanup] = None) -> None:
        """Queue ``worker`` for execution; ``cleanup`` runs after it or on cancel."""
        if worker is None:
            raise TypeError("worker must be callable")
        if self._closed:
            raise RuntimeError("thread pool is closed")
        self._enqueue((worker, cleanup))

    def cancel(self) -> None:
        """Drop all pending tasks, running their cleanup callables."""
        with self._cond:
            pending = list(self._queue)
            self._queue.clear()
            self._cond.notify_all()
        for _, cleanup in pending:
            if cleanup is not None:
                cleanup()

    def wait(self) -> None:
        """Block until the queue is empty and every thread is idle."""
        with self._cond:
            self._cond.wait_for(lambda: not self._queue and self._working == 0)

    def close(self) -> None:
        """Let queued tasks finish, then stop and join all threads."""
        if self._closed:
            return
        self._closed = True
        for _ in self._threads:
            self._enqueue((None, None))
        for thread in self._threads:
            thread.join()

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()