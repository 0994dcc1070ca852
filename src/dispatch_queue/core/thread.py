# src/dispatch_queue/core/thread.py

"""
DispatchThread: a DispatchQueue with its own worker thread.

Construction starts the worker (running the queue's run_forever). Shutdown
always goes: stop the queue, wait until it is drained, join the worker.
Shutdown happens on close(), on leaving a `with` block, when the wrapper
is garbage-collected, or at interpreter exit, whichever comes first.
"""

from __future__ import annotations

import logging
import threading
import weakref
from types import TracebackType
from typing import Callable

from ..config import get_settings
from .queue import DispatchQueue

logger = logging.getLogger(__name__)


def _run_worker(queue: DispatchQueue) -> None:
    logger.debug("Worker %s started.", queue.name)
    try:
        queue.run_forever()
    finally:
        logger.debug("Worker %s finished.", queue.name)


def _shutdown(queue: DispatchQueue, thread: threading.Thread) -> None:
    # Must not reference the DispatchThread itself (weakref.finalize callback).
    queue.stop()

    if threading.current_thread() is thread:
        # Last reference dropped from inside a task.
        logger.warning("Worker %s cannot join itself; queue stopped, join skipped.", queue.name)
        return

    if not thread.is_alive():
        if queue.pending:
            logger.error("Worker %s is gone with %d task(s) still queued.", queue.name, queue.pending)
        return

    queue.wait_until_done()
    thread.join()
    logger.debug("Worker %s joined.", queue.name)


class DispatchThread:
    """
    Background executor: dispatch() from any thread, tasks run in FIFO order
    on one worker thread.

    Tasks that resubmit themselves must receive this object explicitly
    (e.g. through functools.partial); the queue never hands it to them.
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        capacity: int | None = None,
        daemon: bool | None = None,
    ) -> None:
        settings = get_settings()
        worker_name = name or settings.worker_name
        is_daemon = settings.worker_daemon if daemon is None else bool(daemon)

        self._queue = DispatchQueue(capacity=capacity, name=worker_name)
        self._thread = threading.Thread(
            target=_run_worker,
            args=(self._queue,),
            name=worker_name,
            daemon=is_daemon,
        )
        self._thread.start()

        self._finalizer = weakref.finalize(self, _shutdown, self._queue, self._thread)

    @property
    def queue(self) -> DispatchQueue:
        return self._queue

    @property
    def name(self) -> str:
        return self._thread.name

    def dispatch(self, fn: Callable[[], object]) -> bool:
        """Queue `fn` for the worker. False if the wrapper is stopped."""
        return self._queue.dispatch(fn)

    def stop(self) -> None:
        """Stop accepting new tasks. Queued tasks still run. Idempotent."""
        self._queue.stop()

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def close(self) -> None:
        """Stop, drain and join the worker. Safe to call more than once."""
        if threading.current_thread() is self._thread:
            # Leave the finalizer pending so a later close() still joins.
            self._queue.stop()
            logger.warning("Worker %s cannot join itself; queue stopped, join deferred.", self.name)
            return
        self._finalizer()

    def __enter__(self) -> DispatchThread:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<DispatchThread {self.name} alive={self.is_alive()} state={self._queue.state.value}>"
