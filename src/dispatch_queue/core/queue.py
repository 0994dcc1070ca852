# src/dispatch_queue/core/queue.py

from __future__ import annotations

"""
Dispatch queue.

A FIFO of Tasks guarded by one condition variable:
- producers call dispatch() from any thread,
- one consumer drains with run_once() (from its own loop) or run_forever(),
- stop() closes the queue to new work; already accepted tasks still run.

The lock is never held while a task runs, so a task may dispatch onto the
queue that is running it.
"""

import logging
import threading
from enum import StrEnum
from types import TracebackType
from typing import Callable

from .errors import ContractViolation
from .task import Task

logger = logging.getLogger(__name__)


class QueueState(StrEnum):
    """
    Queue lifecycle. Transitions only move forward:
    ACCEPTING -> STOPPED -> DRAINED.
    """

    ACCEPTING = "accepting"
    STOPPED = "stopped"  # no new tasks, some still queued
    DRAINED = "drained"  # stopped and empty (terminal)


class DispatchQueue:
    """
    Thread-safe FIFO of deferred actions.

    All methods are thread-safe. Tasks run in strict FIFO order only when a
    single thread drives run_once()/run_forever().

    close() (also used by the context manager) calls stop() and then
    wait_until_done(). That blocks forever unless some other thread is
    draining the queue. To flush from the current thread instead, call
    stop() followed by run_forever().

    Task failures:
    - an Exception from a task body is logged and the batch continues,
    - a ContractViolation or any non-Exception BaseException propagates;
      the tasks of the batch that had not run yet go back to the front of
      the queue.

    wait_until_done() also waits for the batch currently running, so it
    must not be called from inside a task of the same queue.
    """

    def __init__(self, *, capacity: int | None = None, name: str | None = None) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._accepting = True
        self._tasks: list[Task] = []
        self._in_flight = 0  # batches taken out but not finished
        self._capacity = capacity
        self._name = name or f"dispatch-queue-{id(self):x}"

    @property
    def name(self) -> str:
        return self._name

    # ---- producers ----

    def dispatch(self, fn: Callable[[], object]) -> bool:
        """
        Queue `fn` for execution.

        Returns False (and drops `fn`) if the queue is stopped.
        A Task passed in is moved into the queue, so the caller's handle
        is inert afterwards, even when the dispatch is rejected.
        Raises TaskCapacityError if `fn` captures too much state.
        """
        task = Task(fn, capacity=self._capacity)
        with self._cond:
            if not self._accepting:
                logger.debug("Queue %s: dispatch rejected (stopped)", self._name)
                return False
            self._tasks.append(task)
            self._cond.notify_all()
        return True

    def stop(self) -> None:
        """Stop accepting new tasks. Safe to call any number of times."""
        with self._cond:
            if self._accepting:
                logger.debug("Queue %s: stopping with %d queued", self._name, len(self._tasks))
            self._accepting = False
            self._cond.notify_all()

    # ---- consumer ----

    def run_once(self) -> int:
        """
        Run whatever is queued right now, without waiting for more.

        Returns the number of tasks taken from the queue.
        """
        with self._cond:
            batch, self._tasks = self._tasks, []
            if not batch:
                if not self._accepting:
                    self._cond.notify_all()
                return 0
            self._in_flight += 1

        self._run_batch(batch)
        return len(batch)

    def run_forever(self) -> None:
        """
        Run tasks as they arrive until the queue is stopped and empty.

        When this returns the queue is DRAINED. Typically called from a
        dedicated thread (see DispatchThread).
        """
        logger.debug("Queue %s: run_forever started", self._name)
        while True:
            with self._cond:
                while not self._tasks and self._accepting:
                    self._cond.wait()
                batch, self._tasks = self._tasks, []
                if not batch:
                    # Woken with nothing to do: only happens once stopped.
                    self._cond.notify_all()
                    logger.debug("Queue %s: drained, run_forever exiting", self._name)
                    return
                self._in_flight += 1

            self._run_batch(batch)

    def _run_batch(self, batch: list[Task]) -> None:
        try:
            for i, task in enumerate(batch):
                try:
                    task.invoke()
                except ContractViolation:
                    # A bug in the calling code, never just logged.
                    self._requeue_front(batch[i + 1 :])
                    raise
                except Exception:
                    logger.exception("Queue %s: task failed", self._name)
                except BaseException:
                    self._requeue_front(batch[i + 1 :])
                    raise
        finally:
            with self._cond:
                self._in_flight -= 1
                self._cond.notify_all()

    def _requeue_front(self, rest: list[Task]) -> None:
        if not rest:
            return
        with self._cond:
            self._tasks[:0] = rest
            self._cond.notify_all()
        logger.warning("Queue %s: batch interrupted, %d task(s) put back", self._name, len(rest))

    # ---- observers ----

    def wait_until_done(self) -> None:
        """Block until the queue is stopped and every queued task has run."""
        with self._cond:
            while self._accepting or self._tasks or self._in_flight:
                self._cond.wait()

    @property
    def state(self) -> QueueState:
        with self._cond:
            if self._accepting:
                return QueueState.ACCEPTING
            if self._tasks or self._in_flight:
                return QueueState.STOPPED
            return QueueState.DRAINED

    @property
    def stopped(self) -> bool:
        with self._cond:
            return not self._accepting

    @property
    def pending(self) -> int:
        """Number of tasks waiting for the next drain."""
        with self._cond:
            return len(self._tasks)

    # ---- shutdown ----

    def close(self) -> None:
        """stop() then wait_until_done(). Needs another thread draining the queue."""
        self.stop()
        self.wait_until_done()

    def __enter__(self) -> DispatchQueue:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<DispatchQueue {self._name} {self.state.value} pending={self.pending}>"
