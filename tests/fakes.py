# tests/fakes.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field


@dataclass(slots=True)
class CallLog:
    """
    Thread-safe record of task invocations.

    - Captures entries in invocation order
    - Records the worker thread name for each entry
    """

    entries: list[str] = field(default_factory=list)
    threads: list[str] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock)

    def append(self, entry: str) -> None:
        with self.lock:
            self.entries.append(entry)
            self.threads.append(threading.current_thread().name)

    def joined(self) -> str:
        with self.lock:
            return "".join(self.entries)


class Appender:
    """Callable object: appends a fixed entry to a CallLog."""

    def __init__(self, log: CallLog, entry: str) -> None:
        self.log = log
        self.entry = entry

    def __call__(self) -> None:
        self.log.append(self.entry)


class Bulky:
    """Callable object carrying many attributes (for capacity checks)."""

    def __init__(self, n: int) -> None:
        for i in range(n):
            setattr(self, f"v{i}", i)

    def __call__(self) -> None:
        return None


@dataclass(slots=True)
class Counter:
    value: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock)

    def increment(self) -> None:
        with self.lock:
            self.value += 1
