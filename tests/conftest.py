# tests/conftest.py

from __future__ import annotations

import pytest

from dispatch_queue.core.queue import DispatchQueue

from .fakes import CallLog


@pytest.fixture()
def queue() -> DispatchQueue:
    """
    Fresh queue with an explicit capacity.

    Capacity is passed in rather than read from DISPATCH_TASK_CAPACITY,
    to keep tests independent of the environment.
    """
    return DispatchQueue(capacity=8, name="test-queue")


@pytest.fixture()
def log() -> CallLog:
    return CallLog()
