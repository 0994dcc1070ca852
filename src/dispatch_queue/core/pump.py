# src/dispatch_queue/core/pump.py

from __future__ import annotations

"""
Event-loop pump.

Lets an asyncio application be the consumer of a DispatchQueue: other
threads dispatch() work, and the loop runs it between its own coroutines
by calling run_once() on a fixed interval.
"""

import asyncio
import logging

from ..config import get_settings
from .queue import DispatchQueue, QueueState

logger = logging.getLogger(__name__)

MIN_INTERVAL_SECONDS = 0.001


async def pump_queue(
        queue: DispatchQueue,
        *,
        interval_seconds: float | None = None,
) -> int:
    """
    Drain `queue` from the running event loop.

    Every interval_seconds:
    - run everything currently queued (run_once, never blocks on the lock
      for longer than a swap)
    - return once the queue is stopped and empty

    Tasks run on the event loop thread, so a slow task stalls the loop.
    To stop early, cancel the coroutine; tasks still queued stay queued.

    Returns the total number of tasks run.
    """
    if interval_seconds is None:
        interval_seconds = get_settings().pump_interval_seconds
    sleep_s = max(MIN_INTERVAL_SECONDS, float(interval_seconds))

    total = 0
    while True:
        total += queue.run_once()

        if queue.state == QueueState.DRAINED:
            logger.debug("Pump for %s finished after %d task(s)", queue.name, total)
            return total

        await asyncio.sleep(sleep_s)
