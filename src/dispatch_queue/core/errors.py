# src/dispatch_queue/core/errors.py

from __future__ import annotations

"""
Error taxonomy.

Only contract violations are exceptions. A rejected dispatch (queue already
stopped) is reported through the boolean result of dispatch(), not raised.
"""


class DispatchError(Exception):
    """Base class for errors raised by dispatch_queue."""


class ContractViolation(DispatchError, AssertionError):
    """
    A programming error in the calling code.

    These are not meant to be caught and recovered from; they subclass
    AssertionError so they read as failed invariants in tracebacks.
    """


class TaskCapacityError(ContractViolation):
    """The callable captures more state than a Task can hold."""

    def __init__(self, footprint: int, capacity: int) -> None:
        super().__init__(f"callable captures {footprint} values, task capacity is {capacity}")
        self.footprint = footprint
        self.capacity = capacity


class InertTaskError(ContractViolation):
    """A moved-from or already-invoked Task was used."""
