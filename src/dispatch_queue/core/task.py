# src/dispatch_queue/core/task.py

from __future__ import annotations

"""
Task: a move-only capsule around one zero-argument callable.

A Task has exactly one owner at a time. Ownership moves with Task.take()
(or task.move()), which leaves the source inert. Invoking also consumes
the task, so a stored callable runs at most once.

The capsule has a fixed capacity measured in captured values (closure
cells, bound arguments, bound instance, instance attributes). A callable
that carries more than that is rejected at construction time.
"""

import functools
import inspect
from typing import Any, Callable

from ..config import get_settings
from .errors import InertTaskError, TaskCapacityError


def captured_footprint(fn: Callable[..., Any]) -> int:
    """Count the values a callable keeps alive (its captured state)."""
    if isinstance(fn, functools.partial):
        return 1 + len(fn.args) + len(fn.keywords or {}) + captured_footprint(fn.func)

    if inspect.ismethod(fn):
        return 1 + captured_footprint(fn.__func__)

    if inspect.isfunction(fn):
        closure = fn.__closure__ or ()
        defaults = fn.__defaults__ or ()
        kwdefaults = fn.__kwdefaults__ or {}
        return len(closure) + len(defaults) + len(kwdefaults)

    if inspect.isclass(fn):
        return 0

    if inspect.isbuiltin(fn):
        # Bound builtin methods (some_list.append) hold their instance.
        owner = getattr(fn, "__self__", None)
        return 0 if owner is None or inspect.ismodule(owner) else 1

    # Callable instance: whatever it stores on itself.
    state = getattr(fn, "__dict__", None)
    if state is not None:
        return len(state)

    count = 0
    for klass in type(fn).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot not in ("__dict__", "__weakref__") and hasattr(fn, slot):
                count += 1
    return count


class Task:
    """
    Type-erased, move-only deferred action.

    Live tasks hold a callable; inert tasks (moved-from, or already
    invoked) hold nothing and raise InertTaskError when used.
    """

    __slots__ = ("_fn",)

    def __init__(self, fn: Callable[[], object], *, capacity: int | None = None) -> None:
        source = fn if isinstance(fn, Task) else None
        if source is not None:
            if source._fn is None:
                raise InertTaskError("cannot move from an inert task")
            fn = source._fn
        elif not callable(fn):
            raise TypeError(f"task body must be callable, got {type(fn).__name__}")

        limit = get_settings().task_capacity if capacity is None else int(capacity)
        footprint = captured_footprint(fn)
        if footprint > limit:
            raise TaskCapacityError(footprint, limit)

        if source is not None:
            # Wrapping a Task moves it: the source becomes inert.
            source._release()
        self._fn: Callable[[], object] | None = fn

    @classmethod
    def _adopt(cls, fn: Callable[[], object]) -> Task:
        # Capacity was checked when fn first entered a Task.
        task = cls.__new__(cls)
        task._fn = fn
        return task

    @classmethod
    def take(cls, source: Task) -> Task:
        """Move the callable out of `source` into a new Task."""
        return cls._adopt(source._release())

    def move(self) -> Task:
        return Task.take(self)

    def _release(self) -> Callable[[], object]:
        fn = self._fn
        if fn is None:
            raise InertTaskError("task is inert (moved-from or already invoked)")
        self._fn = None
        return fn

    @property
    def live(self) -> bool:
        return self._fn is not None

    def invoke(self) -> None:
        """Run the stored callable. The task is inert afterwards."""
        fn = self._release()
        fn()

    __call__ = invoke

    def __copy__(self) -> Task:
        raise TypeError("Task is move-only; use Task.take() to transfer it")

    def __deepcopy__(self, memo: dict[int, Any]) -> Task:
        raise TypeError("Task is move-only; use Task.take() to transfer it")

    def __reduce__(self) -> Any:
        raise TypeError("Task is move-only and cannot be pickled")

    def __repr__(self) -> str:
        if self._fn is None:
            return "<Task inert>"
        name = getattr(self._fn, "__qualname__", None) or type(self._fn).__name__
        return f"<Task {name}>"
