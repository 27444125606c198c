"""
Single-flight memoization of an async initializer.

`AsyncOnce` runs its factory at most once: every caller awaiting `get()` while
the first run is in flight shares that run, and every later caller receives
the same outcome, result or exception. Only an explicit `reset()` allows a
new attempt.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class AsyncOnce(Generic[T]):
    """One-shot future guarded against re-entry."""

    def __init__(self, factory: Callable[[], Awaitable[T]]) -> None:
        self._factory = factory
        self._task: Optional[asyncio.Task[T]] = None

    @property
    def started(self) -> bool:
        return self._task is not None

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    @property
    def failed(self) -> bool:
        return (
            self.done
            and not self._task.cancelled()  # type: ignore[union-attr]
            and self._task.exception() is not None  # type: ignore[union-attr]
        )

    async def get(self) -> T:
        if self._task is None:
            self._task = asyncio.ensure_future(self._factory())
        # Shield so a cancelled waiter does not cancel the shared run.
        return await asyncio.shield(self._task)

    def reset(self) -> None:
        """Forget the memoized outcome so the next `get()` starts over."""
        if self._task is not None and not self._task.done():
            raise RuntimeError("cannot reset while initialization is in flight")
        if self._task is not None and not self._task.cancelled():
            # Mark the stored exception as retrieved.
            self._task.exception()
        self._task = None


__all__ = ["AsyncOnce"]
