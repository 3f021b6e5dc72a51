"""Deferred task queue — the "next tick" that hooked components re-render on.

There is no event loop assumption here: a Scheduler is a FIFO of callables
that somebody drains by calling tick(). Tests and simple hosts drive the
module-level default scheduler directly; hosts with a real loop provide a
different scheduler through the SCHEDULER context (see fuel.textual).
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable

from fuel.context import Context

logger = logging.getLogger("fuel.scheduler")

Task = Callable[[], None]


class Scheduler:
    """Single-threaded FIFO of deferred tasks."""

    __slots__ = ("_queue",)

    def __init__(self) -> None:
        self._queue: deque[Task] = deque()

    def defer(self, task: Task) -> None:
        """Queue task to run on the next tick."""
        self._queue.append(task)

    @property
    def pending(self) -> int:
        return len(self._queue)

    def tick(self) -> int:
        """Run the tasks that were queued when the tick began. Returns how many ran.

        Tasks deferred while ticking wait for the next tick. If a task raises,
        the error propagates and the tasks behind it stay queued.
        """
        count = len(self._queue)
        ran = 0
        while ran < count:
            task = self._queue.popleft()
            ran += 1
            task()
        if ran:
            logger.debug("Tick ran %d task(s), %d pending", ran, len(self._queue))
        return ran

    def run_until_idle(self, max_ticks: int = 100) -> int:
        """Tick until nothing is pending. Returns the total number of tasks run."""
        total = 0
        for _ in range(max_ticks):
            if not self._queue:
                return total
            total += self.tick()
        if self._queue:
            raise RuntimeError(f"Scheduler did not settle after {max_ticks} ticks")
        return total

    def __repr__(self) -> str:
        return f"Scheduler({len(self._queue)} pending)"


default_scheduler = Scheduler()

# Scheduler used by hooked components below the provider. Provide another
# Scheduler-like object (anything with defer()) to re-route a subtree.
SCHEDULER: Context[Scheduler] = Context(default_scheduler, "scheduler")


def tick() -> int:
    """Run one tick of the default scheduler."""
    return default_scheduler.tick()


def get_pending_count() -> int:
    """Number of tasks waiting on the default scheduler. Useful for testing."""
    return default_scheduler.pending
